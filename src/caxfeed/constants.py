"""Core constants for caxfeed."""

from enum import Enum


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class FloatWidth(int, Enum):
    """Precision a string-encoded wire number is decoded into."""

    F32 = 32
    F64 = 64


# ============================================
# API Endpoints
# ============================================

DEFAULT_BASE_URL = "https://cax.piccadilly.autonity.org/api"
ORDERBOOKS_PATH = "orderbooks"
QUOTE_PATH_TEMPLATE = "orderbooks/{pair}/quote"

# ============================================
# Default Values
# ============================================

DEFAULT_PAIR = "ATN-USD"
DEFAULT_INTERVAL_SECONDS = 5
DEFAULT_TIMEOUT_SECONDS = 10.0

# ============================================
# Application Constants
# ============================================

APP_NAME = "caxfeed"
USER_AGENT = f"{APP_NAME}/0.1"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
