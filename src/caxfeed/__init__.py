"""caxfeed - CAX quote poller."""

__version__ = "0.1.0"
