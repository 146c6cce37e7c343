"""Feed Module - quote polling and price accumulation."""

from caxfeed.feed.accumulator import PriceAccumulator
from caxfeed.feed.channel import ChannelClosed, Receiver, Sender, open_channel
from caxfeed.feed.poller import PollerStats, QuotePoller

__all__ = [
    "PriceAccumulator",
    "ChannelClosed",
    "Receiver",
    "Sender",
    "open_channel",
    "PollerStats",
    "QuotePoller",
]
