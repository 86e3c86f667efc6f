"""Exceptions raised by the event store, detector and acquisition loop."""

from __future__ import annotations


class InvalidChannelError(ValueError):
    """A channel id outside ``[0, channel_count)``."""

    def __init__(self, channel: int, channel_count: int) -> None:
        super().__init__(f"Invalid channel number {channel}, must be between 0 and {channel_count - 1}.")
        self.channel = channel
        self.channel_count = channel_count


class OrderingViolationError(ValueError):
    """A channel's timestamps are not non-decreasing."""

    def __init__(self, channel: int, previous_ms: int, timestamp_ms: int) -> None:
        super().__init__(
            f"Channel {channel}: timestamp {timestamp_ms} ms precedes previous timestamp {previous_ms} ms"
        )
        self.channel = channel
        self.previous_ms = previous_ms
        self.timestamp_ms = timestamp_ms


class StoreCapacityError(RuntimeError):
    """The store could not grow a channel sequence any further."""

    def __init__(self, channel: int, size: int) -> None:
        super().__init__(f"Channel {channel} cannot hold more than {size} events")
        self.channel = channel
        self.size = size


class StoreFrozenError(RuntimeError):
    """Append attempted after the observation window closed."""


__all__ = [
    "InvalidChannelError",
    "OrderingViolationError",
    "StoreCapacityError",
    "StoreFrozenError",
]
