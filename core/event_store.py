from __future__ import annotations

"""
Per-channel storage for tagged events.

Lifecycle: recording (append-only) → frozen (read-only input to detection).
Each channel holds its timestamps in arrival order; arrival order must be
time order, which is checked on every append.
"""

import logging
from typing import Iterator, List, Literal, Mapping, Optional, Sequence

import numpy as np

from shared.errors import InvalidChannelError, OrderingViolationError, StoreCapacityError, StoreFrozenError
from shared.models import Event

logger = logging.getLogger(__name__)

State = Literal["recording", "frozen"]


def _freeze_timestamps(values: Sequence[int]) -> np.ndarray:
    """Return a read-only int64 copy of `values`."""
    arr = np.array(values, dtype=np.int64)
    if arr.ndim != 1:
        arr = arr.reshape(-1)
    arr.setflags(write=False)
    return arr


class EventStore:
    """
    Owns one ordered timestamp sequence per channel.

    Typical flow:
        store = EventStore(channel_count=6)
        store.append(0, 120)
        store.append(3, 125)
        store.freeze()
        detector.detect(store)
    """

    def __init__(self, channel_count: int = 6, *, max_events_per_channel: Optional[int] = None) -> None:
        if isinstance(channel_count, bool) or not isinstance(channel_count, int) or channel_count <= 0:
            raise ValueError("channel_count must be a positive integer")
        if max_events_per_channel is not None and max_events_per_channel <= 0:
            raise ValueError("max_events_per_channel must be positive")
        self._channel_count = channel_count
        self._max_events = max_events_per_channel
        self._state: State = "recording"
        self._buffers: List[List[int]] = [[] for _ in range(channel_count)]
        self._frozen: Optional[List[np.ndarray]] = None

    @classmethod
    def from_events(
        cls,
        events: Mapping[int, Sequence[int]],
        channel_count: Optional[int] = None,
        *,
        freeze: bool = True,
    ) -> "EventStore":
        """Build a store from ``{channel: [timestamps...]}``, appending in the given order."""
        if channel_count is None:
            channel_count = max(events, default=-1) + 1 or 1
        store = cls(channel_count)
        for channel in sorted(events):
            for timestamp_ms in events[channel]:
                store.append(channel, timestamp_ms)
        if freeze:
            store.freeze()
        return store

    # ----------
    # Recording
    # ----------

    def append(self, channel: int, timestamp_ms: int) -> None:
        """Append `timestamp_ms` to `channel`. Timestamps per channel must not decrease."""
        if self._state != "recording":
            raise StoreFrozenError("EventStore is frozen; the observation window has closed.")
        if isinstance(channel, bool) or not isinstance(channel, (int, np.integer)):
            raise InvalidChannelError(channel, self._channel_count)
        channel = int(channel)
        if not 0 <= channel < self._channel_count:
            raise InvalidChannelError(channel, self._channel_count)
        timestamp_ms = int(timestamp_ms)
        if timestamp_ms < 0:
            raise ValueError("timestamp_ms must be non-negative")

        buf = self._buffers[channel]
        if buf and timestamp_ms < buf[-1]:
            raise OrderingViolationError(channel, buf[-1], timestamp_ms)
        if self._max_events is not None and len(buf) >= self._max_events:
            raise StoreCapacityError(channel, self._max_events)
        try:
            buf.append(timestamp_ms)
        except MemoryError as exc:
            raise StoreCapacityError(channel, len(buf)) from exc

    def freeze(self) -> "EventStore":
        """Close the observation window. Idempotent."""
        if self._state == "recording":
            self._frozen = [_freeze_timestamps(buf) for buf in self._buffers]
            self._buffers = []
            self._state = "frozen"
            logger.debug("EventStore frozen with %d events over %d channels", len(self), self._channel_count)
        return self

    # --------------
    # Introspection
    # --------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def frozen(self) -> bool:
        return self._state == "frozen"

    def channel_count(self) -> int:
        return self._channel_count

    def events(self, channel: int) -> np.ndarray:
        """Timestamps on `channel` in insertion order, as a read-only int64 array."""
        if isinstance(channel, bool) or not isinstance(channel, (int, np.integer)) \
                or not 0 <= channel < self._channel_count:
            raise InvalidChannelError(channel, self._channel_count)
        if self._frozen is not None:
            return self._frozen[channel]
        return _freeze_timestamps(self._buffers[channel])

    def counts(self) -> List[int]:
        if self._frozen is not None:
            return [int(arr.size) for arr in self._frozen]
        return [len(buf) for buf in self._buffers]

    def max_length(self) -> int:
        return max(self.counts(), default=0)

    def iter_events(self) -> Iterator[Event]:
        """Yield every stored event, channel by channel."""
        for channel in range(self._channel_count):
            for timestamp_ms in self.events(channel):
                yield Event(channel, int(timestamp_ms))

    def __len__(self) -> int:
        return sum(self.counts())

    def __repr__(self) -> str:
        return f"EventStore(channel_count={self._channel_count}, state={self._state!r}, counts={self.counts()})"


__all__ = ["EventStore"]
