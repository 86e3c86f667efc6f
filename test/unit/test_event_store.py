"""
Unit tests for EventStore.

Covers the per-channel ordering invariant, the recording → frozen lifecycle,
read-only access, and the recoverable capacity error.
"""
from __future__ import annotations

import numpy as np
import pytest

from core.event_store import EventStore
from shared.errors import InvalidChannelError, OrderingViolationError, StoreCapacityError, StoreFrozenError
from shared.models import Event


class TestEventStoreRecording:

    def test_new_store_has_one_empty_sequence_per_channel(self):
        store = EventStore(6)
        assert store.channel_count() == 6
        assert store.counts() == [0] * 6
        assert len(store) == 0
        for ch in range(6):
            assert store.events(ch).size == 0

    def test_append_keeps_insertion_order(self):
        store = EventStore(3)
        for ts in (5, 5, 17, 240):
            store.append(1, ts)
        np.testing.assert_array_equal(store.events(1), [5, 5, 17, 240])
        assert store.counts() == [0, 4, 0]

    def test_append_out_of_range_channel(self):
        store = EventStore(2)
        with pytest.raises(InvalidChannelError) as info:
            store.append(2, 10)
        assert info.value.channel == 2
        with pytest.raises(InvalidChannelError):
            store.append(-1, 10)

    @pytest.mark.parametrize("channel", [1.5, True, "1", None])
    def test_append_non_integer_channel(self, channel):
        store = EventStore(3)
        with pytest.raises(InvalidChannelError):
            store.append(channel, 10)
        with pytest.raises(InvalidChannelError):
            store.events(channel)
        assert len(store) == 0

    def test_append_accepts_numpy_integer_channel(self):
        store = EventStore(3)
        store.append(np.int64(2), 10)
        assert store.counts() == [0, 0, 1]

    def test_append_negative_timestamp(self):
        with pytest.raises(ValueError):
            EventStore(1).append(0, -5)

    def test_append_out_of_order_fails_fast(self):
        store = EventStore(2)
        store.append(0, 100)
        store.append(1, 50)  # other channels are independent
        with pytest.raises(OrderingViolationError) as info:
            store.append(0, 99)
        assert (info.value.channel, info.value.previous_ms, info.value.timestamp_ms) == (0, 100, 99)
        np.testing.assert_array_equal(store.events(0), [100])

    def test_capacity_limit_is_recoverable(self):
        store = EventStore(2, max_events_per_channel=2)
        store.append(0, 1)
        store.append(0, 2)
        with pytest.raises(StoreCapacityError):
            store.append(0, 3)
        store.append(1, 3)
        assert store.counts() == [2, 1]

    @pytest.mark.parametrize("channel_count", [0, -3, 2.0])
    def test_invalid_channel_count(self, channel_count):
        with pytest.raises(ValueError):
            EventStore(channel_count)


class TestEventStoreFrozen:

    def test_freeze_rejects_appends(self):
        store = EventStore(2)
        store.append(0, 1)
        assert store.freeze() is store
        assert store.frozen
        with pytest.raises(StoreFrozenError):
            store.append(0, 2)

    def test_freeze_is_idempotent(self):
        store = EventStore(1)
        store.append(0, 7)
        store.freeze()
        store.freeze()
        np.testing.assert_array_equal(store.events(0), [7])

    def test_events_are_read_only(self):
        store = EventStore(1)
        store.append(0, 7)
        for arr in (store.events(0), store.freeze().events(0)):
            assert arr.dtype == np.int64
            assert not arr.flags.writeable
            with pytest.raises(ValueError):
                arr[0] = 0

    def test_snapshot_before_freeze_is_detached(self):
        store = EventStore(1)
        store.append(0, 1)
        snapshot = store.events(0)
        store.append(0, 2)
        np.testing.assert_array_equal(snapshot, [1])
        np.testing.assert_array_equal(store.events(0), [1, 2])

    def test_iter_events_and_max_length(self):
        store = EventStore.from_events({0: [1, 4], 2: [3]}, channel_count=3)
        assert store.frozen
        assert list(store.iter_events()) == [Event(0, 1), Event(0, 4), Event(2, 3)]
        assert store.max_length() == 2
        assert len(store) == 3

    def test_from_events_infers_channel_count(self):
        store = EventStore.from_events({0: [1], 4: [2]}, freeze=False)
        assert store.channel_count() == 5
        assert not store.frozen

    def test_from_events_enforces_ordering(self):
        with pytest.raises(OrderingViolationError):
            EventStore.from_events({0: [5, 1]})
