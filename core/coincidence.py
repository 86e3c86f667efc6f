from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

import numpy as np

from shared.errors import OrderingViolationError
from shared.models import CoincidenceResult, Event, Observation, ObservationKind

from .event_store import EventStore

logger = logging.getLogger(__name__)

ObservationCallback = Callable[[Observation], None]


def _check_ordering(store: EventStore) -> None:
    for channel in range(store.channel_count()):
        stamps = store.events(channel)
        if stamps.size < 2:
            continue
        drops = np.flatnonzero(np.diff(stamps) < 0)
        if drops.size:
            k = int(drops[0])
            raise OrderingViolationError(channel, int(stamps[k]), int(stamps[k + 1]))


class CoincidenceDetector:
    """
    Windowed cross-channel coincidence counter.

    Every event on channel ``i`` is compared against every event on each
    channel ``j > i``; a pair matches when the timestamps differ by at most
    ``match_window_ms`` (inclusive). Per anchor event, the matches summed over
    all higher channels decide the class: exactly one is a coincidence, more
    than one is an accident, none is ignored.

    Channels are sorted, so the partners of an anchor ``e`` on channel ``j``
    form the contiguous slice bounded below by ``e - window`` and above by
    ``e + window``; both bounds are located with ``np.searchsorted`` for the
    whole anchor channel at once. Observation order is anchor channel, anchor
    index, partner channel, partner index.
    """

    def __init__(self, match_window_ms: int = 1000) -> None:
        if isinstance(match_window_ms, bool) or not isinstance(match_window_ms, (int, np.integer)):
            raise TypeError("match_window_ms must be an integer")
        if match_window_ms < 0:
            raise ValueError("match_window_ms must be non-negative")
        self._window = int(match_window_ms)

    @property
    def match_window_ms(self) -> int:
        return self._window

    def detect(self, store: EventStore, on_observation: Optional[ObservationCallback] = None) -> CoincidenceResult:
        """Run one detection pass over a frozen store."""
        if not store.frozen:
            raise RuntimeError("freeze() must be called before detect().")
        _check_ordering(store)

        window = self._window
        n_channels = store.channel_count()
        coincidences = 0
        accidents = 0
        observations: List[Observation] = []

        for i in range(n_channels):
            anchors = store.events(i)
            if anchors.size == 0:
                continue

            match_counts = np.zeros(anchors.size, dtype=np.int64)
            spans: List[Tuple[int, np.ndarray, np.ndarray, np.ndarray]] = []
            for j in range(i + 1, n_channels):
                partners = store.events(j)
                if partners.size == 0:
                    continue
                lo = np.searchsorted(partners, anchors - window, side="left")
                hi = np.searchsorted(partners, anchors + window, side="right")
                match_counts += hi - lo
                spans.append((j, partners, lo, hi))

            coincidences += int(np.count_nonzero(match_counts == 1))
            accidents += int(np.count_nonzero(match_counts > 1))

            for k in np.flatnonzero(match_counts):
                anchor = Event(i, int(anchors[k]))
                found = 0
                for j, partners, lo, hi in spans:
                    for t in partners[lo[k]:hi[k]]:
                        kind = ObservationKind.COINCIDENCE if found == 0 else ObservationKind.ACCIDENT
                        found += 1
                        obs = Observation(kind=kind, anchor=anchor, partner=Event(j, int(t)))
                        observations.append(obs)
                        if on_observation is not None:
                            on_observation(obs)

        logger.info(
            "Detection finished: %d coincidences, %d accidents (%d matches, window=%d ms)",
            coincidences,
            accidents,
            len(observations),
            window,
        )
        return CoincidenceResult(
            coincidence_counter=coincidences,
            accident_counter=accidents,
            observations=tuple(observations),
        )


__all__ = ["CoincidenceDetector", "ObservationCallback"]
