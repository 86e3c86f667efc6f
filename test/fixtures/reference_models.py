"""
Reference implementations for property-based testing.

These are deliberately simple, obviously-correct implementations used to
verify the production code via differential testing. They prioritize
correctness and clarity over performance.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

ReferenceObservation = Tuple[str, Tuple[int, int], Tuple[int, int]]


def reference_detect(
    channels: Sequence[Sequence[int]],
    window_ms: int,
) -> Tuple[int, int, List[ReferenceObservation]]:
    """Head-restart scan over plain lists.

    For every anchor on channel i, each channel j > i is scanned from its
    first element while t <= anchor + window; every t with
    |t - anchor| <= window is a match. One match is a coincidence, more
    than one is an accident.

    Returns (coincidences, accidents, observations) where each observation
    is (kind, (i, anchor), (j, t)).
    """
    coincidences = 0
    accidents = 0
    observations: List[ReferenceObservation] = []

    for i, anchors in enumerate(channels):
        for anchor in anchors:
            count = 0
            for j in range(i + 1, len(channels)):
                for t in channels[j]:
                    if t > anchor + window_ms:
                        break
                    if abs(t - anchor) <= window_ms:
                        count += 1
                        kind = "coincidence" if count == 1 else "accident"
                        observations.append((kind, (i, anchor), (j, t)))
            if count == 1:
                coincidences += 1
            elif count > 1:
                accidents += 1

    return coincidences, accidents, observations


def brute_force_pairs(channels: Sequence[Sequence[int]], window_ms: int) -> Dict[Tuple[int, int], int]:
    """Count matching partners per (channel, index) anchor by comparing every cross-channel pair once."""
    counts: Dict[Tuple[int, int], int] = {}
    for i, anchors in enumerate(channels):
        for a_idx, anchor in enumerate(anchors):
            for j in range(i + 1, len(channels)):
                for t in channels[j]:
                    if abs(t - anchor) <= window_ms:
                        counts[(i, a_idx)] = counts.get((i, a_idx), 0) + 1
    return counts
