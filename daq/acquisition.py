from __future__ import annotations

import logging
from dataclasses import dataclass

from core.event_store import EventStore
from shared.errors import StoreCapacityError

from .base_source import BaseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcquisitionStats:
    """Summary of one acquisition run."""

    accepted: int
    invalid: int
    discarded: int
    truncated: bool
    elapsed_s: float


class Acquisition:
    """
    Drives a source for one observation window and fills an EventStore.

    Signals are read until one arrives after `duration_s`; that crossing
    signal is discarded. Out-of-range channel ids are reported and skipped.
    If the store runs out of room the run ends early and is marked truncated.
    The store is left unfrozen; freezing is the caller's decision.
    """

    def __init__(self, store: EventStore, source: BaseSource, duration_s: float) -> None:
        if duration_s <= 0:
            raise ValueError("duration_s must be positive")
        self._store = store
        self._source = source
        self._duration_s = float(duration_s)

    @property
    def store(self) -> EventStore:
        return self._store

    def run(self) -> AcquisitionStats:
        accepted = 0
        invalid = 0
        discarded = 0
        truncated = False
        elapsed_s = 0.0
        channel_count = self._store.channel_count()

        if self._source.state == "closed":
            self._source.open()
        try:
            self._source.start()
            logger.info(
                "Acquisition started: %d channels, %.3f s window (%s source)",
                channel_count,
                self._duration_s,
                self._source.source_class_name(),
            )
            while True:
                signal = self._source.read()
                if signal is None:
                    logger.info("Source exhausted before the window closed")
                    break
                elapsed_s = signal.elapsed_s
                if elapsed_s > self._duration_s:
                    discarded += 1
                    logger.debug("Discarding channel %d signal at %.3f s (window closed)", signal.channel, elapsed_s)
                    break
                if not 0 <= signal.channel < channel_count:
                    invalid += 1
                    logger.warning(
                        "Invalid channel number %d, must be between 0 and %d.", signal.channel, channel_count - 1
                    )
                    continue
                try:
                    self._store.append(signal.channel, signal.timestamp_ms)
                except StoreCapacityError as exc:
                    truncated = True
                    logger.error("Acquisition truncated at %.3f s: %s", elapsed_s, exc)
                    break
                accepted += 1
                logger.debug("Channel %d: time_code = %d", signal.channel, signal.timestamp_ms)
        finally:
            self._source.close()

        stats = AcquisitionStats(
            accepted=accepted,
            invalid=invalid,
            discarded=discarded,
            truncated=truncated,
            elapsed_s=elapsed_s,
        )
        logger.info(
            "Acquisition finished: %d accepted, %d invalid, %d discarded%s",
            accepted,
            invalid,
            discarded,
            " (truncated)" if truncated else "",
        )
        return stats


__all__ = ["Acquisition", "AcquisitionStats"]
