from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from core.coincidence import CoincidenceDetector
from core.event_store import EventStore
from daq.acquisition import Acquisition, AcquisitionStats
from daq.base_source import BaseSource
from reporting.report import ObservationPrinter, format_event_matrix, format_summary
from shared.models import CoincidenceResult
from shared.settings import TaggerSettings


@dataclass(frozen=True)
class RunReport:
    store: EventStore
    acquisition: AcquisitionStats
    result: CoincidenceResult


class TimeTaggerRuntime:
    """
    Headless orchestrator for one experiment.

    Owns the EventStore for the run: acquisition fills it, the store is frozen
    when the window closes, and the detector consumes it read-only. All text
    output goes to `out`; diagnostics go through logging.
    """

    def __init__(
        self,
        settings: Optional[TaggerSettings] = None,
        *,
        out: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or TaggerSettings()
        self.out = out if out is not None else sys.stdout
        self.logger = logger or logging.getLogger(__name__)
        self.detector = CoincidenceDetector(self.settings.match_window_ms)

    def new_store(self) -> EventStore:
        return EventStore(
            self.settings.channel_count,
            max_events_per_channel=self.settings.max_events_per_channel,
        )

    def acquire(self, source: BaseSource) -> tuple[EventStore, AcquisitionStats]:
        store = self.new_store()
        stats = Acquisition(store, source, self.settings.experiment_duration_s).run()
        store.freeze()
        if stats.truncated:
            self.logger.warning("Event store filled up; detection covers only the first %.3f s", stats.elapsed_s)
        return store, stats

    def analyze(self, store: EventStore) -> CoincidenceResult:
        self.out.write("\n" + format_event_matrix(store))
        printer = ObservationPrinter(self.out)
        result = self.detector.detect(store, on_observation=printer)
        self.out.write(format_summary(result))
        return result

    def run(self, source: BaseSource) -> RunReport:
        s = self.settings
        self.out.write(
            f"Time Tagger with experiment duration {s.experiment_duration_s:g} seconds "
            f"and time window {s.match_window_ms} milliseconds.\n"
        )
        self.out.write(
            f"Enter channel numbers (0-{s.channel_count - 1}) until the end of the experiment.\n"
        )
        self.out.flush()
        store, stats = self.acquire(source)
        result = self.analyze(store)
        return RunReport(store=store, acquisition=stats, result=result)


__all__ = ["RunReport", "TimeTaggerRuntime"]
