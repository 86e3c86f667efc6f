"""Plain-text rendering of stored events, detection counters and the match log."""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from core.event_store import EventStore
from shared.models import CoincidenceResult, Observation, ObservationKind

CELL_WIDTH = 10


def format_event_matrix(store: EventStore, width: int = CELL_WIDTH) -> str:
    """
    Lay out every stored timestamp as a matrix: one column per channel, one
    row per event index. Channels with fewer events get blank cells.
    """
    if width <= 0:
        raise ValueError("width must be positive")
    columns = [store.events(ch) for ch in range(store.channel_count())]
    blank = " " * (width + 1)

    lines: List[str] = ["All the time codes:"]
    lines.append("".join(f"{ch:<{width}d} " for ch in range(len(columns))))
    for row in range(store.max_length()):
        cells = [f"{int(col[row]):<{width}d} " if row < col.size else blank for col in columns]
        lines.append("".join(cells))
        lines.append("")
    return "\n".join(lines) + "\n"


def format_observation(obs: Observation) -> str:
    pair = (
        f"Channel {obs.anchor.channel} (time code {obs.anchor.timestamp_ms}) and "
        f"Channel {obs.partner.channel} (time code {obs.partner.timestamp_ms})"
    )
    if obs.kind is ObservationKind.COINCIDENCE:
        return f"Coincidence: {pair}"
    return f"/!\\ ACCIDENT /!\\ ({pair}"


def format_summary(result: CoincidenceResult) -> str:
    return (
        f"Total number of coincidences: {result.coincidence_counter}\n"
        f"Total number of accidents: {result.accident_counter}\n"
    )


class ObservationPrinter:
    """Writes each observation to `stream` as the detector produces it."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self.count = 0

    def __call__(self, obs: Observation) -> None:
        self._stream.write(format_observation(obs) + "\n")
        self.count += 1


__all__ = [
    "CELL_WIDTH",
    "ObservationPrinter",
    "format_event_matrix",
    "format_observation",
    "format_summary",
]
