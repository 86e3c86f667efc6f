from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


# ----------------------------
# Event records
# ----------------------------

@dataclass(frozen=True)
class Event:
    """A single tagged signal.

    Attributes:
        channel: Channel index the signal arrived on
        timestamp_ms: Milliseconds elapsed since the observation window opened
    """

    channel: int
    timestamp_ms: int

    def __post_init__(self) -> None:
        if self.channel < 0:
            raise ValueError("channel must be non-negative")
        if self.timestamp_ms < 0:
            raise ValueError("timestamp_ms must be non-negative")
        object.__setattr__(self, "channel", int(self.channel))
        object.__setattr__(self, "timestamp_ms", int(self.timestamp_ms))

    def as_pair(self) -> Tuple[int, int]:
        return (self.channel, self.timestamp_ms)


@dataclass(frozen=True)
class Signal:
    """Raw channel id read by a source, stamped with seconds since the source started."""

    channel: int
    elapsed_s: float

    @property
    def timestamp_ms(self) -> int:
        return int(round(self.elapsed_s * 1_000_000)) // 1000


# ----------------------------
# Detection results
# ----------------------------

class ObservationKind(str, Enum):
    COINCIDENCE = "coincidence"
    ACCIDENT = "accident"


@dataclass(frozen=True)
class Observation:
    """One window match between an anchor event and a partner on a higher channel.

    The first match found for an anchor is a coincidence; every further match
    for the same anchor is an accident.
    """

    kind: ObservationKind
    anchor: Event
    partner: Event

    def __post_init__(self) -> None:
        if self.partner.channel <= self.anchor.channel:
            raise ValueError("partner channel must be greater than anchor channel")

    @property
    def events(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return (self.anchor.as_pair(), self.partner.as_pair())


@dataclass(frozen=True)
class CoincidenceResult:
    """Counters and ordered observation log produced by one detection pass."""

    coincidence_counter: int = 0
    accident_counter: int = 0
    observations: Tuple[Observation, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.coincidence_counter < 0 or self.accident_counter < 0:
            raise ValueError("counters must be non-negative")
        object.__setattr__(self, "observations", tuple(self.observations))

    @property
    def match_count(self) -> int:
        return len(self.observations)


__all__ = [
    "Event",
    "Signal",
    "ObservationKind",
    "Observation",
    "CoincidenceResult",
]
