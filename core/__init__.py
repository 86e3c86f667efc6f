"""Event storage and coincidence detection."""

from .event_store import EventStore
from .coincidence import CoincidenceDetector
from shared.models import CoincidenceResult, Event, Observation, ObservationKind

__all__ = [
    "Event",
    "Observation",
    "ObservationKind",
    "CoincidenceResult",
    "EventStore",
    "CoincidenceDetector",
]
