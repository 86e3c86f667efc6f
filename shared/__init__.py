"""
Shared data structures, settings and errors used by every layer.
"""

from .errors import InvalidChannelError, OrderingViolationError, StoreCapacityError, StoreFrozenError
from .models import CoincidenceResult, Event, Observation, ObservationKind, Signal
from .settings import TaggerSettings, load_settings

__all__ = [
    "CoincidenceResult",
    "Event",
    "InvalidChannelError",
    "Observation",
    "ObservationKind",
    "OrderingViolationError",
    "Signal",
    "StoreCapacityError",
    "StoreFrozenError",
    "TaggerSettings",
    "load_settings",
]
