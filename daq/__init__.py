"""Signal sources and the acquisition loop that feeds the event store."""

from .acquisition import Acquisition, AcquisitionStats
from .base_source import BaseSource
from .simulated_source import SimulatedSource
from .stream_source import StreamSource

__all__ = ["Acquisition", "AcquisitionStats", "BaseSource", "SimulatedSource", "StreamSource"]
