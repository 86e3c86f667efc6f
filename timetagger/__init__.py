"""Time Tagger: multi-channel event recording and coincidence counting."""

from .runtime import RunReport, TimeTaggerRuntime

__version__ = "0.1.0"

__all__ = ["RunReport", "TimeTaggerRuntime", "__version__"]
