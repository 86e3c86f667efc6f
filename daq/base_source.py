from __future__ import annotations

"""
Base class for signal sources feeding the acquisition loop.

Goals:
- Simple, stable contract: one channel id per read, stamped with elapsed time.
- Clean lifecycle: open → start/stop → close.
- A single time origin per run so every signal shares one timebase.

Subclasses implement the *_impl() methods; the base class owns state
checks and timestamping.
"""

import time as _time
from abc import ABC, abstractmethod
from typing import Any, Iterable, Literal, Optional

from shared.models import Signal


State = Literal["closed", "open", "running"]


class BaseSource(ABC):
    """
    Abstract base for all channel-id sources.

    Typical flow:
        source = Driver()
        source.open()
        source.start()
        while (signal := source.read()) is not None:
            ...
        source.stop()
        source.close()
    """

    @classmethod
    @abstractmethod
    def source_class_name(cls) -> str:
        """Return the human-friendly category name for this source type."""
        raise NotImplementedError

    def __init__(self) -> None:
        self._state: State = "closed"
        self._origin: Optional[float] = None
        self._reads: int = 0

    # ----------
    # Lifecycle
    # ----------

    def open(self) -> None:
        self._assert_state(expected=("closed",))
        self._open_impl()
        self._state = "open"

    def _open_impl(self) -> None:
        """Source-specific resource acquisition."""

    def close(self) -> None:
        if self._state == "running":
            self.stop()
        if self._state == "open":
            self._close_impl()
        self._state = "closed"

    def _close_impl(self) -> None:
        """Source-specific resource release."""

    def start(self) -> float:
        """Begin a run and return the time origin every signal is measured from."""
        self._assert_state(expected=("open",))
        self._reads = 0
        self._start_impl()
        self._origin = self._now()
        self._state = "running"
        return self._origin

    def _start_impl(self) -> None:
        """Source-specific start."""

    def stop(self) -> None:
        if self._state == "running":
            self._stop_impl()
            self._state = "open"

    def _stop_impl(self) -> None:
        """Source-specific stop."""

    # -------
    # Reading
    # -------

    def read(self) -> Optional[Signal]:
        """
        Block until the next channel id arrives and stamp it.

        Returns None once the source has nothing more to deliver.
        """
        self._assert_state(expected=("running",))
        channel = self._read_impl()
        if channel is None:
            return None
        self._reads += 1
        return Signal(channel=channel, elapsed_s=self._now() - self._origin)

    @abstractmethod
    def _read_impl(self) -> Optional[int]:
        """Return the next raw channel id, or None when exhausted."""
        raise NotImplementedError

    def _now(self) -> float:
        """Clock used for stamping; override for virtual timebases."""
        return _time.monotonic()

    # --------------
    # Introspection
    # --------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def running(self) -> bool:
        return self.state == "running"

    def stats(self) -> dict[str, Any]:
        return {
            "source": self.source_class_name(),
            "state": self.state,
            "reads": self._reads,
        }

    def _assert_state(self, expected: Iterable[State]) -> None:
        expected = tuple(expected)
        if self._state not in expected:
            raise RuntimeError(f"Invalid state: {self._state}; expected one of {expected}.")

    def __enter__(self) -> "BaseSource":
        self.open()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


__all__ = ["BaseSource", "State"]
