from __future__ import annotations

import logging
import sys
import time
from typing import Callable, Iterator, Optional, TextIO

from .base_source import BaseSource

logger = logging.getLogger(__name__)


class StreamSource(BaseSource):
    """
    Reads whitespace-separated channel ids from a text stream (stdin by default).

    Each id is stamped with the host monotonic clock the moment it is parsed,
    so an operator typing channel numbers acts as the trigger. Tokens that are
    not integers are reported and skipped.
    """

    @classmethod
    def source_class_name(cls) -> str:
        return "Stream"

    def __init__(self, stream: Optional[TextIO] = None, *, clock: Callable[[], float] = time.monotonic) -> None:
        super().__init__()
        self._stream = stream
        self._clock = clock
        self._tokens: Optional[Iterator[str]] = None
        self.rejected_tokens = 0

    def _open_impl(self) -> None:
        if self._stream is None:
            self._stream = sys.stdin

    def _start_impl(self) -> None:
        self._tokens = self._iter_tokens()
        self.rejected_tokens = 0

    def _iter_tokens(self) -> Iterator[str]:
        for line in self._stream:
            yield from line.split()

    def _now(self) -> float:
        return self._clock()

    def _read_impl(self) -> Optional[int]:
        for token in self._tokens:
            try:
                return int(token)
            except ValueError:
                self.rejected_tokens += 1
                logger.warning("Ignoring non-numeric channel token %r", token)
        return None

    def stats(self) -> dict:
        stats = super().stats()
        stats["rejected_tokens"] = self.rejected_tokens
        return stats


__all__ = ["StreamSource"]
