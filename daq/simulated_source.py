# daq/simulated_source.py
import logging
from typing import Optional

import numpy as np

from .base_source import BaseSource

logger = logging.getLogger(__name__)


class SimulatedSource(BaseSource):
    """
    Simulates a multi-channel detector array on a virtual clock.

    Each channel fires independent Poisson background hits. On top of that,
    correlated bursts (e.g. a particle crossing several detectors) hit
    `burst_multiplicity` distinct channels at once, each displaced by a
    Gaussian jitter. Optionally, out-of-range channel ids are injected to
    exercise the acquisition loop's validation.

    The whole timeline is generated at start() from a seeded RNG, so a given
    configuration always produces the same run. Reads never block; the
    virtual clock jumps to each hit as it is delivered. The timeline runs
    past `duration_s` so the acquisition loop always sees a read that
    crosses its deadline.
    """

    @classmethod
    def source_class_name(cls) -> str:
        return "Simulated"

    def __init__(
        self,
        channel_count: int = 6,
        duration_s: float = 10.0,
        *,
        background_rate_hz: float = 0.5,
        burst_rate_hz: float = 0.3,
        burst_multiplicity: int = 2,
        jitter_ms: float = 50.0,
        invalid_rate_hz: float = 0.0,
        seed: Optional[int] = None,
    ) -> None:
        super().__init__()
        if channel_count <= 0:
            raise ValueError("channel_count must be positive")
        if duration_s <= 0:
            raise ValueError("duration_s must be positive")
        if min(background_rate_hz, burst_rate_hz, invalid_rate_hz, jitter_ms) < 0:
            raise ValueError("rates and jitter must be non-negative")
        if not 1 <= burst_multiplicity <= channel_count:
            raise ValueError("burst_multiplicity must be between 1 and channel_count")
        self._channel_count = int(channel_count)
        self._duration_s = float(duration_s)
        self._background_rate = float(background_rate_hz)
        self._burst_rate = float(burst_rate_hz)
        self._multiplicity = int(burst_multiplicity)
        self._jitter_s = float(jitter_ms) * 1e-3
        self._invalid_rate = float(invalid_rate_hz)
        self._seed = seed

        self._times = np.zeros(0, dtype=np.float64)
        self._channels = np.zeros(0, dtype=np.int64)
        self._cursor = 0
        self._clock_s = 0.0

    def _start_impl(self) -> None:
        self._times, self._channels = self._generate_timeline()
        self._cursor = 0
        self._clock_s = 0.0
        logger.debug("Simulated timeline: %d hits over %.3f s", self._times.size, self._span_s)

    @property
    def _span_s(self) -> float:
        return self._duration_s + 1.0

    def _generate_timeline(self) -> tuple[np.ndarray, np.ndarray]:
        rng = np.random.default_rng(self._seed)
        span = self._span_s
        times = []
        channels = []

        for ch in range(self._channel_count):
            n = rng.poisson(self._background_rate * span)
            times.append(rng.uniform(0.0, span, size=n))
            channels.append(np.full(n, ch, dtype=np.int64))

        n_bursts = rng.poisson(self._burst_rate * span)
        for t0 in rng.uniform(0.0, span, size=n_bursts):
            hit = rng.choice(self._channel_count, size=self._multiplicity, replace=False)
            if self._jitter_s > 0:
                offsets = rng.normal(0.0, self._jitter_s, size=self._multiplicity)
            else:
                offsets = np.zeros(self._multiplicity)
            times.append(np.clip(t0 + offsets, 0.0, span))
            channels.append(hit.astype(np.int64))

        n_invalid = rng.poisson(self._invalid_rate * span)
        if n_invalid:
            times.append(rng.uniform(0.0, span, size=n_invalid))
            channels.append(self._channel_count + rng.integers(0, 3, size=n_invalid))

        # Crossing hit so the deadline is always observed.
        times.append(np.array([span]))
        channels.append(np.array([0], dtype=np.int64))

        all_times = np.concatenate(times)
        all_channels = np.concatenate(channels)
        order = np.argsort(all_times, kind="stable")
        return all_times[order], all_channels[order]

    def _read_impl(self) -> Optional[int]:
        if self._cursor >= self._times.size:
            return None
        self._clock_s = float(self._times[self._cursor])
        channel = int(self._channels[self._cursor])
        self._cursor += 1
        return channel

    def _now(self) -> float:
        return self._clock_s

    def stats(self) -> dict:
        stats = super().stats()
        stats["scheduled"] = int(self._times.size)
        stats["seed"] = self._seed
        return stats


__all__ = ["SimulatedSource"]
