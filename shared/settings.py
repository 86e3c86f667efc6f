from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaggerSettings:
    """Startup constants for one experiment."""

    channel_count: int = 6
    experiment_duration_s: float = 10.0
    match_window_ms: int = 1000
    max_events_per_channel: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.channel_count, bool) or not isinstance(self.channel_count, int) or self.channel_count <= 0:
            raise ValueError("channel_count must be a positive integer")
        if self.experiment_duration_s <= 0:
            raise ValueError("experiment_duration_s must be positive")
        if isinstance(self.match_window_ms, bool) or not isinstance(self.match_window_ms, int) or self.match_window_ms < 0:
            raise ValueError("match_window_ms must be a non-negative integer")
        if self.max_events_per_channel is not None:
            if isinstance(self.max_events_per_channel, bool) or not isinstance(self.max_events_per_channel, int) \
                    or self.max_events_per_channel <= 0:
                raise ValueError("max_events_per_channel must be a positive integer or None")
        object.__setattr__(self, "experiment_duration_s", float(self.experiment_duration_s))

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(path: Union[str, Path, None] = None, **overrides: Any) -> TaggerSettings:
    """
    Build settings from an optional JSON file, then apply keyword overrides.

    Overrides whose value is None are ignored so argparse defaults can be
    passed straight through.
    """
    settings = TaggerSettings()
    if path is not None:
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a JSON object")
        known = {f.name for f in fields(TaggerSettings)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings keys in %s: %s", path, ", ".join(unknown))
        settings = replace(settings, **{k: v for k, v in data.items() if k in known})
        logger.info("Loaded settings from %s", path)

    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        settings = replace(settings, **updates)
    return settings


__all__ = ["TaggerSettings", "load_settings"]
