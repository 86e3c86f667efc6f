from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from daq.base_source import BaseSource
from daq.simulated_source import SimulatedSource
from daq.stream_source import StreamSource
from shared.settings import TaggerSettings, load_settings

from .runtime import TimeTaggerRuntime

logger = logging.getLogger("timetagger")

EXIT_OK = 0
EXIT_RUNTIME = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timetagger",
        description="Record channel events for a fixed window and count cross-channel coincidences.",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="JSON file with channel_count, experiment_duration_s, match_window_ms, max_events_per_channel.",
    )
    parser.add_argument("--channels", dest="channel_count", type=int, default=None, help="Number of input channels.")
    parser.add_argument(
        "--duration",
        dest="experiment_duration_s",
        type=float,
        default=None,
        help="Length of the observation window in seconds.",
    )
    parser.add_argument(
        "--window",
        dest="match_window_ms",
        type=int,
        default=None,
        help="Coincidence window in milliseconds (inclusive).",
    )
    parser.add_argument(
        "--max-events",
        dest="max_events_per_channel",
        type=int,
        default=None,
        help="Stop acquisition once any channel holds this many events.",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use the simulated detector array instead of reading channel ids from stdin.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulated source.")
    parser.add_argument(
        "--rate",
        dest="rate_hz",
        type=float,
        default=0.5,
        help="Simulated background rate per channel (Hz).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="warning",
        help="Logging level (e.g. debug, info, warning).",
    )
    return parser


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_source(args: argparse.Namespace, settings: TaggerSettings, stdin: Optional[TextIO]) -> BaseSource:
    if args.simulate:
        return SimulatedSource(
            settings.channel_count,
            settings.experiment_duration_s,
            background_rate_hz=args.rate_hz,
            burst_multiplicity=min(2, settings.channel_count),
            seed=args.seed,
        )
    return StreamSource(stdin)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        _configure_logging(args.log_level)
        settings = load_settings(
            args.config_path,
            channel_count=args.channel_count,
            experiment_duration_s=args.experiment_duration_s,
            match_window_ms=args.match_window_ms,
            max_events_per_channel=args.max_events_per_channel,
        )
        source = _build_source(args, settings, stdin)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_USAGE

    runtime = TimeTaggerRuntime(settings, out=stdout)
    try:
        runtime.run(source)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_RUNTIME
    except (RuntimeError, ValueError) as exc:
        logger.error("Run failed: %s", exc)
        return EXIT_RUNTIME
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
