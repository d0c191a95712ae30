"""Main CLI entry point for tcodewave."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .. import __version__
from .picker import console_picker
from ..exceptions import TCodeWaveError, UserCancelledError
from ..pipeline import Pipeline
from ..settings import DeviceKind, PipelineSettings

# Command-line option -> PipelineSettings field
OPTION_FIELDS = {
    "device": "device_kind",
    "url": "websocket_url",
    "port": "serial_port",
    "baudrate": "serial_baudrate",
    "frequency": "send_frequency",
    "base_period": "base_period",
    "random_min": "random_min",
    "random_max": "random_max",
    "amplitude_min": "amplitude_min",
    "amplitude_max": "amplitude_max",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcodewave",
        description="tcodewave: TCode Waveform Generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tcodewave --device debug --duration 5          Print commands for 5 seconds
  tcodewave --device serial --port /dev/ttyUSB0  Drive a serial actuator
  tcodewave --device websocket --url ws://host:8080
  tcodewave --settings settings.json             Load settings from JSON
        """,
    )

    parser.add_argument(
        "--device",
        choices=[kind.value for kind in DeviceKind],
        help="Transport to use (default: serial)",
    )
    parser.add_argument("--url", help="WebSocket server address")
    parser.add_argument("--port", help="Serial port or pyserial URL (default: pick interactively)")
    parser.add_argument("--baudrate", type=int, help="Serial baud rate (default: 9600)")
    parser.add_argument("--frequency", type=int, help="Commands per second, 1-200 (default: 50)")
    parser.add_argument("--base-period", type=float, help="Base half-cycle in ms (default: 0)")
    parser.add_argument("--random-min", type=float, help="Minimum period jitter in ms (default: 0)")
    parser.add_argument("--random-max", type=float, help="Maximum period jitter in ms (default: 200)")
    parser.add_argument("--amplitude-min", type=float, help="Lowest position 0-1 (default: 0)")
    parser.add_argument("--amplitude-max", type=float, help="Highest position 0-1 (default: 1)")
    parser.add_argument("--settings", metavar="FILE", help="JSON settings file")
    parser.add_argument(
        "--duration",
        type=float,
        help="Stop after this many seconds (default: run until interrupted)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"tcodewave {__version__}")
    return parser


def build_settings(args: argparse.Namespace) -> PipelineSettings:
    """Load the settings file, if any, and overlay explicit command-line options.

    Raises:
        OSError: If the settings file cannot be read
        pydantic.ValidationError: If the resulting settings are invalid
    """
    settings = PipelineSettings()
    if args.settings:
        settings = PipelineSettings.from_json_file(args.settings)

    overrides: dict[str, Any] = {
        field: getattr(args, option)
        for option, field in OPTION_FIELDS.items()
        if getattr(args, option) is not None
    }
    return settings.updated(**overrides) if overrides else settings


def print_latest_record(records: list[str]) -> None:
    """Echo the newest debug sink record to stdout."""
    if records:
        print(records[-1], flush=True)


async def run(settings: PipelineSettings, duration: float | None) -> None:
    async with Pipeline(settings, picker=console_picker) as pipeline:
        if settings.device_kind is DeviceKind.DEBUG:
            pipeline.on_debug_log(print_latest_record)

        await pipeline.connect()
        pipeline.set_running(True)

        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the tcodewave CLI.

    Returns:
        Exit code (0 for success, 1 for errors, 130 when cancelled)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.settings and not Path(args.settings).exists():
        print(f"Error: File not found: {args.settings}", file=sys.stderr)
        return 1

    try:
        settings = build_settings(args)
    except (OSError, ValidationError) as e:
        print(f"Error: Invalid settings: {e}", file=sys.stderr)
        return 1

    try:
        asyncio.run(run(settings, args.duration))
    except UserCancelledError as e:
        print(f"Cancelled: {e}", file=sys.stderr)
        return 130
    except TCodeWaveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
