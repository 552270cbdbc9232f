"""
Command-line entry point.

Scans a music directory and plays every track found while showing live
amplitude and spectrum readouts.
"""

import argparse
import logging
import sys
from pathlib import Path

from livescope.config import AnalysisConfig, load_presets
from livescope.errors import ConfigError, SetupError
from livescope.io.discovery import discover
from livescope.log import setup_logging
from livescope.playback.driver import PlaybackDriver
from livescope.render.terminal import PlainRenderer, TerminalRenderer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livescope",
        description="Play a music folder with live amplitude and spectrum analysis",
    )

    parser.add_argument(
        "music_dir",
        nargs="?",
        type=Path,
        default=None,
        help="Directory to scan for audio (default: ./music)",
    )

    parser.add_argument(
        "-p", "--preset",
        choices=sorted(load_presets()),
        default="default",
        help="Analysis preset (default: default)",
    )

    parser.add_argument(
        "-b", "--block-size",
        type=int,
        default=None,
        help="Frames per analysed block (default: 512)",
    )

    parser.add_argument(
        "-n", "--bands",
        dest="band_count",
        type=int,
        default=None,
        help="Number of spectrum bands (default: 32)",
    )

    parser.add_argument(
        "-s", "--smoothing",
        dest="smoothing_weight",
        type=float,
        default=None,
        help="Neighbour smoothing weight, 0 disables (default: 0.5)",
    )

    parser.add_argument(
        "-t", "--tick",
        dest="tick_interval",
        type=float,
        default=None,
        help="Display refresh interval in seconds (default: 0.1)",
    )

    parser.add_argument(
        "-e", "--ext",
        dest="extensions",
        action="append",
        default=None,
        help="Accepted file extension, repeatable (default: .mp3 .wav)",
    )

    parser.add_argument(
        "-d", "--display",
        choices=("terminal", "plain", "window"),
        default="terminal",
        help="Presentation backend (default: terminal)",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file instead of stderr",
    )

    return parser


def make_renderer(display: str, config: AnalysisConfig, driver: PlaybackDriver):
    if display == "window":
        from livescope.render.window import WindowRenderer

        return WindowRenderer(on_quit=driver.stop)
    if display == "plain":
        return PlainRenderer(config.bar_width, config.bar_height)
    return TerminalRenderer(config.bar_width, config.bar_height)


def main(argv=None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = AnalysisConfig.from_preset(
            args.preset,
            block_size=args.block_size,
            band_count=args.band_count,
            smoothing_weight=args.smoothing_weight,
            tick_interval=args.tick_interval,
            extensions=args.extensions,
            music_dir=str(args.music_dir) if args.music_dir else None,
        )
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    try:
        files = discover(config.music_dir, config.extensions)
    except SetupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not files:
        print(f"No playable files found in {config.music_dir}")
        return 0

    driver = PlaybackDriver(config)
    renderer = make_renderer(args.display, config, driver)
    driver.renderer = renderer

    try:
        with renderer:
            report = driver.play_playlist(files)
    except SetupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for path, reason in report.failed:
        print(f"Skipped {path.name}: {reason}", file=sys.stderr)

    return 130 if report.interrupted else 0


if __name__ == "__main__":
    sys.exit(main())
