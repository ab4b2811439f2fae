"""Subcommand dispatcher for clipstitch.

Usage:
    clipstitch render   --manifest timeline.yaml --output movie.mp4
    clipstitch trim     source.mp4 --start 10 --end 30 --output clip.mp4
    clipstitch waveform source.mp4 --start 0 --end 5 --output wave.png
    clipstitch sprite   source.mp4 --start 0 --end 5 --output strip.jpg
"""

import argparse
import logging
import sys

COMMANDS = {
    "render": "Render a timeline into one movie",
    "trim": "Trim a segment out of a source video",
    "waveform": "Render an audio waveform preview for a clip interval",
    "sprite": "Render a frame-sprite strip for a clip interval",
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="clipstitch",
        description="Timeline stitching with cross-fades, plus scrubber previews.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every ffmpeg command line",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if parsed.command == "render":
        from .render_cli import main as render_main
        render_main(remaining)
    elif parsed.command == "trim":
        from .trim_cli import main as trim_main
        trim_main(remaining)
    elif parsed.command == "waveform":
        from .thumbnail_cli import waveform_main
        waveform_main(remaining)
    elif parsed.command == "sprite":
        from .thumbnail_cli import sprite_main
        sprite_main(remaining)


if __name__ == "__main__":
    main()
