"""CLI for scrubber previews of a clip interval.

Usage:
    clipstitch waveform source.mp4 --start 0 --end 5 --output wave.png --width 600
    clipstitch sprite   source.mp4 --start 0 --end 5 --output strip.jpg --width 500
"""

import argparse
import sys

from .thumbnails import (
    DEFAULT_WAVEFORM_COLOR,
    MIN_WAVEFORM_WIDTH,
    SPRITE_HEIGHT,
    WAVEFORM_HEIGHT,
    generate_sprite,
    generate_waveform,
)


def _parser(prog, description, default_width, default_height):
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("source", help="Path to source video")
    parser.add_argument("--start", type=float, required=True, help="Interval start in seconds")
    parser.add_argument("--end", type=float, required=True, help="Interval end in seconds")
    parser.add_argument("--output", required=True, help="Output image path")
    parser.add_argument(
        "--width", type=int, default=default_width,
        help=f"Image width in pixels (default: {default_width})",
    )
    parser.add_argument(
        "--height", type=int, default=default_height,
        help=f"Image height in pixels (default: {default_height})",
    )
    return parser


def waveform_main(args=None):
    parser = _parser(
        "clipstitch waveform", "Render an audio waveform image for a clip interval.",
        MIN_WAVEFORM_WIDTH, WAVEFORM_HEIGHT,
    )
    parser.add_argument(
        "--color", default=DEFAULT_WAVEFORM_COLOR,
        help=f"Waveform color as #RRGGBB (default: {DEFAULT_WAVEFORM_COLOR})",
    )
    parsed = parser.parse_args(args)

    result = generate_waveform(
        parsed.source, parsed.start, parsed.end, parsed.output,
        parsed.width, parsed.height, color=parsed.color,
    )
    if result is None:
        print(f"No audio track in {parsed.source}; no waveform written.")
        sys.exit(2)
    print(f"Done: {result}")


def sprite_main(args=None):
    parser = _parser(
        "clipstitch sprite", "Render a horizontal frame-sprite strip for a clip interval.",
        500, SPRITE_HEIGHT,
    )
    parsed = parser.parse_args(args)

    result = generate_sprite(
        parsed.source, parsed.start, parsed.end, parsed.output,
        parsed.width, parsed.height,
    )
    print(f"Done: {result}")
