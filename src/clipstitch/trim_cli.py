"""CLI for trimming a single segment out of a source video.

Usage:
    clipstitch trim source.mp4 --start 10 --end 30 --output clip.mp4
    clipstitch trim source.mp4 --start 10 --end 30 --output clip.mp4 --encode
"""

import argparse

from .trim import trim_clip


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="clipstitch trim",
        description="Trim [start, end) out of a source video.",
    )
    parser.add_argument("source", help="Path to source video")
    parser.add_argument("--start", type=float, required=True, help="Start time in seconds")
    parser.add_argument("--end", type=float, required=True, help="End time in seconds")
    parser.add_argument("--output", required=True, help="Output file path")
    parser.add_argument(
        "--encode", action="store_true",
        help="Re-encode for frame-accurate cuts instead of stream copy",
    )
    parsed = parser.parse_args(args)

    if parsed.end <= parsed.start:
        parser.error("--end must be greater than --start")

    print(f"Trimming {parsed.source}  {parsed.start:.1f}s - {parsed.end:.1f}s")
    trim_clip(parsed.source, parsed.start, parsed.end, parsed.output, copy=not parsed.encode)
    print(f"Done: {parsed.output}")


if __name__ == "__main__":
    main()
