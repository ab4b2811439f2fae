"""CLI for rendering a timeline into a single movie.

Clips come from a YAML timeline manifest or from the editor's saved state.
If any clip sets a transition the timeline is re-encoded through an xfade
filter graph; otherwise clips are joined by stream copy.

Usage:
    clipstitch render --manifest timeline.yaml --output movie.mp4
    clipstitch render --editor-state editor_state.json --output movie.mp4 --workers 4
    clipstitch render --manifest timeline.yaml --validate
"""

import argparse
import tempfile
import time

from .models import has_transitions
from .pipeline import render_timeline
from .plan import build_plan
from .timeline_manifest import (
    load_editor_state,
    load_timeline_manifest,
    validate_timeline_paths,
)


def _load_clips(parsed):
    if parsed.manifest:
        return load_timeline_manifest(parsed.manifest)["clips"]
    return load_editor_state(parsed.editor_state)


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="clipstitch render",
        description="Render timeline clips into one movie.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--manifest", help="Path to YAML timeline manifest")
    source.add_argument("--editor-state", help="Path to editor-state JSON")
    parser.add_argument(
        "--output",
        help="Output mp4 path (required unless --validate)",
    )
    parser.add_argument(
        "--scratch-dir", default=None,
        help="Directory for intermediate files (default: system temp)",
    )
    parser.add_argument(
        "--workers", type=int, default=1,
        help="Parallel trim workers (default: 1, sequential)",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate clips only: check paths and timing, don't render",
    )
    parsed = parser.parse_args(args)

    clips = _load_clips(parsed)
    validate_timeline_paths(clips)

    if parsed.validate:
        print(f"Timeline valid: {len(clips)} clips")
        for i, c in enumerate(clips):
            tt = c.transition_type.name if c.transition_type else "cut"
            print(f"  {i}: {c.source_path} [{c.trim_start:.2f}-{c.trim_end:.2f}] -> {tt}")
        if clips and has_transitions(clips):
            plan = build_plan(clips)
            print(f"Composed duration: {plan.total_duration:.2f}s")
        print("All paths verified.")
        return

    if not parsed.output:
        parser.error("--output is required (unless using --validate)")

    mode = "transitions (re-encode)" if has_transitions(clips) else "stream copy"
    print(f"Rendering {len(clips)} clips, {mode}")
    print(f"Writing to: {parsed.output}")
    t0 = time.monotonic()
    if parsed.scratch_dir:
        render_timeline(clips, parsed.output, parsed.scratch_dir, workers=parsed.workers)
    else:
        with tempfile.TemporaryDirectory(prefix="clipstitch-") as scratch:
            render_timeline(clips, parsed.output, scratch, workers=parsed.workers)
    print(f"\nDone: {parsed.output} ({time.monotonic() - t0:.1f}s)")


if __name__ == "__main__":
    main()
