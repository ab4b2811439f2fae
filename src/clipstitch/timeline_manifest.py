"""Timeline manifest loader — clip lists from YAML or editor-state JSON.

Timeline manifest schema:
  video:
    transition_duration: 1.0    # default for clips that set a transition
  paths:
    raw: "/data/recordings"
  clips:
    - id: intro
      path: "${raw}/a.mp4"
      trim_start: 0.0
      trim_end: 5.0
      duration: 5.0             # optional, defaults to trim_end - trim_start
      transition: fade          # optional outgoing transition
      transition_duration: 1.0  # optional per-clip override

Editor-state files are the desktop editor's saved JSON:
  {"clips": [{"id": ..., "videoPath": ..., "trimStart": ..., ...}], ...}
"""

import json
from pathlib import Path

import yaml

from .common import resolve_path_vars
from .errors import InputValidationError
from .models import TimelineClip


def load_timeline_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a timeline manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Resolve ${path} variables in clip paths.
      3. Apply the global transition_duration default to clips that set a
         transition but no duration.
      4. Build TimelineClip objects and check for duplicate ids.

    Args:
        manifest_path: Path to the YAML timeline manifest.

    Returns:
        Config dict: {"video": {...}, "clips": [TimelineClip, ...]}.

    Raises:
        InputValidationError: Missing/invalid fields.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f) or {}

    if "clips" not in raw:
        raise InputValidationError("Timeline manifest: missing required 'clips' section")

    video = raw.get("video") or {}
    default_td = video.get("transition_duration")
    if default_td is not None and (
        not isinstance(default_td, (int, float)) or default_td < 0
    ):
        raise InputValidationError(
            f"Timeline manifest: video.transition_duration must be >= 0, got {default_td!r}"
        )

    paths = raw.get("paths", {})

    clips = []
    seen_ids = set()
    for i, entry in enumerate(raw["clips"] or []):
        if not isinstance(entry, dict):
            raise InputValidationError(f"Timeline clip {i}: expected a mapping")
        entry = dict(entry)
        if "path" not in entry:
            raise InputValidationError(f"Timeline clip {i}: missing required field 'path'")
        try:
            entry["path"] = resolve_path_vars(str(entry["path"]), paths)
        except ValueError as exc:
            raise InputValidationError(f"Timeline clip {i}: {exc}") from exc

        if (
            entry.get("transition") is not None
            and entry.get("transition_duration") is None
            and default_td is not None
        ):
            entry["transition_duration"] = default_td

        clip = TimelineClip.from_dict(entry)
        if clip.id in seen_ids:
            raise InputValidationError(f"Duplicate clip id: '{clip.id}'")
        seen_ids.add(clip.id)
        clips.append(clip)

    return {"video": video, "clips": clips}


def load_editor_state(state_path: str | Path) -> list[TimelineClip]:
    """Read the clip list out of an editor-state JSON file.

    Raises:
        InputValidationError: The file has no clip list or a clip is invalid.
    """
    with open(state_path) as f:
        state = json.load(f)

    if not isinstance(state, dict) or not isinstance(state.get("clips"), list):
        raise InputValidationError(f"Editor state {state_path}: missing 'clips' list")
    return [TimelineClip.from_dict(entry) for entry in state["clips"]]


def validate_timeline_paths(clips: list[TimelineClip]) -> None:
    """Check that all clip source files exist on disk.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = []
    for clip in clips:
        if not Path(clip.source_path).exists():
            missing.append(clip.source_path)

    if missing:
        msg = f"Missing {len(missing)} source file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
