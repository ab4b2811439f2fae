"""Render pipeline — pick the concatenation path and own the scratch space.

If any clip has a transition configured, the whole timeline goes through
the re-encoding transition path; otherwise clips are joined by stream copy.

Callers pass a scratch directory they own. Each render works in its own
mkdtemp() subdirectory of it, so concurrent renders never share temp files,
and preview filenames are unique per request.
"""

import logging
import shutil
import tempfile
import uuid
from pathlib import Path

from .common import remove_quietly
from .concat import concatenate_fast, concatenate_with_transitions
from .errors import InputValidationError
from .models import TimelineClip, has_transitions
from .runner import find_ffmpeg
from .trim import DEFAULT_PROFILE, EncodeProfile

logger = logging.getLogger(__name__)


def render_timeline(
    clips: list[TimelineClip],
    output: str | Path,
    scratch_dir: str | Path,
    workers: int = 1,
    profile: EncodeProfile = DEFAULT_PROFILE,
) -> Path:
    """Render the clip list into a single movie at `output`.

    On failure the partially written output is removed and the error is
    re-raised unchanged.

    Raises:
        InputValidationError: Empty list or invalid transition geometry.
        ToolUnavailableError: ffmpeg could not be found.
        SubprocessFailure: Any ffmpeg step failed.
    """
    if not clips:
        raise InputValidationError("No clips to render")
    find_ffmpeg()

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    scratch = Path(scratch_dir)
    scratch.mkdir(parents=True, exist_ok=True)
    work_dir = Path(tempfile.mkdtemp(prefix="render-", dir=scratch))

    try:
        if has_transitions(clips):
            logger.info("Rendering %d clips via transition path", len(clips))
            concatenate_with_transitions(clips, output, work_dir, workers=workers, profile=profile)
        else:
            logger.info("Rendering %d clips via stream-copy path", len(clips))
            concatenate_fast(clips, output, work_dir, workers=workers)
    except BaseException:
        remove_quietly(output)
        raise
    finally:
        remove_quietly(work_dir)

    return output


def create_preview(
    clips: list[TimelineClip],
    scratch_dir: str | Path,
    workers: int = 1,
) -> Path:
    """Render a preview movie under a request-unique name in scratch_dir."""
    output = Path(scratch_dir) / f"preview-{uuid.uuid4().hex}.mp4"
    return render_timeline(clips, output, scratch_dir, workers=workers)


def export_preview(preview: str | Path, destination: str | Path) -> Path:
    """Copy a rendered preview to a user-chosen location.

    Raises:
        FileNotFoundError: The preview has not been rendered.
    """
    preview = Path(preview)
    if not preview.exists():
        raise FileNotFoundError(
            f"Preview video not found: {preview}. Render a preview first."
        )
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(preview, destination)
    return destination
