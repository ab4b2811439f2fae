"""ffmpeg subprocess runner.

Every tool invocation in clipstitch goes through run_ffmpeg(): it resolves
the executable once, runs the command to completion, and turns a non-zero
exit into a SubprocessFailure carrying stderr verbatim. There is no timeout
and no retry; a hung ffmpeg blocks the caller.
"""

import functools
import logging
import shlex
import shutil
import subprocess

import imageio_ffmpeg

from .errors import SubprocessFailure, ToolUnavailableError

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def find_ffmpeg() -> str:
    """Locate the ffmpeg executable.

    imageio-ffmpeg's bundled binary is preferred (it also honours the
    IMAGEIO_FFMPEG_EXE environment variable); a system ffmpeg on PATH is
    the fallback. The lookup is cached, so the check happens once.

    Raises:
        ToolUnavailableError: Neither location has an ffmpeg.
    """
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError:
        pass
    system = shutil.which("ffmpeg")
    if system:
        return system
    raise ToolUnavailableError(
        "FFmpeg not found. Install ffmpeg or set IMAGEIO_FFMPEG_EXE."
    )


def run_ffmpeg(
    args: list[str],
    operation: str,
    clip_index: int | None = None,
    clip_id: str | None = None,
) -> subprocess.CompletedProcess:
    """Run ffmpeg with the given arguments and wait for it to exit.

    Args:
        args: Arguments after the executable name.
        operation: Short description used in logs and error messages.
        clip_index: Index of the clip being processed, if any.
        clip_id: Id of the clip being processed, if any.

    Returns:
        The completed process with captured stdout/stderr text.

    Raises:
        ToolUnavailableError: ffmpeg could not be located.
        SubprocessFailure: ffmpeg exited non-zero.
    """
    cmd = [find_ffmpeg(), "-hide_banner", *args]
    logger.debug("ffmpeg %s: %s", operation, shlex.join(cmd))

    result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    if result.returncode != 0:
        raise SubprocessFailure(
            operation, result.returncode, result.stderr.strip(),
            clip_index=clip_index, clip_id=clip_id,
        )
    return result
