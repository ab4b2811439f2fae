"""Scrubber previews — audio waveform images and frame-sprite strips.

Both are rendered from a clip's trimmed interval, independently of any
concatenation, and cached on disk by (clip id, requested width). A cache
hit returns the existing file without running ffmpeg.

A clip without an audio track has no waveform. That is reported as None
("no preview available"), never as an error.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path

from .common import ffmpeg_color, fmt_seconds
from .errors import InputValidationError, SubprocessFailure
from .models import TimelineClip
from .probe import probe_media
from .runner import run_ffmpeg

logger = logging.getLogger(__name__)

MIN_FRAME_WIDTH = 50
MAX_SPRITE_FPS = 10.0

MIN_WAVEFORM_WIDTH = 300
MIN_SPRITE_WIDTH = 100
WAVEFORM_HEIGHT = 60
SPRITE_HEIGHT = 38
DEFAULT_WAVEFORM_COLOR = "#FFFFFF"

# ffmpeg's complaint when [0:a] has nothing to bind to.
_NO_AUDIO_MARKERS = ("matches no streams", "does not contain any stream")


def thumbnail_width(duration: float, pixels_per_second: float, minimum: int) -> int:
    """Pixel width of a clip's preview at the timeline's current zoom."""
    return max(minimum, math.floor(duration * pixels_per_second))


def _check_interval(trim_start: float, trim_end: float, width: int, height: int) -> float:
    duration = trim_end - trim_start
    if duration <= 0:
        raise InputValidationError("Invalid duration: trim_end must be greater than trim_start")
    if width <= 0 or height <= 0:
        raise InputValidationError(f"Invalid preview size: {width}x{height}")
    return duration


# ── Waveform ───────────────────────────────────────────────────────

def generate_waveform(
    source: str,
    trim_start: float,
    trim_end: float,
    output: str | Path,
    width: int,
    height: int = WAVEFORM_HEIGHT,
    color: str = DEFAULT_WAVEFORM_COLOR,
) -> Path | None:
    """Render the amplitude envelope of [trim_start, trim_end) to an image.

    Returns:
        The output path, or None if the source has no audio track.

    Raises:
        InputValidationError: Empty interval or non-positive size.
        SubprocessFailure: ffmpeg failed for any other reason.
    """
    duration = _check_interval(trim_start, trim_end, width, height)

    if not probe_media(source).has_audio:
        logger.info("No audio track in %s, skipping waveform", source)
        return None

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    filter_complex = (
        f"[0:a]showwavespic=s={width}x{height}"
        f":colors={ffmpeg_color(color)}:scale=lin[v]"
    )
    try:
        run_ffmpeg(
            [
                "-ss", fmt_seconds(trim_start),
                "-i", str(source),
                "-t", fmt_seconds(duration),
                "-filter_complex", filter_complex,
                "-map", "[v]",
                "-frames:v", "1",
                "-y", str(output),
            ],
            "generate waveform",
        )
    except SubprocessFailure as exc:
        if any(marker in exc.stderr for marker in _NO_AUDIO_MARKERS):
            logger.info("No audio stream bound for %s, skipping waveform", source)
            return None
        raise
    return output


# ── Sprite ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SpriteGeometry:
    fps: float
    num_frames: int
    frame_width: int


def sprite_geometry(
    duration: float,
    width: int,
    min_frame_width: int = MIN_FRAME_WIDTH,
    max_fps: float = MAX_SPRITE_FPS,
) -> SpriteGeometry:
    """Choose frame rate, frame count and tile width for a sprite strip.

    As many frames as fit at min_frame_width pixels each, spread evenly
    over the interval, capped at max_fps for very short clips. Frames are
    never narrower than min_frame_width unless the strip itself is.
    """
    if duration <= 0:
        raise InputValidationError("Invalid duration: trim_end must be greater than trim_start")
    if width <= 0:
        raise InputValidationError(f"Invalid sprite width: {width}")

    max_frames = max(width // min_frame_width, 1)
    fps = min(max_frames / duration, max_fps)
    # Round before ceil so 10.000000000000002 frames stays 10.
    num_frames = math.ceil(round(duration * fps, 6))
    num_frames = min(max(num_frames, 1), max_frames)
    return SpriteGeometry(fps=fps, num_frames=num_frames, frame_width=width // num_frames)


def generate_sprite(
    source: str,
    trim_start: float,
    trim_end: float,
    output: str | Path,
    width: int,
    height: int,
) -> Path:
    """Render a horizontal filmstrip of evenly spaced frames.

    Raises:
        InputValidationError: Empty interval or non-positive size.
        SubprocessFailure: ffmpeg failed.
    """
    duration = _check_interval(trim_start, trim_end, width, height)
    geo = sprite_geometry(duration, width)

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    filter_complex = (
        f"[0:v]fps={geo.fps:.6f},scale=-1:{height},"
        f"scale={geo.frame_width}:{height},tile={geo.num_frames}x1[sprite]"
    )
    run_ffmpeg(
        [
            "-ss", fmt_seconds(trim_start),
            "-i", str(source),
            "-t", fmt_seconds(duration),
            "-filter_complex", filter_complex,
            "-map", "[sprite]",
            "-frames:v", "1",
            "-y", str(output),
        ],
        "generate sprite",
    )
    return output


# ── Cache ──────────────────────────────────────────────────────────

class ThumbnailCache:
    """On-disk preview cache keyed by (clip id, width)."""

    def __init__(self, cache_dir: str | Path):
        self.root = Path(cache_dir)

    @property
    def waveforms_dir(self) -> Path:
        return self.root / "waveforms"

    @property
    def sprites_dir(self) -> Path:
        return self.root / "sprites"

    @staticmethod
    def _key(clip_id: str, width: int) -> str:
        # Ids come from editor state; keep every entry inside the cache root.
        if not clip_id or any(c in clip_id for c in ("/", "\\", "\0")):
            raise InputValidationError(f"Clip id is not usable as a cache key: {clip_id!r}")
        return f"{clip_id}_{width}"

    def waveform_path(self, clip_id: str, width: int) -> Path:
        return self.waveforms_dir / f"{self._key(clip_id, width)}.png"

    def no_audio_marker(self, clip_id: str, width: int) -> Path:
        """Empty file recording that the clip has no waveform at this width."""
        return self.waveforms_dir / f"{self._key(clip_id, width)}.noaudio"

    def sprite_path(self, clip_id: str, width: int) -> Path:
        return self.sprites_dir / f"{self._key(clip_id, width)}.jpg"


def clip_waveform(
    clip: TimelineClip,
    cache: ThumbnailCache,
    width: int,
    height: int = WAVEFORM_HEIGHT,
) -> Path | None:
    """Cached waveform for a timeline clip; None if it has no audio."""
    path = cache.waveform_path(clip.id, width)
    if path.exists():
        return path
    marker = cache.no_audio_marker(clip.id, width)
    if marker.exists():
        return None

    result = generate_waveform(clip.source_path, clip.trim_start, clip.trim_end, path, width, height)
    if result is None:
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.touch()
    return result


def clip_sprite(clip: TimelineClip, cache: ThumbnailCache, width: int, height: int) -> Path:
    """Cached sprite strip for a timeline clip."""
    path = cache.sprite_path(clip.id, width)
    if path.exists():
        return path
    return generate_sprite(clip.source_path, clip.trim_start, clip.trim_end, path, width, height)
