"""Clip trimming — cut [start, end) out of a source file with ffmpeg."""

from dataclasses import dataclass
from pathlib import Path

from .common import fmt_seconds
from .errors import InputValidationError, SubprocessFailure
from .models import TimelineClip
from .runner import run_ffmpeg


@dataclass(frozen=True)
class EncodeProfile:
    """Fixed intermediate encoding used wherever ffmpeg must re-encode.

    Every input of a transition filter graph goes through this profile so
    the graph sees uniformly encoded, frame-accurate streams.
    """

    video_codec: str = "libx264"
    preset: str = "superfast"
    crf: int = 23
    audio_codec: str = "aac"
    audio_bitrate: str = "128k"

    def args(self) -> list[str]:
        return [
            "-c:v", self.video_codec,
            "-preset", self.preset,
            "-crf", str(self.crf),
            "-c:a", self.audio_codec,
            "-b:a", self.audio_bitrate,
        ]


DEFAULT_PROFILE = EncodeProfile()


def trim_clip(
    source: str,
    start: float,
    end: float,
    output: str | Path,
    copy: bool = True,
    profile: EncodeProfile = DEFAULT_PROFILE,
) -> None:
    """Cut a single segment from a source video.

    Args:
        source: Path to source video.
        start: Start time in seconds.
        end: End time in seconds (exclusive).
        output: Output file path; parent directories are created.
        copy: If True, stream-copy (fast, keyframe-aligned).
              If False, re-encode with `profile` for frame-accurate cuts.
        profile: Encoding settings used when copy is False.

    Raises:
        InputValidationError: end is not after start.
        SubprocessFailure: ffmpeg failed.
    """
    if end <= start:
        raise InputValidationError(f"Trim end ({end}) must be greater than start ({start})")

    Path(output).parent.mkdir(parents=True, exist_ok=True)

    codec_args = ["-c", "copy"] if copy else profile.args()
    args = [
        "-ss", fmt_seconds(start),
        "-i", str(source),
        "-t", fmt_seconds(end - start),
        *codec_args,
        "-y", str(output),
    ]
    run_ffmpeg(args, "trim video" if copy else "encode clip")


def trim_timeline_clip(
    clip: TimelineClip,
    output: str | Path,
    index: int,
    copy: bool = True,
    profile: EncodeProfile = DEFAULT_PROFILE,
) -> Path:
    """Trim one timeline clip, tagging any failure with its index and id.

    Returns:
        The output path.
    """
    try:
        trim_clip(clip.source_path, clip.trim_start, clip.trim_end, output,
                  copy=copy, profile=profile)
    except SubprocessFailure as exc:
        raise exc.for_clip(index, clip.id) from exc
    return Path(output)
