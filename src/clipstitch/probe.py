"""Media probing via moviepy's ffmpeg info parser.

imageio-ffmpeg does not bundle ffprobe, so stream layout and duration come
from parsing `ffmpeg -i` output, which moviepy already does.
"""

from dataclasses import dataclass
from pathlib import Path

from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos


@dataclass(frozen=True)
class MediaInfo:
    duration: float
    has_video: bool
    has_audio: bool


def probe_media(path: str | Path) -> MediaInfo:
    """Report duration and which stream types a media file carries.

    Raises:
        FileNotFoundError: The file does not exist.
        OSError: ffmpeg could not read the file.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Media file not found: {p}")

    infos = ffmpeg_parse_infos(str(p))
    return MediaInfo(
        duration=float(infos.get("duration") or 0.0),
        has_video=bool(infos.get("video_found")),
        has_audio=bool(infos.get("audio_found")),
    )
