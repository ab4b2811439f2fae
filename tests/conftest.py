"""Shared test fixtures for clipstitch tests."""

import subprocess

import pytest
import imageio_ffmpeg

from clipstitch.models import TimelineClip

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _make_video(out, duration, color="blue", audio=True):
    cmd = [
        _FFMPEG, "-y",
        "-f", "lavfi", "-i", f"color=c={color}:s=320x240:d={duration}:r=10",
    ]
    if audio:
        cmd += ["-f", "lavfi", "-i", f"sine=frequency=440:sample_rate=44100:duration={duration}"]
    cmd += ["-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p", "-g", "10"]
    if audio:
        cmd += ["-c:a", "aac", "-b:a", "32k", "-ac", "2", "-shortest"]
    cmd.append(str(out))
    subprocess.run(cmd, check=True, capture_output=True)
    return out


@pytest.fixture
def source_video(tmp_path):
    """Create a 5-second test video (320x240, 10fps) with a sine-tone audio track."""
    return _make_video(tmp_path / "source.mp4", 5)


@pytest.fixture
def silent_video(tmp_path):
    """Create a 3-second video with no audio stream at all."""
    return _make_video(tmp_path / "silent.mp4", 3, color="green", audio=False)


@pytest.fixture
def make_clip():
    """Factory for TimelineClip objects with sensible defaults."""
    def _make(clip_id="c0", duration=5.0, transition=None, transition_duration=None,
              source="/fake/source.mp4", trim_start=0.0):
        return TimelineClip(
            id=clip_id,
            source_path=str(source),
            trim_start=trim_start,
            trim_end=trim_start + duration,
            duration=duration,
            transition_type=transition,
            transition_duration=transition_duration,
        )
    return _make
