"""Tests for waveform and sprite previews.

Uses the shared source_video / silent_video fixtures from conftest.py and
Pillow to inspect the rendered images.
"""

from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from clipstitch.errors import InputValidationError, SubprocessFailure
from clipstitch.models import TimelineClip
from clipstitch.thumbnails import (
    MIN_SPRITE_WIDTH,
    MIN_WAVEFORM_WIDTH,
    ThumbnailCache,
    clip_sprite,
    clip_waveform,
    generate_sprite,
    generate_waveform,
    sprite_geometry,
    thumbnail_width,
)


def _clip(source, clip_id="c1", start=0.0, end=5.0):
    return TimelineClip(id=clip_id, source_path=str(source), trim_start=start,
                        trim_end=end, duration=end - start)


class TestSpriteGeometry:
    def test_reference_geometry(self):
        geo = sprite_geometry(5.0, 500)
        assert geo.fps == pytest.approx(2.0)
        assert geo.num_frames == 10
        assert geo.frame_width == 50

    def test_at_least_one_frame(self):
        geo = sprite_geometry(5.0, 30)
        assert geo.num_frames == 1
        assert geo.frame_width == 30

    def test_short_clip_capped_at_max_fps(self):
        geo = sprite_geometry(0.5, 500)
        assert geo.fps == pytest.approx(10.0)
        assert geo.num_frames == 5
        assert geo.frame_width == 100

    def test_long_clip_frames_stay_legible(self):
        geo = sprite_geometry(120.0, 500)
        assert geo.num_frames == 10
        assert geo.frame_width >= 50

    def test_float_noise_does_not_add_a_frame(self):
        geo = sprite_geometry(3.0, 500)
        assert geo.num_frames == 10

    def test_invalid_duration(self):
        with pytest.raises(InputValidationError):
            sprite_geometry(0.0, 500)


class TestThumbnailWidth:
    def test_scales_with_zoom(self):
        assert thumbnail_width(10.0, 50, MIN_WAVEFORM_WIDTH) == 500

    def test_minimum_applies(self):
        assert thumbnail_width(1.0, 20, MIN_SPRITE_WIDTH) == 100


class TestThumbnailCache:
    def test_paths_keyed_by_clip_and_width(self, tmp_path):
        cache = ThumbnailCache(tmp_path)
        assert cache.waveform_path("c1", 300) == tmp_path / "waveforms" / "c1_300.png"
        assert cache.sprite_path("c1", 500) == tmp_path / "sprites" / "c1_500.jpg"

    @pytest.mark.parametrize("clip_id", ["../../escape", "a/b", "a\\b", ""])
    def test_ids_cannot_leave_cache_root(self, tmp_path, clip_id):
        cache = ThumbnailCache(tmp_path)
        with pytest.raises(InputValidationError, match="cache key"):
            cache.waveform_path(clip_id, 300)
        with pytest.raises(InputValidationError, match="cache key"):
            cache.sprite_path(clip_id, 300)

    def test_dots_stay_inside_cache_root(self, tmp_path):
        path = ThumbnailCache(tmp_path).sprite_path("..", 500)
        assert path.parent == tmp_path / "sprites"


class TestWaveform:
    def test_renders_requested_size(self, source_video, tmp_path):
        out = generate_waveform(str(source_video), 1.0, 4.0, tmp_path / "w.png", 400, 60)
        assert out == tmp_path / "w.png"
        with Image.open(out) as img:
            assert img.size == (400, 60)
            # A sine tone draws something other than the background.
            assert np.asarray(img.convert("L")).max() > 0

    def test_no_audio_is_not_an_error(self, silent_video, tmp_path):
        result = generate_waveform(str(silent_video), 0.0, 2.0, tmp_path / "w.png", 300, 60)
        assert result is None
        assert not (tmp_path / "w.png").exists()

    def test_stderr_no_stream_treated_as_absence(self, source_video, tmp_path):
        failure = SubprocessFailure(
            "generate waveform", 1,
            "Stream specifier ':a' in filtergraph description matches no streams.",
        )
        with patch("clipstitch.thumbnails.run_ffmpeg", side_effect=failure):
            assert generate_waveform(str(source_video), 0.0, 1.0, tmp_path / "w.png", 300) is None

    def test_other_failures_propagate(self, source_video, tmp_path):
        failure = SubprocessFailure("generate waveform", 1, "Invalid argument")
        with patch("clipstitch.thumbnails.run_ffmpeg", side_effect=failure):
            with pytest.raises(SubprocessFailure):
                generate_waveform(str(source_video), 0.0, 1.0, tmp_path / "w.png", 300)

    def test_invalid_interval(self, source_video, tmp_path):
        with pytest.raises(InputValidationError, match="trim_end"):
            generate_waveform(str(source_video), 2.0, 1.0, tmp_path / "w.png", 300)


class TestSprite:
    def test_renders_strip(self, source_video, tmp_path):
        out = generate_sprite(str(source_video), 0.0, 5.0, tmp_path / "s.jpg", 500, 38)
        with Image.open(out) as img:
            assert img.size == (500, 38)

    def test_filter_uses_geometry(self, tmp_path):
        with patch("clipstitch.thumbnails.run_ffmpeg") as run:
            generate_sprite("/a.mp4", 2.0, 7.0, tmp_path / "s.jpg", 500, 40)
        args = run.call_args[0][0]
        graph = args[args.index("-filter_complex") + 1]
        assert graph == "[0:v]fps=2.000000,scale=-1:40,scale=50:40,tile=10x1[sprite]"
        assert args[args.index("-ss") + 1] == "2.000"
        assert args[args.index("-t") + 1] == "5.000"


class TestCachedPreviews:
    def test_sprite_cache_hit_skips_ffmpeg(self, source_video, tmp_path):
        cache = ThumbnailCache(tmp_path / "cache")
        clip = _clip(source_video)

        first = clip_sprite(clip, cache, 500, 38)
        assert first.exists()

        with patch("clipstitch.thumbnails.run_ffmpeg") as run:
            second = clip_sprite(clip, cache, 500, 38)
        run.assert_not_called()
        assert second == first

    def test_new_width_is_a_cache_miss(self, tmp_path):
        cache = ThumbnailCache(tmp_path)
        clip = _clip("/a.mp4")
        with patch("clipstitch.thumbnails.run_ffmpeg") as run:
            clip_sprite(clip, cache, 500, 38)
            clip_sprite(clip, cache, 600, 38)
        assert run.call_count == 2

    def test_waveform_cache_hit_skips_ffmpeg(self, tmp_path):
        cache = ThumbnailCache(tmp_path)
        clip = _clip("/a.mp4")
        path = cache.waveform_path(clip.id, 300)
        path.parent.mkdir(parents=True)
        path.write_bytes(b"png")

        with patch("clipstitch.thumbnails.run_ffmpeg") as run, \
                patch("clipstitch.thumbnails.probe_media") as probe:
            assert clip_waveform(clip, cache, 300) == path
        run.assert_not_called()
        probe.assert_not_called()

    def test_waveform_for_silent_clip(self, silent_video, tmp_path):
        cache = ThumbnailCache(tmp_path / "cache")
        assert clip_waveform(_clip(silent_video, end=2.0), cache, 300) is None
        assert ThumbnailCache(tmp_path / "cache").no_audio_marker("c1", 300).exists()

    def test_silent_clip_probed_once(self, silent_video, tmp_path):
        cache = ThumbnailCache(tmp_path / "cache")
        clip = _clip(silent_video, end=2.0)
        assert clip_waveform(clip, cache, 300) is None

        with patch("clipstitch.thumbnails.probe_media") as probe, \
                patch("clipstitch.thumbnails.run_ffmpeg") as run:
            assert clip_waveform(clip, cache, 300) is None
        probe.assert_not_called()
        run.assert_not_called()
