"""Tests for the render pipeline (path selection and scratch handling)."""

from unittest.mock import patch

import pytest
from moviepy import VideoFileClip

from clipstitch.errors import InputValidationError, SubprocessFailure, ToolUnavailableError
from clipstitch.models import TimelineClip
from clipstitch.pipeline import create_preview, export_preview, render_timeline


def _clip(clip_id, source, start, end, transition=None, td=None):
    return TimelineClip(
        id=clip_id, source_path=str(source), trim_start=start, trim_end=end,
        duration=end - start, transition_type=transition, transition_duration=td,
    )


class TestPathSelection:
    def test_no_transitions_uses_fast_path(self, tmp_path):
        clips = [_clip("a", "/a.mp4", 0, 1), _clip("b", "/b.mp4", 0, 1)]
        with patch("clipstitch.pipeline.concatenate_fast") as fast, \
                patch("clipstitch.pipeline.concatenate_with_transitions") as slow:
            render_timeline(clips, tmp_path / "out.mp4", tmp_path / "scratch")
        fast.assert_called_once()
        slow.assert_not_called()

    def test_any_transition_uses_transition_path(self, tmp_path):
        clips = [_clip("a", "/a.mp4", 0, 3, "fade", 1.0), _clip("b", "/b.mp4", 0, 1)]
        with patch("clipstitch.pipeline.concatenate_fast") as fast, \
                patch("clipstitch.pipeline.concatenate_with_transitions") as slow:
            render_timeline(clips, tmp_path / "out.mp4", tmp_path / "scratch")
        slow.assert_called_once()
        fast.assert_not_called()

    def test_work_dir_is_request_scoped_and_removed(self, tmp_path):
        seen = []

        def fake_fast(clips, output, work_dir, workers=1):
            seen.append(work_dir)
            assert work_dir.parent == tmp_path / "scratch"
            assert work_dir.exists()

        with patch("clipstitch.pipeline.concatenate_fast", side_effect=fake_fast):
            render_timeline([_clip("a", "/a.mp4", 0, 1)], tmp_path / "o1.mp4", tmp_path / "scratch")
            render_timeline([_clip("a", "/a.mp4", 0, 1)], tmp_path / "o2.mp4", tmp_path / "scratch")

        assert seen[0] != seen[1]
        assert not any(p.exists() for p in seen)


class TestErrors:
    def test_empty_list_rejected_before_tool_check(self, tmp_path):
        with patch("clipstitch.pipeline.find_ffmpeg") as find:
            with pytest.raises(InputValidationError, match="No clips"):
                render_timeline([], tmp_path / "out.mp4", tmp_path)
        find.assert_not_called()

    def test_tool_unavailable_short_circuits(self, tmp_path):
        with patch("clipstitch.pipeline.find_ffmpeg", side_effect=ToolUnavailableError("FFmpeg not found")), \
                patch("clipstitch.pipeline.concatenate_fast") as fast:
            with pytest.raises(ToolUnavailableError):
                render_timeline([_clip("a", "/a.mp4", 0, 1)], tmp_path / "out.mp4", tmp_path)
        fast.assert_not_called()

    def test_failure_removes_partial_output(self, tmp_path):
        out = tmp_path / "out.mp4"

        def fake_fast(clips, output, work_dir, workers=1):
            output.write_bytes(b"partial")
            raise SubprocessFailure("concatenate videos", 1, "disk full")

        with patch("clipstitch.pipeline.concatenate_fast", side_effect=fake_fast):
            with pytest.raises(SubprocessFailure, match="disk full"):
                render_timeline([_clip("a", "/a.mp4", 0, 1)], out, tmp_path / "scratch")
        assert not out.exists()

    def test_relative_scratch_and_output(self, source_video, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        clips = [
            _clip("a", source_video, 0.0, 2.0),
            _clip("b", source_video, 2.0, 3.0),
        ]
        out = render_timeline(clips, "renders/out.mp4", "scratch")
        with VideoFileClip(str(tmp_path / out)) as clip:
            assert clip.duration == pytest.approx(3.0, abs=0.6)
        assert list((tmp_path / "scratch").iterdir()) == []


class TestPreview:
    def test_preview_names_are_unique(self, tmp_path):
        with patch("clipstitch.pipeline.concatenate_fast"):
            p1 = create_preview([_clip("a", "/a.mp4", 0, 1)], tmp_path)
            p2 = create_preview([_clip("a", "/a.mp4", 0, 1)], tmp_path)
        assert p1 != p2
        assert p1.parent == tmp_path
        assert p1.name.startswith("preview-") and p1.suffix == ".mp4"

    def test_end_to_end_transition_preview(self, source_video, tmp_path):
        clips = [
            _clip("a", source_video, 0.0, 2.0, "fade", 0.5),
            _clip("b", source_video, 2.0, 4.0),
        ]
        preview = create_preview(clips, tmp_path / "scratch")
        with VideoFileClip(str(preview)) as clip:
            assert clip.duration == pytest.approx(3.5, abs=0.3)
        # Only the preview remains in the scratch directory.
        assert list((tmp_path / "scratch").iterdir()) == [preview]

    def test_export_copies_preview(self, tmp_path):
        preview = tmp_path / "preview.mp4"
        preview.write_bytes(b"movie")
        dest = export_preview(preview, tmp_path / "exports" / "final.mp4")
        assert dest.read_bytes() == b"movie"

    def test_export_without_preview(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Render a preview first"):
            export_preview(tmp_path / "missing.mp4", tmp_path / "final.mp4")
