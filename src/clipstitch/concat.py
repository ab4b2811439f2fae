"""Timeline concatenation — fast stream-copy path and cross-fade path.

Fast path: trim every clip with stream copy, then join them with ffmpeg's
concat demuxer. No re-encoding, so cut points snap to keyframes.

Transition path: re-encode every trimmed clip to a uniform intermediate
profile, then run a single ffmpeg call with all clips as inputs and the
transition filter graph mapping [out] and [outa] to the final file.

Both paths write their intermediates as clip_<i>.mp4 in the scratch
directory they are given, and always remove them afterwards.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .common import remove_quietly
from .errors import InputValidationError
from .filtergraph import build_transition_graph
from .models import TimelineClip
from .runner import run_ffmpeg
from .trim import DEFAULT_PROFILE, EncodeProfile, trim_timeline_clip

logger = logging.getLogger(__name__)

CONCAT_LIST_NAME = "concat_list.txt"


def _temp_clip_path(temp_dir: Path, index: int) -> Path:
    return temp_dir / f"clip_{index}.mp4"


def _trim_all(
    clips: list[TimelineClip],
    temp_dir: Path,
    copy: bool,
    profile: EncodeProfile,
    workers: int,
    created: list[Path],
) -> list[Path]:
    """Trim every clip into temp_dir, returning paths in timeline order.

    Paths are appended to `created` as soon as they are scheduled so the
    caller can clean up after a partial failure.

    Args:
        workers: 1 = sequential, >1 = parallel via ThreadPoolExecutor.
            Filenames are per-index, so parallel trims never collide.
    """
    paths = [_temp_clip_path(temp_dir, i) for i in range(len(clips))]
    created.extend(paths)

    if workers <= 1 or len(clips) == 1:
        for i, (clip, path) in enumerate(zip(clips, paths)):
            logger.info("Trimming clip %d (%s) %.3fs-%.3fs", i, clip.id, clip.trim_start, clip.trim_end)
            trim_timeline_clip(clip, path, i, copy=copy, profile=profile)
        return paths

    with ThreadPoolExecutor(max_workers=min(workers, len(clips))) as pool:
        futures = {
            pool.submit(trim_timeline_clip, clip, path, i, copy, profile): i
            for i, (clip, path) in enumerate(zip(clips, paths))
        }
        try:
            for future in as_completed(futures):
                future.result()  # propagate exceptions
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    return paths


def _escape_concat_path(path: Path) -> str:
    # The concat demuxer reads single-quoted strings; embed quotes as '\''.
    return str(path).replace("'", "'\\''")


def write_concat_list(paths: list[Path], list_path: Path) -> Path:
    """Write the concat demuxer manifest: one `file '<path>'` per line.

    The demuxer resolves relative entries against the manifest's own
    directory, not the working directory, so every entry is made absolute.
    """
    lines = [f"file '{_escape_concat_path(Path(p).resolve())}'\n" for p in paths]
    list_path.write_text("".join(lines))
    return list_path


def concatenate_fast(
    clips: list[TimelineClip],
    output: str | Path,
    temp_dir: str | Path,
    workers: int = 1,
) -> Path:
    """Concatenate clips with stream copy (no re-encoding).

    Args:
        clips: Timeline clips in output order.
        output: Final movie path.
        temp_dir: Scratch directory owned by the caller.
        workers: Parallel trim workers (1 = sequential).

    Returns:
        The output path.

    Raises:
        InputValidationError: Empty clip list.
        SubprocessFailure: A trim (tagged with the clip) or the concat failed.
    """
    if not clips:
        raise InputValidationError("No clips to concatenate")

    temp_dir = Path(temp_dir).resolve()
    temp_dir.mkdir(parents=True, exist_ok=True)
    output = Path(output)
    list_path = temp_dir / CONCAT_LIST_NAME
    created: list[Path] = []

    try:
        paths = _trim_all(clips, temp_dir, True, DEFAULT_PROFILE, workers, created)
        write_concat_list(paths, list_path)

        logger.info("Concatenating %d clips (stream copy) to %s", len(clips), output)
        run_ffmpeg(
            [
                "-f", "concat",
                "-safe", "0",
                "-i", str(list_path),
                "-c", "copy",
                "-y", str(output),
            ],
            "concatenate videos",
        )
    finally:
        remove_quietly(*created, list_path)

    return output


def concatenate_with_transitions(
    clips: list[TimelineClip],
    output: str | Path,
    temp_dir: str | Path,
    workers: int = 1,
    profile: EncodeProfile = DEFAULT_PROFILE,
) -> Path:
    """Concatenate clips with xfade transitions and synchronized audio.

    A single clip short-circuits to a plain stream-copy trim: there is
    nothing to blend, so no filter graph is built.

    Args:
        clips: Timeline clips in output order.
        output: Final movie path.
        temp_dir: Scratch directory owned by the caller.
        workers: Parallel encode workers (1 = sequential).
        profile: Intermediate and final encoding settings.

    Returns:
        The output path.

    Raises:
        InputValidationError: Empty list or invalid transition geometry.
        SubprocessFailure: An encode (tagged with the clip) or the final
            filter graph render failed.
    """
    if not clips:
        raise InputValidationError("No clips to concatenate")

    output = Path(output)
    if len(clips) == 1:
        logger.info("Single clip, trimming %s directly to %s", clips[0].id, output)
        trim_timeline_clip(clips[0], output, 0, copy=True)
        return output

    # Build the graph first so bad geometry fails before any encoding.
    graph = build_transition_graph(clips)

    temp_dir = Path(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    created: list[Path] = []

    try:
        paths = _trim_all(clips, temp_dir, False, profile, workers, created)

        inputs = []
        for path in paths:
            inputs.extend(["-i", str(path)])
        maps = []
        for label in graph.output_labels:
            maps.extend(["-map", f"[{label}]"])

        logger.info("Rendering %d clips with transitions to %s", len(clips), output)
        run_ffmpeg(
            [
                *inputs,
                "-filter_complex", graph.serialize(),
                *maps,
                *profile.args(),
                "-y", str(output),
            ],
            "concatenate with transitions",
        )
    finally:
        remove_quietly(*created)

    return output
