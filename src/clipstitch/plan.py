"""Timeline arithmetic for cross-fade composition.

Cross-fades make video time non-linear: each transition overlaps the tail
of one clip with the head of the next, so the composed timeline is shorter
than the sum of its clips. Audio must stay on a flat timeline, so every
clip's audio is placed independently:

    Track 0: [====|]            trim the overlapped tail,
    Track 1:     [wait][====|]  delay to the clip's timeline position,
    Track 2:          [wait][====]  pad with silence to the total length,
                  ↓ mix ↓       then sum all tracks.

Key formulas (td_i = transition duration of clip i, default 1.0s):
    cumulative_offset_i = Σ_{j<i} (duration_j − td_j)
    offset_i            = cumulative_offset_i + duration_i − td_i
    total               = Σ_{i<n-1} (duration_i − td_i) + duration_{n-1}
    pad_i               = total − (cumulative_offset_i + trimmed_i)

Everything here is pure; the plan is recomputed per render and never stored.
"""

from dataclasses import dataclass

from .errors import InputValidationError
from .models import TimelineClip


@dataclass(frozen=True)
class AudioPlacement:
    """Where one clip's audio lands on the composed timeline.

    trim_end is None for the last clip, whose audio is used in full.
    """

    index: int
    trim_end: float | None
    delay: float
    pad: float

    @property
    def delay_ms(self) -> int:
        return round(self.delay * 1000)


@dataclass(frozen=True)
class TimelinePlan:
    cumulative_offsets: tuple[float, ...]
    transition_offsets: tuple[float, ...]
    total_duration: float
    audio: tuple[AudioPlacement, ...]


def validate_transition_geometry(clips: list[TimelineClip]) -> None:
    """Reject transitions that would produce a negative offset or padding.

    Every clip except the last must be strictly longer than its outgoing
    transition, and no transition may have a negative duration.

    Raises:
        InputValidationError: Describes the first offending clip.
    """
    for i, clip in enumerate(clips[:-1]):
        td = clip.effective_transition_duration
        if td < 0:
            raise InputValidationError(
                f"Clip {i} ({clip.id}): transition_duration must be >= 0, got {td}"
            )
        if td >= clip.duration:
            raise InputValidationError(
                f"Clip {i} ({clip.id}): transition_duration ({td}) must be "
                f"shorter than the clip duration ({clip.duration})"
            )


def cumulative_offset(clips: list[TimelineClip], index: int) -> float:
    """Composed-timeline time at which clip `index` begins."""
    return sum(
        clip.duration - clip.effective_transition_duration
        for clip in clips[:index]
    )


def transition_offset(clips: list[TimelineClip], index: int) -> float:
    """Start of the cross-fade between clip `index` and clip `index + 1`.

    Measured from the start of the merged output, which is what xfade's
    offset means once the transitions are chained.
    """
    clip = clips[index]
    return cumulative_offset(clips, index) + clip.duration - clip.effective_transition_duration


def total_duration(clips: list[TimelineClip]) -> float:
    if not clips:
        return 0.0
    return cumulative_offset(clips, len(clips) - 1) + clips[-1].duration


def build_plan(clips: list[TimelineClip]) -> TimelinePlan:
    """Compute offsets, total duration, and per-clip audio placement.

    Raises:
        InputValidationError: Empty list or invalid transition geometry.
    """
    if not clips:
        raise InputValidationError("No clips to plan")
    validate_transition_geometry(clips)

    n = len(clips)
    offsets = tuple(cumulative_offset(clips, i) for i in range(n))
    total = total_duration(clips)

    audio = []
    for i, clip in enumerate(clips):
        if i < n - 1:
            trimmed = clip.duration - clip.effective_transition_duration
            trim_end = trimmed
        else:
            trimmed = clip.duration
            trim_end = None
        audio.append(AudioPlacement(
            index=i,
            trim_end=trim_end,
            delay=offsets[i],
            pad=total - (offsets[i] + trimmed),
        ))

    return TimelinePlan(
        cumulative_offsets=offsets,
        transition_offsets=tuple(transition_offset(clips, i) for i in range(n - 1)),
        total_duration=total,
        audio=tuple(audio),
    )
