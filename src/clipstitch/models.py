"""Timeline data model: clips and transitions.

A TimelineClip is a trimmed window [trim_start, trim_end) of a source file
placed on the edit timeline. Sequence order is timeline order; the UI's
`position` field is carried along but never consulted.

The transition field on each clip controls its *outgoing* transition (how
this clip blends INTO the next one). The last clip's transition is ignored.
"""

import logging
from dataclasses import dataclass

from .errors import InputValidationError

logger = logging.getLogger(__name__)

DEFAULT_TRANSITION = "fade"
DEFAULT_TRANSITION_DURATION = 1.0

# Transition names understood by ffmpeg's xfade filter.
KNOWN_TRANSITIONS = frozenset({
    "fade", "fadeblack", "fadewhite", "fadegrays", "fadefast", "fadeslow",
    "dissolve", "distance", "pixelize", "radial", "hblur",
    "wipeleft", "wiperight", "wipeup", "wipedown",
    "wipetl", "wipetr", "wipebl", "wipebr",
    "slideleft", "slideright", "slideup", "slidedown",
    "smoothleft", "smoothright", "smoothup", "smoothdown",
    "circlecrop", "rectcrop", "circleopen", "circleclose",
    "vertopen", "vertclose", "horzopen", "horzclose",
    "diagtl", "diagtr", "diagbl", "diagbr",
    "hlslice", "hrslice", "vuslice", "vdslice",
    "squeezeh", "squeezev", "zoomin",
})


@dataclass(frozen=True)
class Transition:
    """A cross-fade style, tagged as known or passthrough.

    Unknown names are not rejected: they are forwarded verbatim to ffmpeg,
    which is the final judge of what it supports.
    """

    name: str
    known: bool = True

    @classmethod
    def parse(cls, value: "str | Transition") -> "Transition":
        if isinstance(value, Transition):
            return value
        name = str(value).strip()
        if not name:
            raise InputValidationError("Transition name must not be empty")
        known = name in KNOWN_TRANSITIONS
        if not known:
            logger.warning("Unknown transition '%s', forwarding to ffmpeg as-is", name)
        return cls(name, known)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TimelineClip:
    id: str
    source_path: str
    trim_start: float
    trim_end: float
    duration: float
    transition_type: Transition | None = None
    transition_duration: float | None = None
    name: str = ""
    position: float = 0.0

    def __post_init__(self):
        if self.trim_end <= self.trim_start:
            raise InputValidationError(
                f"Clip {self.id}: trim_end ({self.trim_end}) must be "
                f"greater than trim_start ({self.trim_start})"
            )
        if self.transition_type is not None and not isinstance(self.transition_type, Transition):
            object.__setattr__(self, "transition_type", Transition.parse(self.transition_type))

    @property
    def trim_length(self) -> float:
        return self.trim_end - self.trim_start

    @property
    def effective_transition_duration(self) -> float:
        if self.transition_duration is None:
            return DEFAULT_TRANSITION_DURATION
        return self.transition_duration

    @property
    def effective_transition(self) -> Transition:
        if self.transition_type is None:
            return Transition(DEFAULT_TRANSITION)
        return self.transition_type

    @classmethod
    def from_dict(cls, data: dict) -> "TimelineClip":
        """Build a clip from a manifest entry or an editor-state record.

        Accepts snake_case keys (``path``/``source_path``, ``trim_start``,
        ``transition``/``transition_type``) as well as the editor's
        camelCase keys (``videoPath``, ``trimStart``, ``transitionType``).
        ``duration`` defaults to the trimmed length.

        Raises:
            InputValidationError: Missing or invalid fields.
        """
        def pick(*keys, default=None):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        clip_id = pick("id")
        if clip_id is None:
            raise InputValidationError("Clip: missing required field 'id'")
        source = pick("source_path", "path", "videoPath", "video_path")
        if source is None:
            raise InputValidationError(f"Clip {clip_id}: missing source path")
        start = pick("trim_start", "trimStart")
        end = pick("trim_end", "trimEnd")
        if start is None or end is None:
            raise InputValidationError(f"Clip {clip_id}: trim_start and trim_end are required")

        try:
            start = float(start)
            end = float(end)
            duration = float(pick("duration", default=end - start))
            transition_duration = pick("transition_duration", "transitionDuration")
            if transition_duration is not None:
                transition_duration = float(transition_duration)
        except (TypeError, ValueError) as exc:
            raise InputValidationError(f"Clip {clip_id}: {exc}") from exc

        transition = pick("transition_type", "transitionType", "transition")
        return cls(
            id=str(clip_id),
            source_path=str(source),
            trim_start=start,
            trim_end=end,
            duration=duration,
            transition_type=Transition.parse(transition) if transition is not None else None,
            transition_duration=transition_duration,
            name=str(pick("name", default="")),
            position=float(pick("position", default=0.0)),
        )


def has_transitions(clips: list[TimelineClip]) -> bool:
    """True if any clip has a transition configured."""
    return any(clip.transition_type is not None for clip in clips)
