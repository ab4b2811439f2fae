"""ffmpeg filter graph IR and the transition graph builder.

Graphs are built as a list of FilterNode objects with explicit input and
output pad labels, validated as a DAG, and only rendered to ffmpeg's
-filter_complex grammar by FilterGraph.serialize(). That keeps the offset
and padding arithmetic testable without string matching.

The transition graph has two named outputs:
  - [out]:  video, a chain of xfade filters (pairwise, left to right).
  - [outa]: audio, every clip trimmed/delayed/padded independently, then
            summed with amix.
"""

import re
from dataclasses import dataclass, field

from .common import fmt_seconds
from .errors import InputValidationError
from .models import TimelineClip
from .plan import TimelinePlan, build_plan

VIDEO_OUTPUT = "out"
AUDIO_OUTPUT = "outa"

# Below this, a delay or pad is float noise rather than real silence.
_EPSILON = 1e-6

_STREAM_LABEL = re.compile(r"^\d+:[va]$")


@dataclass
class FilterNode:
    """One filter invocation: [in1][in2]name=k=v:k=v[out]."""

    name: str
    inputs: list[str]
    outputs: list[str]
    options: dict[str, str] = field(default_factory=dict)

    def serialize(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        outs = "".join(f"[{label}]" for label in self.outputs)
        body = self.name
        if self.options:
            body += "=" + ":".join(f"{k}={v}" for k, v in self.options.items())
        return f"{ins}{body}{outs}"


class FilterGraph:
    """Ordered collection of filter nodes with label bookkeeping.

    Nodes must be added in dependency order: every input label is either
    a stream specifier of an input file (``N:v`` / ``N:a``) or the output
    of an earlier node, and every produced label is consumed at most once.
    """

    def __init__(self):
        self.nodes: list[FilterNode] = []
        self._produced: set[str] = set()
        self._consumed: set[str] = set()

    def add(self, name: str, inputs: list[str], outputs: list[str], /, **options) -> FilterNode:
        for label in inputs:
            if _STREAM_LABEL.match(label):
                continue
            if label not in self._produced:
                raise ValueError(f"Filter '{name}' consumes unknown label [{label}]")
            if label in self._consumed:
                raise ValueError(f"Label [{label}] consumed twice")
        for label in outputs:
            if label in self._produced:
                raise ValueError(f"Label [{label}] produced twice")

        node = FilterNode(name, list(inputs), list(outputs), {k: str(v) for k, v in options.items()})
        self.nodes.append(node)
        self._consumed.update(label for label in inputs if not _STREAM_LABEL.match(label))
        self._produced.update(outputs)
        return node

    @property
    def output_labels(self) -> list[str]:
        """Labels produced but never consumed, in production order."""
        dangling = []
        for node in self.nodes:
            for label in node.outputs:
                if label not in self._consumed:
                    dangling.append(label)
        return dangling

    def find(self, name: str) -> list[FilterNode]:
        return [node for node in self.nodes if node.name == name]

    def serialize(self) -> str:
        return "; ".join(node.serialize() for node in self.nodes)

    def __str__(self) -> str:
        return self.serialize()


def _add_video_chain(graph: FilterGraph, clips: list[TimelineClip], plan: TimelinePlan) -> None:
    n = len(clips)
    current = "0:v"
    for i in range(n - 1):
        clip = clips[i]
        output = VIDEO_OUTPUT if i == n - 2 else f"v{i}"
        graph.add(
            "xfade",
            [current, f"{i + 1}:v"],
            [output],
            transition=clip.effective_transition.name,
            duration=fmt_seconds(clip.effective_transition_duration),
            offset=fmt_seconds(plan.transition_offsets[i]),
        )
        current = output


def _add_audio_mix(graph: FilterGraph, plan: TimelinePlan) -> None:
    mix_inputs = []
    for placement in plan.audio:
        i = placement.index
        label = f"{i}:a"

        # Discard the tail that the next clip's cross-fade overlaps.
        if placement.trim_end is not None:
            graph.add("atrim", [label], [f"atrim{i}"],
                      start=0, end=fmt_seconds(placement.trim_end))
            label = f"atrim{i}"

        if placement.delay > _EPSILON:
            ms = placement.delay_ms
            graph.add("adelay", [label], [f"adelay{i}"], delays=ms, all=1)
            label = f"adelay{i}"

        if placement.pad > _EPSILON:
            graph.add("apad", [label], [f"apadend{i}"], pad_dur=fmt_seconds(placement.pad))
            label = f"apadend{i}"

        mix_inputs.append(label)

    graph.add(
        "amix", mix_inputs, [AUDIO_OUTPUT],
        inputs=len(mix_inputs), duration="longest", dropout_transition=0,
    )


def build_transition_graph(clips: list[TimelineClip]) -> FilterGraph:
    """Build the cross-fade video + synchronized audio filter graph.

    Input N of the ffmpeg command must be the encoded trim of clips[N].
    The graph math uses the clips' logical durations, which match the
    encoded temp files by construction.

    Raises:
        InputValidationError: Fewer than two clips, or a transition that is
            not shorter than its clip.
    """
    if len(clips) < 2:
        raise InputValidationError("At least two clips are required for transitions")

    plan = build_plan(clips)
    graph = FilterGraph()
    _add_video_chain(graph, clips, plan)
    _add_audio_mix(graph, plan)
    return graph
