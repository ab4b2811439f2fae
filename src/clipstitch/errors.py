"""Exception types raised by clipstitch.

Cleanup failures are never raised (they are logged), and a missing audio
track for a waveform is a ``None`` result, not an exception.
"""


class ClipstitchError(Exception):
    """Base class for all clipstitch errors."""


class InputValidationError(ClipstitchError, ValueError):
    """Clip list or geometry rejected before any subprocess is started."""


class ToolUnavailableError(ClipstitchError, RuntimeError):
    """The ffmpeg executable could not be located."""


class SubprocessFailure(ClipstitchError, RuntimeError):
    """ffmpeg exited with a non-zero status.

    Carries the tool's stderr verbatim, plus the index/id of the clip
    being processed when the failure is tied to one.
    """

    def __init__(
        self,
        operation: str,
        returncode: int,
        stderr: str,
        clip_index: int | None = None,
        clip_id: str | None = None,
    ):
        self.operation = operation
        self.returncode = returncode
        self.stderr = stderr
        self.clip_index = clip_index
        self.clip_id = clip_id
        super().__init__(self._format())

    def _format(self) -> str:
        where = ""
        if self.clip_index is not None:
            where = f" on clip {self.clip_index}"
            if self.clip_id is not None:
                where += f" ({self.clip_id})"
        return f"ffmpeg {self.operation} failed{where}: {self.stderr}"

    def for_clip(self, index: int, clip_id: str | None) -> "SubprocessFailure":
        """Return a copy of this failure tagged with the offending clip."""
        return SubprocessFailure(
            self.operation, self.returncode, self.stderr,
            clip_index=index, clip_id=clip_id,
        )
