"""Error taxonomy for question indexing runs."""

from __future__ import annotations

from pathlib import Path


class QStampError(Exception):
    """Base class for qstamp errors."""


class InputUnavailableError(QStampError):
    """An input artifact could not be supplied; the run cannot continue."""

    stage = "acquisition"

    def __init__(self, artifact: str, path: str | Path | None, reason: str) -> None:
        self.artifact = artifact
        self.path = Path(path) if path is not None else None
        self.reason = reason
        location = f" at {self.path}" if self.path is not None else ""
        super().__init__(
            f"{artifact} unavailable during {self.stage}{location}: {reason}"
        )


class MalformedCueError(QStampError):
    """A single caption cue could not be parsed."""

    stage = "caption parsing"

    def __init__(self, block: str, reason: str) -> None:
        self.block = block
        self.reason = reason
        preview = " ".join(block.split())[:80]
        super().__init__(f"malformed caption cue ({reason}): {preview!r}")
