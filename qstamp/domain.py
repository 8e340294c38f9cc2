"""Domain data structures for questions, caption timelines, and alignments."""

from typing import NamedTuple, Optional


class Question(NamedTuple):
    """A question recovered from the numbered list in a video description."""

    full: str
    searchable: str
    shortened: str
    ordinal: int


class CaptionEntry(NamedTuple):
    """Novel normalized transcript text first shown at ``start`` seconds."""

    text: str
    start: float


class TimedWord(NamedTuple):
    """One word of the flattened transcript timeline."""

    word: str
    start: float


class AlignmentResult(NamedTuple):
    """A question paired with the time it is asked, or ``None`` if not found."""

    question: Question
    start: Optional[float]

    @property
    def found(self) -> bool:
        return self.start is not None
