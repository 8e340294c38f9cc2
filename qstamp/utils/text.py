"""Text normalization shared by the description parser, caption parser and aligner.

``normalize_text`` is the single definition of "the same utterance": two
fragments match only after both have been routed through it.
"""

from __future__ import annotations

import re

_JOINING_MARKS = re.compile(r"[\'\"`‘’“”]")
_SEPARATORS = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")

FILLER_WORDS = frozenset(
    {
        "i",
        "a",
        "was",
        "and",
        "it",
        "of",
        "like",
        "do",
        "to",
        "you",
        "as",
        "have",
        "when",
        "the",
        "because",
        "in",
        "is",
        "that",
    }
)


def normalize_text(text: str) -> str:
    """Returns the searchable form of ``text``.

    Lowercases, deletes quote marks inside words (``don't`` -> ``dont``),
    turns every other punctuation character into a space, collapses
    whitespace runs and trims the result.
    """
    if not text:
        return ""
    lowered = text.lower()
    lowered = _JOINING_MARKS.sub("", lowered)
    lowered = _SEPARATORS.sub(" ", lowered)
    return _WHITESPACE.sub(" ", lowered).strip()


def content_tokens(searchable: str) -> list[str]:
    """Returns the tokens of a normalized phrase that carry meaning.

    Filler words are dropped; a phrase made only of filler keeps all tokens.
    """
    tokens = searchable.split()
    meaningful = [token for token in tokens if token not in FILLER_WORDS]
    return meaningful or tokens
