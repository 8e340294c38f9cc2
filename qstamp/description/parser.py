"""
Question extraction from free-form video descriptions.

Descriptions carry an informally numbered list of questions surrounded by
links, sponsor blurbs and other boilerplate. The parser repairs paragraph
breaks, keeps paragraphs that start with a list ordinal, and filters the
ordinals through a tolerance window so that stray numbers (prices, years,
timestamps) far out of sequence are not mistaken for questions.

Functions:
    - split_paragraphs: Repairs blank-looking lines and splits into paragraphs.
    - find_numbered_items: Yields (ordinal, text) for paragraphs with a list marker.
    - filter_sequence: Applies the ordinal window as an explicit fold.
    - build_question: Derives the full, searchable and shortened forms.
    - parse_description: Runs the whole extraction.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import NamedTuple, Optional

from qstamp.config import DescriptionSettings
from qstamp.domain import Question
from qstamp.utils.logger import get_logger
from qstamp.utils.text import normalize_text

logger: logging.Logger = get_logger(__name__)

MAX_BLANK_LINE_WIDTH = 10
PARAGRAPH_SEPARATOR = "\n\n"

_BLANK_LOOKING_LINE = re.compile(r"^ {1,%d}$" % MAX_BLANK_LINE_WIDTH, re.MULTILINE)
_EXTRA_NEWLINES = re.compile(r"\n{3,}")
_ORDINAL = re.compile(r"[1-9]\d?")
_LIST_MARKER = re.compile(r"^\d+\s*[.:=)\-]*\s*")
_ASIDE = re.compile(r"\([^()]*\)")


class NumberedItem(NamedTuple):
    """A paragraph that starts with a list ordinal."""

    ordinal: int
    text: str


class SequenceState(NamedTuple):
    """Accumulator carried through the ordinal window fold."""

    accepted: tuple[NumberedItem, ...] = ()
    previous_ordinal: Optional[int] = None


def split_paragraphs(description: str) -> list[str]:
    """Splits a description into paragraphs on blank lines.

    Lines holding only spaces (up to ten) count as blank, so indentation-only
    lines between list items do not glue paragraphs together.
    """
    text = description.replace("\r\n", "\n").replace("\r", "\n")
    text = _BLANK_LOOKING_LINE.sub("", text)
    text = _EXTRA_NEWLINES.sub(PARAGRAPH_SEPARATOR, text)
    return text.split(PARAGRAPH_SEPARATOR)


def _leading_ordinal(text: str) -> Optional[int]:
    match = _ORDINAL.match(text)
    if match is None:
        return None
    return int(match.group(0))


def find_numbered_items(
    paragraphs: Iterable[str], min_chars: int = 10
) -> Iterator[NumberedItem]:
    """Yields the paragraphs that begin with a 1-9 list ordinal.

    A paragraph whose first line is a heading gets one retry with the
    heading removed.
    """
    for paragraph in paragraphs:
        paragraph = paragraph.strip()
        if len(paragraph) < min_chars:
            continue

        ordinal = _leading_ordinal(paragraph)
        if ordinal is None:
            heading, _, remainder = paragraph.partition("\n")
            remainder = remainder.strip()
            if not remainder:
                continue
            ordinal = _leading_ordinal(remainder)
            if ordinal is None:
                continue
            logger.debug("Dropped heading %r before numbered item.", heading)
            paragraph = remainder

        yield NumberedItem(ordinal=ordinal, text=paragraph)


def accept_item(state: SequenceState, item: NumberedItem, window: int) -> SequenceState:
    """One step of the ordinal window fold."""
    previous = state.previous_ordinal
    if previous is not None and abs(item.ordinal - previous) > window:
        logger.debug(
            "Rejected item %d (previous accepted %d): %r",
            item.ordinal,
            previous,
            item.text[:40],
        )
        return state
    return SequenceState(
        accepted=state.accepted + (item,),
        previous_ordinal=item.ordinal,
    )


def filter_sequence(items: Iterable[NumberedItem], window: int = 4) -> list[NumberedItem]:
    """Keeps items whose ordinal lies within ``window`` of the last accepted one.

    The first item seeds the tracker.
    """
    state = SequenceState()
    for item in items:
        state = accept_item(state, item, window)
    return list(state.accepted)


def _strip_asides(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _ASIDE.sub(" ", text)
    # An unclosed aside swallows the rest of the question.
    return text.split("(", 1)[0]


def _searchable_form(full: str, max_chars: int) -> str:
    searchable = normalize_text(_strip_asides(full))
    if len(searchable) <= max_chars:
        return searchable
    truncated = searchable[:max_chars]
    if searchable[max_chars] != " " and " " in truncated:
        truncated = truncated.rsplit(" ", 1)[0]
    return truncated.strip()


def _shortened_form(full: str, max_chars: int) -> str:
    if len(full) <= max_chars:
        return full
    return full[: max_chars - 2].rstrip() + ".."


def build_question(item: NumberedItem, settings: DescriptionSettings) -> Question:
    """Builds a Question from an accepted numbered paragraph."""
    joined = " ".join(line.strip() for line in item.text.splitlines() if line.strip())
    full = _LIST_MARKER.sub("", joined, count=1).strip()
    return Question(
        full=full,
        searchable=_searchable_form(full, settings.searchable_max_chars),
        shortened=_shortened_form(full, settings.shortened_max_chars),
        ordinal=item.ordinal,
    )


def parse_description(
    description: str, settings: Optional[DescriptionSettings] = None
) -> list[Question]:
    """
    Recovers the ordered question list from a raw description.

    Arguments:
        description (str): The raw description text.
        settings (DescriptionSettings, optional): Paragraph and window limits.

    Returns:
        list[Question]: Questions in description order; empty when the
            description has no numbered list.
    """
    settings = settings or DescriptionSettings()
    paragraphs = split_paragraphs(description)
    items = find_numbered_items(paragraphs, min_chars=settings.min_paragraph_chars)
    accepted = filter_sequence(items, window=settings.ordinal_window)
    questions = [build_question(item, settings) for item in accepted]
    logger.info(
        "Recovered %d question(s) from %d description paragraph(s).",
        len(questions),
        len(paragraphs),
    )
    return questions
