"""
Question Alignment for qstamp

Assigns each question the time it is asked by walking the transcript once
with a cursor. Questions are asked in description order, so a question is
only searched for after the point where the previous one was found; this
keeps the resulting index chronological even when captions are noisy.

Functions:
    - locate_question: Finds one question at or after the cursor.
    - align_questions: Aligns every question in order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from qstamp.alignment.matching import PhraseMatch, WordIndex, find_exact, find_fuzzy
from qstamp.captions.parser import timeline_words
from qstamp.config import AlignmentSettings
from qstamp.domain import AlignmentResult, CaptionEntry, Question
from qstamp.utils.logger import get_logger
from qstamp.utils.text import content_tokens

logger: logging.Logger = get_logger(__name__)


def locate_question(
    question: Question,
    index: WordIndex,
    cursor: int,
    settings: AlignmentSettings,
) -> Optional[PhraseMatch]:
    """
    Searches ``[cursor, cursor + lookahead_words]`` for a question.

    The verbatim phrase is tried first; when it is absent the fuzzy token
    overlap search runs over the same window.

    Arguments:
        question (Question): The question to locate.
        index (WordIndex): Index over the transcript words.
        cursor (int): First word position still eligible.
        settings (AlignmentSettings): Lookahead and fuzzy thresholds.

    Returns:
        Optional[PhraseMatch]: The matched word range, or None.
    """
    tokens = question.searchable.split()
    if not tokens or cursor >= len(index):
        return None
    upper = cursor + settings.lookahead_words

    match = find_exact(index, tokens, cursor, upper)
    if match is not None:
        return match

    meaningful = content_tokens(question.searchable)
    if len(set(meaningful)) < settings.min_fuzzy_tokens:
        return None
    return find_fuzzy(
        index,
        meaningful,
        cursor,
        upper,
        phrase_length=len(tokens),
        span_factor=settings.span_factor,
        min_overlap_ratio=settings.min_overlap_ratio,
        token_similarity=settings.token_similarity,
    )


def align_questions(
    questions: Sequence[Question],
    entries: Sequence[CaptionEntry],
    settings: Optional[AlignmentSettings] = None,
) -> list[AlignmentResult]:
    """
    Aligns questions to the transcript timeline.

    Arguments:
        questions (Sequence[Question]): Questions in the order they are asked.
        entries (Sequence[CaptionEntry]): Deduplicated, time-ordered transcript.
        settings (AlignmentSettings, optional): Search bounds and thresholds.

    Returns:
        list[AlignmentResult]: One result per question, in question order.
            Found starts never decrease; unmatched questions have no start.
    """
    settings = settings or AlignmentSettings()
    words = timeline_words(entries)
    index = WordIndex([word.word for word in words])

    results: list[AlignmentResult] = []
    cursor = 0
    for position, question in enumerate(questions, 1):
        match = locate_question(question, index, cursor, settings)
        if match is None:
            logger.debug("Question %d not found: %r", position, question.shortened)
            results.append(AlignmentResult(question=question, start=None))
            continue

        start = words[match.start].start
        logger.debug(
            "Question %d found at %.2fs (%s, score %.2f, words %d-%d).",
            position,
            start,
            match.method,
            match.score,
            match.start,
            match.end,
        )
        results.append(AlignmentResult(question=question, start=start))
        cursor = match.end

    found = sum(1 for result in results if result.found)
    logger.info("Aligned %d of %d question(s) to the transcript.", found, len(results))
    return results
