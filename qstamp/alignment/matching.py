"""Exact and fuzzy phrase search over a transcript word stream."""

from __future__ import annotations

import math
from bisect import bisect_left
from collections import defaultdict
from collections.abc import Sequence
from typing import NamedTuple, Optional

from rapidfuzz import fuzz, process


class PhraseMatch(NamedTuple):
    """Word range ``[start, end)`` of the transcript that matched a phrase."""

    start: int
    end: int
    score: float
    method: str


class WordIndex:
    """Positions of every word in the transcript, plus fuzzy lookups by word."""

    def __init__(self, words: Sequence[str]) -> None:
        self.words: Sequence[str] = words
        positions: defaultdict[str, list[int]] = defaultdict(list)
        for position, word in enumerate(words):
            positions[word].append(position)
        self.positions: dict[str, list[int]] = dict(positions)
        self.vocabulary: list[str] = list(self.positions)
        self._similar_cache: dict[tuple[str, float], list[int]] = {}

    def __len__(self) -> int:
        return len(self.words)

    def exact_positions(self, word: str) -> list[int]:
        return self.positions.get(word, [])

    def similar_positions(self, word: str, min_similarity: float) -> list[int]:
        """Sorted positions of transcript words whose ``fuzz.ratio`` to ``word``
        reaches ``min_similarity`` (0-100)."""
        key = (word, min_similarity)
        cached = self._similar_cache.get(key)
        if cached is not None:
            return cached
        if min_similarity >= 100:
            found = list(self.exact_positions(word))
        else:
            matches = process.extract(
                word,
                self.vocabulary,
                scorer=fuzz.ratio,
                score_cutoff=min_similarity,
                limit=None,
            )
            found = sorted(
                position for choice, _, _ in matches for position in self.positions[choice]
            )
        self._similar_cache[key] = found
        return found


def find_exact(
    index: WordIndex, tokens: Sequence[str], lower: int, upper: int
) -> Optional[PhraseMatch]:
    """First occurrence of ``tokens`` starting in ``[lower, upper]``."""
    if not tokens:
        return None
    size = len(tokens)
    candidates = index.exact_positions(tokens[0])
    for position in candidates[bisect_left(candidates, lower) :]:
        if position > upper:
            break
        if list(index.words[position : position + size]) == list(tokens):
            return PhraseMatch(start=position, end=position + size, score=1.0, method="exact")
    return None


def _first_in_span(positions: list[int], start: int, stop: int) -> Optional[int]:
    slot = bisect_left(positions, start)
    if slot < len(positions) and positions[slot] < stop:
        return positions[slot]
    return None


def _span_hits(
    token_positions: Sequence[list[int]], start: int, span: int
) -> list[int]:
    hits = []
    for positions in token_positions:
        hit = _first_in_span(positions, start, start + span)
        if hit is not None:
            hits.append(hit)
    return hits


def find_fuzzy(
    index: WordIndex,
    tokens: Sequence[str],
    lower: int,
    upper: int,
    *,
    phrase_length: int,
    span_factor: float,
    min_overlap_ratio: float,
    token_similarity: float,
) -> Optional[PhraseMatch]:
    """
    Finds the earliest span where enough of ``tokens`` are spoken close together.

    A span starts at a transcript word similar to one of the tokens and is
    ``ceil(phrase_length * span_factor)`` words long. Its score is the share of
    distinct tokens that occur inside it. The first start in ``[lower, upper]``
    reaching ``min_overlap_ratio`` opens a local search over the starts within
    one span of it; the best score wins, the earliest start on ties.
    """
    distinct = list(dict.fromkeys(tokens))
    if not distinct:
        return None
    span = max(math.ceil(phrase_length * span_factor), len(distinct))
    token_positions = [index.similar_positions(token, token_similarity) for token in distinct]
    candidates = sorted(
        {
            position
            for positions in token_positions
            for position in positions[bisect_left(positions, lower) :]
            if position <= upper
        }
    )

    for offset, start in enumerate(candidates):
        hits = _span_hits(token_positions, start, span)
        score = len(hits) / len(distinct)
        if score < min_overlap_ratio:
            continue

        best_start, best_hits, best_score = start, hits, score
        for other in candidates[offset + 1 :]:
            if other >= start + span:
                break
            other_hits = _span_hits(token_positions, other, span)
            other_score = len(other_hits) / len(distinct)
            if other_score > best_score:
                best_start, best_hits, best_score = other, other_hits, other_score
        return PhraseMatch(
            start=best_start,
            end=max(best_hits) + 1,
            score=best_score,
            method="fuzzy",
        )
    return None
