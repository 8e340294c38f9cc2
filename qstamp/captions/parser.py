"""
Caption Parsing for qstamp

Turns an auto-generated WebVTT caption track into a clean transcript
timeline. Auto captions simulate scrolling by repeating the trailing words of
one cue as the leading words of the next; the parser collapses that overlap so
every spoken word appears once, stamped with the start of the cue that first
showed it.

Functions:
    - parse_timestamp: Converts a WebVTT timestamp to seconds.
    - split_cue_blocks: Splits a raw track into validated cue blocks.
    - read_cues: Parses cue blocks with webvtt-py into (start, text) pairs.
    - is_rolling_track: Tells a scrolling caption layout from plain cues.
    - collapse_rolling_window: Removes the rolling-window duplication.
    - parse_captions: Runs the whole parse.
    - timeline_words: Flattens caption entries into a word stream.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Iterable, Sequence

import webvtt
from webvtt.errors import MalformedCaptionError, MalformedFileError

from qstamp.domain import CaptionEntry, TimedWord
from qstamp.errors import MalformedCueError
from qstamp.utils.logger import get_logger
from qstamp.utils.text import normalize_text

logger: logging.Logger = get_logger(__name__)

WEBVTT_HEADER = "WEBVTT"
MAX_OVERLAP_WORDS = 100
LONG_OVERLAP_WORDS = 2
ROLLING_PAIR_SHARE = 0.5

_TIMESTAMP = re.compile(r"^(?:(\d{2,}):)?([0-5]\d):([0-5]\d)\.(\d{3})$")
_TIMING_LINE = re.compile(r"^\s*(\S+)\s+-->\s+(\S+)")
_CUE_MARKUP = re.compile(r"<[^>]*>")


def parse_timestamp(value: str) -> float:
    """
    Converts ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` to seconds.

    Raises:
        ValueError: If ``value`` is not a WebVTT timestamp.
    """
    match = _TIMESTAMP.match(value.strip())
    if match is None:
        raise ValueError(f"invalid timestamp {value!r}")
    hours, minutes, seconds, millis = match.groups()
    return round(
        int(hours or 0) * 3600 + int(minutes) * 60 + int(seconds) + int(millis) / 1000,
        3,
    )


def _is_timing_line(line: str) -> bool:
    return "-->" in line


def _repair_blank_looking_lines(lines: list[str]) -> list[str]:
    """Removes whitespace-only lines that sit inside a cue.

    Auto captions put a single-space line above the first text line of a cue.
    Such a line only ends a block when a new cue follows it.
    """
    repaired: list[str] = []
    for index, line in enumerate(lines):
        if line == "" or line.strip():
            repaired.append(line)
            continue
        following = lines[index + 1 : index + 3]
        if not following or following[0] == "" or any(
            _is_timing_line(candidate) for candidate in following
        ):
            repaired.append("")
    return repaired


def split_cue_blocks(raw_captions: str) -> list[str]:
    """Returns the cue blocks of a track whose timing line parses.

    Header, NOTE and STYLE blocks are dropped. Cue blocks with an unparseable
    timing line are logged and skipped. A block holding more than one ``-->``
    line is logged and split at each of them.
    """
    lines = [line.rstrip("\r") for line in raw_captions.replace("\r\n", "\n").split("\n")]
    text = "\n".join(_repair_blank_looking_lines(lines))

    blocks: list[str] = []
    for block in re.split(r"\n{2,}", text):
        cues = _split_at_timing_lines([line for line in block.split("\n") if line != ""])
        if len(cues) > 1:
            logger.warning(
                "Splitting caption block: %s",
                MalformedCueError(block, "more than one cue timing in block"),
            )
        for cue_lines in cues:
            if len(cue_lines) < 2:
                continue
            try:
                _validate_timing_line(cue_lines[0])
            except MalformedCueError as err:
                logger.warning("Skipping caption cue: %s", err)
                continue
            blocks.append("\n".join(cue_lines))
    return blocks


def _split_at_timing_lines(block_lines: list[str]) -> list[list[str]]:
    """Groups lines into cues, each opened by a timing line; leading lines are dropped."""
    cues: list[list[str]] = []
    for line in block_lines:
        if _is_timing_line(line):
            cues.append([line])
        elif cues:
            cues[-1].append(line)
    return cues


def _validate_timing_line(line: str) -> None:
    match = _TIMING_LINE.match(line)
    if match is None:
        raise MalformedCueError(line, "missing cue timing")
    start, end = match.groups()
    try:
        parse_timestamp(start)
        parse_timestamp(end)
    except ValueError as err:
        raise MalformedCueError(line, str(err)) from err


def _cue_text(lines: Iterable[str]) -> str:
    text = " ".join(_CUE_MARKUP.sub("", line) for line in lines)
    return normalize_text(html.unescape(text))


def _read_block_group(blocks: Sequence[str]) -> list[tuple[float, str]]:
    document = webvtt.from_string(f"{WEBVTT_HEADER}\n\n" + "\n\n".join(blocks))
    return [
        (parse_timestamp(caption.start), _cue_text(caption.lines))
        for caption in document.captions
    ]


def read_cues(blocks: Sequence[str]) -> list[tuple[float, str]]:
    """
    Parses validated cue blocks into ``(start, normalized text)`` pairs.

    The blocks are parsed as one document; when webvtt-py rejects it, each
    block is parsed on its own and the ones it rejects are skipped.
    """
    if not blocks:
        return []
    try:
        return _read_block_group(blocks)
    except (MalformedFileError, MalformedCaptionError, ValueError) as err:
        logger.warning("Caption track rejected as a whole (%s); parsing cue by cue.", err)

    cues: list[tuple[float, str]] = []
    for block in blocks:
        try:
            cues.extend(_read_block_group([block]))
        except (MalformedFileError, MalformedCaptionError, ValueError) as err:
            logger.warning("Skipping caption cue: %s", MalformedCueError(block, str(err)))
    return cues


def _overlap_length(tail: Sequence[str], words: Sequence[str], minimum: int = 1) -> int:
    """Longest k >= ``minimum`` such that the last k words of ``tail`` open ``words``."""
    for size in range(min(len(tail), len(words)), minimum - 1, -1):
        if list(tail[-size:]) == list(words[:size]):
            return size
    return 0


def is_rolling_track(cue_words: Sequence[Sequence[str]]) -> bool:
    """
    Tells whether a track repeats words across cues to simulate scrolling.

    A track is rolling when at least half of its consecutive cue pairs open
    with the words the previous cue ended on. At least two pairs are needed
    to tell a scrolling layout from a word that is simply said twice.
    """
    pairs = list(zip(cue_words, cue_words[1:]))
    if len(pairs) < 2:
        return False
    overlapping = sum(1 for previous, current in pairs if _overlap_length(previous, current))
    return overlapping / len(pairs) >= ROLLING_PAIR_SHARE


def collapse_rolling_window(cues: Iterable[tuple[float, str]]) -> list[CaptionEntry]:
    """
    Drops words a cue repeats from the end of the transcript seen so far.

    In a rolling track any repeated suffix counts; elsewhere only overlaps of
    ``LONG_OVERLAP_WORDS`` or more, so a word said again across a cue border
    is kept.

    Arguments:
        cues (Iterable[tuple[float, str]]): Normalized cues in time order.

    Returns:
        list[CaptionEntry]: One entry per cue that adds words, holding only
            the novel words and the cue's start time.
    """
    timed_words = [(start, text.split()) for start, text in cues]
    timed_words = [(start, words) for start, words in timed_words if words]
    rolling = is_rolling_track([words for _, words in timed_words])
    minimum = 1 if rolling else LONG_OVERLAP_WORDS
    logger.debug("Caption track %s rolling.", "is" if rolling else "is not")

    entries: list[CaptionEntry] = []
    tail: list[str] = []
    for start, words in timed_words:
        overlap = _overlap_length(tail, words, minimum)
        novel = words[overlap:]
        if not novel:
            continue
        entries.append(CaptionEntry(text=" ".join(novel), start=start))
        tail = (tail + novel)[-MAX_OVERLAP_WORDS:]
    return entries


def parse_captions(raw_captions: str) -> list[CaptionEntry]:
    """
    Parses a WebVTT caption track into a deduplicated transcript timeline.

    Arguments:
        raw_captions (str): The caption track contents.

    Returns:
        list[CaptionEntry]: Entries ordered by start time (stream order on
            ties); empty for an empty track.
    """
    if not raw_captions.strip():
        logger.info("Caption track is empty.")
        return []

    blocks = split_cue_blocks(raw_captions)
    cues = read_cues(blocks)
    cues.sort(key=lambda cue: cue[0])
    entries = collapse_rolling_window(cues)
    logger.info(
        "Collapsed %d caption cue(s) into %d transcript entr%s.",
        len(cues),
        len(entries),
        "y" if len(entries) == 1 else "ies",
    )
    return entries


def timeline_words(entries: Iterable[CaptionEntry]) -> list[TimedWord]:
    """Flattens caption entries into one word per item, keeping entry starts."""
    return [
        TimedWord(word=word, start=entry.start)
        for entry in entries
        for word in entry.text.split()
    ]
