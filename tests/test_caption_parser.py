"""Behavior tests for caption parsing and rolling-window collapse."""

import logging

import pytest

from qstamp.captions.parser import (
    collapse_rolling_window,
    is_rolling_track,
    parse_captions,
    parse_timestamp,
    split_cue_blocks,
    timeline_words,
)
from qstamp.domain import CaptionEntry, TimedWord

YOUTUBE_AUTO_CAPTIONS = (
    "WEBVTT\n"
    "Kind: captions\n"
    "Language: en\n"
    "\n"
    "00:00:00.030 --> 00:00:02.470 align:start position:0%\n"
    " \n"
    "what<00:00:00.510><c> is</c><00:00:00.900><c> caching</c>\n"
    "\n"
    "00:00:02.470 --> 00:00:02.480 align:start position:0%\n"
    "what is caching\n"
    " \n"
    "\n"
    "00:00:02.480 --> 00:00:05.000 align:start position:0%\n"
    "what is caching\n"
    "and<00:00:03.000><c> why</c><00:00:03.500><c> care</c>\n"
    "\n"
    "00:00:05.000 --> 00:00:05.010 align:start position:0%\n"
    "and why care\n"
    " \n"
)


def test_parse_captions_collapses_rolling_overlap(make_vtt) -> None:
    """Words repeated from the previous cue should only appear once."""
    captions = make_vtt(
        ("00:00:00.000", "00:00:01.000", "hello there"),
        ("00:00:01.000", "00:00:02.000", "there friends"),
        ("00:00:02.000", "00:00:03.000", "friends today"),
    )

    entries = parse_captions(captions)

    assert entries == [
        CaptionEntry("hello there", 0.0),
        CaptionEntry("friends", 1.0),
        CaptionEntry("today", 2.0),
    ]
    words = [word.word for word in timeline_words(entries)]
    assert words == ["hello", "there", "friends", "today"]


def test_parse_captions_handles_auto_caption_layout() -> None:
    """Inline word timings, blank-looking lines and display-only cues collapse."""
    entries = parse_captions(YOUTUBE_AUTO_CAPTIONS)

    assert entries == [
        CaptionEntry("what is caching", 0.03),
        CaptionEntry("and why care", 2.48),
    ]


def test_parse_captions_normalizes_text(make_vtt) -> None:
    """Stored caption text goes through the normalizer."""
    captions = make_vtt(
        ("00:00:01.500", "00:00:03.000", "<v Host>Hello, World!</v>"),
        ("00:00:03.000", "00:00:04.000", "&gt;&gt; It's GREAT"),
    )

    assert parse_captions(captions) == [
        CaptionEntry("hello world", 1.5),
        CaptionEntry("its great", 3.0),
    ]


def test_parse_captions_skips_malformed_cue(make_vtt, caplog) -> None:
    """A cue with a broken timestamp is logged and skipped."""
    caplog.set_level(logging.WARNING)
    captions = make_vtt(
        ("00:00:01.000", "00:00:02.000", "hello world"),
        ("00:00:xx.000", "00:00:03.000", "broken cue"),
        ("00:00:03.000", "00:00:04.000", "goodbye now"),
    )

    entries = parse_captions(captions)

    assert entries == [CaptionEntry("hello world", 1.0), CaptionEntry("goodbye now", 3.0)]
    assert any("Skipping caption cue" in record.message for record in caplog.records)


def test_parse_captions_orders_by_start(make_vtt) -> None:
    """Out-of-order cues are sorted by start time."""
    captions = make_vtt(
        ("00:00:05.000", "00:00:06.000", "later words"),
        ("00:00:01.000", "00:00:02.000", "early words"),
    )

    entries = parse_captions(captions)

    assert [entry.start for entry in entries] == [1.0, 5.0]


def test_parse_captions_accepts_identifiers_and_missing_header() -> None:
    """Cue identifiers are ignored and a missing header is tolerated."""
    captions = "1\n00:00:01.000 --> 00:00:02.000\nfirst line\n\n2\n00:01:02.250 --> 00:01:03.000\nsecond line\n"

    assert parse_captions(captions) == [
        CaptionEntry("first line", 1.0),
        CaptionEntry("second line", 62.25),
    ]


def test_parse_captions_empty_track() -> None:
    """An empty track is an empty transcript, not an error."""
    assert parse_captions("") == []
    assert parse_captions("WEBVTT\n\n") == []


def test_split_cue_blocks_drops_header_and_notes() -> None:
    """Only cue blocks survive splitting."""
    captions = "WEBVTT\nKind: captions\n\nNOTE written by hand\n\n00:00:01.000 --> 00:00:02.000\nhi there\n"

    assert split_cue_blocks(captions) == ["00:00:01.000 --> 00:00:02.000\nhi there"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("00:00:01.000", 1.0),
        ("01:02:03.500", 3723.5),
        ("02:03.250", 123.25),
        ("00:00:12.345", 12.345),
    ],
)
def test_parse_timestamp_converts_to_seconds(value: str, expected: float) -> None:
    assert parse_timestamp(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["", "1.5", "00:61:00.000", "00:00:01,000"])
def test_parse_timestamp_rejects_invalid_values(value: str) -> None:
    with pytest.raises(ValueError):
        parse_timestamp(value)


def test_collapse_rolling_window_keeps_first_appearance_time() -> None:
    """Novel words keep the start of the cue that first showed them."""
    cues = [(0.0, "one two three"), (1.0, "two three four"), (2.0, "three four"), (3.0, "five")]

    entries = collapse_rolling_window(cues)

    assert entries == [
        CaptionEntry("one two three", 0.0),
        CaptionEntry("four", 1.0),
        CaptionEntry("five", 3.0),
    ]
    assert timeline_words(entries)[-2:] == [TimedWord("four", 1.0), TimedWord("five", 3.0)]


def test_parse_captions_skips_cue_rejected_by_webvtt(make_vtt, caplog) -> None:
    """A cue webvtt-py cannot read is skipped without losing the rest of the track."""
    caplog.set_level(logging.WARNING)
    captions = make_vtt(
        ("00:00:01.000", "00:00:02.000", "hello world"),
        ("100:00:03.000", "100:00:04.000", "very long stream"),
        ("00:00:05.000", "00:00:06.000", "goodbye now"),
    )

    entries = parse_captions(captions)

    assert entries == [CaptionEntry("hello world", 1.0), CaptionEntry("goodbye now", 5.0)]
    assert any("Skipping caption cue" in record.message for record in caplog.records)


def test_parse_captions_splits_cues_missing_blank_line(caplog) -> None:
    """Cues run together keep their own start times and are reported."""
    caplog.set_level(logging.WARNING)
    captions = (
        "WEBVTT\n\n"
        "00:00:01.000 --> 00:00:02.000\nfirst words\n"
        "00:00:03.000 --> 00:00:04.000\nsecond words\n"
    )

    entries = parse_captions(captions)

    assert entries == [CaptionEntry("first words", 1.0), CaptionEntry("second words", 3.0)]
    assert any("Splitting caption block" in record.message for record in caplog.records)


def test_split_cue_blocks_reports_arrow_in_cue_text(caplog) -> None:
    """A cue whose text looks like a timing line is logged, not silently lost."""
    caplog.set_level(logging.WARNING)
    captions = (
        "WEBVTT\n\n"
        "00:00:01.000 --> 00:00:02.000\nuse a --> b here\n\n"
        "00:00:03.000 --> 00:00:04.000\nnext words\n"
    )

    assert split_cue_blocks(captions) == ["00:00:03.000 --> 00:00:04.000\nnext words"]
    assert any("Skipping caption cue" in record.message for record in caplog.records)


def test_collapse_rolling_window_keeps_repeated_word_outside_rolling_track() -> None:
    """A word said again across a cue border is not rolling duplication."""
    entries = collapse_rolling_window([(0.0, "that is that"), (1.0, "that is all")])

    assert [word.word for word in timeline_words(entries)] == [
        "that",
        "is",
        "that",
        "that",
        "is",
        "all",
    ]


def test_collapse_rolling_window_drops_long_overlap_outside_rolling_track() -> None:
    """Multi-word repeats are collapsed even when the track does not scroll."""
    entries = collapse_rolling_window([(0.0, "i said no way"), (1.0, "no way at all")])

    assert entries == [CaptionEntry("i said no way", 0.0), CaptionEntry("at all", 1.0)]


@pytest.mark.parametrize(
    ("cues", "expected"),
    [
        ([["hello", "there"], ["there", "friends"], ["friends", "today"]], True),
        ([["i", "said", "no"], ["no", "way"]], False),
        ([["one", "two"], ["three"], ["four"], ["four", "five"]], False),
        ([], False),
    ],
)
def test_is_rolling_track(cues, expected: bool) -> None:
    assert is_rolling_track(cues) is expected
