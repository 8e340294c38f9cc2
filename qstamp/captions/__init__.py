from .parser import (
    collapse_rolling_window,
    is_rolling_track,
    parse_captions,
    parse_timestamp,
    read_cues,
    split_cue_blocks,
    timeline_words,
)

__all__ = [
    "collapse_rolling_window",
    "is_rolling_track",
    "parse_captions",
    "parse_timestamp",
    "read_cues",
    "split_cue_blocks",
    "timeline_words",
]
