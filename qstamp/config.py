"""Typed runtime configuration for qstamp.

Settings are read from the environment (optionally seeded from a ``.env``
file by the CLI) into frozen dataclasses. Library code receives an
``AppConfig`` explicitly; only the CLI and ``get_settings`` touch the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from qstamp.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DescriptionSettings:
    """Heuristics for recovering questions from a video description."""

    min_paragraph_chars: int = 10
    ordinal_window: int = 4
    shortened_max_chars: int = 120
    searchable_max_chars: int = 170


@dataclass(frozen=True)
class AlignmentSettings:
    """Bounds and thresholds used when aligning questions to captions."""

    lookahead_words: int = 4000
    min_overlap_ratio: float = 0.6
    token_similarity: float = 85.0
    span_factor: float = 1.5
    min_fuzzy_tokens: int = 2


@dataclass(frozen=True)
class OutputSettings:
    """Presentation and staging options."""

    lead_in_seconds: float = 3.0
    meta_dir: Path = Path(".vid-meta")
    caption_language: str = "en"


@dataclass(frozen=True)
class AppConfig:
    """Top-level application settings."""

    description: DescriptionSettings = field(default_factory=DescriptionSettings)
    alignment: AlignmentSettings = field(default_factory=AlignmentSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


def _read_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        value = int(raw_value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s.", name, raw_value, default)
        return default
    if value < minimum:
        logger.warning("Ignoring out-of-range %s=%r; using %s.", name, raw_value, default)
        return default
    return value


def _read_float(
    name: str,
    default: float,
    *,
    minimum: float = 0.0,
    maximum: float | None = None,
) -> float:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        value = float(raw_value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s.", name, raw_value, default)
        return default
    if value < minimum or (maximum is not None and value > maximum):
        logger.warning("Ignoring out-of-range %s=%r; using %s.", name, raw_value, default)
        return default
    return value


def _load_settings_from_env() -> AppConfig:
    description_defaults = DescriptionSettings()
    alignment_defaults = AlignmentSettings()
    output_defaults = OutputSettings()
    return AppConfig(
        description=DescriptionSettings(
            min_paragraph_chars=_read_int(
                "QSTAMP_MIN_PARAGRAPH_CHARS",
                description_defaults.min_paragraph_chars,
            ),
            ordinal_window=_read_int(
                "QSTAMP_ORDINAL_WINDOW", description_defaults.ordinal_window
            ),
            shortened_max_chars=_read_int(
                "QSTAMP_SHORTENED_MAX_CHARS",
                description_defaults.shortened_max_chars,
                minimum=3,
            ),
            searchable_max_chars=_read_int(
                "QSTAMP_SEARCHABLE_MAX_CHARS",
                description_defaults.searchable_max_chars,
                minimum=1,
            ),
        ),
        alignment=AlignmentSettings(
            lookahead_words=_read_int(
                "QSTAMP_LOOKAHEAD_WORDS", alignment_defaults.lookahead_words, minimum=1
            ),
            min_overlap_ratio=_read_float(
                "QSTAMP_MIN_OVERLAP_RATIO",
                alignment_defaults.min_overlap_ratio,
                maximum=1.0,
            ),
            token_similarity=_read_float(
                "QSTAMP_TOKEN_SIMILARITY",
                alignment_defaults.token_similarity,
                maximum=100.0,
            ),
            span_factor=_read_float(
                "QSTAMP_SPAN_FACTOR", alignment_defaults.span_factor, minimum=1.0
            ),
            min_fuzzy_tokens=_read_int(
                "QSTAMP_MIN_FUZZY_TOKENS", alignment_defaults.min_fuzzy_tokens, minimum=1
            ),
        ),
        output=OutputSettings(
            lead_in_seconds=_read_float(
                "QSTAMP_LEAD_IN_SECONDS", output_defaults.lead_in_seconds
            ),
            meta_dir=Path(
                os.getenv("QSTAMP_META_DIR", "").strip() or output_defaults.meta_dir
            ),
            caption_language=(
                os.getenv("QSTAMP_CAPTION_LANGUAGE", "").strip()
                or output_defaults.caption_language
            ),
        ),
    )


_SETTINGS: AppConfig | None = None


def reload_settings() -> AppConfig:
    """Re-reads the environment and replaces the cached settings."""
    global _SETTINGS
    _SETTINGS = _load_settings_from_env()
    return _SETTINGS


def get_settings() -> AppConfig:
    """Returns cached settings, loading them on first use."""
    if _SETTINGS is None:
        return reload_settings()
    return _SETTINGS
