"""
Episode discovery in a staged metadata directory.

The acquisition step stages files with the downloader output template
``<playlist_index>.<title>.vid.<ext>``; for each video that gives a
``description`` file, a ``<lang>.vtt`` caption track and, once indexed, a
``results.json`` file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from qstamp.errors import InputUnavailableError
from qstamp.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

VIDEO_MARKER = "vid"
DESCRIPTION_EXTENSION = "description"
RESULTS_EXTENSION = "results.json"


@dataclass
class Episode:
    """Files staged for one video."""

    number: int
    raw_number: str
    title: str
    meta_dir: Path
    caption_language: str = "en"
    has_description: bool = False
    has_captions: bool = False
    has_results: bool = False

    @property
    def base_name(self) -> str:
        return f"{self.raw_number}.{self.title}.{VIDEO_MARKER}."

    @property
    def description_path(self) -> Path:
        return self.meta_dir / (self.base_name + DESCRIPTION_EXTENSION)

    @property
    def captions_path(self) -> Path:
        return self.meta_dir / (self.base_name + f"{self.caption_language}.vtt")

    @property
    def results_path(self) -> Path:
        return self.meta_dir / (self.base_name + RESULTS_EXTENSION)

    @property
    def is_indexable(self) -> bool:
        return self.has_description and self.has_captions


def split_staged_name(name: str) -> Optional[tuple[str, str, str]]:
    """Splits ``<n>.<title>.vid.<ext>`` into ``(n, title, ext)``.

    Returns None for names that do not follow the template.
    """
    parts = name.split(".")
    if len(parts) < 4 or not parts[0].isdigit():
        return None
    try:
        marker = len(parts) - 1 - parts[::-1].index(VIDEO_MARKER)
    except ValueError:
        return None
    if marker < 2 or marker == len(parts) - 1:
        return None
    return parts[0], ".".join(parts[1:marker]), ".".join(parts[marker + 1 :])


def discover_episodes(
    meta_dir: str | Path,
    *,
    caption_language: str = "en",
    title_filter: Optional[str] = None,
) -> list[Episode]:
    """
    Lists the episodes staged in ``meta_dir``, sorted by episode number.

    Arguments:
        meta_dir (str | Path): The staging directory.
        caption_language (str): Language code of the caption track to use.
        title_filter (str, optional): Case-insensitive text a title must contain.

    Raises:
        InputUnavailableError: If ``meta_dir`` is not a directory.
    """
    directory = Path(meta_dir)
    if not directory.is_dir():
        raise InputUnavailableError("metadata directory", directory, "not a directory")

    captions_extension = f"{caption_language}.vtt"
    episodes: dict[str, Episode] = {}
    for path in sorted(directory.iterdir()):
        parsed = split_staged_name(path.name)
        if parsed is None:
            continue
        raw_number, title, extension = parsed
        if title_filter and title_filter.lower() not in title.lower():
            continue

        episode = episodes.setdefault(
            title,
            Episode(
                number=int(raw_number),
                raw_number=raw_number,
                title=title,
                meta_dir=directory,
                caption_language=caption_language,
            ),
        )
        if extension == DESCRIPTION_EXTENSION:
            episode.has_description = True
        elif extension == captions_extension:
            episode.has_captions = True
        elif extension == RESULTS_EXTENSION:
            episode.has_results = True

    found = sorted(episodes.values(), key=lambda episode: episode.number)
    logger.info("Discovered %d episode(s) in %s.", len(found), directory)
    return found


def load_cached_result(episode: Episode) -> dict[str, Any]:
    """Reads an episode's results file; a corrupt file is reported in ``error``."""
    try:
        with open(episode.results_path, encoding="utf-8") as file:
            payload = json.load(file)
    except (OSError, ValueError) as err:
        logger.warning("Unreadable results for %s: %s", episode.title, err)
        return {"questions": [], "timestamps": [], "error": str(err)}
    if not isinstance(payload, dict):
        return {"questions": [], "timestamps": [], "error": "results file is not an object"}
    return payload


def save_result(episode: Episode, payload: dict[str, Any]) -> Path:
    """Writes an episode's results file and returns its path."""
    with open(episode.results_path, mode="w", encoding="utf-8") as file:
        json.dump(payload, file, ensure_ascii=False, indent=2)
    episode.has_results = True
    logger.debug("Saved results for %s to %s", episode.title, episode.results_path)
    return episode.results_path
