"""Loading the description and caption artifacts of one video."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from qstamp.errors import InputUnavailableError
from qstamp.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

DESCRIPTION_ARTIFACT = "description"
CAPTIONS_ARTIFACT = "captions"


class VideoArtifacts(NamedTuple):
    """The two text artifacts the indexer needs for one video."""

    description: str
    captions: str


def read_artifact(artifact: str, path: str | Path) -> str:
    """
    Reads one artifact as UTF-8 text.

    Raises:
        InputUnavailableError: If the file is missing, unreadable or not UTF-8.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise InputUnavailableError(artifact, file_path, "file not found")
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise InputUnavailableError(artifact, file_path, str(err)) from err


def load_artifacts(description_path: str | Path, captions_path: str | Path) -> VideoArtifacts:
    """Reads the description and caption files of one video."""
    description = read_artifact(DESCRIPTION_ARTIFACT, description_path)
    captions = read_artifact(CAPTIONS_ARTIFACT, captions_path)
    logger.debug(
        "Loaded description (%d chars) and captions (%d chars).",
        len(description),
        len(captions),
    )
    return VideoArtifacts(description=description, captions=captions)
