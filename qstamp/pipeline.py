"""Pipeline seam running both parsers and the aligner for one video."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from qstamp.alignment import align_questions
from qstamp.captions import parse_captions
from qstamp.config import AppConfig
from qstamp.description import parse_description
from qstamp.domain import AlignmentResult, CaptionEntry, Question
from qstamp.sources import VideoArtifacts
from qstamp.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VideoIndex:
    """Questions recovered for one video and where each is asked."""

    questions: list[Question]
    transcript: list[CaptionEntry]
    results: list[AlignmentResult]

    @property
    def found_count(self) -> int:
        return sum(1 for result in self.results if result.found)


def index_video(
    description_text: str,
    captions_text: str,
    settings: Optional[AppConfig] = None,
) -> VideoIndex:
    """Builds the question index of one video from its two text artifacts."""
    settings = settings or AppConfig()
    questions = parse_description(description_text, settings.description)
    transcript = parse_captions(captions_text)
    if not questions:
        logger.info("Description has no numbered questions; nothing to align.")
    elif not transcript:
        logger.info("Transcript is empty; every question is reported as not found.")
    results = align_questions(questions, transcript, settings.alignment)
    return VideoIndex(questions=questions, transcript=transcript, results=results)


def index_artifacts(
    artifacts: VideoArtifacts, settings: Optional[AppConfig] = None
) -> VideoIndex:
    """Builds the question index from loaded artifacts."""
    return index_video(artifacts.description, artifacts.captions, settings)
