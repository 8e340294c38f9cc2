"""
Report Utility Functions for qstamp

This module renders a question index for people and for other programs: a
colored console table, and a JSON document of questions with their
timestamps.

Functions:
    - format_timestamp: Formats seconds as MM:SS or H:MM:SS.
    - color_txt: Colorizes a string.
    - print_index: Prints the question index as a table.
    - results_to_dict: Converts alignment results to a JSON-ready dict.
    - save_index_to_json: Saves the question index to a JSON file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence

from colored import attr, bg, fg
from halo import Halo

from qstamp.domain import AlignmentResult
from qstamp.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)

NOT_FOUND_LABEL = "--:--"


def format_timestamp(seconds: float, lead_in: float = 0.0) -> str:
    """
    Formats a video offset for display.

    Arguments:
        seconds (float): Offset from the start of the video.
        lead_in (float, optional): Seconds to back off so playback starts
            just before the question; the result never goes below zero.

    Returns:
        str: ``MM:SS``, or ``H:MM:SS`` from one hour on.
    """
    total = max(int(seconds - lead_in), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def color_txt(
    string: str, fg_color: str, bg_color: str, padding: int = 0
) -> str:
    """
    Colorizes a string.

    Arguments:
        string (str): String to be colorized.
        fg_color (str): Foreground color.
        bg_color (str): Background color.

    Returns:
        str: Colorized string.
    """
    if padding:
        string = string.ljust(padding)

    return f"{fg(fg_color)}{bg(bg_color)}{string}{attr('reset')}"


def print_index(results: Sequence[AlignmentResult], lead_in: float = 0.0) -> None:
    """
    Prints the question index, one question per row.

    Arguments:
        results (Sequence[AlignmentResult]): Alignment results in question order.
        lead_in (float, optional): Seconds subtracted from each timestamp.
    """
    logger.info(msg=f"Printing index with {len(results)} questions.")
    if not results:
        print("No questions found in the description.")
        return

    labels: List[str] = [
        format_timestamp(result.start, lead_in) if result.start is not None else NOT_FOUND_LABEL
        for result in results
    ]
    max_time_width: int = max(len("Time"), *(len(label) for label in labels))
    max_number_width: int = max(len("#"), *(len(str(r.question.ordinal)) for r in results))

    print(color_txt("Time", "black", "green", max_time_width + 1), end="")
    print(color_txt("#", "black", "yellow", max_number_width + 1), end="")
    print(color_txt("Question", "black", "blue"))

    for label, result in zip(labels, results):
        time_str: str = label.ljust(max_time_width)
        if not result.found:
            time_str = color_txt(time_str, "red", "black")
        number_str: str = str(result.question.ordinal).ljust(max_number_width)
        print(f"{time_str} {number_str} {result.question.shortened}")


def results_to_dict(
    results: Sequence[AlignmentResult],
    lead_in: float = 0.0,
    error: Optional[str] = None,
) -> dict[str, Any]:
    """
    Converts alignment results into a JSON-ready dictionary.

    Arguments:
        results (Sequence[AlignmentResult]): Alignment results in question order.
        lead_in (float, optional): Seconds subtracted in the ``atStr`` labels.
        error (str, optional): Error message recorded for the video.

    Returns:
        dict: ``questions``, ``timestamps`` and ``error`` keys.
    """
    return {
        "questions": [
            {
                "full": result.question.full,
                "searchable": result.question.searchable,
                "shortened": result.question.shortened,
                "ordinal": result.question.ordinal,
            }
            for result in results
        ],
        "timestamps": [
            {
                "questionIdx": index,
                "start": None if result.start is None else round(result.start, 3),
                "atStr": (
                    format_timestamp(result.start, lead_in)
                    if result.start is not None
                    else ""
                ),
                "found": result.found,
            }
            for index, result in enumerate(results)
        ],
        "error": error or "",
    }


def save_index_to_json(
    results: Sequence[AlignmentResult],
    file_name: str | Path,
    lead_in: float = 0.0,
) -> str:
    """
    Saves the question index to a JSON file.

    Arguments:
        results (Sequence[AlignmentResult]): Alignment results in question order.
        file_name (str | Path): Destination file path.
        lead_in (float, optional): Seconds subtracted in the ``atStr`` labels.

    Returns:
        str: The path to the saved JSON file.
    """
    logger.info(msg="Starting to save question index to JSON.")
    path = Path(file_name)
    with Halo(
        text=f"Saving question index to {path}",
        spinner="dots",
        text_color="green",
    ):
        with open(path, mode="w", encoding="utf-8") as file:
            json.dump(results_to_dict(results, lead_in), file, ensure_ascii=False, indent=2)

    logger.info(msg=f"Question index successfully saved to {path}")
    return str(path)
