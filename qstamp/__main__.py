"""
Question Timestamp Indexer (qstamp)

This module serves as the entry point for the qstamp tool. It finds, for
every question listed in a video description, the moment the question is
asked according to the video's auto-generated captions.

Usage:
    The tool can be operated in two modes:
    1. Single video: index one description file against one caption file.
    2. Batch: index every episode staged in a metadata directory, caching
        each episode's results next to its files.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from dotenv import load_dotenv
from halo import Halo

from qstamp.config import AppConfig, reload_settings
from qstamp.errors import InputUnavailableError
from qstamp.pipeline import index_artifacts
from qstamp.sources import (
    Episode,
    discover_episodes,
    load_artifacts,
    load_cached_result,
    save_result,
)
from qstamp.utils.logger import configure_logging, get_logger
from qstamp.utils.report import print_index, results_to_dict, save_index_to_json

logger: logging.Logger = get_logger("qstamp")


def _build_parser(settings: AppConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qstamp",
        description="Timestamp the questions of a video description against its captions",
    )
    parser.add_argument(
        "--description",
        type=str,
        help="Path to the video description text file",
    )
    parser.add_argument(
        "--captions",
        type=str,
        help="Path to the WebVTT caption file",
    )
    parser.add_argument(
        "--json",
        type=str,
        help="Save the question index of a single video to this JSON file",
    )
    parser.add_argument(
        "--meta-dir",
        type=str,
        nargs="?",
        const=str(settings.output.meta_dir),
        help="Index every episode staged in this directory (default: QSTAMP_META_DIR)",
    )
    parser.add_argument(
        "--title-filter",
        type=str,
        help="Only index episodes whose title contains this text (batch mode)",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-index episodes that already have results (batch mode)",
    )
    parser.add_argument(
        "--lead-in",
        type=float,
        default=settings.output.lead_in_seconds,
        help="Seconds to back off displayed timestamps",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level; overrides LOG_LEVEL",
    )
    return parser


def main() -> None:
    """
    Main function to handle the command line interface logic.
    """
    load_dotenv()
    settings: AppConfig = reload_settings()
    parser = _build_parser(settings)
    args: argparse.Namespace = parser.parse_args()
    configure_logging(args.log_level)

    start_time: float = time.time()
    if args.meta_dir:
        _run_batch(args, settings)
    elif args.description and args.captions:
        _run_single(args, settings)
    else:
        logger.error(
            msg="Provide --description and --captions, or --meta-dir for batch mode."
        )
        sys.exit(1)

    logger.info(msg=f"Indexing completed in {time.time() - start_time:.2f} seconds")


def _run_single(args: argparse.Namespace, settings: AppConfig) -> None:
    try:
        artifacts = load_artifacts(args.description, args.captions)
    except InputUnavailableError as err:
        logger.error(msg=str(err))
        sys.exit(1)

    with Halo(text="Aligning questions to captions...", spinner="dots", text_color="green"):
        video_index = index_artifacts(artifacts, settings)
    print_index(video_index.results, lead_in=args.lead_in)

    if args.json:
        try:
            json_file = save_index_to_json(video_index.results, args.json, lead_in=args.lead_in)
        except OSError as err:
            logger.error(msg=f"Failed to save question index: {err}", exc_info=True)
            sys.exit(1)
        logger.info(msg=f"Question index saved to {json_file}")


def _index_episode(episode: Episode, settings: AppConfig, lead_in: float) -> dict:
    try:
        artifacts = load_artifacts(episode.description_path, episode.captions_path)
    except InputUnavailableError as err:
        logger.warning("Episode %d skipped: %s", episode.number, err)
        return results_to_dict([], lead_in, error=str(err))
    video_index = index_artifacts(artifacts, settings)
    return results_to_dict(video_index.results, lead_in)


def _run_batch(args: argparse.Namespace, settings: AppConfig) -> None:
    try:
        episodes = discover_episodes(
            Path(args.meta_dir),
            caption_language=settings.output.caption_language,
            title_filter=args.title_filter,
        )
    except InputUnavailableError as err:
        logger.error(msg=str(err))
        sys.exit(1)

    for episode in episodes:
        if not episode.is_indexable:
            logger.info(
                "Episode %d (%s) is missing its description or captions.",
                episode.number,
                episode.title,
            )
            continue

        if episode.has_results and not args.force:
            payload = load_cached_result(episode)
            logger.debug("Using cached results for episode %d.", episode.number)
        else:
            with Halo(
                text=f"Indexing episode {episode.number}...",
                spinner="dots",
                text_color="green",
            ):
                payload = _index_episode(episode, settings, args.lead_in)
            save_result(episode, payload)

        timestamps = payload.get("timestamps", [])
        found = sum(1 for stamp in timestamps if stamp.get("found"))
        status = payload.get("error") or f"{found}/{len(timestamps)} questions found"
        print(f"{episode.number:>4}  {episode.title}: {status}")


if __name__ == "__main__":
    main()
