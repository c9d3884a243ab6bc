"""
Command line entry point: generate subtitles for a local media file.

Usage:
    python cli.py <path-to-media-file> [--output-dir DIR]
"""

import argparse
import logging
import os
import sys

from configs.config import get_config
from logging_config import setup_logging
from src.transcription.assemblyai_client import AssemblyAIClient
from src.transcription.refiner import SubtitleRefiner
from src.transcription.worker import generate_subtitles

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate SRT subtitles for a media file")
    parser.add_argument("media_file", help="Path to the audio or video file")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the SRT files (default: next to the media file)",
    )
    args = parser.parse_args(argv)

    if not os.path.exists(args.media_file):
        print(f"File not found: {args.media_file}", file=sys.stderr)
        return 1

    setup_logging()
    cfg = get_config()
    output_dir = args.output_dir or os.path.dirname(os.path.abspath(args.media_file))

    try:
        outputs = generate_subtitles(
            args.media_file,
            output_dir,
            transcriber=AssemblyAIClient.from_config(cfg),
            refiner=SubtitleRefiner.from_config(cfg),
        )
    except Exception as exc:
        logger.error("Failed to generate subtitles: %s", exc, exc_info=True)
        return 1

    print("\nSubtitle generation completed successfully!")
    print(f"Raw SRT: {outputs.raw_srt_path}")
    print(f"Improved SRT: {outputs.improved_srt_path}")
    if not outputs.refined:
        print("Note: refinement was skipped or failed; the improved SRT is the raw SRT.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
