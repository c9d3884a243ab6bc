"""
SRT subtitle utilities.

Converts a completed transcript into SRT text.  Three input shapes are
supported, tried in this order:

1. word-level timestamps, grouped into readable chunks;
2. speaker utterances, one cue per utterance;
3. plain text only, split into sentences that share the reported audio
   duration evenly.
"""

import logging
import math
import re
from typing import Iterable, List, Tuple

from commons import atomic_write_text
from src.transcription.chunking import group_words_into_chunks
from src.transcription.models import TranscriptionResult

logger = logging.getLogger(__name__)

SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]+")
ZERO_TIMESTAMP = "00:00:00,000"

# (start_ms, end_ms, text)
CueEntry = Tuple[float, float, str]


def format_srt_time(milliseconds) -> str:
    """Convert milliseconds to SRT timestamp format: HH:MM:SS,mmm"""
    if isinstance(milliseconds, bool) or not isinstance(milliseconds, (int, float)):
        return ZERO_TIMESTAMP
    if not math.isfinite(milliseconds) or milliseconds < 0:
        return ZERO_TIMESTAMP

    total_seconds = int(milliseconds // 1000)
    millis = int(milliseconds % 1000)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


def render_srt(entries: Iterable[CueEntry]) -> str:
    """Render (start_ms, end_ms, text) entries as numbered SRT blocks."""
    blocks = []
    for idx, (start_ms, end_ms, text) in enumerate(entries, start=1):
        blocks.append(
            f"{idx}\n{format_srt_time(start_ms)} --> {format_srt_time(end_ms)}\n{text}\n\n"
        )
    return "".join(blocks)


def split_sentences(text: str) -> List[str]:
    """Split text on . ! ? keeping the terminator with each sentence."""
    return SENTENCE_PATTERN.findall(text) or [text]


def _word_entries(result: TranscriptionResult) -> List[CueEntry]:
    chunks = group_words_into_chunks(result.words)
    return [(chunk.start, chunk.end, chunk.text) for chunk in chunks]


def _utterance_entries(result: TranscriptionResult) -> List[CueEntry]:
    entries = []
    for utterance in result.utterances:
        prefix = f"Speaker {utterance.speaker}: " if utterance.speaker else ""
        entries.append((utterance.start, utterance.end, f"{prefix}{utterance.text}"))
    return entries


def _sentence_entries(result: TranscriptionResult) -> List[CueEntry]:
    sentences = split_sentences(result.text or "")
    # Without timing data the duration is shared evenly; a missing
    # duration gives zero-length cues.
    duration = result.audio_duration or 0
    time_per_sentence = duration / len(sentences)
    return [
        (i * time_per_sentence, (i + 1) * time_per_sentence, sentence.strip())
        for i, sentence in enumerate(sentences)
    ]


def convert_to_srt(result: TranscriptionResult) -> str:
    """Convert a transcription result into SRT text."""
    if result.words:
        strategy, entries = "words", _word_entries(result)
    elif result.utterances is not None:
        strategy, entries = "utterances", _utterance_entries(result)
    else:
        strategy, entries = "sentences", _sentence_entries(result)

    logger.info("Built %d SRT cues from %s", len(entries), strategy)
    return render_srt(entries)


def write_srt(srt_content: str, output_path: str) -> None:
    """Persist SRT text to ``output_path`` atomically."""
    atomic_write_text(output_path, srt_content)
    logger.info("SRT file saved to: %s", output_path)
