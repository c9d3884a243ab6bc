"""
Groups timestamped words into subtitle-sized chunks.

A chunk is closed as soon as one of these holds after a word is added:

* the word ends a sentence (``.``, ``!`` or ``?``);
* the chunk has at least 13 words and the last comma, semicolon or colon
  inside it is no more than 5 words back;
* the chunk has 20 words.
"""

import logging
import re
from typing import List, Sequence

from src.transcription.models import Chunk, Word

logger = logging.getLogger(__name__)

SENTENCE_END_PATTERN = re.compile(r"[.!?]$")
SOFT_PUNCTUATION_PATTERN = re.compile(r"[,;:]$")

MIN_WORDS_FOR_SOFT_BREAK = 13
MAX_WORDS_AFTER_SOFT_BREAK = 5
MAX_WORDS_PER_CHUNK = 20


def _should_close(word_text: str, word_count: int, last_soft_break: int) -> bool:
    if SENTENCE_END_PATTERN.search(word_text):
        return True
    if (
        word_count >= MIN_WORDS_FOR_SOFT_BREAK
        and last_soft_break > 0
        and word_count - last_soft_break <= MAX_WORDS_AFTER_SOFT_BREAK
    ):
        return True
    return word_count >= MAX_WORDS_PER_CHUNK


def group_words_into_chunks(words: Sequence[Word]) -> List[Chunk]:
    """
    Split ``words`` into chunks in spoken order.

    Every word ends up in exactly one chunk.  Raises ``ValueError`` when
    ``words`` is empty.
    """
    if not words:
        raise ValueError("Cannot build subtitle chunks from an empty word list")

    chunks: List[Chunk] = []
    current: List[Word] = []
    last_soft_break = 0

    for word in words:
        current.append(word)
        word_count = len(current)

        if SOFT_PUNCTUATION_PATTERN.search(word.text):
            last_soft_break = word_count

        if _should_close(word.text, word_count, last_soft_break):
            chunks.append(Chunk.from_words(current))
            current = []
            last_soft_break = 0

    if current:
        chunks.append(Chunk.from_words(current))

    logger.debug("Grouped %d words into %d chunks", len(words), len(chunks))
    return chunks
