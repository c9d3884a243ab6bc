"""
Tests for SRT timestamp formatting and transcript-to-SRT conversion.
"""

import re

import pytest

from src.transcription.models import TranscriptionResult
from src.transcription.srt_utils import (
    convert_to_srt,
    format_srt_time,
    split_sentences,
    write_srt,
)

TIMESTAMP_RE = re.compile(r"^\d{2}:\d{2}:\d{2},\d{3}$")


def _cue_indices(srt_text):
    blocks = [block for block in srt_text.split("\n\n") if block]
    return [int(block.split("\n")[0]) for block in blocks]


# ── format_srt_time ──────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "milliseconds, expected",
    [
        (0, "00:00:00,000"),
        (999, "00:00:00,999"),
        (1000, "00:00:01,000"),
        (61_001, "00:01:01,001"),
        (3_600_000, "01:00:00,000"),
        (3_723_456, "01:02:03,456"),
        (1500.9, "00:00:01,500"),
        (999.999, "00:00:00,999"),
    ],
)
def test_format_srt_time(milliseconds, expected):
    assert format_srt_time(milliseconds) == expected


@pytest.mark.parametrize(
    "bad_value", [None, "1000", float("nan"), float("inf"), -5, True, [1]]
)
def test_format_srt_time_invalid_input_returns_zero(bad_value):
    assert format_srt_time(bad_value) == "00:00:00,000"


def test_format_srt_time_is_fixed_width_and_monotonic():
    values = [0, 1, 59_999, 60_000, 3_599_999, 3_600_000, 86_399_999, 359_999_999]
    formatted = [format_srt_time(value) for value in values]

    assert all(TIMESTAMP_RE.match(stamp) for stamp in formatted)
    assert formatted == sorted(formatted)


# ── convert_to_srt ───────────────────────────────────────────────────────


def test_word_level_transcript():
    result = TranscriptionResult.model_validate(
        {
            "words": [
                {"text": "Hello,", "start": 0, "end": 500},
                {"text": "world.", "start": 500, "end": 1000},
            ]
        }
    )
    assert convert_to_srt(result) == "1\n00:00:00,000 --> 00:00:01,000\nHello, world.\n\n"


def test_word_level_numbering_is_contiguous():
    words = [
        {"text": f"w{i}{'.' if i % 4 == 3 else ''}", "start": i * 100, "end": i * 100 + 50}
        for i in range(22)
    ]
    srt = convert_to_srt(TranscriptionResult.model_validate({"words": words}))

    assert _cue_indices(srt) == list(range(1, 7))


def test_words_take_priority_over_utterances():
    result = TranscriptionResult.model_validate(
        {
            "words": [{"text": "Hi.", "start": 0, "end": 300}],
            "utterances": [{"speaker": "A", "text": "Hi.", "start": 0, "end": 300}],
        }
    )
    assert "Speaker" not in convert_to_srt(result)


def test_utterance_transcript_with_speaker():
    result = TranscriptionResult.model_validate(
        {
            "words": [],
            "utterances": [{"speaker": "A", "text": "Hi", "start": 0, "end": 300}],
        }
    )
    assert convert_to_srt(result) == "1\n00:00:00,000 --> 00:00:00,300\nSpeaker A: Hi\n\n"


def test_utterance_without_speaker_has_no_prefix():
    result = TranscriptionResult.model_validate(
        {
            "utterances": [
                {"speaker": None, "text": "First", "start": 0, "end": 1000},
                {"text": "Second", "start": 1000, "end": 2500},
            ]
        }
    )
    srt = convert_to_srt(result)

    assert srt == (
        "1\n00:00:00,000 --> 00:00:01,000\nFirst\n\n"
        "2\n00:00:01,000 --> 00:00:02,500\nSecond\n\n"
    )


def test_sentence_fallback_distributes_duration():
    result = TranscriptionResult.model_validate(
        {"text": "One. Two. Three.", "audio_duration": 3000}
    )
    assert convert_to_srt(result) == (
        "1\n00:00:00,000 --> 00:00:01,000\nOne.\n\n"
        "2\n00:00:01,000 --> 00:00:02,000\nTwo.\n\n"
        "3\n00:00:02,000 --> 00:00:03,000\nThree.\n\n"
    )


def test_sentence_fallback_without_duration_gives_zero_length_cues():
    result = TranscriptionResult.model_validate({"text": "Yes! No?"})
    srt = convert_to_srt(result)

    assert _cue_indices(srt) == [1, 2]
    assert srt.count("00:00:00,000 --> 00:00:00,000") == 2


def test_sentence_fallback_unterminated_text_is_single_cue():
    result = TranscriptionResult.model_validate(
        {"text": "no punctuation here", "audio_duration": 500}
    )
    assert convert_to_srt(result) == (
        "1\n00:00:00,000 --> 00:00:00,500\nno punctuation here\n\n"
    )


def test_split_sentences_keeps_terminators():
    assert split_sentences("Wait... what?! Ok") == ["Wait...", " what?!"]
    assert split_sentences("") == [""]


def test_inverted_word_span_is_rejected():
    with pytest.raises(ValueError):
        TranscriptionResult.model_validate(
            {"words": [{"text": "oops", "start": 500, "end": 100}]}
        )


# ── write_srt ────────────────────────────────────────────────────────────


def test_write_srt_creates_file_without_leftovers(tmp_path):
    target = tmp_path / "nested" / "out.srt"
    write_srt("1\n00:00:00,000 --> 00:00:01,000\nHé\n\n", str(target))

    assert target.read_text(encoding="utf-8") == "1\n00:00:00,000 --> 00:00:01,000\nHé\n\n"
    assert [p.name for p in target.parent.iterdir()] == ["out.srt"]
