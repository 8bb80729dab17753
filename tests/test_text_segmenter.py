"""Tests for splitting long text into provider-sized segments."""

from __future__ import annotations

import time

import pytest

from narrator.services.tts.text_segmenter import segment_text, split_sentences


def _squash(value: str) -> str:
    return "".join(value.split())


def test_short_text_is_returned_untouched() -> None:
    text = "  Hello there. How are you?  "
    assert segment_text(text, max_segment_size=100) == [text]


def test_empty_and_whitespace_text_yield_no_segments() -> None:
    assert segment_text("") == []
    assert segment_text("   \n\t ") == []


def test_invalid_limit_rejected() -> None:
    with pytest.raises(ValueError):
        segment_text("hello", max_segment_size=0)


def test_long_text_packs_whole_sentences() -> None:
    sentence = "a" * 98 + ". "
    text = sentence * 120
    assert len(text) == 12000

    segments = segment_text(text, max_segment_size=5000)

    assert len(segments) == 3
    assert all(len(segment) <= 5000 for segment in segments)
    # Every segment ends on a sentence boundary
    assert all(segment.endswith(".") for segment in segments)
    assert _squash("".join(segments)) == _squash(text)


def test_single_oversized_word_is_cut_into_limit_sized_pieces() -> None:
    text = "a" * 12000

    segments = segment_text(text, max_segment_size=5000)

    assert [len(segment) for segment in segments] == [5000, 5000, 2000]
    assert "".join(segments) == text


def test_oversized_sentence_falls_back_to_words() -> None:
    text = " ".join(["word"] * 30) + ". Short one."

    segments = segment_text(text, max_segment_size=40)

    assert all(len(segment) <= 40 for segment in segments)
    # Words are never cut when they fit
    for segment in segments:
        for token in segment.split():
            assert token in {"word", "word.", "Short", "one."}
    assert _squash("".join(segments)) == _squash(text)


def test_segments_never_exceed_limit_and_are_not_blank() -> None:
    text = (
        "First sentence here! Second one is a bit longer than the first? "
        "Third... and a fourth.   "
    ) * 20

    segments = segment_text(text, max_segment_size=70)

    assert segments
    for segment in segments:
        assert 0 < len(segment) <= 70
        assert segment == segment.strip()
    assert _squash("".join(segments)) == _squash(text)


def test_segmentation_is_deterministic() -> None:
    text = "One. Two! Three? " * 400
    assert segment_text(text, 500) == segment_text(text, 500)


def test_split_sentences_keeps_punctuation_and_reproduces_text() -> None:
    text = "Dr. Smith arrived. Was he late?! No 3.14 is pi"

    units = list(split_sentences(text))

    assert "".join(units) == text
    assert units[0] == "Dr. "
    # A period inside a number is not a boundary
    assert units[-1] == "No 3.14 is pi"


@pytest.mark.parametrize(
    "text",
    [
        "." * 49999 + "x",
        "?!" * 24999 + "xy",
        "x" * 50000,
        ("wait..." * 7143)[:50000],
    ],
)
def test_punctuation_runs_at_text_ceiling_stay_fast(text: str) -> None:
    assert len(text) == 50000

    started = time.perf_counter()
    segments = segment_text(text, max_segment_size=5000)
    elapsed = time.perf_counter() - started

    assert elapsed < 2.0
    assert all(0 < len(segment) <= 5000 for segment in segments)
    assert _squash("".join(segments)) == _squash(text)


def test_split_sentences_on_unbroken_punctuation_run() -> None:
    text = "." * 1000 + "x. Done."

    assert list(split_sentences(text)) == ["." * 1000 + "x. ", "Done."]
