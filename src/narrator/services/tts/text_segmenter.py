"""
Text Segmenter for Batch TTS Synthesis.

Providers cap the amount of text accepted by a single synthesis call, so long
submissions are split into bounded segments before any network activity. Each
segment becomes exactly one provider call, and the resulting audio fragments
are reassembled in segment order.

Splitting strategy:
    1. Text that already fits is returned untouched as a single segment.
    2. Otherwise the text is cut into sentence units at ``.``, ``!`` or ``?``
       runs followed by whitespace (or the end of the text). Units keep their
       punctuation, so no content is lost.
    3. Units are packed greedily while the running length stays within the
       limit.
    4. A unit that is too long on its own is packed word by word instead; a
       single word longer than the limit is cut into limit-sized pieces.

Usage:
    segments = segment_text(text, max_segment_size=5000)
    for segment in segments:
        fragment = await provider.synthesize(segment, params)
"""

import re
from typing import Iterator, List

DEFAULT_MAX_SEGMENT_SIZE = 5000

# Whole runs of terminal punctuation; a run ends a sentence only when it is
# followed by whitespace or the end of the text.
_TERMINATOR_PATTERN = re.compile(r"[.!?]+")
_WHITESPACE_PATTERN = re.compile(r"\s*")
_WORD_PATTERN = re.compile(r"\S+\s*")


def segment_text(text: str, max_segment_size: int = DEFAULT_MAX_SEGMENT_SIZE) -> List[str]:
    """
    Split text into ordered segments no longer than ``max_segment_size``.

    Args:
        text: Input text to split.
        max_segment_size: Maximum number of characters per segment.

    Returns:
        Ordered, non-empty segments. Empty or whitespace-only text yields an
        empty list; rejecting that is the caller's job.
    """
    if max_segment_size < 1:
        raise ValueError("max_segment_size must be positive")

    if not text or not text.strip():
        return []

    if len(text) <= max_segment_size:
        return [text]

    segments: List[str] = []
    current = ""

    for sentence in split_sentences(text):
        if len(current) + len(sentence) <= max_segment_size:
            current += sentence
            continue

        _emit(segments, current)
        current = ""

        if len(sentence) <= max_segment_size:
            current = sentence
        else:
            segments.extend(_segment_words(sentence, max_segment_size))

    _emit(segments, current)
    return segments


def split_sentences(text: str) -> Iterator[str]:
    """Yield contiguous sentence units; joining them reproduces ``text``."""
    start = 0
    for match in _TERMINATOR_PATTERN.finditer(text):
        end = match.end()
        if end < len(text) and not text[end].isspace():
            continue
        # Trailing whitespace stays attached to the sentence it follows
        end = _WHITESPACE_PATTERN.match(text, end).end()
        if end > start:
            yield text[start:end]
        start = end

    if start < len(text):
        yield text[start:]


def _segment_words(sentence: str, max_segment_size: int) -> List[str]:
    segments: List[str] = []
    current = ""

    for token in _WORD_PATTERN.findall(sentence):
        if len(current) + len(token) <= max_segment_size:
            current += token
            continue

        _emit(segments, current)
        current = ""

        word = token.rstrip()
        if len(word) <= max_segment_size:
            current = token
            continue

        # Only place a word is ever cut: it cannot fit in any segment.
        pieces = [
            word[start:start + max_segment_size]
            for start in range(0, len(word), max_segment_size)
        ]
        for piece in pieces[:-1]:
            _emit(segments, piece)
        current = pieces[-1] + token[len(word):]

    _emit(segments, current)
    return segments


def _emit(segments: List[str], chunk: str) -> None:
    stripped = chunk.strip()
    if stripped:
        segments.append(stripped)


__all__ = ["DEFAULT_MAX_SEGMENT_SIZE", "segment_text", "split_sentences"]
