"""Core subtitle logic: timestamps, line wrapping, block building and SRT output.

WHY: This module contains the whole text-to-subtitle pipeline — from a flat
list of recognizer chunks (or one untimed text block) to a finished SRT
string. It decides where cues break, estimates missing timing, wraps long
lines and serializes times with millisecond precision.

HOW: The pipeline has four stages:
  1. spans_from_chunks() — normalizes recognizer chunks into TimedSpans.
  2. build_blocks() — single greedy left-to-right pass that merges spans
     into blocks and splits on duration or length limits.
     estimate_blocks() replaces it when the recognizer returned no chunks,
     synthesizing times from a words-per-minute estimate.
  3. wrap_text() — greedy two-line wrap for each block.
  4. generate_srt() — numbered SRT document with HH:MM:SS,mmm times.

RULES:
- ALL functions take their limits as explicit parameters — no global state.
  Concurrent calls with different configs are safe.
- Spans are appended whole; a span is never split mid-text.
- Malformed timestamps are defaulted, empty texts skipped; nothing here
  raises for well-typed input.
- The two-line midpoint rebalance in wrap_text() may exceed max_chars per
  line. That is the observed contract; do not "fix" it.
"""

import math
import re
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .models import SubtitleBlock, TimedSpan
from .presets import MAX_LINES, MISSING_END_PADDING, WORDS_PER_MINUTE, SegmentationConfig

# =============================================================================
# Time Utilities
# =============================================================================

SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


def coerce_seconds(value: Any) -> Optional[float]:
    """Return value as finite float seconds, or None if it is missing or invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None
    return seconds


def format_timestamp(seconds: Any) -> str:
    """Convert seconds to SRT timestamp format: HH:MM:SS,mmm

    None, NaN and other unreadable values (and negatives) format as zero.
    Hours are not wrapped at 24.
    """
    value = coerce_seconds(seconds)
    if value is None or value < 0:
        value = 0.0
    hours = int(value // 3600)
    minutes = int((value % 3600) // 60)
    secs = int(value % 60)
    millis = int((value % 1) * 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


# =============================================================================
# Line Wrapping
# =============================================================================

def wrap_text(text: str, max_chars: int) -> List[str]:
    """Greedily wrap text into at most two display lines.

    WHY: SRT players show one or two lines per cue. The builder already keeps
    most blocks within two lines' worth of characters; this function decides
    where the line break goes.

    HOW: Words (split on single spaces) are appended to the current line
    while len(line) + len(word) + 1 <= max_chars, otherwise the line is
    flushed. If more than two lines result, the line list is cut at
    ceil(count / 2) and each half joined with spaces.

    RULES:
    - Always returns at most two strings (an empty list for empty text).
    - The rebalance is a regroup, not a second wrap: lines may exceed
      max_chars when the text is very dense.
    """
    lines = []  # type: List[str]
    current = ""

    for word in text.split(" "):
        if len(current) + len(word) + 1 <= max_chars:
            current += (" " if current else "") + word
        else:
            if current:
                lines.append(current)
            current = word

    if current:
        lines.append(current)

    if len(lines) > MAX_LINES:
        mid = math.ceil(len(lines) / 2)
        return [" ".join(lines[:mid]), " ".join(lines[mid:])]

    return lines


# =============================================================================
# Input Parsing
# =============================================================================

def spans_from_chunks(chunks: Iterable[Any]) -> List[TimedSpan]:
    """Normalize recognizer chunks into TimedSpan objects.

    WHY: The recognizer returns chunks shaped {text, timestamp: [start, end]},
    but either timestamp entry (or the whole tuple) may be missing or null.

    HOW: Reads text and the first two timestamp entries, leaving anything
    unreadable as None for build_blocks() to default.

    RULES:
    - Non-dict chunks are ignored.
    - A non-string text becomes "" (and is then skipped by the builder).
    """
    spans = []  # type: List[TimedSpan]
    for chunk in chunks:
        if not isinstance(chunk, Mapping):
            continue
        text = chunk.get("text")
        if not isinstance(text, str):
            text = ""
        timestamp = chunk.get("timestamp")
        start = end = None
        if isinstance(timestamp, (list, tuple)):
            if len(timestamp) > 0:
                start = coerce_seconds(timestamp[0])
            if len(timestamp) > 1:
                end = coerce_seconds(timestamp[1])
        spans.append(TimedSpan(text=text, start=start, end=end))
    return spans


def transcription_to_blocks(transcription: Any, config: SegmentationConfig) -> List[SubtitleBlock]:
    """Route a recognizer response to the timed or untimed builder.

    Accepts {text, chunks} / {text} mappings, or a bare list of chunks.
    Non-empty chunks go through build_blocks(); otherwise the text is
    estimated with estimate_blocks().
    """
    if isinstance(transcription, (list, tuple)):
        return build_blocks(spans_from_chunks(transcription), config)

    if not isinstance(transcription, Mapping):
        return []

    chunks = transcription.get("chunks")
    if isinstance(chunks, (list, tuple)) and chunks:
        return build_blocks(spans_from_chunks(chunks), config)

    text = transcription.get("text")
    return estimate_blocks(text if isinstance(text, str) else "", config)


# =============================================================================
# Block Building
# =============================================================================

def _pad_to_minimum(block: SubtitleBlock, min_duration: float) -> SubtitleBlock:
    """Return a copy of block whose end honors the minimum display duration."""
    if block.end - block.start < min_duration:
        return replace(block, end=block.start + min_duration)
    return replace(block)


def build_blocks(spans: Sequence[TimedSpan], config: SegmentationConfig) -> List[SubtitleBlock]:
    """Merge timed spans into subtitle blocks in one greedy pass.

    WHY: Recognizers emit short chunks (phrases or words). Viewers need cues
    that stay up long enough to read but not so long they drift from the
    audio, and that fit in two lines.

    HOW: One accumulator walks the spans left to right. Before appending a
    span it checks three split conditions; if any trips (and the accumulator
    already holds text) the accumulator is padded to the minimum duration,
    emitted, and reseeded with the current span.

    RULES:
    - Split if: the block would last longer than max_block_duration; OR the
      combined text exceeds two lines' worth of characters; OR the block
      already lasts min_block_duration and the span would push it past the
      minimum again.
    - Missing start defaults to 0, missing end to start + 2 seconds.
    - Spans whose trimmed text is empty are dropped and never open a block.
    - The first accumulator starts at the first span's start, even when that
      span itself is later dropped for empty text.

    Args:
        spans: Ordered TimedSpans from the recognizer.
        config: Pacing limits.

    Returns:
        Ordered list of SubtitleBlocks (empty for empty input).
    """
    spans = list(spans)
    if not spans:
        return []

    min_d = config.min_block_duration
    max_d = config.max_block_duration
    max_chars = config.max_block_chars

    blocks = []  # type: List[SubtitleBlock]
    current = SubtitleBlock(text="", start=coerce_seconds(spans[0].start) or 0.0, end=0.0)

    for span in spans:
        chunk_start = coerce_seconds(span.start) or 0.0
        chunk_end = coerce_seconds(span.end) or chunk_start + MISSING_END_PADDING
        chunk_text = (span.text or "").strip()

        if not chunk_text:
            continue

        current_duration = current.end - current.start
        would_be_duration = chunk_end - current.start
        combined_text = current.text + (" " if current.text else "") + chunk_text

        should_split = (
            would_be_duration > max_d
            or len(combined_text) > max_chars
            or (current_duration >= min_d and would_be_duration > min_d)
        )

        if should_split and current.text:
            blocks.append(_pad_to_minimum(current, min_d))
            current = SubtitleBlock(text=chunk_text, start=chunk_start, end=chunk_end)
        else:
            current.text = combined_text
            current.end = chunk_end

    if current.text:
        blocks.append(_pad_to_minimum(current, min_d))

    return blocks


def split_sentences(text: str) -> List[str]:
    """Split text after sentence punctuation (. ! ?), keeping the terminator.

    Text with no terminator at all is returned as a single sentence. Once
    any sentence matches, text after the last terminator is dropped.
    """
    sentences = SENTENCE_RE.findall(text)
    if not sentences:
        return [text]
    return sentences


def estimate_duration(sentence: str, min_duration: float) -> float:
    """Reading time for a sentence at WORDS_PER_MINUTE, never below min_duration."""
    words = len(sentence.split())
    return max(min_duration, words / WORDS_PER_MINUTE * 60)


def estimate_blocks(text: str, config: SegmentationConfig) -> List[SubtitleBlock]:
    """Build subtitle blocks for untimed text by estimating reading time.

    WHY: Some recognizer responses carry only {text} with no chunk
    timestamps. Subtitles still need plausible, monotonic times.

    HOW: Splits the text into sentences, estimates each sentence's duration
    from its word count, and accumulates sentences into a block until the
    accumulated estimate would exceed max_block_duration. A closed block's
    successor starts exactly where it ended.

    RULES:
    - The running clock only moves forward; block starts never decrease.
    - Each block lasts at least min_block_duration.
    - A block opened by a split lasts min(estimate, max_block_duration).
    - Empty or whitespace-only text yields no blocks.
    """
    if not text:
        return []

    min_d = config.min_block_duration
    max_d = config.max_block_duration

    blocks = []  # type: List[SubtitleBlock]
    current_time = 0.0
    current = SubtitleBlock(text="", start=0.0, end=0.0)

    for sentence in split_sentences(text):
        trimmed = sentence.strip()
        if not trimmed:
            continue

        estimated = estimate_duration(trimmed, min_d)
        combined_text = current.text + (" " if current.text else "") + trimmed
        would_be_duration = (current.end - current.start) + estimated

        if would_be_duration > max_d and current.text:
            blocks.append(replace(current))
            current = SubtitleBlock(
                text=trimmed,
                start=current.end,
                end=current.end + min(estimated, max_d),
            )
        else:
            if not current.text:
                current.start = current_time
            current.text = combined_text
            current.end = current.start + max(min_d, would_be_duration)

        current_time = current.end

    if current.text:
        blocks.append(current)

    return blocks


# =============================================================================
# SRT Output
# =============================================================================

def generate_srt(blocks: Sequence[SubtitleBlock], max_line_chars: int) -> str:
    """Render subtitle blocks as an SRT document.

    RULES:
    - Indices are 1-based and follow input order; no block is dropped.
    - Each block's text is wrapped to at most two lines.
    - Blocks are separated by a blank line; trailing whitespace is trimmed.
    - An empty block list renders as "".
    """
    parts = []  # type: List[str]

    for i, block in enumerate(blocks, 1):
        lines = wrap_text(block.text, max_line_chars)
        parts.append("{}\n{} --> {}\n{}\n\n".format(
            i,
            format_timestamp(block.start),
            format_timestamp(block.end),
            "\n".join(lines),
        ))

    return "".join(parts).strip()
