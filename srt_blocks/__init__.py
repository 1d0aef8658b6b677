"""Subtitle block builder: recognizer output to SRT.

WHY: Speech recognizers return either timestamped chunks or one untimed text
block. Neither is a usable subtitle file. This package turns both into SRT
cues that respect user-tunable pacing (minimum/maximum block duration and
maximum characters per line), with no network or environment dependencies
so the application layer, CLI and tests can all call it directly.

HOW: The single public entry point is format_srt(transcription, config).
It routes the response to the timed block builder (chunks present) or the
untimed estimator (text only), then serializes the blocks. Lower-level
steps (build_blocks, estimate_blocks, wrap_text, format_timestamp,
generate_srt) are re-exported for callers that need them individually.

RULES:
- format_srt() is the main public API for producing SRT output.
- config defaults to DEFAULT_CONFIG (8 s / 20 s / 42 chars).
- Empty input produces "" — never an exception.
- No global state: every function receives its limits explicitly.
"""

from typing import Any, Optional

from .models import SubtitleBlock, TimedSpan
from .presets import (
    DEFAULT_CONFIG,
    DEFAULT_MAX_BLOCK_DURATION,
    DEFAULT_MAX_LINE_CHARS,
    DEFAULT_MIN_BLOCK_DURATION,
    SegmentationConfig,
    resolve_config,
)
from .core import (
    build_blocks,
    estimate_blocks,
    format_timestamp,
    generate_srt,
    spans_from_chunks,
    split_sentences,
    transcription_to_blocks,
    wrap_text,
)

__all__ = [
    "format_srt",
    "TimedSpan",
    "SubtitleBlock",
    "SegmentationConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_MIN_BLOCK_DURATION",
    "DEFAULT_MAX_BLOCK_DURATION",
    "DEFAULT_MAX_LINE_CHARS",
    "resolve_config",
    "build_blocks",
    "estimate_blocks",
    "format_timestamp",
    "generate_srt",
    "spans_from_chunks",
    "split_sentences",
    "transcription_to_blocks",
    "wrap_text",
]


def format_srt(
    transcription: Any,
    config: Optional[SegmentationConfig] = None,
) -> str:
    """Format a recognizer response into an SRT subtitle string.

    WHY: This is the single public entry point for the library. The
    application's SRT formatter, the CLI and tests call this function
    instead of wiring the stages together themselves.

    HOW: transcription_to_blocks() -> generate_srt().

    RULES:
    - transcription is {"text": ...}, {"text": ..., "chunks": [...]} or a
      bare list of chunks.
    - A non-empty "chunks" list wins over "text".
    - Returns "" when nothing survives segmentation.

    Args:
        transcription: Parsed recognizer response.
        config: Pacing limits. Default: DEFAULT_CONFIG.

    Returns:
        SRT-formatted subtitle string.
    """
    cfg = config if config is not None else DEFAULT_CONFIG

    blocks = transcription_to_blocks(transcription, cfg)
    if not blocks:
        return ""

    return generate_srt(blocks, cfg.max_line_chars)
