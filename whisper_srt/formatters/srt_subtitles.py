"""SRT subtitle formatter — bridge from recognizer output to the srt_blocks library.

WHY: All SRT output must go through the subtitle block library so that the
pacing rules (minimum/maximum block duration, two lines of max_line_chars)
are applied the same way everywhere.

HOW: Converts the RecognitionResult back to its wire shape and calls
format_srt() with the formatter's SegmentationConfig.

RULES:
- Registered as "srt" in the FORMATTERS dict.
- Produces one file: {stem}.srt, media type "application/x-subrip".
- An empty transcription produces an empty SRT string.
- Never modifies the RecognitionResult.
"""

from __future__ import annotations

from srt_blocks import format_srt
from whisper_srt.api.models import RecognitionResult
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


class SRTSubtitleFormatter(BaseFormatter):
    """Formatter that produces a SubRip subtitle file."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(self, result: RecognitionResult) -> list[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".srt",
                content=format_srt(result.to_dict(), self.config),
                media_type="application/x-subrip",
            )
        ]
