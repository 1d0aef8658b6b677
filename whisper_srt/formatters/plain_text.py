"""Plain text transcript formatter.

WHY: Editors often want the transcript itself for review or copy-paste,
without timecodes.

HOW: Uses the recognizer's full text when present; otherwise rebuilds it
from the chunk texts. Runs of whitespace collapse to single spaces.

RULES:
- Output suffix: "-transcript.txt"
- Media type: "text/plain"
- Ends with a single newline unless the transcript is empty
"""

from __future__ import annotations

from whisper_srt.api.models import RecognitionResult
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


def _transcript_text(result: RecognitionResult) -> str:
    text = result.text
    if not text.strip() and result.chunks:
        text = " ".join(c.text for c in result.chunks)
    return " ".join(text.split())


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the bare transcript text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, result: RecognitionResult) -> list[FormatterOutput]:
        text = _transcript_text(result)
        return [
            FormatterOutput(
                suffix="-transcript.txt",
                content=text + "\n" if text else "",
                media_type="text/plain",
            )
        ]
