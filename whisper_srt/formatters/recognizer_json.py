"""Recognizer JSON formatter — saves the (reconciled) recognizer response.

WHY: Recognition is the slow, paid step. Keeping the raw {text, chunks}
response lets users re-render subtitles with different pacing later
(``whisper-srt --from-json`` or ``srt-blocks``) without re-sending audio.

HOW: Serializes RecognitionResult.to_dict() as pretty-printed UTF-8 JSON.

RULES:
- Output suffix: "-recognition.json"
- Media type: "application/json"
- Non-ASCII text is written as-is (ensure_ascii=False)
"""

from __future__ import annotations

import json

from whisper_srt.api.models import RecognitionResult
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


class RecognizerJSONFormatter(BaseFormatter):
    """Formatter that writes the recognizer response as JSON."""

    @property
    def name(self) -> str:
        return "Recognizer JSON"

    def format(self, result: RecognitionResult) -> list[FormatterOutput]:
        return [
            FormatterOutput(
                suffix="-recognition.json",
                content=json.dumps(result.to_dict(), ensure_ascii=False, indent=2),
                media_type="application/json",
            )
        ]
