"""Output formatter registry — pluggable format hub.

WHY: The CLI and the HTTP server need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate with the run's pacing config:
``formatter = FORMATTERS["srt"](config)``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisper_srt.formatters.plain_text import PlainTextFormatter
from whisper_srt.formatters.recognizer_json import RecognizerJSONFormatter
from whisper_srt.formatters.srt_subtitles import SRTSubtitleFormatter

if TYPE_CHECKING:
    from whisper_srt.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTSubtitleFormatter,
    "plain_text": PlainTextFormatter,
    "recognizer_json": RecognizerJSONFormatter,
}

DEFAULT_FORMATS = ["srt"]
