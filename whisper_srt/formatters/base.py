"""Abstract base formatter and output container.

WHY: Every output format consumes the same RecognitionResult but produces
different file content. This base class enforces a consistent interface so
the CLI and the HTTP server can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. It holds the SegmentationConfig for formatters
that need pacing limits. FormatterOutput is a plain dataclass that bundles a
file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list of FormatterOutput (usually one item)
- ``suffix`` is appended to the source stem, e.g. ``".srt"`` or ``"-transcript.txt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from srt_blocks import DEFAULT_CONFIG, SegmentationConfig
from whisper_srt.api.models import RecognitionResult


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".srt"`` → ``"interview.srt"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(self, config: SegmentationConfig | None = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Subtitles'."""

    @abstractmethod
    def format(self, result: RecognitionResult) -> list[FormatterOutput]:
        """Convert a recognition result into one or more output files.

        Args:
            result: Recognizer output (already offset-reconciled for long
                    recordings).

        Returns:
            List of FormatterOutput objects, each containing a file suffix,
            content string, and MIME type.
        """
