"""Data models for the subtitle block builder.

WHY: Recognizer output arrives as loosely-typed chunks whose timestamps may
be partial. The builder needs one uniform input type (TimedSpan) and one
uniform output type (SubtitleBlock) so every stage of the pipeline agrees on
what it consumes and produces.

HOW: Two small dataclasses. TimedSpan keeps start/end optional because the
recognizer does not always deliver both; defaulting happens inside the
builder, not at parse time. SubtitleBlock always carries concrete floats.

RULES:
- Times are in seconds (float), never milliseconds.
- TimedSpan.text is stored as received; trimming happens in the builder.
- A SubtitleBlock is never mutated after it has been emitted.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class TimedSpan:
    """One unit of recognized speech with (possibly partial) boundaries.

    Attributes:
        text: The recognized text, untrimmed.
        start: Start time in seconds, or None when the recognizer omitted it.
        end: End time in seconds, or None when the recognizer omitted it.
    """
    text: str
    start: Optional[float] = None
    end: Optional[float] = None


@dataclass
class SubtitleBlock:
    """One displayed subtitle cue.

    Attributes:
        text: Cue text on a single line; wrapping happens at serialization.
        start: Start time in seconds.
        end: End time in seconds, padded to honor the minimum block duration.
    """
    text: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start
