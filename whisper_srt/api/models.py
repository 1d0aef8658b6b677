"""Recognizer response dataclasses.

WHY: The Hugging Face Whisper endpoint returns plain JSON: always a "text"
field, and a "chunks" array of {text, timestamp: [start, end]} when
timestamps were produced. Typed dataclasses make the structure explicit
and let the reconciler shift timestamps without poking at raw dicts.

HOW: RecognitionChunk and RecognitionResult map 1:1 to the JSON objects.
from_dict() parses tolerantly, to_dict() writes the same shape back so a
result can be saved and re-rendered later.

RULES:
- start/end are None when the recognizer omitted them (or sent null)
- chunks is None when the response carried no "chunks" key; an explicit
  empty list stays an empty list
- to_dict() output is accepted by srt_blocks.format_srt()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from srt_blocks.core import coerce_seconds


@dataclass
class RecognitionChunk:
    """One timestamped chunk of recognized text.

    RULES:
    - text: chunk text as returned (leading spaces are common)
    - start/end: float seconds, or None when missing
    """

    text: str
    start: float | None = None
    end: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> RecognitionChunk:
        text = data.get("text")
        timestamp = data.get("timestamp")
        start = end = None
        if isinstance(timestamp, (list, tuple)):
            if len(timestamp) > 0:
                start = coerce_seconds(timestamp[0])
            if len(timestamp) > 1:
                end = coerce_seconds(timestamp[1])
        return cls(
            text=text if isinstance(text, str) else "",
            start=start,
            end=end,
        )

    def to_dict(self) -> dict:
        return {"text": self.text, "timestamp": [self.start, self.end]}

    def shifted(self, offset_s: float) -> RecognitionChunk:
        """Return a copy moved later by offset_s.

        A missing start becomes offset_s (the segment's own start on the full
        timeline). A missing end stays missing so the block builder still
        gives the chunk its default length.
        """
        return RecognitionChunk(
            text=self.text,
            start=(self.start or 0.0) + offset_s,
            end=None if self.end is None else self.end + offset_s,
        )


@dataclass
class RecognitionResult:
    """A full recognizer response: plain text plus optional chunks.

    RULES:
    - text is the full transcript ("" when absent)
    - chunks is None for text-only responses
    """

    text: str
    chunks: list[RecognitionChunk] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RecognitionResult:
        """Parse a recognizer response dict (or a bare chunk list)."""
        if isinstance(data, list):
            data = {"text": "", "chunks": data}
        if not isinstance(data, dict):
            return cls(text="")

        text = data.get("text")
        raw_chunks = data.get("chunks")
        chunks = None
        if isinstance(raw_chunks, list):
            chunks = [
                RecognitionChunk.from_dict(c) for c in raw_chunks if isinstance(c, dict)
            ]
        return cls(text=text if isinstance(text, str) else "", chunks=chunks)

    def to_dict(self) -> dict:
        data: dict = {"text": self.text}
        if self.chunks is not None:
            data["chunks"] = [c.to_dict() for c in self.chunks]
        return data

    @property
    def has_timestamps(self) -> bool:
        return bool(self.chunks)
