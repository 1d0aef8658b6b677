"""Shared test fixtures for the whisper_srt / srt_blocks test suite.

WHY: Several test modules need the same recognizer response and the same
pacing settings. Centralizing them here avoids duplication and keeps the
expected values in one place.

HOW: Pytest fixtures provide a timed recognizer response (text + chunks), a
text-only response, the default SegmentationConfig, and a parser for SRT
documents so tests can check structure instead of raw strings.

RULES:
- The sample response mirrors the Hugging Face Whisper shape:
  {text, chunks: [{text, timestamp: [start, end]}]}
- Timestamps are exact binary fractions so millisecond checks are stable.
"""

from typing import Any, Dict, List

import pytest

from srt_blocks import SegmentationConfig
from whisper_srt.api.models import RecognitionResult


SAMPLE_RESPONSE: Dict[str, Any] = {
    "text": " Hello there. This is a test of the subtitle builder. "
            "It keeps going for a while. Goodbye.",
    "chunks": [
        {"text": " Hello there.",                            "timestamp": [0.0, 2.0]},
        {"text": " This is a test of the subtitle builder.", "timestamp": [2.0, 6.5]},
        {"text": " It keeps going for a while.",             "timestamp": [6.5, 10.0]},
        {"text": " Goodbye.",                                "timestamp": [10.0, 12.0]},
    ],
}

EXPECTED_SAMPLE_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:10,000\n"
    "Hello there. This is a test of the subtitle builder. It keeps going for a\n"
    "while.\n"
    "\n"
    "2\n"
    "00:00:10,000 --> 00:00:18,000\n"
    "Goodbye."
)


def parse_srt(srt: str) -> List[Dict[str, Any]]:
    """Parse SRT content into dicts with 'index', 'start_ms', 'end_ms', 'lines'."""
    blocks = []
    if not srt.strip():
        return blocks
    for raw in srt.split("\n\n"):
        lines = raw.split("\n")
        start, end = lines[1].split(" --> ")
        blocks.append({
            "index": int(lines[0]),
            "start_ms": _timestamp_to_ms(start),
            "end_ms": _timestamp_to_ms(end),
            "lines": lines[2:],
        })
    return blocks


def _timestamp_to_ms(ts: str) -> int:
    hms, ms = ts.split(",")
    h, m, s = hms.split(":")
    return ((int(h) * 60 + int(m)) * 60 + int(s)) * 1000 + int(ms)


@pytest.fixture
def sample_response():
    """Timed recognizer response with four chunks."""
    return {
        "text": SAMPLE_RESPONSE["text"],
        "chunks": [dict(c, timestamp=list(c["timestamp"])) for c in SAMPLE_RESPONSE["chunks"]],
    }


@pytest.fixture
def sample_result(sample_response):
    """The sample response parsed into a RecognitionResult."""
    return RecognitionResult.from_dict(sample_response)


@pytest.fixture
def text_only_response():
    """Recognizer response without chunk timestamps."""
    return {"text": "One. Two. Three."}


@pytest.fixture
def default_config():
    """Default pacing: 8 s minimum, 20 s maximum, 42 chars per line."""
    return SegmentationConfig()
