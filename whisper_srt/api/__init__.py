"""Recognition API client package — async HTTP interface to Hugging Face Whisper.

WHY: The converter needs to send audio to a hosted speech-recognition model
and read back text with optional chunk timestamps. This package
encapsulates that communication behind an async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Response data is parsed
into typed dataclasses defined in models.py.

RULES:
- All HTTP calls go through HuggingFaceClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token from config (or passed explicitly)
"""

from whisper_srt.api.client import (
    HuggingFaceClient,
    InvalidAPIKeyError,
    ModelLoadingError,
    RecognitionAPIError,
)
from whisper_srt.api.models import RecognitionChunk, RecognitionResult

__all__ = [
    "HuggingFaceClient",
    "InvalidAPIKeyError",
    "ModelLoadingError",
    "RecognitionAPIError",
    "RecognitionChunk",
    "RecognitionResult",
]
