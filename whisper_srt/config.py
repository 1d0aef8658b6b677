"""Configuration constants, recognizer defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find, update,
and override: the Hugging Face endpoint and model, the model-loading retry
policy, the single-request size limit, segment length for long recordings,
and the default subtitle pacing. Plain module-level data, not buried in
logic.

HOW: python-dotenv loads the .env file on import. Constants are module-level
values read from the environment with sensible defaults. load_api_key()
gives a clear error when the token is missing.

RULES:
- The API key is loaded from .env via python-dotenv, never hardcoded
- SUPPORTED_FORMATS lists accepted audio/video file extensions
- All defaults can be overridden via environment variables
- Subtitle pacing defaults feed srt_blocks.resolve_config()
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported audio/video file extensions
# ---------------------------------------------------------------------------

SUPPORTED_FORMATS: set[str] = {
    ".aac", ".aiff", ".flac", ".m4a", ".mp3", ".mp4",
    ".mpeg", ".oga", ".ogg", ".opus", ".wav", ".webm",
}
"""Audio/video file extensions accepted for upload (lowercase, with dot)."""

DEFAULT_CONTENT_TYPE = "audio/mpeg"
"""Content-Type sent when the file's media type cannot be guessed."""

# ---------------------------------------------------------------------------
# Recognizer (Hugging Face Inference API) configuration
# ---------------------------------------------------------------------------

HF_INFERENCE_URL = os.getenv("HF_INFERENCE_URL", "https://api-inference.huggingface.co/models")
HF_MODEL = os.getenv("HF_MODEL", "openai/whisper-large-v3")

MODEL_LOADING_WAIT_S = float(os.getenv("MODEL_LOADING_WAIT_S", "20"))
"""Fixed wait before retrying while the remote model is still loading (HTTP 503)."""

MODEL_LOADING_MAX_RETRIES = int(os.getenv("MODEL_LOADING_MAX_RETRIES", "10"))

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(24 * 1024 * 1024)))
"""Largest file sent in a single recognition request."""

SERVER_MAX_UPLOAD_BYTES = int(os.getenv("SERVER_MAX_UPLOAD_BYTES", str(50 * 1024 * 1024)))
"""Largest upload accepted by the HTTP layer."""

SEGMENT_DURATION_S = float(os.getenv("SEGMENT_DURATION_S", "600"))
"""Duration of each pre-split segment of a long recording (10 minutes)."""

# ---------------------------------------------------------------------------
# Subtitle pacing defaults
# ---------------------------------------------------------------------------

DEFAULT_MIN_BLOCK_DURATION = float(os.getenv("DEFAULT_MIN_BLOCK_DURATION", "8"))
DEFAULT_MAX_BLOCK_DURATION = float(os.getenv("DEFAULT_MAX_BLOCK_DURATION", "20"))
DEFAULT_MAX_LINE_CHARS = int(os.getenv("DEFAULT_MAX_LINE_CHARS", "42"))


def load_api_key() -> str:
    """Load the Hugging Face API token from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("HF_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Hugging Face API key not configured. "
            "Add HF_API_KEY to the .env file in the app folder."
        )
    return key
