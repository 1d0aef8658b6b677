"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation.

HOW: One model per response shape. All fields carry Field descriptions for
the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Response models never expose the API key or internal paths
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body for validation and upload failures."""

    detail: str = Field(description="Human-readable error message.")


class SubtitleStats(BaseModel):
    """Summary of a finished conversion."""

    blocks: int = Field(description="Number of subtitle blocks in the SRT output.")
    words: int = Field(description="Number of words in the transcript.")
    characters: int = Field(description="Number of characters in the transcript.")


class SubtitleResponse(BaseModel):
    """Result of POST /subtitles."""

    filename: str = Field(description="Suggested download name for the SRT file.")
    srt: str = Field(description="The SRT document.")
    text: str = Field(description="Full transcript text from the recognizer.")
    stats: SubtitleStats = Field(description="Block, word and character counts.")
    min_block_duration: float = Field(description="Minimum block duration used (seconds).")
    max_block_duration: float = Field(description="Maximum block duration used (seconds).")
    max_line_chars: int = Field(description="Maximum characters per line used.")


class HealthResponse(BaseModel):
    """Liveness check response."""

    status: str = Field(description="Always 'ok' when the service is up.")
    version: str = Field(description="Service version.")
    model: Optional[str] = Field(default=None, description="Configured recognizer model id.")
