"""FastAPI application: upload proxy and subtitle endpoint.

WHY: Browser front-ends cannot call the Hugging Face API with a raw file
upload and their own token without a CORS-friendly relay, and other tools
(curl, n8n) want subtitles over HTTP without installing the CLI. FastAPI
provides request parsing, OpenAPI docs and CORS handling.

HOW: Three endpoints:
  POST /transcribe — forwards an uploaded file to the recognizer and
                     returns the recognizer's JSON unchanged in shape.
  POST /subtitles  — recognizes the upload and returns SRT text plus a
                     summary, using the pacing fields sent with the form.
  GET  /health     — liveness check.
Recognizer errors are forwarded with their original status code and body
through an exception handler.

RULES:
- The API key comes from the "apiKey" form field or the X-API-Key header
- Missing file or key → 400; oversized upload → 413; bad pacing → 422
- Upload size limit is SERVER_MAX_UPLOAD_BYTES (50 MB default)
- CORS is open to any origin for POST/OPTIONS/GET
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import httpx
from fastapi import FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from srt_blocks import format_srt, resolve_config
from whisper_srt import __version__
from whisper_srt.api.client import HuggingFaceClient, RecognitionAPIError, guess_content_type
from whisper_srt.api.models import RecognitionResult
from whisper_srt.config import HF_MODEL, SERVER_MAX_UPLOAD_BYTES, SUPPORTED_FORMATS
from whisper_srt.core.stats import summarize
from whisper_srt.server.models import (
    ErrorResponse,
    HealthResponse,
    SubtitleResponse,
    SubtitleStats,
)

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_STEM = "subtitles"

app = FastAPI(
    title="Whisper SRT Converter API",
    description=(
        "Send an audio or video file to a Hugging Face Whisper model and get "
        "back the raw recognition result or paced SRT subtitles."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["Content-Type", "X-API-Key"],
)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


@app.exception_handler(RecognitionAPIError)
async def recognition_error_handler(request: Request, exc: RecognitionAPIError) -> JSONResponse:
    """Forward recognizer errors with their own status code and body."""
    logger.warning("Recognizer rejected request: %s", exc)
    content = exc.payload or {"error": exc.message}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(httpx.HTTPError)
async def upstream_error_handler(request: Request, exc: httpx.HTTPError) -> JSONResponse:
    logger.exception("Could not reach the recognizer")
    return JSONResponse(status_code=502, content={"error": str(exc) or type(exc).__name__})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_inputs(audio: Optional[UploadFile], api_key: Optional[str]) -> str:
    """Validate the upload and return the API key to use."""
    key = (api_key or "").strip()
    if audio is None or not key:
        raise HTTPException(status_code=400, detail="Missing audio file or apiKey")

    filename = Path(audio.filename or "").name
    ext = Path(filename).suffix.lower()
    content_type = audio.content_type or ""
    is_media = content_type.startswith("audio/") or content_type.startswith("video/")
    if ext not in SUPPORTED_FORMATS and not is_media:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext or content_type, ", ".join(sorted(SUPPORTED_FORMATS))
            ),
        )
    return key


async def _read_upload(audio: UploadFile) -> bytes:
    content = await audio.read()
    if len(content) > SERVER_MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail="File too large ({} bytes, max {})".format(
                len(content), SERVER_MAX_UPLOAD_BYTES
            ),
        )
    return content


def _upload_content_type(audio: UploadFile) -> str:
    content_type = audio.content_type or ""
    if content_type.startswith("audio/") or content_type.startswith("video/"):
        return content_type
    return guess_content_type(audio.filename or "")


async def _recognize_upload(audio: UploadFile, api_key: str) -> RecognitionResult:
    content = await _read_upload(audio)
    async with HuggingFaceClient(api_key=api_key) as client:
        return await client.transcribe(content, content_type=_upload_content_type(audio))


def _download_name(filename: Optional[str]) -> str:
    stem = Path(filename or "").stem
    return "{}.srt".format(stem or DEFAULT_DOWNLOAD_STEM)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post(
    "/transcribe",
    tags=["recognition"],
    summary="Forward an upload to the recognizer",
    description=(
        "Multipart upload with an 'audio' file field. Returns the recognizer "
        "response: {text} or {text, chunks:[{text, timestamp:[start, end]}]}."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing file/key or unsupported type"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
    },
)
async def transcribe(
    audio: Annotated[
        Optional[UploadFile],
        File(description="Audio or video file to transcribe"),
    ] = None,
    api_key: Annotated[
        Optional[str],
        Form(alias="apiKey", description="Hugging Face API token."),
    ] = None,
    x_api_key: Annotated[
        Optional[str],
        Header(alias="X-API-Key", description="Hugging Face API token (alternative to apiKey)."),
    ] = None,
) -> dict:
    key = _require_inputs(audio, api_key or x_api_key)
    result = await _recognize_upload(audio, key)
    return result.to_dict()


@app.post(
    "/subtitles",
    response_model=SubtitleResponse,
    tags=["subtitles"],
    summary="Transcribe an upload and return SRT subtitles",
    description=(
        "Recognizes the uploaded file and segments the result into SRT blocks. "
        "Empty or zero pacing fields fall back to the defaults (8 s / 20 s / 42 chars)."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing file/key or unsupported type"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
        422: {"model": ErrorResponse, "description": "Invalid pacing settings"},
    },
)
async def subtitles(
    audio: Annotated[
        Optional[UploadFile],
        File(description="Audio or video file to transcribe"),
    ] = None,
    api_key: Annotated[
        Optional[str],
        Form(alias="apiKey", description="Hugging Face API token."),
    ] = None,
    x_api_key: Annotated[
        Optional[str],
        Header(alias="X-API-Key", description="Hugging Face API token (alternative to apiKey)."),
    ] = None,
    min_duration: Annotated[
        Optional[str],
        Form(alias="minTime", description="Minimum seconds per subtitle block."),
    ] = None,
    max_duration: Annotated[
        Optional[str],
        Form(alias="maxTime", description="Maximum seconds per subtitle block."),
    ] = None,
    max_chars: Annotated[
        Optional[str],
        Form(alias="maxChars", description="Maximum characters per line."),
    ] = None,
) -> SubtitleResponse:
    try:
        config = resolve_config(min_duration, max_duration, max_chars)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    key = _require_inputs(audio, api_key or x_api_key)
    result = await _recognize_upload(audio, key)

    srt = format_srt(result.to_dict(), config)
    stats = summarize(srt, result)

    return SubtitleResponse(
        filename=_download_name(audio.filename),
        srt=srt,
        text=result.text,
        stats=SubtitleStats(
            blocks=stats.blocks,
            words=stats.words,
            characters=stats.characters,
        ),
        min_block_duration=config.min_block_duration,
        max_block_duration=config.max_block_duration,
        max_line_chars=config.max_line_chars,
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, model=HF_MODEL)


def run_api():
    """Entry point for the whisper-srt-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Starting API with recognizer model %s", HF_MODEL)
    uvicorn.run(app, host="0.0.0.0", port=8000)
