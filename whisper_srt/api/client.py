"""Async HTTP client for the Hugging Face Inference speech-recognition API.

WHY: The converter sends audio to a hosted Whisper model and gets back
either {text} or {text, chunks}. This module hides the HTTP details (auth,
content types, the "model is loading" dance, error mapping) behind a single
client class so the CLI, the server and the segment reconciler don't need
to know them.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. HuggingFaceClient is an
async context manager — enter it to get an authenticated client, exit to
close the connection pool. A recognition call POSTs the raw audio bytes to
{base_url}/{model}. While the model is cold the API answers 503; the client
waits a fixed interval and retries the same request.

RULES:
- Always use the async context manager (async with HuggingFaceClient(...) as client:)
- Default model is openai/whisper-large-v3
- 503 → fixed wait (20s default) then retry, up to max_retries
- 401 → InvalidAPIKeyError; other non-2xx → RecognitionAPIError with the
  response's "error" field (or "API error: {status}")
- A retry re-sends the same bytes and returns a single result; callers never
  see a partial or duplicated response
- Status callback (on_status) is optional; when provided, called with status strings
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path

import httpx

from whisper_srt.api.models import RecognitionResult
from whisper_srt.config import (
    DEFAULT_CONTENT_TYPE,
    HF_INFERENCE_URL,
    HF_MODEL,
    MODEL_LOADING_MAX_RETRIES,
    MODEL_LOADING_WAIT_S,
    load_api_key,
)

logger = logging.getLogger(__name__)


class RecognitionAPIError(Exception):
    """Raised when the recognition API returns an error response.

    RULES:
    - Always include status_code and message
    - payload is the decoded JSON error body ({} if it was not JSON)
    """

    def __init__(self, status_code: int, message: str, payload: dict | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.payload = payload if payload is not None else {}
        super().__init__(f"Recognition API error {status_code}: {message}")


class InvalidAPIKeyError(RecognitionAPIError):
    """Raised on HTTP 401: the Hugging Face token was rejected."""


class ModelLoadingError(RecognitionAPIError):
    """Raised when the model is still loading after all retries."""


class HuggingFaceClient:
    """Async client for the Hugging Face Inference speech-recognition API.

    RULES:
    - Use as: async with HuggingFaceClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url, model, retry wait and retry count default to config values
    - transport is for tests (httpx.MockTransport); leave None in production
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        retry_wait_s: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or HF_INFERENCE_URL).rstrip("/")
        self._model = (model or HF_MODEL).strip("/")
        self._retry_wait_s = MODEL_LOADING_WAIT_S if retry_wait_s is None else retry_wait_s
        self._max_retries = MODEL_LOADING_MAX_RETRIES if max_retries is None else max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._model

    async def __aenter__(self) -> HuggingFaceClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "HuggingFaceClient must be used as an async context manager: "
                "async with HuggingFaceClient() as client: ..."
            )
        return self._client

    async def transcribe(
        self,
        audio: bytes,
        content_type: str | None = None,
        on_status: Callable[[str], None] | None = None,
    ) -> RecognitionResult:
        """Send audio bytes to the recognizer and return the parsed result.

        HOW: POSTs the raw bytes with the given Content-Type. On 503 the
        model is still loading: wait retry_wait_s and send the same request
        again, up to max_retries times.

        Args:
            audio: Raw audio/video file content.
            content_type: Media type of the audio (default: audio/mpeg).
            on_status: Optional callback for status updates.

        Returns:
            RecognitionResult with text and optional timestamped chunks.

        Raises:
            InvalidAPIKeyError: On HTTP 401.
            ModelLoadingError: If the model is still loading after all retries.
            RecognitionAPIError: On any other non-2xx response or a non-JSON body.
        """
        client = self._ensure_client()
        headers = {"Content-Type": content_type or DEFAULT_CONTENT_TYPE}
        retries = 0

        while True:
            resp = await client.post(f"/{self._model}", content=audio, headers=headers)

            if resp.status_code == 503:
                payload = _json_or_empty(resp)
                if retries >= self._max_retries:
                    raise ModelLoadingError(
                        503,
                        "Model {} still loading after {} retries".format(self._model, retries),
                        payload,
                    )
                retries += 1
                logger.info(
                    "Model %s is loading; retry %d/%d in %.0fs",
                    self._model, retries, self._max_retries, self._retry_wait_s,
                )
                if on_status:
                    on_status("Model loading... waiting {:.0f}s...".format(self._retry_wait_s))
                await asyncio.sleep(self._retry_wait_s)
                continue

            if resp.status_code == 401:
                raise InvalidAPIKeyError(
                    401,
                    "Invalid API key. Check your Hugging Face token.",
                    _json_or_empty(resp),
                )

            if not resp.is_success:
                payload = _json_or_empty(resp)
                message = payload.get("error") if isinstance(payload.get("error"), str) else None
                raise RecognitionAPIError(
                    resp.status_code,
                    message or "API error: {}".format(resp.status_code),
                    payload,
                )

            try:
                data = resp.json()
            except ValueError:
                raise RecognitionAPIError(
                    resp.status_code, "Recognizer returned a non-JSON response"
                )
            return RecognitionResult.from_dict(data)

    async def transcribe_file(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> RecognitionResult:
        """Read an audio/video file and transcribe it in one request.

        RULES:
        - Content-Type is guessed from the file extension, else audio/mpeg
        - The caller is responsible for the single-request size limit
        """
        file_path = Path(file_path)
        if on_status:
            on_status("Sending {} to the recognizer...".format(file_path.name))

        audio = file_path.read_bytes()
        return await self.transcribe(
            audio,
            content_type=guess_content_type(file_path.name),
            on_status=on_status,
        )


def guess_content_type(filename: str) -> str:
    """Media type for an audio filename, defaulting to audio/mpeg."""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or DEFAULT_CONTENT_TYPE


def _json_or_empty(resp: httpx.Response) -> dict:
    """Decode a JSON object body, or return {} for anything else."""
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
