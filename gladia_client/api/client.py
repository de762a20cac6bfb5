"""Async HTTP client for the Gladia v2 speech-to-text API.

WHY: Transcribing with Gladia is a multi-step protocol: optionally upload a
local file, submit a job, then poll the job until it is done or failed.
This module wraps that protocol behind a single client class so callers
(CLI, scripts, tests) never deal with HTTP details or polling loops.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GladiaClient is an async
context manager: enter it to open an authenticated connection pool, exit to
close it. Every request goes through _request(), which classifies failures
into GladiaError. transcribe() submits and delegates to wait_for_result(),
a fixed-interval polling loop. The feature helpers (translate, summarize,
...) force one option and call transcribe().

RULES:
- Always use the async context manager (async with GladiaClient(...) as client:)
- api_key defaults to GLADIA_API_KEY; construction fails without one
- Client defaults (language, diarization) are merged under every call's
  options; call-level values win
- Polling is fixed-interval: 2s x 60 attempts by default (~2 minutes)
- A 404 while polling is transient (the job may not have propagated yet)
- Every failure surfaces as GladiaError
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

import httpx

from gladia_client.api.errors import (
    INVALID_RESPONSE,
    NETWORK_ERROR,
    PAYLOAD_TOO_LARGE,
    TIMEOUT,
    UNSUPPORTED_MEDIA_TYPE,
    UPLOAD_ERROR,
    GladiaError,
)
from gladia_client.api.live import LiveSession, open_live_session
from gladia_client.api.models import (
    AudioUploadResponse,
    ClientDefaults,
    DiarizationConfig,
    JobStatus,
    LiveTranscriptionOptions,
    TranscriptionOptions,
    TranscriptionResponse,
    TranscriptionResult,
    TranslationConfig,
    merge_options,
)
from gladia_client.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_POLLING_INTERVAL_S,
    DEFAULT_UPLOAD_EXTENSION,
    GLADIA_BASE_URL,
    MAX_UPLOAD_SIZE_MB,
    SUPPORTED_FORMATS_HINT,
    load_api_key,
)

logger = logging.getLogger(__name__)

AUTH_HEADER = "x-gladia-key"
TRANSCRIPTION_PATH = "/v2/transcription"
UPLOAD_PATH = "/v2/upload"

AudioSource = Union[str, Path, bytes, bytearray, BinaryIO]
StatusCallback = Callable[[str], None]


class GladiaClient:
    """Async client for the Gladia pre-recorded and live transcription APIs.

    WHY: Provides a typed interface for the full workflow: upload → submit →
    poll → typed result, plus retrieval, deletion and live sessions.

    HOW: Wraps httpx.AsyncClient with the x-gladia-key header. Use as an
    async context manager to ensure the HTTP connection pool is closed.

    RULES:
    - Use as: async with GladiaClient() as client: ...
    - base_url defaults to GLADIA_BASE_URL from config
    - transport is passed through to httpx (tests use httpx.MockTransport)
    - create_live_session() does not need the context manager
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        language: Optional[str] = None,
        diarization: Optional[bool] = None,
        diarization_config: Optional[DiarizationConfig] = None,
        polling_interval: Optional[float] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[httpx.Timeout] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or GLADIA_BASE_URL).rstrip("/")
        self.defaults = ClientDefaults(
            language=language,
            diarization=diarization,
            diarization_config=diarization_config,
        )
        self._polling_interval = (
            DEFAULT_POLLING_INTERVAL_S if polling_interval is None else polling_interval
        )
        self._max_retries = DEFAULT_MAX_RETRIES if max_retries is None else max_retries
        self._timeout = timeout or httpx.Timeout(300.0, connect=30.0)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> GladiaClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={AUTH_HEADER: self._api_key},
            timeout=self._timeout,
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
                "GladiaClient must be used as an async context manager: "
                "async with GladiaClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        endpoint: str,
        method: str = "GET",
        *,
        json: Any = None,
        files: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform one request/response exchange and return the parsed JSON.

        WHY: Every Gladia call shares the same auth, content type and error
        classification. Centralizing it keeps the workflow methods short.

        HOW: Relative endpoints resolve against base_url; absolute URLs (such
        as a job's result_url) are used as-is by httpx. Non-2xx responses
        and transport failures are converted to GladiaError.

        RULES:
        - Content-Type: application/json on everything but multipart uploads
        - Caller headers override the defaults
        - Error message/code come from the JSON body when there is one,
          else "API Error: <status> <reason>"
        - Transport failures raise GladiaError(code=NETWORK_ERROR), no status
        - An empty success body returns None
        """
        client = self._ensure_client()

        request_headers: Dict[str, str] = {}
        if files is None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)

        try:
            resp = await client.request(
                method,
                endpoint,
                json=json,
                files=files,
                headers=request_headers,
            )
        except httpx.RequestError as exc:
            raise GladiaError(
                str(exc) or "Network error occurred", code=NETWORK_ERROR
            ) from exc

        if not resp.is_success:
            raise _error_from_response(resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise GladiaError(
                "Invalid JSON response from {} {}".format(method, endpoint),
                status_code=resp.status_code,
                code=INVALID_RESPONSE,
            ) from exc

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def wait_for_result(
        self,
        result_url: str,
        polling_interval: Optional[float] = None,
        max_retries: Optional[int] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> TranscriptionResult:
        """Poll a job until it is done, failed, or the retry budget runs out.

        WHY: Gladia transcription is asynchronous. Without a callback the
        client must re-fetch the job until its status becomes terminal.

        HOW: Fixed-interval loop. Each attempt fetches result_url; "done"
        returns, "error" raises, anything else sleeps and retries. A 404 is
        treated like "not ready yet" because a freshly created job can take
        a moment to become readable.

        RULES:
        - At most max_retries fetches, strictly one after the other
        - "error" raises immediately, whatever budget remains
        - A done result without full_transcript only logs a warning
        - Any GladiaError other than 404 aborts the loop
        - Exhausting the budget raises GladiaError(408, TIMEOUT)

        Args:
            result_url: Absolute URL or path of the job resource.
            polling_interval: Seconds between attempts (default 2.0).
            max_retries: Maximum number of attempts (default 60).
            on_status: Optional callback for human-readable status updates.

        Returns:
            TranscriptionResult parsed from the "done" response.
        """
        interval = self._polling_interval if polling_interval is None else polling_interval
        budget = self._max_retries if max_retries is None else max_retries
        retries = 0

        while retries < budget:
            try:
                response = await self._request(result_url)
            except GladiaError as exc:
                if exc.status_code != 404:
                    raise
                logger.info(
                    "Waiting for resource to be available (attempt %d/%d)",
                    retries + 1,
                    budget,
                )
                if on_status:
                    on_status("Waiting for job to become available...")
                await asyncio.sleep(interval)
                retries += 1
                continue

            data = response if isinstance(response, dict) else {}
            status = data.get("status")

            if status == JobStatus.DONE:
                result = TranscriptionResult.from_dict(data)
                if not result.full_transcript:
                    logger.warning(
                        "Job %s is done but the response has no full_transcript",
                        result.id,
                    )
                if on_status:
                    on_status("Transcription complete.")
                return result

            if status == JobStatus.ERROR:
                error = data.get("error") or {}
                message = error.get("message") or "Unknown error"
                if on_status:
                    on_status("Transcription error: {}".format(message))
                raise GladiaError(
                    "Transcription failed: {}".format(message),
                    code=error.get("code"),
                )

            logger.info(
                "Transcription status: %s (attempt %d/%d)", status, retries + 1, budget
            )
            if on_status:
                on_status("Transcription {}... (attempt {}/{})".format(
                    status, retries + 1, budget
                ))
            await asyncio.sleep(interval)
            retries += 1

        raise GladiaError(
            "Transcription timed out after {} attempts".format(budget),
            status_code=408,
            code=TIMEOUT,
        )

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def transcribe(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        polling_interval: Optional[float] = None,
        max_retries: Optional[int] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> TranscriptionResult:
        """Submit a transcription job for an audio/video URL.

        WHY: This is the main entry point. It submits the job and, unless
        callback mode is requested, waits for the final result.

        HOW: Merges client defaults with ``options``, POSTs to
        /v2/transcription, validates the returned id, then either returns
        immediately (callback mode) or polls the job's result_url.

        RULES:
        - Call-level option fields override client defaults (shallow merge)
        - Missing id in the response raises GladiaError
        - Callback mode returns a result with only id and status set
        - result_url falls back to {base_url}/v2/transcription/{id}
        - 413 → PAYLOAD_TOO_LARGE, 415 → UNSUPPORTED_MEDIA_TYPE, with
          friendlier messages; other errors propagate unchanged
        """
        merged = merge_options(self.defaults, options)
        body: Dict[str, Any] = {"audio_url": audio_url}
        body.update(merged.to_dict())

        if on_status:
            on_status("Submitting transcription job...")

        try:
            data = await self._request(TRANSCRIPTION_PATH, "POST", json=body)
        except GladiaError as exc:
            friendly = _friendly_submission_error(exc)
            if friendly is None:
                raise
            raise friendly from exc

        response = TranscriptionResponse.from_dict(data if isinstance(data, dict) else {})
        if not response.id:
            raise GladiaError("Invalid response: missing id")
        logger.info("Created transcription job %s", response.id)

        if merged.callback:
            if on_status:
                on_status("Job {} submitted in callback mode.".format(response.id))
            return TranscriptionResult(
                id=response.id,
                status=response.status or JobStatus.CREATED.value,
            )

        result_url = response.result_url or "{}{}/{}".format(
            self._base_url, TRANSCRIPTION_PATH, response.id
        )
        return await self.wait_for_result(
            result_url,
            polling_interval=polling_interval,
            max_retries=max_retries,
            on_status=on_status,
        )

    async def transcribe_video(
        self,
        video_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        """Same as transcribe(); Gladia extracts the audio track itself."""
        return await self.transcribe(video_url, options, **kwargs)

    async def upload_file(
        self,
        file: AudioSource,
        filename: Optional[str] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> str:
        """Upload a local audio/video file and return its Gladia audio_url.

        WHY: Gladia only transcribes URLs. Local files are first uploaded
        to POST /v2/upload, which returns a URL usable in transcribe().

        HOW: Reads the payload, names it ``audio.<ext>`` so the service can
        detect the format, and sends it as the multipart ``audio`` field.

        RULES:
        - file: path (str/Path), bytes, or a binary file-like object
        - Extension comes from filename, else the path/file name, else mp3
        - Every failure raises GladiaError prefixed "File upload failed:",
          keeping the upstream status and code (default UPLOAD_ERROR)
        """
        name = filename or _source_name(file) or "audio_{}.{}".format(
            int(time.time() * 1000), DEFAULT_UPLOAD_EXTENSION
        )
        extension = _extension_of(name)

        try:
            payload = _read_source(file)
        except (OSError, ValueError, TypeError) as exc:
            raise GladiaError(
                "File upload failed: {}".format(exc), code=UPLOAD_ERROR
            ) from exc

        if on_status:
            on_status("Uploading file ({:,} bytes)...".format(len(payload)))

        files = {"audio": ("audio.{}".format(extension), payload, "audio/{}".format(extension))}
        try:
            data = await self._request(UPLOAD_PATH, "POST", files=files)
        except GladiaError as exc:
            raise GladiaError(
                "File upload failed: {}".format(exc.message),
                status_code=exc.status_code,
                code=exc.code or UPLOAD_ERROR,
            ) from exc

        upload = AudioUploadResponse.from_dict(data if isinstance(data, dict) else {})
        if not upload.audio_url:
            raise GladiaError(
                "Upload successful but no audio URL returned", code=UPLOAD_ERROR
            )
        logger.info("Uploaded %s as %s", name, upload.audio_url)
        return upload.audio_url

    async def transcribe_file(
        self,
        file: AudioSource,
        options: Optional[TranscriptionOptions] = None,
        filename: Optional[str] = None,
        polling_interval: Optional[float] = None,
        max_retries: Optional[int] = None,
        on_status: Optional[StatusCallback] = None,
    ) -> TranscriptionResult:
        """Upload a local file, then transcribe it like transcribe()."""
        audio_url = await self.upload_file(file, filename=filename, on_status=on_status)
        return await self.transcribe(
            audio_url,
            options,
            polling_interval=polling_interval,
            max_retries=max_retries,
            on_status=on_status,
        )

    async def get_transcription(self, transcription_id: str) -> TranscriptionResult:
        """Fetch a job snapshot by id, whatever its status."""
        data = await self._request("{}/{}".format(TRANSCRIPTION_PATH, transcription_id))
        return TranscriptionResult.from_dict(data if isinstance(data, dict) else {})

    async def delete_transcription(self, transcription_id: str) -> None:
        """Delete a job and its result from Gladia."""
        await self._request(
            "{}/{}".format(TRANSCRIPTION_PATH, transcription_id), "DELETE"
        )
        logger.info("Deleted transcription job %s", transcription_id)

    # ------------------------------------------------------------------
    # Audio intelligence shortcuts
    # ------------------------------------------------------------------

    async def translate(
        self,
        audio_url: str,
        target_languages: Union[str, List[str]],
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        """Transcribe and translate into one or more target languages."""
        if isinstance(target_languages, str):
            languages = [target_languages]
        else:
            languages = list(target_languages)
        return await self.transcribe(
            audio_url,
            _with_feature(
                options,
                translation=True,
                translation_config=TranslationConfig(target_languages=languages),
            ),
            **kwargs,
        )

    async def summarize(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        return await self.transcribe(
            audio_url, _with_feature(options, summarization=True), **kwargs
        )

    async def analyze_sentiment(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        return await self.transcribe(
            audio_url, _with_feature(options, sentiment_analysis=True), **kwargs
        )

    async def detect_entities(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        return await self.transcribe(
            audio_url, _with_feature(options, named_entity_recognition=True), **kwargs
        )

    async def moderate_content(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        return await self.transcribe(
            audio_url, _with_feature(options, content_moderation=True), **kwargs
        )

    async def generate_chapters(
        self,
        audio_url: str,
        options: Optional[TranscriptionOptions] = None,
        **kwargs: Any,
    ) -> TranscriptionResult:
        return await self.transcribe(
            audio_url, _with_feature(options, chapterization=True), **kwargs
        )

    # ------------------------------------------------------------------
    # Live
    # ------------------------------------------------------------------

    async def create_live_session(
        self,
        options: Optional[LiveTranscriptionOptions] = None,
        open_timeout: Optional[float] = 10.0,
    ) -> LiveSession:
        """Open a real-time transcription session on /v2/live."""
        return await open_live_session(
            self._base_url, self._api_key, options, open_timeout=open_timeout
        )


# ---------------------------------------------------------------------------
# Helpers (module-private)
# ---------------------------------------------------------------------------


def _error_from_response(resp: httpx.Response) -> GladiaError:
    """Build a GladiaError from a non-2xx response."""
    message = "API Error: {} {}".format(resp.status_code, resp.reason_phrase)
    code = None
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or message
        code = body.get("code") or None
    return GladiaError(message, status_code=resp.status_code, code=code)


def _friendly_submission_error(exc: GladiaError) -> Optional[GladiaError]:
    """Map 413/415 submission failures to clearer errors; None otherwise."""
    if exc.status_code == 413:
        return GladiaError(
            "File too large. Maximum file size is {}MB.".format(MAX_UPLOAD_SIZE_MB),
            413,
            PAYLOAD_TOO_LARGE,
        )
    if exc.status_code == 415:
        return GladiaError(
            "Unsupported file format. Please use a supported audio format "
            "({}).".format(SUPPORTED_FORMATS_HINT),
            415,
            UNSUPPORTED_MEDIA_TYPE,
        )
    return None


def _with_feature(
    options: Optional[TranscriptionOptions], **forced: Any
) -> TranscriptionOptions:
    """Copy ``options`` with the given feature fields forced."""
    return dataclasses.replace(options or TranscriptionOptions(), **forced)


def _source_name(file: AudioSource) -> Optional[str]:
    if isinstance(file, (str, Path)):
        return Path(file).name
    name = getattr(file, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return None


def _extension_of(name: str) -> str:
    suffix = Path(name).suffix.lstrip(".").lower()
    return suffix or DEFAULT_UPLOAD_EXTENSION


def _read_source(file: AudioSource) -> bytes:
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    if isinstance(file, (str, Path)):
        return Path(file).read_bytes()
    read = getattr(file, "read", None)
    if read is None:
        raise TypeError("unsupported audio source: {}".format(type(file).__name__))
    data = read()
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("audio source read() returned {}".format(type(data).__name__))
    return bytes(data)
