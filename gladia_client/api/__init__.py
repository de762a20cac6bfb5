"""Gladia API client package: async HTTP and WebSocket interface to Gladia.

WHY: Callers need to submit transcription jobs, wait for their results and
stream live audio without knowing the Gladia wire protocol. This package
encapsulates all Gladia communication behind GladiaClient and LiveSession.

HOW: GladiaClient uses httpx.AsyncClient for the REST endpoints; LiveSession
wraps a websockets connection to /v2/live. Requests and responses are typed
with the dataclasses in models.py; every failure is a GladiaError.

RULES:
- All HTTP calls go through GladiaClient (no direct httpx usage elsewhere)
- Authentication is the x-gladia-key header (query parameter for live)
"""

from gladia_client.api.client import GladiaClient
from gladia_client.api.errors import GladiaError
from gladia_client.api.live import LiveSession
from gladia_client.api.models import (
    CallbackConfig,
    ClientDefaults,
    DiarizationConfig,
    JobStatus,
    LiveTranscriptionMessage,
    LiveTranscriptionOptions,
    SubtitlesConfig,
    SummarizationConfig,
    TranscriptionOptions,
    TranscriptionResult,
    TranslationConfig,
    merge_options,
)

__all__ = [
    "CallbackConfig",
    "ClientDefaults",
    "DiarizationConfig",
    "GladiaClient",
    "GladiaError",
    "JobStatus",
    "LiveSession",
    "LiveTranscriptionMessage",
    "LiveTranscriptionOptions",
    "SubtitlesConfig",
    "SummarizationConfig",
    "TranscriptionOptions",
    "TranscriptionResult",
    "TranslationConfig",
    "merge_options",
]
