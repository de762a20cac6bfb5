"""Gladia Client: async Python client for the Gladia speech-to-text API.

WHY: Gladia transcribes pre-recorded audio through an asynchronous job API
and live audio through a WebSocket. This package hides both protocols
behind a small typed client so scripts and the bundled CLI only deal with
options in and results out.

HOW: Two layers: the API client (submit, poll, upload, live sessions) in
gladia_client.api, and presentation (CLI, plain-text report) at the top
level.

RULES:
- GladiaClient is the only entry point to the service
- Every failure is a GladiaError carrying message, status_code and code
"""

from gladia_client.api import (
    GladiaClient,
    GladiaError,
    LiveSession,
    LiveTranscriptionOptions,
    TranscriptionOptions,
    TranscriptionResult,
)

__version__ = "0.1.0"

__all__ = [
    "GladiaClient",
    "GladiaError",
    "LiveSession",
    "LiveTranscriptionOptions",
    "TranscriptionOptions",
    "TranscriptionResult",
    "__version__",
]
