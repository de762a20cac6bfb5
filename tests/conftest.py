"""Shared test fixtures for the gladia_client test suite.

WHY: Most tests exercise GladiaClient against a fake Gladia API. Building
the fake once here keeps every test focused on the behavior it checks
rather than on HTTP plumbing.

HOW: FakeGladia is an httpx.MockTransport handler with per-route response
queues. Each (method, path) route pops its next response; the last one
repeats. Responses may be httpx.Response objects, exceptions to raise, or
callables taking the request. Every request is recorded for assertions.

RULES:
- No test talks to the real Gladia API (see test_e2e.py for the opt-in one)
- Clients built by FakeGladia poll with a 0s interval
- Unrouted requests get a 404 with a JSON body
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import httpx
import pytest

from gladia_client.api.client import GladiaClient

BASE_URL = "https://api.gladia.test"
API_KEY = "test-key"

DONE_RESPONSE: Dict[str, Any] = {
    "id": "abc",
    "request_id": "G-abc",
    "version": 2,
    "status": "done",
    "kind": "pre-recorded",
    "created_at": "2025-01-01T10:00:00.000Z",
    "completed_at": "2025-01-01T10:00:05.000Z",
    "file": {
        "id": "f-1",
        "filename": "interview.mp3",
        "source": "https://example.com/interview.mp3",
        "audio_duration": 12.5,
        "number_of_channels": 1,
    },
    "result": {
        "metadata": {
            "audio_duration": 12.5,
            "number_of_distinct_channels": 1,
            "billing_time": 12.5,
            "transcription_time": 3.25,
        },
        "transcription": {
            "languages": ["en"],
            "full_transcript": "How are you doing today? I am fantastic, thank you.",
            "utterances": [
                {
                    "start": 0.12,
                    "end": 0.94,
                    "text": "How are you doing today?",
                    "confidence": 0.9,
                    "speaker": 0,
                    "channel": 0,
                    "words": [
                        {"word": "How", "start": 0.12, "end": 0.25, "confidence": 0.97},
                    ],
                },
                {
                    "start": 1.2,
                    "end": 2.12,
                    "text": "I am fantastic, thank you.",
                    "confidence": 0.8,
                    "speaker": 1,
                    "channel": 0,
                    "words": [],
                },
            ],
        },
    },
}


class FakeGladia:
    """Scriptable stand-in for the Gladia REST API."""

    base_url = BASE_URL
    api_key = API_KEY

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Any]] = {}

    def add(self, method: str, path: str, *responses: Any) -> None:
        self._routes.setdefault((method, path), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "no route for test"})
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        return item

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def client(self, **kwargs: Any) -> GladiaClient:
        kwargs.setdefault("polling_interval", 0.0)
        return GladiaClient(
            api_key=API_KEY,
            base_url=BASE_URL,
            transport=httpx.MockTransport(self.handler),
            **kwargs,
        )


@pytest.fixture
def fake():
    return FakeGladia()


@pytest.fixture
def done_response():
    return json.loads(json.dumps(DONE_RESPONSE))
