"""Live (real-time) transcription session over the Gladia /v2/live WebSocket.

WHY: Real-time transcription streams audio to Gladia and receives partial
and final transcripts as they are produced. Callers need a connection that
also knows the two Gladia-specific outbound actions: send an audio chunk
and ask the server to stop recording.

HOW: build_live_url() encodes the API key and every live option into the
query string. open_live_session() connects with the websockets library and
wraps the connection in a LiveSession, which owns it and exposes
send_audio(), stop_recording(), inbound iteration and close().

RULES:
- send_audio() and stop_recording() are silent no-ops unless the
  connection is OPEN (no error, no queueing)
- Inbound frames are passed through unmodified; parsing is the caller's
  job (see LiveTranscriptionMessage.from_json)
- No reconnection or buffering
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import InvalidStatus, WebSocketException
from websockets.protocol import State

from gladia_client.api.errors import NETWORK_ERROR, GladiaError
from gladia_client.api.models import LiveTranscriptionOptions

logger = logging.getLogger(__name__)

LIVE_PATH = "/v2/live"
STOP_RECORDING_MESSAGE = json.dumps({"action": "stop_recording"})

_SCHEME_MAP = {"https": "wss", "http": "ws"}

Frame = Union[str, bytes]
FrameHandler = Callable[[Frame], Union[None, Awaitable[None]]]


def build_live_url(
    base_url: str,
    api_key: str,
    options: Optional[LiveTranscriptionOptions] = None,
) -> str:
    """Build the WebSocket URL for a live session.

    RULES:
    - http/https base URLs map to ws/wss
    - x-gladia-key is always the first query parameter
    - Option encoding follows LiveTranscriptionOptions.to_query_params()
    """
    parts = urlsplit(base_url.rstrip("/") + LIVE_PATH)
    scheme = _SCHEME_MAP.get(parts.scheme, parts.scheme)

    params = [("x-gladia-key", api_key)]
    if options is not None:
        params.extend(options.to_query_params())

    return urlunsplit((scheme, parts.netloc, parts.path, urlencode(params), ""))


class LiveSession:
    """An open live transcription connection plus the options it was made with.

    Use as an async context manager or call close() explicitly::

        async with await client.create_live_session(options) as session:
            await session.send_audio(chunk)
            await session.stop_recording()
            async for frame in session:
                ...
    """

    def __init__(
        self,
        connection: ClientConnection,
        options: Optional[LiveTranscriptionOptions] = None,
    ) -> None:
        self._connection = connection
        self.options = options

    @property
    def connection(self) -> ClientConnection:
        return self._connection

    @property
    def is_open(self) -> bool:
        return self._connection.state is State.OPEN

    async def send_audio(self, chunk: Any) -> None:
        """Send one audio chunk as a binary frame.

        ``chunk`` is bytes-like, or a file-like object whose ``read()`` (sync
        or async) returns the whole payload. Skipped when not open.
        """
        if not self.is_open:
            logger.debug("Live session not open, dropping audio chunk")
            return

        data = chunk
        if hasattr(chunk, "read"):
            data = chunk.read()
            if inspect.isawaitable(data):
                data = await data
            # The peer may have closed the socket while we were reading.
            if not self.is_open:
                logger.debug("Live session closed while reading chunk, dropping it")
                return

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                "audio chunk must be bytes-like, got {}".format(type(data).__name__)
            )
        await self._connection.send(data)

    async def stop_recording(self) -> None:
        """Ask the server to stop recording; a no-op when not open."""
        if not self.is_open:
            return
        await self._connection.send(STOP_RECORDING_MESSAGE)

    async def recv(self) -> Frame:
        return await self._connection.recv()

    async def __aiter__(self) -> AsyncIterator[Frame]:
        async for frame in self._connection:
            yield frame

    async def listen(self, handler: FrameHandler) -> None:
        """Call ``handler`` for every inbound frame until the peer closes.

        The handler may be a plain function or a coroutine function.
        """
        async for frame in self._connection:
            outcome = handler(frame)
            if inspect.isawaitable(outcome):
                await outcome

    async def close(self, code: int = 1000, reason: str = "") -> None:
        await self._connection.close(code, reason)

    async def __aenter__(self) -> LiveSession:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()


async def open_live_session(
    base_url: str,
    api_key: str,
    options: Optional[LiveTranscriptionOptions] = None,
    open_timeout: Optional[float] = 10.0,
) -> LiveSession:
    """Connect to /v2/live and return the wrapped session.

    RULES:
    - A handshake rejected with an HTTP status raises GladiaError with
      that status
    - Any other connection failure raises GladiaError(code=NETWORK_ERROR)
    """
    url = build_live_url(base_url, api_key, options)
    try:
        connection = await connect(url, open_timeout=open_timeout)
    except InvalidStatus as exc:
        status = exc.response.status_code
        raise GladiaError(
            "Live session rejected: {} {}".format(status, exc.response.reason_phrase),
            status_code=status,
        ) from exc
    except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
        raise GladiaError(
            str(exc) or "Network error occurred", code=NETWORK_ERROR
        ) from exc

    logger.info("Live session opened")
    return LiveSession(connection, options)
