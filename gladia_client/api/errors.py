"""The single structured error type raised by the Gladia client.

WHY: Callers need one exception to catch for every failure the client can
surface (transport, HTTP status, job failure, polling timeout, upload).
Distinguishing the cases by status code and error code keeps the except
clauses simple: ``except GladiaError as e: if e.code == TIMEOUT: ...``.

HOW: GladiaError carries the message, an optional HTTP status and an
optional string code. The module-level constants are the codes the client
assigns itself; any other code comes verbatim from the Gladia API.

RULES:
- status_code is None when no HTTP response was involved
- code is None when neither the API nor the client classified the error
- str(error) is the plain message
"""

from __future__ import annotations

NETWORK_ERROR = "NETWORK_ERROR"
TIMEOUT = "TIMEOUT"
PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
UPLOAD_ERROR = "UPLOAD_ERROR"
INVALID_RESPONSE = "INVALID_RESPONSE"


class GladiaError(Exception):
    """Raised for every failure reported by the Gladia client.

    Attributes:
        message: Human-readable description.
        status_code: HTTP status of the failing response, if any.
        code: Gladia error code or one of this module's constants.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    def __repr__(self) -> str:
        return "GladiaError(message={!r}, status_code={!r}, code={!r})".format(
            self.message, self.status_code, self.code
        )
