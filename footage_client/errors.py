from enum import Enum
from typing import Any

import httpx

NETWORK_MESSAGE = (
    "Cannot connect to server. Please check if the backend is running and CORS is configured."
)
CORS_MESSAGE = "CORS error. Backend is not accepting requests from this domain."
TIMEOUT_MESSAGE = "Request timed out. Please try with a smaller file or check your connection."
SERVER_MESSAGE = "Server error. The backend service may be experiencing issues."
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server. Please try again."

UPLOAD_NETWORK_MESSAGE = "Network error. Cannot connect to server."
UPLOAD_TOO_LARGE_MESSAGE = "File too large. Please use a smaller video file."

TRANSCRIPTION_TIMEOUT_MESSAGE = "Transcription timed out. Please try with a shorter video."
TRANSCRIPTION_FAILED_MESSAGE = "Transcription failed. Please try again."


class ErrorKind(str, Enum):
    NETWORK = "network"
    CORS = "cors"
    TIMEOUT = "timeout"
    SERVER = "server"
    PAYLOAD_TOO_LARGE = "payload-too-large"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ApiError(Exception):
    """Normalized failure of a backend call.

    Only ``message`` is meant for users. ``payload`` holds the parsed
    backend body and is populated for unclassified failures only, so
    operation-specific handlers can inspect it.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def backend_error(self) -> str | None:
        if isinstance(self.payload, dict) and self.payload.get("error"):
            return str(self.payload["error"])
        return None

    def to_envelope(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


def classify_request_error(exc: httpx.RequestError) -> ApiError:
    """Map a failure that produced no usable response."""
    if isinstance(exc, httpx.TimeoutException):
        return ApiError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)
    if isinstance(exc, httpx.TransportError):
        return ApiError(ErrorKind.NETWORK, NETWORK_MESSAGE)
    # Undecodable bodies, redirect loops.
    return ApiError(ErrorKind.UNKNOWN, UNEXPECTED_RESPONSE_MESSAGE)


def classify_response(response: httpx.Response) -> ApiError | None:
    status_code = response.status_code
    if status_code == 0:
        return ApiError(ErrorKind.CORS, CORS_MESSAGE, status_code=0)
    if status_code == 408:
        return ApiError(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE, status_code=408)
    if status_code >= 500:
        return ApiError(ErrorKind.SERVER, SERVER_MESSAGE, status_code=status_code)
    if 200 <= status_code < 300:
        return None
    return passthrough_error(response)


def passthrough_error(response: httpx.Response) -> ApiError:
    return ApiError(
        ErrorKind.TRANSPORT,
        f"Request failed with status code {response.status_code}",
        status_code=response.status_code,
        payload=_safe_payload(response),
    )


def _safe_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None
