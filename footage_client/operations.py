"""Named calls against the primary backend.

Every function takes the process-wide ``BackendClient`` as its first
argument and either returns the parsed body or raises ``ApiError``.
"""

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any

import httpx

from footage_client.errors import (
    TRANSCRIPTION_FAILED_MESSAGE,
    TRANSCRIPTION_TIMEOUT_MESSAGE,
    UNEXPECTED_RESPONSE_MESSAGE,
    UPLOAD_NETWORK_MESSAGE,
    UPLOAD_TOO_LARGE_MESSAGE,
    ApiError,
    ErrorKind,
    passthrough_error,
)
from footage_client.http import BackendClient, parse_json
from footage_client.schemas import (
    DEFAULT_TRANSITION_DURATION,
    RenderOptions,
    RenderRequest,
    SearchRequest,
    StoryRequest,
    TranscribeRequest,
    UploadForm,
    UploadProgress,
)

logger = logging.getLogger("footage_client.operations")

ProgressCallback = Callable[[UploadProgress], None]


async def upload_video(
    client: BackendClient,
    form: UploadForm,
    on_progress: ProgressCallback | None = None,
) -> httpx.Response:
    """Upload a video as multipart form data.

    Uses the long upload timeout and its own failure mapping instead of the
    shared classification. Returns the full response on success.
    """
    logger.info("upload_started", extra={"url": "/upload"})
    request = _build_upload_request(client, form, on_progress)
    try:
        response = await client.http.send(request)
    except httpx.TimeoutException as exc:
        logger.error("upload_failed %s", exc, extra={"error_kind": ErrorKind.TIMEOUT.value})
        raise ApiError(ErrorKind.TIMEOUT, str(exc) or "Upload timed out") from exc
    except httpx.TransportError as exc:
        logger.error("upload_failed %s", exc, extra={"error_kind": ErrorKind.NETWORK.value})
        raise ApiError(ErrorKind.NETWORK, UPLOAD_NETWORK_MESSAGE) from exc
    except httpx.RequestError as exc:
        logger.error("upload_failed %s", exc, extra={"error_kind": ErrorKind.UNKNOWN.value})
        raise ApiError(ErrorKind.UNKNOWN, UNEXPECTED_RESPONSE_MESSAGE) from exc

    if response.status_code == 413:
        logger.error("upload_failed", extra={"status_code": 413})
        raise ApiError(ErrorKind.PAYLOAD_TOO_LARGE, UPLOAD_TOO_LARGE_MESSAGE, status_code=413)
    if not response.is_success:
        logger.error("upload_failed", extra={"status_code": response.status_code})
        raise passthrough_error(response)

    logger.info("upload_succeeded", extra={"status_code": response.status_code})
    return response


def _build_upload_request(
    client: BackendClient,
    form: UploadForm,
    on_progress: ProgressCallback | None,
) -> httpx.Request:
    # Encoded outside the client so the multipart Content-Type is not
    # shadowed by the client's default JSON header.
    encoded = httpx.Request(
        "POST",
        client.http.base_url.join("upload"),
        data=form.fields or None,
        files=form.files(),
    )
    body = encoded.read()
    return client.http.build_request(
        "POST",
        "/upload",
        content=_ProgressBody(body, client.settings.upload_chunk_size, on_progress),
        headers={
            "Content-Type": encoded.headers["Content-Type"],
            "Content-Length": str(len(body)),
        },
        timeout=client.settings.upload_timeout_s,
    )


class _ProgressBody:
    """Chunked upload body that reports progress as it is consumed.

    Re-iterable, so a 307/308 redirect can replay it.
    """

    def __init__(self, body: bytes, chunk_size: int, on_progress: ProgressCallback | None) -> None:
        self.body = body
        self.chunk_size = chunk_size
        self.on_progress = on_progress

    async def __aiter__(self) -> AsyncIterator[bytes]:
        total = len(self.body)
        for start in range(0, total, self.chunk_size):
            chunk = self.body[start : start + self.chunk_size]
            yield chunk
            progress = UploadProgress(loaded=start + len(chunk), total=total)
            logger.debug("upload_progress", extra={"percent": progress.percent})
            if self.on_progress is not None:
                self.on_progress(progress)


async def transcribe_video(client: BackendClient, video_id: str) -> Any:
    payload = TranscribeRequest(video_id=video_id)
    logger.info("transcription_started", extra={"video_id": video_id})
    try:
        response = await client.post("/transcribe-direct-video", json=payload.to_wire())
        data = parse_json(response)
    except ApiError as exc:
        logger.error(
            "transcription_failed %s",
            exc.message,
            extra={"video_id": video_id, "error_kind": exc.kind.value},
        )
        if exc.kind is ErrorKind.TIMEOUT:
            raise ApiError(
                ErrorKind.TIMEOUT, TRANSCRIPTION_TIMEOUT_MESSAGE, status_code=exc.status_code
            ) from exc
        if exc.backend_error:
            raise ApiError(
                exc.kind, exc.backend_error, status_code=exc.status_code, payload=exc.payload
            ) from exc
        raise ApiError(exc.kind, TRANSCRIPTION_FAILED_MESSAGE, status_code=exc.status_code) from exc

    logger.info("transcription_succeeded", extra={"video_id": video_id})
    return data


async def generate_story(
    client: BackendClient, video_id: str, prompt: str, mode: str = "normal"
) -> Any:
    payload = StoryRequest(video_id=video_id, prompt=prompt, mode=mode)
    return await _post_json(client, "/generate-story", payload.to_wire(), "story", video_id)


async def render_video(
    client: BackendClient,
    video_id: str,
    scenes: Sequence[Any],
    options: RenderOptions | None = None,
) -> Any:
    options = options or RenderOptions()
    transition_duration = options.transition_duration
    if transition_duration is None:
        transition_duration = DEFAULT_TRANSITION_DURATION
    payload = RenderRequest(
        video_id=video_id,
        scenes=list(scenes),
        transition_duration=transition_duration,
    )
    return await _post_json(client, "/render-story", payload.to_wire(), "render", video_id)


async def search_video(client: BackendClient, video_id: str, query: str) -> Any:
    payload = SearchRequest(video_id=video_id, query=query)
    return await _post_json(client, "/search", payload.to_wire(), "search", video_id)


async def probe_cors(client: BackendClient) -> Any:
    return await _get_json(client, "/cors-test", "cors_test")


async def health_check(client: BackendClient) -> Any:
    return await _get_json(client, "/health", "health_check")


async def _post_json(
    client: BackendClient, path: str, payload: dict, event: str, video_id: str
) -> Any:
    logger.info("%s_started", event, extra={"video_id": video_id})
    try:
        data = parse_json(await client.post(path, json=payload))
    except ApiError as exc:
        logger.error(
            "%s_failed %s",
            event,
            exc.message,
            extra={"video_id": video_id, "error_kind": exc.kind.value},
        )
        raise
    logger.info("%s_succeeded", event, extra={"video_id": video_id})
    return data


async def _get_json(client: BackendClient, path: str, event: str) -> Any:
    try:
        data = parse_json(await client.get(path))
    except ApiError as exc:
        logger.error("%s_failed %s", event, exc.message, extra={"error_kind": exc.kind.value})
        raise
    logger.info("%s_passed", event)
    return data
