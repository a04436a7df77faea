import logging
from dataclasses import dataclass
from typing import Any

import httpx

from footage_client.config import ClientSettings
from footage_client.errors import ApiError, ErrorKind, classify_request_error, classify_response

logger = logging.getLogger("footage_client.http")

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


@dataclass
class BackendClient:
    """Process-wide handle on the primary backend.

    Holds immutable settings and a single ``httpx.AsyncClient``. Every call
    made through ``request`` goes through the ordered failure classification
    in ``footage_client.errors``.
    """

    settings: ClientSettings
    http: httpx.AsyncClient

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *_exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            response = await self.http.request(method, path, json=json)
        except httpx.RequestError as exc:
            error = classify_request_error(exc)
            _log_api_error(error, method, path, detail=str(exc))
            raise error from exc

        error = classify_response(response)
        if error is not None:
            _log_api_error(error, method, path)
            raise error
        return response

    async def get(self, path: str) -> httpx.Response:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> httpx.Response:
        return await self.request("POST", path, json=json)


def build_backend_client(
    settings: ClientSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BackendClient:
    settings = settings or ClientSettings.from_env()
    http = httpx.AsyncClient(
        base_url=settings.backend_url,
        timeout=httpx.Timeout(settings.timeout_s),
        headers=DEFAULT_HEADERS,
        follow_redirects=True,
        transport=transport,
        event_hooks={
            "request": [_request_hook(settings.with_credentials)],
            "response": [_log_response],
        },
    )
    logger.info("backend_client_configured", extra={"url": settings.backend_url})
    return BackendClient(settings=settings, http=http)


def parse_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(
            ErrorKind.UNKNOWN,
            "Invalid JSON in backend response",
            status_code=response.status_code,
        ) from exc


def _request_hook(with_credentials: bool):
    async def _on_request(request: httpx.Request) -> None:
        if not with_credentials:
            request.headers.pop("Cookie", None)
        logger.info("api_request", extra={"method": request.method, "url": str(request.url)})
        logger.debug("api_request_headers %s", dict(request.headers))

    return _on_request


async def _log_response(response: httpx.Response) -> None:
    logger.info(
        "api_response",
        extra={"status_code": response.status_code, "url": str(response.request.url)},
    )


def _log_api_error(error: ApiError, method: str, path: str, detail: str | None = None) -> None:
    logger.error(
        "api_error %s",
        detail or error.message,
        extra={
            "status_code": error.status_code,
            "error_kind": error.kind.value,
            "method": method,
            "url": path,
        },
    )
