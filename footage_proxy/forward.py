import json
import logging
from typing import Any

import httpx

from footage_proxy.config import ProxySettings

logger = logging.getLogger("footage_proxy.forward")

BODYLESS_METHODS = {"GET", "HEAD"}
FORWARD_HEADERS = {"Content-Type": "application/json"}
FAILURE_MESSAGE = "Backend connection failed"


def build_target_url(origin: str, path: str | list[str] | None) -> str:
    if isinstance(path, (list, tuple)):
        path = "/".join(path)
    return f"{origin}/{path or ''}"


def encode_body(raw: bytes) -> str | None:
    """Re-serialize an inbound body as JSON; empty bodies are dropped."""
    if not raw:
        return None
    text = raw.decode("utf-8")
    try:
        value = json.loads(text)
    except ValueError:
        value = text
    return json.dumps(value)


async def forward_request(
    settings: ProxySettings,
    method: str,
    path: str | list[str] | None,
    raw_body: bytes = b"",
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[int, Any]:
    """Replay a request against the proxy backend.

    Returns the backend's status and parsed JSON body, or the fixed 500
    envelope when anything along the way fails. Never raises.
    """
    try:
        url = build_target_url(settings.backend_url, path)
        method = method.upper()
        content = None if method in BODYLESS_METHODS else encode_body(raw_body)
        logger.info("proxy_forward", extra={"method": method, "url": url})
        async with httpx.AsyncClient(timeout=settings.timeout_seconds, transport=transport) as client:
            response = await client.request(method, url, content=content, headers=FORWARD_HEADERS)
        return response.status_code, response.json()
    except Exception as exc:  # noqa: BLE001
        logger.exception("proxy_failed", extra={"method": method, "path": str(path)})
        return 500, {"error": FAILURE_MESSAGE, "details": str(exc)}
