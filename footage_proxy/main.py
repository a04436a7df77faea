import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from footage_proxy.config import ProxySettings, get_settings, settings
from footage_proxy.forward import forward_request
from footage_proxy.observability import RequestLoggingMiddleware
from footage_shared.logging_setup import configure_logging

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

configure_logging(settings.log_level, settings.log_json)

app = FastAPI(title="Footage Flow Proxy", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)


def get_transport() -> httpx.AsyncBaseTransport | None:
    return None


@app.api_route("/api/{proxy:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(
    proxy: str,
    request: Request,
    proxy_settings: ProxySettings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> JSONResponse:
    raw_body = b"" if request.method in {"GET", "HEAD"} else await request.body()
    status_code, body = await forward_request(
        proxy_settings,
        request.method,
        proxy,
        raw_body,
        transport=transport,
    )
    return JSONResponse(status_code=status_code, content=body)
