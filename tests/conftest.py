import os

import httpx
import pytest

# Keep tests deterministic and independent of any local .env.
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["PROXY_BACKEND_URL"] = "http://proxy-backend.test"
os.environ["LOG_JSON"] = "false"

from footage_client.config import ClientSettings  # noqa: E402
from footage_client.http import build_backend_client  # noqa: E402


@pytest.fixture
def make_client():
    def _make(handler, **overrides):
        settings = ClientSettings(backend_url="http://backend.test", **overrides)
        return build_backend_client(settings, transport=httpx.MockTransport(handler))

    return _make
