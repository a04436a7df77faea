import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BACKEND_URL = "https://backend-footage-flow.onrender.com"


@dataclass(frozen=True)
class ClientSettings:
    backend_url: str = DEFAULT_BACKEND_URL
    timeout_ms: int = 30000
    upload_timeout_ms: int = 120000
    with_credentials: bool = False
    upload_chunk_size: int = 64 * 1024

    @classmethod
    def from_env(cls) -> "ClientSettings":
        return cls(
            backend_url=(os.getenv("BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/"),
            timeout_ms=int(os.getenv("BACKEND_TIMEOUT_MS", "30000")),
            upload_timeout_ms=int(os.getenv("BACKEND_UPLOAD_TIMEOUT_MS", "120000")),
            with_credentials=os.getenv("BACKEND_WITH_CREDENTIALS", "false").lower() == "true",
        )

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def upload_timeout_s(self) -> float:
        return self.upload_timeout_ms / 1000.0
