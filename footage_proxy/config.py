import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PROXY_BACKEND_URL = "http://footage-flow-env.eba-92jebm7b.ap-south-1.elasticbeanstalk.com"


@dataclass(frozen=True)
class ProxySettings:
    backend_url: str = os.getenv("PROXY_BACKEND_URL", DEFAULT_PROXY_BACKEND_URL).rstrip("/")
    timeout_seconds: float = float(os.getenv("PROXY_TIMEOUT_SECONDS", "30"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() == "true"


settings = ProxySettings()


def get_settings() -> ProxySettings:
    return settings
