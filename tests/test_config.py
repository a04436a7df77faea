from footage_client.config import DEFAULT_BACKEND_URL, ClientSettings
from footage_proxy.config import ProxySettings


def test_client_settings_read_env_and_strip_trailing_slash(monkeypatch) -> None:
    monkeypatch.setenv("BACKEND_URL", "https://api.example.com/")
    monkeypatch.setenv("BACKEND_TIMEOUT_MS", "5000")

    settings = ClientSettings.from_env()

    assert settings.backend_url == "https://api.example.com"
    assert settings.timeout_s == 5.0
    assert settings.upload_timeout_s == 120.0
    assert settings.with_credentials is False


def test_client_settings_fall_back_to_default_origin(monkeypatch) -> None:
    monkeypatch.delenv("BACKEND_URL", raising=False)

    assert ClientSettings.from_env().backend_url == DEFAULT_BACKEND_URL


def test_proxy_origin_is_independent_of_client_origin() -> None:
    assert ProxySettings().backend_url == "http://proxy-backend.test"
    assert ClientSettings.from_env().backend_url == "http://backend.test"
