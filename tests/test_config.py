import pytest
from pydantic import ValidationError

from authbridge.core.config import Settings


def test_settings_use_env_aliases(monkeypatch):
    monkeypatch.setenv("WECHAT_CLIENT_ID", "wx-app-id")
    monkeypatch.setenv("WECHAT_CLIENT_SECRET", "wx-app-secret")
    monkeypatch.setenv("WECHAT_REDIRECT_URI", "https://example.com/cb")
    monkeypatch.setenv("WECHAT_LANG", "en")

    settings = Settings()
    assert settings.wechat_client_id == "wx-app-id"
    assert settings.wechat_client_secret == "wx-app-secret"
    assert settings.wechat_redirect_uri == "https://example.com/cb"
    assert settings.wechat_lang == "en"


def test_http_settings_have_defaults(monkeypatch):
    monkeypatch.delenv("OAUTH_HTTP_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("OAUTH_USER_AGENT", raising=False)

    settings = Settings()
    assert settings.http_timeout_seconds == 10.0
    assert settings.user_agent.startswith("authbridge/")


def test_http_timeout_from_env(monkeypatch):
    monkeypatch.setenv("OAUTH_HTTP_TIMEOUT_SECONDS", "2.5")

    settings = Settings()
    assert settings.http_timeout_seconds == 2.5


def test_wechat_lang_is_validated(monkeypatch):
    monkeypatch.setenv("WECHAT_LANG", "fr")

    with pytest.raises(ValidationError):
        Settings()
