import pytest
from pydantic import ValidationError

from mcp_kodi.server.config import Settings


def test_settings_defaults(monkeypatch):
    for name in ("KODI_HOST", "KODI_IP", "KODI_PORT", "ACTIVATE_TV"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.kodi_url == "http://localhost:8080"
    assert settings.activate_tv is False
    assert settings.fuzzy_threshold == 0.4
    assert settings.pvr_channel_type == "tv"


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("KODI_HOST", "192.168.1.20")
    monkeypatch.setenv("KODI_PORT", "8081")
    monkeypatch.setenv("KODI_SCHEME", "https")
    monkeypatch.setenv("ACTIVATE_TV", "true")
    settings = Settings()
    assert settings.kodi_url == "https://192.168.1.20:8081"
    assert settings.activate_tv is True


def test_settings_accepts_kodi_ip_alias(monkeypatch):
    monkeypatch.delenv("KODI_HOST", raising=False)
    monkeypatch.setenv("KODI_IP", " 10.0.0.7 ")
    assert Settings().kodi_host == "10.0.0.7"


def test_settings_invalid_port(monkeypatch):
    monkeypatch.setenv("KODI_PORT", "notint")
    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("FUZZY_THRESHOLD", "1.5"),
        ("PVR_CHANNEL_TYPE", "satellite"),
        ("KODI_TIMEOUT", "0"),
        ("KODI_HOST", "   "),
    ],
)
def test_settings_rejects_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()
