from upbit_client.client import UpbitClient
from upbit_client.settings import Settings


def test_has_credentials_requires_both_keys() -> None:
    settings = Settings(UPBIT_ACCESS_KEY="access", UPBIT_SECRET_KEY="  ")
    assert settings.has_credentials() is False

    settings = Settings(UPBIT_ACCESS_KEY="access", UPBIT_SECRET_KEY="secret")
    assert settings.has_credentials() is True


def test_settings_read_environment(monkeypatch) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.setenv("UPBIT_BASE_URL", "https://example.test/")
    monkeypatch.setenv("UPBIT_TIMEOUT_SECONDS", "3.5")
    settings = Settings()
    assert settings.upbit_base_url == "https://example.test/"
    assert settings.upbit_timeout_seconds == 3.5


def test_client_from_settings_strips_trailing_slash() -> None:
    settings = Settings(UPBIT_BASE_URL="https://example.test/")
    client = UpbitClient.from_settings(settings)
    assert client._base_url == "https://example.test"
