import pytest
from pydantic import ValidationError

from secrets_console.config import ClientConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in (
        "SECRETS_API_BASE_URL",
        "SECRETS_API_TIMEOUT",
        "SECRETS_API_ACCESS_TOKEN",
        "SECRETS_API_RETAIN_DECRYPTED_ON_REFRESH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ClientConfig(base_url="https://api.example.com")

    assert config.timeout is None
    assert config.verify_ssl is True
    assert config.access_token is None
    assert config.retain_decrypted_on_refresh is False


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("SECRETS_API_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("SECRETS_API_TIMEOUT", "2.5")
    monkeypatch.setenv("SECRETS_API_RETAIN_DECRYPTED_ON_REFRESH", "true")

    config = ClientConfig()

    assert config.base_url == "https://env.example.com"
    assert config.timeout == 2.5
    assert config.retain_decrypted_on_refresh is True


def test_base_url_is_required():
    with pytest.raises(ValidationError):
        ClientConfig()


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        ClientConfig(base_url="https://api.example.com", timeout=0)
