import pytest

from kvault import EngineVersion, SettingsError, VaultSettings, load_settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com/")
    monkeypatch.setenv("VAULT_TOKEN", "env-token")
    monkeypatch.setenv("VAULT_NAMESPACE", "admin")
    monkeypatch.setenv("VAULT_MAX_RETRIES", "3")
    monkeypatch.setenv("VAULT_RETRY_INTERVAL_MS", "250")
    monkeypatch.setenv("VAULT_ENGINE_VERSION", "2")
    monkeypatch.setenv("VAULT_SSL_VERIFY", "false")

    settings = load_settings()

    assert settings.ADDR == "https://vault.example.com"
    assert settings.TOKEN == "env-token"
    assert settings.NAMESPACE == "admin"
    assert settings.MAX_RETRIES == 3
    assert settings.RETRY_INTERVAL_MS == 250
    assert settings.ENGINE_VERSION is EngineVersion.V2
    assert settings.SSL_VERIFY is False
    assert settings.PREFIX_PATH_DEPTH == 1


def test_settings_from_dotenv_file(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("VAULT_ADDR=http://from-dotenv:8200\nVAULT_TOKEN=dotenv-token\n")

    settings = load_settings()

    assert settings.ADDR == "http://from-dotenv:8200"
    assert settings.TOKEN == "dotenv-token"


def test_token_falls_back_to_token_file(tmp_path, monkeypatch):
    token_file = tmp_path / ".vault-token"
    token_file.write_text("file-token\n")
    monkeypatch.setenv("VAULT_ADDR", "http://vault.local")

    settings = load_settings()

    assert settings.TOKEN == "file-token"


def test_missing_address_is_rejected(monkeypatch):
    monkeypatch.setenv("VAULT_TOKEN", "tkn")
    with pytest.raises(SettingsError, match="address"):
        load_settings()


def test_missing_token_is_rejected(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "http://vault.local")
    with pytest.raises(SettingsError, match="token"):
        load_settings()


def test_invalid_engine_version_is_rejected(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "http://vault.local")
    monkeypatch.setenv("VAULT_TOKEN", "tkn")
    monkeypatch.setenv("VAULT_ENGINE_VERSION", "3")
    with pytest.raises(SettingsError):
        load_settings()


def test_overrides_take_precedence(monkeypatch):
    monkeypatch.setenv("VAULT_ADDR", "http://vault.local")
    monkeypatch.setenv("VAULT_TOKEN", "tkn")

    settings = load_settings(PREFIX_PATH_DEPTH=2, TOKEN="other")

    assert settings.PREFIX_PATH_DEPTH == 2
    assert settings.TOKEN == "other"


def test_negative_retries_are_invalid():
    with pytest.raises(SettingsError):
        load_settings(ADDR="http://vault.local", TOKEN="tkn", MAX_RETRIES=-1)


def test_settings_defaults():
    settings = VaultSettings(ADDR="http://vault.local", TOKEN="tkn")
    assert settings.ENGINE_VERSION is None
    assert settings.USE_ENGINE_PATH_MAP is True
    assert settings.OPEN_TIMEOUT == 10.0
