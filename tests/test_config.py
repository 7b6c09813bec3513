import logging

from margin_dashboard.config import DEFAULT_WEBHOOK_BASE_URL, ensure_secret_key, load_settings


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("WEBHOOK_BASE_URL", "https://hooks.test/webhook/")
    monkeypatch.setenv("WEBHOOK_TIMEOUT", "5")
    monkeypatch.setenv("SECRET_KEY", "from-env")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings["WEBHOOK_BASE_URL"] == "https://hooks.test/webhook/"
    assert settings["WEBHOOK_TIMEOUT"] == 5.0
    assert settings["SECRET_KEY"] == "from-env"
    assert settings["LOG_LEVEL"] == "DEBUG"


def test_load_settings_defaults(monkeypatch):
    for name in ("WEBHOOK_BASE_URL", "WEBHOOK_TIMEOUT", "SECRET_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings["WEBHOOK_BASE_URL"] == DEFAULT_WEBHOOK_BASE_URL
    assert settings["WEBHOOK_TIMEOUT"] == 30.0
    assert settings["SECRET_KEY"] is None
    assert settings["MAX_CONTENT_LENGTH"] == 16 * 1024 * 1024


def test_missing_secret_key_is_generated_with_a_warning(monkeypatch, caplog):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    config = load_settings()

    with caplog.at_level(logging.WARNING, logger="margin_dashboard.config"):
        assert ensure_secret_key(config) is False

    assert config["SECRET_KEY"]
    assert "SECRET_KEY is not set" in caplog.text


def test_configured_secret_key_is_kept_silently(caplog):
    config = {"SECRET_KEY": "fixed"}

    with caplog.at_level(logging.WARNING, logger="margin_dashboard.config"):
        assert ensure_secret_key(config) is True

    assert config["SECRET_KEY"] == "fixed"
    assert caplog.text == ""


def test_generated_secret_key_is_quiet_under_testing(caplog):
    config = {"TESTING": True, "SECRET_KEY": None}

    with caplog.at_level(logging.WARNING, logger="margin_dashboard.config"):
        assert ensure_secret_key(config) is False

    assert config["SECRET_KEY"]
    assert caplog.text == ""
