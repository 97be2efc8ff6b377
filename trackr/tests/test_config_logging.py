"""Тесты настроек, логирования и исключений."""

import json
import logging

import pytest

from trackr.config import Settings, get_settings
from trackr.core.exceptions import (
    ApiError,
    AuthenticationError,
    NotFoundError,
    RequestTimeoutError,
    TrackrError,
)
from trackr.core.logging_config import ColoredFormatter, JSONFormatter, TokenRedactingFilter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JSONFormatter, ColoredFormatter)):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _record(msg: str, level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("trackr.test", level, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


# ==================== Settings ====================

def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("TRACKR_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("TRACKR_PLATFORM", "native")
    monkeypatch.setenv("TRACKR_STORAGE_PATH", str(tmp_path / "creds.json"))
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.api_base_url == "https://api.example.com"
    assert settings.platform == "native"
    assert settings.storage_path == tmp_path / "creds.json"
    assert settings.api_timeout == 10
    assert get_settings() is settings
    get_settings.cache_clear()


def test_settings_reject_unknown_platform():
    with pytest.raises(ValueError):
        Settings(platform="desktop")


def test_settings_env_configuration():
    assert Settings.model_config["env_prefix"] == "TRACKR_"
    assert Settings.model_config["env_file"] == ".env"
    assert Settings.model_config["case_sensitive"] is False


# ==================== Исключения ====================

@pytest.mark.parametrize(
    "status, error_cls, kind",
    [(401, AuthenticationError, "authentication"), (403, AuthenticationError, "authentication"),
     (404, NotFoundError, "not_found"), (500, ApiError, "api")],
)
def test_from_http(status, error_cls, kind):
    error = TrackrError.from_http(status, "msg", details={"detail": "msg"})

    assert type(error) is error_cls
    assert error.kind == kind
    assert error.to_dict() == {"error": kind, "message": "msg", "status": status, "details": {"detail": "msg"}}


def test_formatted_message_matches_str():
    error = RequestTimeoutError("Request timeout - server may be offline")
    assert str(error) == error.formatted_message
    assert error.kind == "timeout"


# ==================== Логирование ====================

def test_token_is_redacted():
    record = _record("Sending Authorization: Token abc.def-123")

    assert TokenRedactingFilter().filter(record) is True
    assert record.getMessage() == "Sending Authorization: Token [REDACTED]"


def test_json_formatter_includes_extra():
    data = json.loads(JSONFormatter().format(_record("Signed in", user_id=7)))

    assert data["message"] == "Signed in"
    assert data["level"] == "INFO"
    assert data["user_id"] == 7
    assert "msg" not in data


def test_colored_formatter_does_not_mutate_record():
    record = _record("hello", level=logging.WARNING)

    output = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "\033[33m" in output
    assert record.levelname == "WARNING"


def test_setup_logging_configures_handlers(tmp_path):
    log_file = tmp_path / "trackr.log"

    setup_logging(level="DEBUG", json_logs=True, log_file=str(log_file))
    logging.getLogger("trackr.test").info("Token secret123 used")
    for handler in logging.getLogger().handlers:
        handler.flush()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert logging.getLogger("urllib3").level == logging.WARNING
    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert lines[-1]["message"] == "Token [REDACTED] used"
