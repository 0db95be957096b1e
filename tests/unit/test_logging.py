import logging

import pytest

from landmarks.core.config import Settings
from landmarks.logging import configure_logging
from landmarks.main import create_app


@pytest.fixture(autouse=True)
def restore_logging():
    root_level = logging.getLogger().level
    httpx_level = logging.getLogger("httpx").level
    yield
    configure_logging(Settings())
    logging.getLogger().setLevel(root_level)
    logging.getLogger("httpx").setLevel(httpx_level)


def test_create_app_applies_its_own_log_level():
    create_app(Settings(LOG_LEVEL="WARNING"))
    assert logging.getLogger().level == logging.WARNING


def test_log_level_is_case_insensitive():
    configure_logging(Settings(LOG_LEVEL="debug"))
    assert logging.getLogger().level == logging.DEBUG
    # httpx stays quiet even when everything else is verbose
    assert logging.getLogger("httpx").level == logging.WARNING


def test_httpx_follows_stricter_levels():
    configure_logging(Settings(LOG_LEVEL="ERROR", ENV="production"))
    assert logging.getLogger("httpx").level == logging.ERROR


def test_unknown_log_level_rejected():
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        configure_logging(Settings(LOG_LEVEL="chatty"))


def test_uvicorn_loggers_propagate_to_root():
    configure_logging(Settings())
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        routed = logging.getLogger(name)
        assert routed.handlers == []
        assert routed.propagate
