import json
import logging

import pytest
import structlog

from walletsync.config import settings
from walletsync.logging_config import (
    REDACTED,
    add_node_context,
    bind_wallet_context,
    redact_secrets,
    setup_logging,
)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


def test_add_node_context_keeps_explicit_node():
    assert add_node_context(None, "info", {"event": "x"})["node"] == settings.node_api_url
    assert add_node_context(None, "info", {"event": "x", "node": "other"})["node"] == "other"


def test_redact_secrets():
    event = redact_secrets(None, "info", {"event": "start", "password": "hunter2", "wallet": "w"})

    assert event["password"] == REDACTED
    assert event["wallet"] == "w"


def test_stdlib_lines_carry_wallet_context(restore_logging, capsys):
    setup_logging("INFO")
    bind_wallet_context("demo-wallet", "account 0")

    logging.getLogger("walletsync.test").warning("Notification: %s", "hello", extra={"title": "Node"})

    line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert line["event"] == "Notification: hello"
    assert line["wallet"] == "demo-wallet"
    assert line["account"] == "account 0"
    assert line["title"] == "Node"
    assert line["node"] == settings.node_api_url
    assert line["level"] == "warning"


def test_password_never_rendered(restore_logging, capsys):
    setup_logging("INFO")

    logging.getLogger("walletsync.test").info("start staking", extra={"password": "hunter2"})

    err = capsys.readouterr().err
    assert "hunter2" not in err
    assert REDACTED in err
