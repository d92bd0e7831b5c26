"""
Structured logging for the wallet sync client.

Every line carries the node it talks to and, once bound, the wallet and
account. Wallet passwords never reach the output. JSON lines by default,
a colored console at DEBUG.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from .config import settings

# Event keys whose values must never be rendered
REDACTED_KEYS = frozenset({"password", "wallet_password"})
REDACTED = "***"


def add_node_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag the event with the node API it concerns."""
    event_dict.setdefault("node", settings.node_api_url)
    return event_dict


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _shared_processors(is_dev: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        # stdlib `extra=` fields, e.g. the notification title
        structlog.stdlib.ExtraAdder(),
        add_node_context,
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if not is_dev:
        processors.append(structlog.processors.format_exc_info)
    return processors


def _renderer(is_dev: bool) -> Processor:
    if is_dev:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: from settings.log_level)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    is_dev = level == logging.DEBUG
    shared_processors = _shared_processors(is_dev)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(is_dev),
        ],
    )

    # The CLI prints wallet state to stdout
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Request lines from the HTTP stack would repeat every poll
    for name in ("httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_wallet_context(wallet_name: str, account_name: Optional[str] = None) -> None:
    """Attach the wallet identity to every log line emitted from this context."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(wallet=wallet_name)
    if account_name:
        structlog.contextvars.bind_contextvars(account=account_name)
