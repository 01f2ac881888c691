"""Structured logging for registry events.

Every module logs through ``structlog.get_logger(__name__)`` with an event
name and keyword fields. The dispatcher binds ``tx_id`` and ``function`` for
the length of one invocation, so every event it triggers carries them.

Usage:
    configure_logging(LedgerSettings(log_format="json"))
    bind_invocation(tx_id="tx-1", function="initAsset")
    structlog.get_logger("ledgersafe.registry.records").info("asset_created", name="asset1")
    # {"tx_id": "tx-1", "function": "initAsset", "name": "asset1", "event": "asset_created", ...}
    clear_invocation()
"""

from __future__ import annotations

import logging
import sys

import structlog

from ledgersafe.config.settings import LedgerSettings


def _renderer(settings: LedgerSettings) -> structlog.typing.Processor:
    # No ANSI colours in console output.
    if settings.log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(settings: LedgerSettings | None = None) -> None:
    """Route structlog through stdlib logging with a pretty or JSON renderer."""
    settings = settings or LedgerSettings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(processor=_renderer(settings))

    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def bind_invocation(**kwargs: object) -> None:
    """Bind context variables (tx id, function) for the current invocation."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_invocation() -> None:
    """Clear invocation context variables."""
    structlog.contextvars.clear_contextvars()
