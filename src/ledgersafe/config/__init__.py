"""Configuration module using Pydantic Settings, plus structlog setup.

Usage:
    from ledgersafe.config import LedgerSettings, configure_logging

    settings = LedgerSettings(log_format="json")
    configure_logging(settings)
"""

from ledgersafe.config.logging import bind_invocation, clear_invocation, configure_logging
from ledgersafe.config.settings import LedgerSettings

__all__ = [
    "LedgerSettings",
    "configure_logging",
    "bind_invocation",
    "clear_invocation",
]
