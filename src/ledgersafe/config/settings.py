"""Configuration settings using Pydantic Settings.

Usage:
    from ledgersafe.config import LedgerSettings

    # Load from environment variables (LEDGERSAFE_*)
    settings = LedgerSettings()

    # Or override with explicit values
    settings = LedgerSettings(max_page_size=50, log_format="json")
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledgersafe.storage.retrying import RetryPolicy


class LedgerSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the asset registry.

    Attributes:
        index_name: Composite index name for the type-to-name index.
        max_page_size: Upper bound applied to requested page sizes.
        log_level: Standard logging level name.
        log_format: "pretty" for console output, "json" for machine output.
        retry_attempts: Attempts per store call when wrapped in RetryingStore.
        retry_backoff: Backoff strategy between store retries.
        retry_base_delay: Base delay in seconds for retry backoff.

    Environment Variables:
        LEDGERSAFE_INDEX_NAME
        LEDGERSAFE_MAX_PAGE_SIZE
        LEDGERSAFE_LOG_LEVEL
        LEDGERSAFE_LOG_FORMAT
        LEDGERSAFE_RETRY_ATTEMPTS
        LEDGERSAFE_RETRY_BACKOFF
        LEDGERSAFE_RETRY_BASE_DELAY
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERSAFE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    index_name: str = Field(default="assetType~name", min_length=1)
    max_page_size: int = Field(default=1000, gt=0)
    log_level: str = "INFO"
    log_format: Literal["pretty", "json"] = "pretty"
    retry_attempts: int = Field(default=3, ge=1)
    retry_backoff: Literal["none", "linear", "exponential"] = "exponential"
    retry_base_delay: float = Field(default=0.05, ge=0.0)

    def retry_policy(self) -> RetryPolicy:
        """Build the store RetryPolicy described by these settings."""
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            backoff=self.retry_backoff,
            base_delay=self.retry_base_delay,
        )
