"""Binder settings, loaded from environment variables.

Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class BinderSettings(BaseSettings):
    """Top-level settings for the cache binder host."""

    # Retain detach actions so the host can unbind on shutdown
    support_teardown: bool = False

    # Whether the cluster messenger accepts multi-key commands
    batch_invalidation: bool = True

    cluster_nodes: int = Field(default=1, ge=1)
    journal_size: int = Field(default=1000, ge=0)

    log_level: str = "INFO"

    model_config = {"env_prefix": "CACHEBINDER_"}
