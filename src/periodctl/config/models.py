"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``periodctl.toml`` only holds
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PublicPeriodicity = Literal["weekly", "biweekly", "monthly"]


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # Relative paths resolve against the directory holding periodctl.toml.
    path: str = ".periodctl/periods.db"


class TenantConfig(BaseModel):
    """[tenant] section."""

    model_config = {"frozen": True}

    default_id: str | None = None
    periodicity: PublicPeriodicity = "biweekly"


class NumberingConfig(BaseModel):
    """[numbering] section."""

    model_config = {"frozen": True}

    skip_duplicate_check: bool = False


class PeriodsConfig(BaseModel):
    """[periods] section."""

    model_config = {"frozen": True}

    custom_days: int | None = Field(default=None, ge=2)


class McpConfig(BaseModel):
    """[mcp] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    audit: bool = True
