"""Unified settings: CLI flags, env vars and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``PERIODCTL_*`` prefix, ``__`` for nested sections
  3. TOML file: ``periodctl.toml`` discovered via walk-up
  4. Code defaults baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from periodctl.config.discovery import find_config
from periodctl.config.models import (
    DatabaseConfig,
    McpConfig,
    NumberingConfig,
    PeriodsConfig,
    PluginsConfig,
    TenantConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``periodctl.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed to settings_customise_sources during construction.
_tls = threading.local()


class PeriodSettings(BaseSettings):
    """Resolved settings for one periodctl invocation.

    Attributes:
        root: Directory that relative paths resolve against (parent of
            ``periodctl.toml``, or CWD if none was found).
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PERIODCTL_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # CLI flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    tenant_override: str | None = None

    # TOML sections
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    tenant: TenantConfig = Field(default_factory=TenantConfig)
    numbering: NumberingConfig = Field(default_factory=NumberingConfig)
    periods: PeriodsConfig = Field(default_factory=PeriodsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def db_path(self) -> Path:
        """Absolute database path."""
        path = Path(self.database.path).expanduser()
        return path if path.is_absolute() else self.root / path

    @property
    def tenant_id(self) -> str | None:
        """``--tenant`` if given, else ``[tenant] default_id``."""
        return self.tenant_override or self.tenant.default_id

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PeriodSettings:
        """Construct settings from a CLI invocation.

        Discovers ``periodctl.toml`` (or uses *config_path*), resolves
        *root* from the config file's directory, and merges CLI flags as
        highest-priority overrides. ``None`` flags are dropped so they do
        not mask env or TOML values.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
