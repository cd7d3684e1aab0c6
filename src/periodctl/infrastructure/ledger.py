"""Ledger: the unit that owns persistence for one process.

The Ledger is the single dependency injected into every service. It owns
the SQLAlchemy engine, the :class:`PeriodRepository` and, once
initialized, the plugin event bus.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from periodctl.domain.errors import PersistenceError
from periodctl.infrastructure.database.engine import init_database
from periodctl.infrastructure.repositories.periods import PeriodRepository

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from periodctl.config.settings import PeriodSettings
    from periodctl.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class Ledger:
    """Engine + repository + event bus for one database.

    Constructed lazily by the CLI ``AppContext`` (or by the MCP server)
    from :class:`PeriodSettings`.
    """

    def __init__(self, settings: PeriodSettings) -> None:
        self._settings = settings
        try:
            self._engine: Engine = init_database(settings.db_path)
        except SQLAlchemyError as exc:
            msg = f"Cannot open ledger at {settings.db_path}: {exc}"
            raise PersistenceError(msg) from exc
        self._periods = PeriodRepository(self._engine)
        self._event_bus: EventBus | None = None
        logger.debug("Ledger opened at %s", settings.db_path)

    @property
    def db_path(self) -> Path:
        return self._settings.db_path

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def settings(self) -> PeriodSettings:
        return self._settings

    @property
    def periods(self) -> PeriodRepository:
        return self._periods

    @property
    def event_bus(self) -> EventBus | None:
        """The plugin event bus (None if not initialized)."""
        return self._event_bus

    def init_event_bus(self) -> None:
        """Discover plugins and attach an event bus.

        No-op when ``[plugins] enabled`` is false. The built-in audit
        plugin is registered unless ``[plugins] audit`` is false.
        """
        if not self._settings.plugins.enabled:
            return

        from periodctl.plugins.builtins.audit import AuditPlugin
        from periodctl.plugins.event_bus import EventBus
        from periodctl.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load()
        if self._settings.plugins.audit:
            pm.register_plugin(AuditPlugin(), name="audit-builtin")
        logger.debug("Plugins loaded: %s", names)
        self._event_bus = EventBus(pm)

    def close(self) -> None:
        """Dispose of pooled connections."""
        self._engine.dispose()
