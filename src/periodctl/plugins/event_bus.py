"""Synchronous lifecycle event dispatch via pluggy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from periodctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatches lifecycle events to registered plugins in-process.

    A failing hook raises out of :meth:`dispatch`; services turn that into
    a warning on their result.
    """

    def __init__(self, plugin_manager: PluginManager) -> None:
        self._pm = plugin_manager
        self.dispatched: int = 0

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            logger.debug("No hook spec named %s; event dropped", hook_name)
            return
        hook_fn(**payload)
        self.dispatched += 1
