"""Extension layer: lifecycle hooks via pluggy.

Discovery: the ``periodctl.plugins`` entry-point group.
Plugin failures are warnings, never errors.
"""

from periodctl.plugins.event_bus import EventBus
from periodctl.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
