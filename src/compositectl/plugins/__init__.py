"""Extension layer: build lifecycle hooks via pluggy.

Discovery: entry_points (pip-installed) and single-file local plugins.
INVARIANT: Plugin failures are warnings, never errors.
"""

from compositectl.plugins.hookspecs import hookimpl
from compositectl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
