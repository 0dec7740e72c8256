"""Plugin discovery, loading, and hook dispatch.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery from ``.compositectl/plugins/``.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Any

import pluggy

from compositectl.plugins.hookspecs import PROJECT_NAME, CompositectlHookSpec

ENTRY_POINT_GROUP = "compositectl.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CompositectlHookSpec)

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if local_dir is not None:
            self._discover_local(local_dir)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Call every implementation of *hook_name* with *payload*.

        Exceptions from plugins propagate; callers turn them into warnings.
        """
        hook = getattr(self._pm.hook, hook_name)
        hook(**payload)

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside it that carry hookimpl-decorated methods are
        instantiated and registered. A broken local plugin is logged and
        skipped.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"compositectl_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any ``@hookimpl`` methods.

        Pluggy's ``HookimplMarker("compositectl")`` sets a ``compositectl_impl``
        attribute on decorated methods.
        """
        marker = f"{PROJECT_NAME}_impl"
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, marker, None):
                return True
        return False
