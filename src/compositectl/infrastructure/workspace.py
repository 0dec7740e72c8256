"""Workspace: settings, package store, and plugins for one invocation.

Constructed once at CLI startup from :class:`CompositeSettings` and stored
in ``click.Context.obj``. Services receive the Workspace via their
:class:`BaseService` constructor.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from compositectl.infrastructure.store import FilesystemPackageStore, PackageStore

if TYPE_CHECKING:
    from compositectl.config.settings import CompositeSettings
    from compositectl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Workspace:
    """Access point for the package store, plugin hooks, and workspace paths.

    Parameters:
        settings: Resolved settings.
        store: Explicit store (tests, embedding callers). Built from
            ``settings.store`` when omitted.
    """

    def __init__(self, settings: CompositeSettings, *, store: PackageStore | None = None) -> None:
        self._settings = settings
        self._store = store
        self._plugins: PluginManager | None = None

    @property
    def root(self) -> Path:
        """The workspace root directory."""
        return self._settings.workspace_root

    @property
    def settings(self) -> CompositeSettings:
        return self._settings

    @property
    def store(self) -> PackageStore:
        """The package store (created lazily on first access)."""
        if self._store is None:
            cfg = self._settings.store
            self._store = FilesystemPackageStore(
                Path(cfg.pkg_root),
                installer=cfg.installer,
                channel=cfg.channel,
                fallback_channel=cfg.fallback_channel,
                depot_url=cfg.depot_url,
                install_enabled=self._settings.installs_enabled,
            )
        return self._store

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None if not initialized)."""
        return self._plugins

    def init_plugins(self) -> None:
        """Create the plugin manager and discover entry-point and local plugins."""
        from compositectl.plugins.manager import PluginManager

        if not self._settings.plugins.enabled:
            return
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=self.resolve_path(self._settings.plugins.local_dir))
        logger.debug("Plugins loaded: %s", names)
        self._plugins = pm

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve *value* against the workspace root unless already absolute."""
        path = Path(value)
        return path if path.is_absolute() else self.root / path

    def plan_path(self, plan: str | Path | None = None) -> Path:
        """The plan file to use.

        *plan* if given, else the nearest plan found at startup, else
        ``[build] plan_file`` under the root.
        """
        if plan:
            return self.resolve_path(plan)
        if self._settings.plan_path is not None:
            return self._settings.plan_path
        return self.resolve_path(self._settings.build.plan_file)

    def output_dir(self, output: str | Path | None = None) -> Path:
        """The directory rendered metadata goes to."""
        return self.resolve_path(output or self._settings.build.output_dir)
