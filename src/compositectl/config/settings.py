"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``COMPOSITECTL_*`` prefix
  3. TOML file: ``compositectl.toml`` discovered via walk-up
  4. Code defaults: baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` fed
by :mod:`compositectl.config.discovery`, which also locates the nearest
plan file for commands run without an explicit plan.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from compositectl.config.discovery import find_config, find_plan, load_config
from compositectl.config.models import BuildConfig, PluginsConfig, StoreConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Serve the tables of the checked ``compositectl.toml`` to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any] | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = data or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for the config tables during construction.
_tls = threading.local()


class CompositeSettings(BaseSettings):
    """Unified settings for the entire compositectl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.  Stored in
    ``click.Context.obj`` at the CLI root level.

    Attributes:
        workspace_root: Directory plans and relative paths resolve against
            (parent of ``compositectl.toml``, or CWD if no config found).
        config_path: The config file in effect, or None.
        plan_path: Nearest plan file found between the start directory and
            the workspace root, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "COMPOSITECTL_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    plan_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_install: bool = False

    # --- TOML sections ---
    store: StoreConfig = Field(default_factory=StoreConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_data: ClassVar[dict[str, Any] | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_data = getattr(_tls, "toml_data", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_data),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        **cli_flags: Any,
    ) -> CompositeSettings:
        """Construct settings from CLI invocation.

        Discovers ``compositectl.toml`` via walk-up (or explicit *config_path*),
        resolves *workspace_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides. The nearest
        ``[build] plan_file`` below the root becomes ``plan_path``.
        """
        start = workspace_root or Path.cwd()
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        resolved_root = workspace_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else start

        _tls.toml_data = load_config(toml_path) if toml_path else None
        try:
            settings = cls(
                workspace_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_data = None

        plan = find_plan(start, resolved_root, settings.build.plan_file)
        if plan is None:
            return settings
        return settings.model_copy(update={"plan_path": plan})

    @property
    def installs_enabled(self) -> bool:
        """False when either the ``--no-install`` flag or ``[store] no_install`` is set."""
        return not (self.no_install or self.store.no_install)
