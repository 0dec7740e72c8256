"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, compositectl.toml only contains
overrides. A machine with a standard package root needs no file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- compositectl.toml sections ---


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True, "extra": "forbid"}

    pkg_root: str = "/hab/pkgs"
    installer: list[str] = Field(default_factory=lambda: ["hab", "pkg", "install"])
    depot_url: str | None = None
    channel: str = "stable"
    fallback_channel: str = "stable"
    no_install: bool = False


class BuildConfig(BaseModel):
    """[build] section."""

    model_config = {"frozen": True, "extra": "forbid"}

    target: str = "x86_64-linux"
    output_dir: str = "results"
    plan_file: str = "composite.toml"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True, "extra": "forbid"}

    enabled: bool = True
    local_dir: str = ".compositectl/plugins"


class CompositeConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True, "extra": "forbid"}

    store: StoreConfig = Field(default_factory=StoreConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
