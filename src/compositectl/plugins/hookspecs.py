"""Pluggy hook specifications for composite build lifecycle events.

Hooks are dispatched synchronously, in pipeline order, after each stage
succeeds. A failed stage dispatches nothing.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "compositectl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CompositectlHookSpec:
    """Hook specifications for the compositectl plugin system."""

    @hookspec
    def post_resolve(self, resolved: dict[str, str]) -> None:
        """Called after every service resolved (reference -> fully-qualified ident)."""

    @hookspec
    def post_validate(self, ident: str, warnings: list[str]) -> None:
        """Called after the composite passed every validation."""

    @hookspec
    def post_build(self, ident: str, output_dir: str, files: list[str]) -> None:
        """Called after the composite metadata files were written."""
