"""BaseService: foundation for all compositectl services.

Every service receives a :class:`Workspace` at construction time. The
Workspace provides the package store, workspace paths, and plugin hooks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from compositectl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from compositectl.domain.errors import CompositeError
    from compositectl.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ResolveService(BaseService):
            def resolve(self, references: list[str]) -> ServiceResult:
                store = self._workspace.store
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @staticmethod
    def _failure(op: str, exc: CompositeError, warnings: list[str] | None = None) -> ServiceResult:
        """Convert a composite error into an ``ok=False`` result."""
        logger.debug("%s failed: %s", op, exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            warnings=warnings or [],
            error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail),
        )

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle hook. No-op if plugins are not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._workspace.plugins
        if plugins is None:
            return
        try:
            plugins.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
