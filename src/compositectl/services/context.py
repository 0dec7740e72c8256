"""BuildContext: the explicit state of one composite build.

Constructed once after resolution and threaded through every validation
stage. Nothing here is module-global and nothing is mutated after
construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from compositectl.domain.plan import CompositePlan
from compositectl.services.exports import ExportCatalog
from compositectl.services.resolve import ResolvedPackage


@dataclass(frozen=True)
class BuildContext:
    """Plan, resolution map, and export catalog of one build."""

    plan: CompositePlan
    resolved: Mapping[str, ResolvedPackage]
    exports: ExportCatalog

    @classmethod
    def create(cls, plan: CompositePlan, resolved: Mapping[str, ResolvedPackage]) -> BuildContext:
        """Snapshot *resolved* and build the export catalog from it."""
        snapshot = MappingProxyType(dict(resolved))
        return cls(plan=plan, resolved=snapshot, exports=ExportCatalog.build(snapshot))

    @property
    def declared(self) -> frozenset[str]:
        return frozenset(self.plan.services)
