"""CompositeSpecService: expand built composite metadata into run specs.

Reads the files written by :func:`render_metadata` back from a package
directory and produces one spec per member service. Each mapped bind is
rendered against the service group of its satisfier, so a supervisor
can start the members already wired together::

    core/api  binds: router:router.default
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from compositectl.domain.errors import CompositeError, ResolutionError, UnknownSetError
from compositectl.domain.ident import PackageIdent, ServiceReference
from compositectl.domain.metadata import (
    BindMapping,
    parse_bind_map,
    parse_lines,
    parse_service_sets,
)
from compositectl.domain.types import MetadataFile, PackageType
from compositectl.services.base import BaseService
from compositectl.services.contracts import SpecsResultData, dump_validated
from compositectl.services.result import ServiceResult
from compositectl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

DEFAULT_GROUP = "default"


@dataclass(frozen=True)
class InstalledComposite:
    """Composite metadata as read back from a package directory."""

    path: Path
    ident: PackageIdent
    pkg_type: PackageType
    services: tuple[str, ...] = ()
    bind_map: dict[str, tuple[BindMapping, ...]] = field(default_factory=dict)
    service_sets: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.ident.name


def service_group(satisfier: str, group: str) -> str:
    """``<satisfier name>.<group>`` for a satisfier reference."""
    return f"{ServiceReference.parse(satisfier).name}.{group}"


class CompositeSpecService(BaseService):
    """Read composite metadata back and expand it into per-service specs."""

    def load_metadata(self, path: Path) -> InstalledComposite:
        """Parse the metadata files of the package at *path*.

        A missing ``TYPE`` file means a standalone package.

        Raises:
            ResolutionError: *path* has no ``IDENT`` file, one that is not a
                fully-qualified identifier, or an unknown ``TYPE``.
        """
        store = self._workspace.store
        raw_ident = store.read_metadata_file(path, MetadataFile.IDENT).strip()
        if not raw_ident:
            raise ResolutionError(str(path), "no IDENT metadata found")
        try:
            ident = PackageIdent.parse(raw_ident)
        except ValueError as exc:
            raise ResolutionError(str(path), f"malformed IDENT '{raw_ident}'") from exc

        raw_type = store.read_metadata_file(path, MetadataFile.TYPE).strip()
        try:
            pkg_type = PackageType(raw_type) if raw_type else PackageType.STANDALONE
        except ValueError as exc:
            raise ResolutionError(str(path), f"unknown package type '{raw_type}'") from exc
        if pkg_type is PackageType.STANDALONE:
            return InstalledComposite(path=path, ident=ident, pkg_type=pkg_type)

        return InstalledComposite(
            path=path,
            ident=ident,
            pkg_type=pkg_type,
            services=parse_lines(store.read_metadata_file(path, MetadataFile.SERVICES)),
            bind_map=parse_bind_map(store.read_metadata_file(path, MetadataFile.BIND_MAP)),
            service_sets=parse_service_sets(
                store.read_metadata_file(path, MetadataFile.SERVICE_SETS)
            ),
        )

    @traced
    def expand(
        self,
        path: Path,
        *,
        group: str = DEFAULT_GROUP,
        set_name: str | None = None,
    ) -> ServiceResult:
        """One spec per member service, optionally limited to a named set."""
        op = "composite_specs"
        try:
            with trace_span("load_metadata"):
                composite = self.load_metadata(path)
            with trace_span("expand"):
                items = self._expand(composite, group, set_name)
        except CompositeError as exc:
            return self._failure(op, exc)

        logger.debug("Expanded %s into %d specs", composite.ident, len(items))
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(
                SpecsResultData,
                {
                    "ident": str(composite.ident),
                    "pkg_type": str(composite.pkg_type),
                    "set_name": set_name,
                    "count": len(items),
                    "items": items,
                },
            ),
        )

    @staticmethod
    def _expand(
        composite: InstalledComposite,
        group: str,
        set_name: str | None,
    ) -> list[dict[str, object]]:
        if composite.pkg_type is PackageType.STANDALONE:
            if set_name is not None:
                raise UnknownSetError(set_name, [])
            return [{"ident": str(composite.ident), "group": group}]

        # SERVICES keeps repeated declarations; each member expands once.
        members = tuple(dict.fromkeys(composite.services))
        if set_name is not None:
            if set_name not in composite.service_sets:
                raise UnknownSetError(set_name, sorted(composite.service_sets))
            wanted = set(composite.service_sets[set_name])
            members = tuple(s for s in members if s in wanted)

        return [
            {
                "ident": service,
                "composite": composite.name,
                "group": group,
                "binds": [
                    f"{m.bind_name}:{service_group(m.satisfier, group)}"
                    for m in sorted(composite.bind_map.get(service, ()))
                ],
            }
            for service in members
        ]
