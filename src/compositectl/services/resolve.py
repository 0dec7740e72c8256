"""ServiceResolver: declared references to installed package records.

Each declared reference is installed through the store (a no-op for an
exact installed match) and then resolved to the newest installed
candidate. Resolution is sequential in declaration order so log output
is reproducible.

INVARIANT: The resolution map is keyed by the reference exactly as
declared. Later stages look services up by that literal string.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from compositectl.domain.errors import CompositeError, NotAServiceError, ResolutionError
from compositectl.domain.ident import PackageIdent, ServiceReference
from compositectl.domain.metadata import parse_binds, parse_exports
from compositectl.domain.types import MetadataFile
from compositectl.infrastructure.filesystem import has_run_hook
from compositectl.infrastructure.store import PackageStore
from compositectl.services.base import BaseService
from compositectl.services.contracts import ResolveResultData, dump_validated
from compositectl.services.result import ServiceResult
from compositectl.services.telemetry import traced

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPackage:
    """One declared reference pinned to a concrete installed artifact.

    Metadata sets are read from the install directory on first access and
    cached for the life of the record.
    """

    reference: str
    ident: PackageIdent
    path: Path
    store: PackageStore = field(repr=False, compare=False)

    @cached_property
    def binds(self) -> dict[str, frozenset[str]]:
        """Required binds: bind name -> export keys the satisfier must provide."""
        return parse_binds(self.store.read_metadata_file(self.path, MetadataFile.BINDS))

    @cached_property
    def binds_optional(self) -> dict[str, frozenset[str]]:
        return parse_binds(self.store.read_metadata_file(self.path, MetadataFile.BINDS_OPTIONAL))

    @cached_property
    def exports(self) -> frozenset[str]:
        """Exported configuration keys (values are not retained)."""
        return parse_exports(self.store.read_metadata_file(self.path, MetadataFile.EXPORTS))

    @property
    def is_service(self) -> bool:
        return has_run_hook(self.path)


class ServiceResolver:
    """Resolve declared service references against a package store."""

    def __init__(self, store: PackageStore) -> None:
        self._store = store

    def resolve_one(self, reference: str) -> ResolvedPackage:
        """Install and resolve a single reference.

        Raises:
            ResolutionError: No origin segment, or nothing installed after
                the install attempt.
        """
        ServiceReference.parse(reference)
        logger.info("Installing %s locally", reference)
        self._store.install(reference)

        path = self._store.resolve_latest_installed(reference)
        if path is None:
            raise ResolutionError(reference, "no installed package found; should it be built first?")

        package = ResolvedPackage(
            reference=reference,
            ident=PackageIdent.from_install_path(path),
            path=path,
            store=self._store,
        )
        logger.info("Resolved service '%s' to %s", reference, package.ident)
        return package

    def resolve(self, references: Sequence[str]) -> dict[str, ResolvedPackage]:
        """Resolve every reference; the first failure aborts."""
        resolved: dict[str, ResolvedPackage] = {}
        for reference in references:
            if reference not in resolved:
                resolved[reference] = self.resolve_one(reference)
        return resolved


def assert_services(resolved: Mapping[str, ResolvedPackage]) -> None:
    """Fail on the first (sorted) resolved package that has no run entry point."""
    for reference in sorted(resolved):
        package = resolved[reference]
        logger.debug("Verifying that %s is a service", package.path)
        if not package.is_service:
            raise NotAServiceError(reference, str(package.path))


class ResolveService(BaseService):
    """Resolve references without validating a whole composite."""

    @traced
    def resolve(self, references: Sequence[str]) -> ServiceResult:
        """Map each reference to the fully-qualified ident it resolves to."""
        op = "resolve_services"
        try:
            resolved = ServiceResolver(self._workspace.store).resolve(references)
        except CompositeError as exc:
            return self._failure(op, exc)

        items = [
            {
                "reference": reference,
                "ident": str(package.ident),
                "path": str(package.path),
                "is_service": package.is_service,
            }
            for reference, package in sorted(resolved.items())
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ResolveResultData, {"count": len(items), "items": items}),
        )
