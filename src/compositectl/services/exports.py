"""ExportCatalog: exported keys of every resolved package.

Built once per build from the resolution map and read-only thereafter.
Keyed by fully-qualified ident, so two declared references that resolve
to the same artifact share one entry.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compositectl.services.resolve import ResolvedPackage


class ExportCatalog(Mapping[str, frozenset[str]]):
    """Read-only mapping of fully-qualified ident -> exported keys."""

    def __init__(self, exports: Mapping[str, frozenset[str]]) -> None:
        self._exports = dict(exports)

    @classmethod
    def build(cls, resolved: Mapping[str, ResolvedPackage]) -> ExportCatalog:
        """Read ``EXPORTS`` of every resolved package.

        A package without an ``EXPORTS`` file contributes an empty set.
        I/O errors reading an existing file propagate.
        """
        return cls({str(package.ident): package.exports for package in resolved.values()})

    def exports_for(self, package: ResolvedPackage) -> frozenset[str]:
        return self._exports.get(str(package.ident), frozenset())

    def __getitem__(self, ident: str) -> frozenset[str]:
        return self._exports[ident]

    def __iter__(self) -> Iterator[str]:
        return iter(self._exports)

    def __len__(self) -> int:
        return len(self._exports)
