"""Service references, package identifiers, and version-aware ordering.

A service reference is ``origin/name[/version[/release]]``. The origin is
always required. References are keyed by the literal string the composite
author wrote; they are never normalized.

INVARIANT: ``ServiceReference.raw`` is the identity used in every map that
is keyed by a declared service.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from compositectl.domain.errors import ResolutionError

_NUMERIC_RUN = re.compile(r"(\d+)")

# Path segments below <pkg_root>/<reference> that make up one candidate,
# keyed by how many segments the reference already carries.
_SEARCH_DEPTH: dict[int, int] = {4: 1, 3: 2, 2: 3}


@dataclass(frozen=True)
class ServiceReference:
    """A parsed, possibly partial, service identifier."""

    raw: str
    origin: str
    name: str
    version: str | None = None
    release: str | None = None

    @classmethod
    def parse(cls, raw: str) -> ServiceReference:
        """Parse *raw* into a reference, raising ResolutionError when malformed."""
        parts = raw.split("/")
        if len(parts) < 2:
            msg = f"origin required (example: acme/{raw})"
            raise ResolutionError(raw, msg)
        if len(parts) > 4 or any(not part.strip() for part in parts):
            raise ResolutionError(raw, "expected origin/name[/version[/release]]")
        version = parts[2] if len(parts) > 2 else None
        release = parts[3] if len(parts) > 3 else None
        return cls(raw=raw, origin=parts[0], name=parts[1], version=version, release=release)

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(p for p in (self.origin, self.name, self.version, self.release) if p)

    @property
    def fully_qualified(self) -> bool:
        return self.release is not None

    @property
    def search_depth(self) -> int:
        """Directory levels below the reference that hold one installed candidate."""
        return _SEARCH_DEPTH[len(self.segments)]

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True, order=True)
class PackageIdent:
    """A fully-qualified ``origin/name/version/release`` identifier."""

    origin: str
    name: str
    version: str
    release: str

    @classmethod
    def parse(cls, raw: str) -> PackageIdent:
        """Parse a fully-qualified identifier string."""
        parts = raw.strip().split("/")
        if len(parts) != 4 or any(not part for part in parts):
            msg = f"Not a fully-qualified package identifier: {raw!r}"
            raise ValueError(msg)
        return cls(*parts)

    @classmethod
    def from_install_path(cls, path: Path) -> PackageIdent:
        """Derive the identifier from the last four segments of an install directory."""
        parts = path.parts[-4:]
        if len(parts) != 4:
            msg = f"Not a package install directory: {path}"
            raise ValueError(msg)
        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.origin}/{self.name}/{self.version}/{self.release}"


def version_sort_key(text: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key comparing numeric runs numerically and the rest lexically.

    Examples:
        >>> sorted(["1.10.0", "1.9.0", "1.2.0"], key=version_sort_key)
        ['1.2.0', '1.9.0', '1.10.0']
    """
    key: list[tuple[int, int, str]] = []
    for part in _NUMERIC_RUN.split(text):
        if not part:
            continue
        if part.isdigit():
            key.append((1, int(part), ""))
        else:
            key.append((0, 0, part))
    return tuple(key)


def latest_version(candidates: list[str]) -> str | None:
    """Return the candidate that sorts first in descending version order."""
    if not candidates:
        return None
    return sorted(candidates, key=version_sort_key, reverse=True)[0]
