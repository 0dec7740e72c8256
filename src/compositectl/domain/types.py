"""Package types and metadata file names.

Metadata files are the plain-text, line-oriented contract between a
package on disk and the tooling that reads it.
"""

from __future__ import annotations

from enum import StrEnum


class PackageType(StrEnum):
    """Kinds of installable package."""

    STANDALONE = "standalone"
    COMPOSITE = "composite"


class MetadataFile(StrEnum):
    """Names of metadata files read from members and written for composites."""

    # Read from each member package
    MANIFEST = "MANIFEST"
    BINDS = "BINDS"
    BINDS_OPTIONAL = "BINDS_OPTIONAL"
    EXPORTS = "EXPORTS"

    # Written for the composite
    SERVICES = "SERVICES"
    RESOLVED_SERVICES = "RESOLVED_SERVICES"
    BIND_MAP = "BIND_MAP"
    SERVICE_SETS = "SERVICE_SETS"
    IDENT = "IDENT"
    TYPE = "TYPE"
    TARGET = "TARGET"
    FILES = "FILES"


# Entry points that make a package runnable as a service.
RUN_HOOKS: tuple[str, ...] = ("run", "hooks/run")
