"""MetadataRenderer: the persisted metadata of a validated composite.

INVARIANT: Rendering is a pure function of :class:`CompositeMetadata`.
No external state is re-read, so identical input always yields
identical bytes regardless of declaration order.

An empty bind map or set map renders no file at all; absence, not an
empty file, means "no data".
"""

from __future__ import annotations

import hashlib

from pydantic import BaseModel, ConfigDict, Field

from compositectl.domain.metadata import render_assoc, render_lines
from compositectl.domain.types import MetadataFile, PackageType
from compositectl.services.context import BuildContext


class CompositeMetadata(BaseModel):
    """The validated, write-once model of a composite package."""

    model_config = ConfigDict(frozen=True)

    ident: str
    pkg_type: PackageType = PackageType.COMPOSITE
    target: str
    services: tuple[str, ...]
    resolved: dict[str, str]
    bind_map: dict[str, tuple[str, ...]] = Field(default_factory=dict)
    service_sets: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @classmethod
    def from_context(cls, context: BuildContext, *, ident: str, target: str) -> CompositeMetadata:
        """Freeze a successfully validated build into metadata."""
        plan = context.plan
        return cls(
            ident=ident,
            target=target,
            services=tuple(plan.services),
            resolved={ref: str(pkg.ident) for ref, pkg in context.resolved.items()},
            bind_map={
                service: tuple(str(m) for m in mappings)
                for service, mappings in plan.bind_map.items()
                if mappings
            },
            service_sets={name: members for name, members in plan.service_sets.items() if members},
        )


def _blake2b_hex(content: str) -> str:
    return hashlib.blake2b(content.encode("utf-8"), digest_size=32).hexdigest()


def render_metadata(metadata: CompositeMetadata) -> dict[str, str]:
    """Render every metadata file of *metadata* as ``{filename: text}``."""
    files: dict[str, str] = {
        MetadataFile.SERVICES: render_lines(metadata.services),
        MetadataFile.RESOLVED_SERVICES: render_lines(set(metadata.resolved.values())),
        MetadataFile.IDENT: f"{metadata.ident}\n",
        MetadataFile.TYPE: f"{metadata.pkg_type}\n",
        MetadataFile.TARGET: f"{metadata.target}\n",
    }
    bind_map = render_assoc({k: set(v) for k, v in metadata.bind_map.items()})
    if bind_map:
        files[MetadataFile.BIND_MAP] = bind_map
    service_sets = render_assoc({k: set(v) for k, v in metadata.service_sets.items()})
    if service_sets:
        files[MetadataFile.SERVICE_SETS] = service_sets

    files[MetadataFile.FILES] = "".join(
        f"{_blake2b_hex(content)}  {name}\n" for name, content in sorted(files.items())
    )
    return {str(name): content for name, content in files.items()}
