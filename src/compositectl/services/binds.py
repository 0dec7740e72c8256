"""BindValidator: every declared bind mapping must be satisfiable.

For each declaring service, in sorted order, and each of its mappings,
in sorted order:

1. the declaring service must be a member of the composite;
2. the bind must be declared in the service's own ``BINDS``;
3. the satisfier must be a resolved member, or listed as external;
4. the satisfier must export every key the bind requires.

The first violation raises and aborts the build. Required binds that
have no mapping at all are not errors: wiring them is left to runtime,
and each one is reported as a warning. Circular binds are reported the
same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from compositectl.domain.errors import (
    UndeclaredServiceError,
    UnknownBindError,
    UnresolvedSatisfierError,
    UnsatisfiedExportError,
)
from compositectl.domain.metadata import BindMapping
from compositectl.infrastructure.graph import build_bind_graph, find_bind_cycles
from compositectl.services.context import BuildContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnmappedBind:
    """A required bind that the bind map leaves for runtime wiring."""

    service: str
    bind_name: str


@dataclass(frozen=True)
class BindReport:
    """Non-fatal findings of a successful bind validation."""

    checked: int = 0
    unmapped: tuple[UnmappedBind, ...] = ()
    external: tuple[tuple[str, BindMapping], ...] = ()
    cycles: tuple[tuple[str, ...], ...] = ()

    @property
    def warnings(self) -> list[str]:
        messages = [
            f"Required bind '{u.bind_name}' of {u.service} is not mapped; "
            "it must be wired at runtime"
            for u in self.unmapped
        ]
        messages.extend(
            f"Bind '{m.bind_name}' of {service} is satisfied by external service "
            f"{m.satisfier}; its exports were not checked"
            for service, m in self.external
        )
        messages.extend(
            f"Circular binds: {' -> '.join((*cycle, cycle[0]))}" for cycle in self.cycles
        )
        return messages


class BindValidator:
    """Validate the plan's bind map against resolved package metadata."""

    def __init__(self, context: BuildContext) -> None:
        self._ctx = context

    def validate(self) -> BindReport:
        plan = self._ctx.plan
        declared = self._ctx.declared
        external = frozenset(plan.external)
        checked = 0
        external_hits: list[tuple[str, BindMapping]] = []

        for service in sorted(plan.bind_map):
            if service not in declared:
                raise UndeclaredServiceError(service)
            package = self._ctx.resolved[service]
            required_binds = package.binds
            logger.debug("Resolving binds for %s", service)

            for mapping in sorted(set(plan.bind_map[service])):
                bind_name, satisfier_ref = mapping
                if bind_name not in required_binds:
                    raise UnknownBindError(service, bind_name, str(package.ident))

                satisfier = self._ctx.resolved.get(satisfier_ref)
                if satisfier is None:
                    if satisfier_ref in external:
                        external_hits.append((service, mapping))
                        continue
                    raise UnresolvedSatisfierError(service, bind_name, satisfier_ref)

                logger.debug(
                    "Checking that bind '%s' of %s is satisfied by %s",
                    bind_name,
                    package.ident,
                    satisfier.ident,
                )
                exported = self._ctx.exports.exports_for(satisfier)
                missing = sorted(required_binds[bind_name] - exported)
                if missing:
                    raise UnsatisfiedExportError(service, bind_name, satisfier_ref, missing[0])
                checked += 1

        return BindReport(
            checked=checked,
            unmapped=self._unmapped(),
            external=tuple(external_hits),
            cycles=tuple(tuple(c) for c in find_bind_cycles(build_bind_graph(plan.bind_map))),
        )

    def _unmapped(self) -> tuple[UnmappedBind, ...]:
        unmapped: list[UnmappedBind] = []
        for service in sorted(self._ctx.resolved):
            mapped = {m.bind_name for m in self._ctx.plan.bind_map.get(service, ())}
            for bind_name in sorted(set(self._ctx.resolved[service].binds) - mapped):
                unmapped.append(UnmappedBind(service, bind_name))
        return tuple(unmapped)
