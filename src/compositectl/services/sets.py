"""SetValidator: named service sets may only name declared services."""

from __future__ import annotations

from compositectl.domain.errors import InvalidSetMemberError
from compositectl.domain.plan import CompositePlan


class SetValidator:
    """Check every named set of a plan against its declared services."""

    def __init__(self, plan: CompositePlan) -> None:
        self._plan = plan

    def validate(self) -> None:
        """Raise InvalidSetMemberError for the first (sorted) undeclared member."""
        declared = frozenset(self._plan.services)
        for set_name in sorted(self._plan.service_sets):
            for member in sorted(set(self._plan.service_sets[set_name])):
                if member not in declared:
                    raise InvalidSetMemberError(set_name, member)
