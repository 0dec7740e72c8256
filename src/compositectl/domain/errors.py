"""Composite build errors.

INVARIANT: Every error here is fatal to the composite build. There is no
partial-success mode; the first violation aborts and names the offending
service, bind, or key.

Each error carries a stable ``code`` and a ``detail`` dict so the service
layer can convert it into a structured ``ServiceError`` without string
parsing.
"""

from __future__ import annotations

from typing import Any, ClassVar


class CompositeError(Exception):
    """Base class for composite validation and resolution failures."""

    code: ClassVar[str] = "COMPOSITE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class InvalidPlanError(CompositeError):
    """The composite plan file is unreadable or malformed."""

    code = "INVALID_PLAN"

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Invalid composite plan {source}: {reason}", source=source, reason=reason)
        self.source = source
        self.reason = reason


class InsufficientServiceCountError(CompositeError):
    """Fewer than two services were declared."""

    code = "INSUFFICIENT_SERVICES"

    def __init__(self, count: int) -> None:
        super().__init__(
            "A composite package should have at least two services; "
            f"{count} declared. Otherwise just build a standalone package",
            count=count,
        )
        self.count = count


class ResolutionError(CompositeError):
    """A service reference could not be resolved to an installed package."""

    code = "RESOLUTION_FAILED"

    def __init__(self, reference: str, reason: str | None = None) -> None:
        message = f"Resolving '{reference}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, reference=reference)
        self.reference = reference


class NotAServiceError(CompositeError):
    """A resolved package has no run entry point."""

    code = "NOT_A_SERVICE"

    def __init__(self, reference: str, path: str) -> None:
        super().__init__(
            f"'{reference}' ({path}) is not a service. "
            "Only services are allowed in composite packages",
            reference=reference,
            path=path,
        )
        self.reference = reference
        self.path = path


class UndeclaredServiceError(CompositeError):
    """The bind map names a service that is not a member of the composite."""

    code = "UNDECLARED_SERVICE"

    def __init__(self, service: str) -> None:
        super().__init__(
            f"The bind map has an entry for '{service}', which is not a declared service",
            service=service,
        )
        self.service = service


class UnknownBindError(CompositeError):
    """A mapping satisfies a bind the service never declared."""

    code = "UNKNOWN_BIND"

    def __init__(self, service: str, bind_name: str, resolved: str | None = None) -> None:
        target = resolved or service
        super().__init__(
            f"The bind '{bind_name}' mapped for '{service}' does not exist in {target}",
            service=service,
            bind_name=bind_name,
        )
        self.service = service
        self.bind_name = bind_name


class UnresolvedSatisfierError(CompositeError):
    """A mapping names a satisfier that is neither a member nor external."""

    code = "UNRESOLVED_SATISFIER"

    def __init__(self, service: str, bind_name: str, satisfier: str) -> None:
        super().__init__(
            f"The bind '{bind_name}' of '{service}' is mapped to '{satisfier}', "
            "which is not a service of this composite",
            service=service,
            bind_name=bind_name,
            satisfier=satisfier,
        )
        self.service = service
        self.bind_name = bind_name
        self.satisfier = satisfier


class UnsatisfiedExportError(CompositeError):
    """A satisfier does not export a key required by the bind."""

    code = "UNSATISFIED_EXPORT"

    def __init__(self, service: str, bind_name: str, satisfier: str, missing_key: str) -> None:
        super().__init__(
            f"{satisfier} does not export '{missing_key}', "
            f"which is required by the '{bind_name}' bind of {service}",
            service=service,
            bind_name=bind_name,
            satisfier=satisfier,
            missing_key=missing_key,
        )
        self.service = service
        self.bind_name = bind_name
        self.satisfier = satisfier
        self.missing_key = missing_key


class InvalidSetMemberError(CompositeError):
    """A named set lists a service that is not declared."""

    code = "INVALID_SET_MEMBER"

    def __init__(self, set_name: str, member: str) -> None:
        super().__init__(
            f"Service set '{set_name}' has '{member}' as a member, "
            "but it is not a declared service",
            set_name=set_name,
            member=member,
        )
        self.set_name = set_name
        self.member = member


class UnknownSetError(CompositeError):
    """A named set was requested that the composite does not define."""

    code = "UNKNOWN_SET"

    def __init__(self, set_name: str, available: list[str]) -> None:
        super().__init__(
            f"Service set '{set_name}' is not defined by this composite",
            set_name=set_name,
            available=available,
        )
        self.set_name = set_name
