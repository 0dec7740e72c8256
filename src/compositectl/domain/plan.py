"""Composite plan model: what the composite author declares.

A plan is a TOML document (``composite.toml``)::

    services = ["core/builder-api", "core/builder-api-proxy"]
    external = []

    [package]
    origin = "core"
    name = "builder"
    version = "1.0.0"

    [bind_map]
    "core/builder-api" = ["router:core/builder-api-proxy"]

    [service_sets]
    default = ["core/builder-api", "core/builder-api-proxy"]

Bind map and set values also accept a single whitespace-separated string.
The plan is deliberately permissive; composition rules are enforced by the
validators in the service layer so each violation gets its own error.
"""

from __future__ import annotations

import tomllib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from compositectl.domain.errors import InvalidPlanError
from compositectl.domain.metadata import BindMapping, parse_bind_mapping

PLAN_FILENAME = "composite.toml"


class PackageSection(BaseModel):
    """[package] section: identity of the composite being built."""

    model_config = ConfigDict(frozen=True)

    origin: str
    name: str
    version: str
    release: str | None = None
    target: str | None = None


class CompositePlan(BaseModel):
    """Declared services, wiring, and named sets of one composite."""

    model_config = ConfigDict(frozen=True)

    package: PackageSection
    services: tuple[str, ...] = ()
    external: tuple[str, ...] = ()
    bind_map: dict[str, tuple[BindMapping, ...]] = Field(default_factory=dict)
    service_sets: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @field_validator("services", "external", mode="before")
    @classmethod
    def _split_string_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator("bind_map", mode="before")
    @classmethod
    def _parse_bind_map(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        parsed: dict[str, tuple[BindMapping, ...]] = {}
        for service, mappings in value.items():
            if isinstance(mappings, str):
                mappings = mappings.split()
            parsed[service] = tuple(
                m if isinstance(m, BindMapping) else parse_bind_mapping(str(m)) for m in mappings
            )
        return parsed

    @field_validator("service_sets", mode="before")
    @classmethod
    def _split_set_members(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            name: members.split() if isinstance(members, str) else members
            for name, members in value.items()
        }


def parse_plan(text: str, *, source: str = PLAN_FILENAME) -> CompositePlan:
    """Parse and validate a TOML plan document.

    Raises:
        InvalidPlanError: On TOML syntax errors or schema violations.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidPlanError(source, str(exc)) from exc
    try:
        return CompositePlan.model_validate(data)
    except ValidationError as exc:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidPlanError(source, reason) from exc
