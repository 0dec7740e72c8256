"""Typed payload contracts for service and adapter boundaries.

These models validate operation payload shapes before they leave the
service layer, so a renamed key (``resolved`` vs ``resolved_services``)
fails in tests rather than in a renderer or plugin.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


class ResolveItem(BaseModel):
    """One declared reference and the artifact it resolved to."""

    reference: str
    ident: str
    path: str
    is_service: bool


class ResolveResultData(BaseModel):
    """Payload contract for ``ResolveService.resolve``."""

    count: int
    items: list[ResolveItem]


class UnmappedBindItem(BaseModel):
    service: str
    bind_name: str


class ValidateResultData(BaseModel):
    """Payload contract for ``CompositeBuildService.validate``."""

    model_config = ConfigDict(extra="allow")

    ident: str
    target: str
    services: list[str]
    resolved: dict[str, str]
    bind_count: int
    unmapped: list[UnmappedBindItem] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)


class BuildResultData(ValidateResultData):
    """Payload contract for ``CompositeBuildService.build``."""

    output_dir: str
    files: list[str]


class ServiceSpecItem(BaseModel):
    """One expanded run spec of a composite member."""

    ident: str
    composite: str | None = None
    group: str
    binds: list[str] = Field(default_factory=list)


class SpecsResultData(BaseModel):
    """Payload contract for ``CompositeSpecService.expand``."""

    ident: str
    pkg_type: str
    set_name: str | None = None
    count: int
    items: list[ServiceSpecItem]
