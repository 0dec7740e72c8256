"""Tests for the composite plan model and TOML parsing."""

from __future__ import annotations

import pytest

from compositectl.domain.errors import InvalidPlanError
from compositectl.domain.metadata import BindMapping
from compositectl.domain.plan import parse_plan

_PACKAGE = '[package]\norigin = "core"\nname = "builder"\nversion = "1.0.0"\n'


class TestParsePlan:
    def test_minimal(self) -> None:
        plan = parse_plan('services = ["core/a", "core/b"]\n' + _PACKAGE)
        assert plan.services == ("core/a", "core/b")
        assert plan.package.release is None
        assert plan.bind_map == {}
        assert plan.service_sets == {}
        assert plan.external == ()

    def test_list_bind_map(self) -> None:
        plan = parse_plan(
            'services = ["core/a", "core/b"]\n'
            + _PACKAGE
            + '[bind_map]\n"core/a" = ["router:core/b", "db:core/b"]\n'
        )
        assert plan.bind_map["core/a"] == (
            BindMapping("router", "core/b"),
            BindMapping("db", "core/b"),
        )

    def test_string_forms(self) -> None:
        plan = parse_plan(
            'services = "core/a core/b"\n'
            'external = "core/ext"\n'
            + _PACKAGE
            + '[bind_map]\n"core/a" = "router:core/b db:core/ext"\n'
            + '[service_sets]\ndefault = "core/a core/b"\n'
        )
        assert plan.services == ("core/a", "core/b")
        assert plan.external == ("core/ext",)
        assert len(plan.bind_map["core/a"]) == 2
        assert plan.service_sets["default"] == ("core/a", "core/b")

    def test_invalid_toml(self) -> None:
        with pytest.raises(InvalidPlanError) as exc_info:
            parse_plan("services = [", source="broken.toml")
        assert exc_info.value.source == "broken.toml"
        assert exc_info.value.code == "INVALID_PLAN"

    def test_missing_package(self) -> None:
        with pytest.raises(InvalidPlanError, match="package"):
            parse_plan('services = ["core/a", "core/b"]\n')

    def test_malformed_mapping(self) -> None:
        with pytest.raises(InvalidPlanError, match="bind_name:service"):
            parse_plan(_PACKAGE + '[bind_map]\n"core/a" = ["router"]\n')
