"""Tests for metadata parsing and deterministic rendering."""

from __future__ import annotations

import pytest

from compositectl.domain.metadata import (
    BindMapping,
    parse_bind_map,
    parse_bind_mapping,
    parse_binds,
    parse_exports,
    parse_lines,
    parse_service_sets,
    render_assoc,
    render_lines,
    split_words,
)


class TestBindMapping:
    def test_parse(self) -> None:
        mapping = parse_bind_mapping("router:core/builder-router")
        assert mapping == BindMapping("router", "core/builder-router")
        assert str(mapping) == "router:core/builder-router"

    @pytest.mark.parametrize("text", ["router", ":core/x", "router:", ""])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ValueError, match="bind_name:service"):
            parse_bind_mapping(text)


class TestParseBinds:
    def test_whitespace_and_commas(self) -> None:
        binds = parse_binds("router=port ip\ndatastore=port,host\n")
        assert binds == {
            "router": frozenset({"port", "ip"}),
            "datastore": frozenset({"port", "host"}),
        }

    def test_blank_lines_ignored(self) -> None:
        assert parse_binds("\n\nrouter=port\n\n") == {"router": frozenset({"port"})}

    def test_bind_without_keys(self) -> None:
        assert parse_binds("peer\n") == {"peer": frozenset()}

    def test_empty(self) -> None:
        assert parse_binds("") == {}

    def test_split_words(self) -> None:
        assert split_words(" a, b  c,,d ") == ["a", "b", "c", "d"]


class TestParseExports:
    def test_keeps_keys_only(self) -> None:
        exports = parse_exports("ip=sys.ip\nport=cfg.port\nurl=http://x/?a=b\n")
        assert exports == frozenset({"ip", "port", "url"})

    def test_empty(self) -> None:
        assert parse_exports("") == frozenset()


class TestReadBack:
    def test_lines(self) -> None:
        assert parse_lines("core/a\ncore/b\n") == ("core/a", "core/b")

    def test_bind_map(self) -> None:
        parsed = parse_bind_map("core/api=database:core/db router:core/router\n")
        assert parsed == {
            "core/api": (
                BindMapping("database", "core/db"),
                BindMapping("router", "core/router"),
            )
        }

    def test_service_sets(self) -> None:
        parsed = parse_service_sets("default=core/a core/b\nbackend=core/b\n")
        assert parsed == {"default": ("core/a", "core/b"), "backend": ("core/b",)}


class TestRendering:
    def test_lines_sorted_and_terminated(self) -> None:
        assert render_lines(["core/b", "core/a"]) == "core/a\ncore/b\n"

    def test_empty_lines(self) -> None:
        assert render_lines([]) == ""

    def test_assoc_sorted_by_key_then_value(self) -> None:
        text = render_assoc({"core/api-proxy": ["z", "a"], "core/api": ["m"]})
        assert text == "core/api=m\ncore/api-proxy=a z\n"

    def test_empty_assoc(self) -> None:
        assert render_assoc({}) == ""

    def test_rendering_is_order_independent(self) -> None:
        one = render_assoc({"b": ["2", "1"], "a": ["x"]})
        two = render_assoc({"a": ["x"], "b": ["1", "2"]})
        assert one == two
