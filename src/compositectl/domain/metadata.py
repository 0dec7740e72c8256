"""Parsing and rendering of line-oriented package metadata.

Input side (member packages): ``BINDS``, ``BINDS_OPTIONAL``, ``EXPORTS``.
Output side (composites): ``SERVICES``, ``RESOLVED_SERVICES``,
``BIND_MAP``, ``SERVICE_SETS`` and the common identity files.

Value lists are typed frozensets/tuples, never whitespace-joined strings.
Pure functions only; file access lives in the infrastructure layer.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import NamedTuple

_KEY_SEPARATORS = re.compile(r"[,\s]+")


class BindMapping(NamedTuple):
    """One ``bind_name:satisfier`` wiring declared by the composite author."""

    bind_name: str
    satisfier: str

    def __str__(self) -> str:
        return f"{self.bind_name}:{self.satisfier}"


def parse_bind_mapping(text: str) -> BindMapping:
    """Parse ``bind_name:satisfier``, e.g. ``router:core/builder-router``."""
    bind_name, sep, satisfier = text.strip().partition(":")
    if not sep or not bind_name or not satisfier:
        msg = f"Bind mapping must be 'bind_name:service', got {text!r}"
        raise ValueError(msg)
    return BindMapping(bind_name, satisfier)


def split_words(value: str) -> list[str]:
    """Split a whitespace- or comma-separated value into non-empty words."""
    return [word for word in _KEY_SEPARATORS.split(value) if word]


def _content_lines(text: str) -> Iterable[str]:
    for line in text.splitlines():
        line = line.strip()
        if line:
            yield line


# ---------------------------------------------------------------------------
# Member metadata (input)
# ---------------------------------------------------------------------------


def parse_binds(text: str) -> dict[str, frozenset[str]]:
    """Parse a ``BINDS``/``BINDS_OPTIONAL`` file into bind name -> required keys.

    Each line is ``name=key1 key2`` (commas are accepted as separators too).
    A line without ``=`` declares a bind that requires no keys.
    """
    binds: dict[str, frozenset[str]] = {}
    for line in _content_lines(text):
        name, _, keys = line.partition("=")
        binds[name.strip()] = frozenset(split_words(keys))
    return binds


def parse_exports(text: str) -> frozenset[str]:
    """Parse an ``EXPORTS`` file, keeping only the key before the first ``=``."""
    return frozenset(line.partition("=")[0].strip() for line in _content_lines(text))


# ---------------------------------------------------------------------------
# Composite metadata (output, and read back by consumers)
# ---------------------------------------------------------------------------


def parse_lines(text: str) -> tuple[str, ...]:
    """Parse a one-entry-per-line file such as ``SERVICES``."""
    return tuple(_content_lines(text))


def parse_bind_map(text: str) -> dict[str, tuple[BindMapping, ...]]:
    """Parse ``service=bind:satisfier bind:satisfier`` lines."""
    result: dict[str, tuple[BindMapping, ...]] = {}
    for line in _content_lines(text):
        service, _, value = line.partition("=")
        result[service.strip()] = tuple(parse_bind_mapping(m) for m in value.split())
    return result


def parse_service_sets(text: str) -> dict[str, tuple[str, ...]]:
    """Parse ``set_name=member member`` lines."""
    result: dict[str, tuple[str, ...]] = {}
    for line in _content_lines(text):
        set_name, _, members = line.partition("=")
        result[set_name.strip()] = tuple(members.split())
    return result


def render_lines(lines: Iterable[str]) -> str:
    """Render entries one per line, sorted, newline-terminated."""
    ordered = sorted(lines)
    if not ordered:
        return ""
    return "\n".join(ordered) + "\n"


def render_assoc(mapping: Mapping[str, Iterable[str]]) -> str:
    """Render ``key=v1 v2`` lines sorted by key, values sorted within a line.

    An empty mapping renders as the empty string; callers skip the file.
    """
    # Values are space-separated, not comma-separated, so BIND_MAP lines read
    # back with the same whitespace split that the supervisor's reader uses.
    lines =[f"{key}={' '.join(sorted(values))}" for key, values in sorted(mapping.items())]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
