"""Tests for ServiceResolver, the service-type check, and ResolveService."""

from __future__ import annotations

from pathlib import Path

import pytest

from compositectl.domain.errors import NotAServiceError, ResolutionError
from compositectl.infrastructure.store import FilesystemPackageStore
from compositectl.infrastructure.workspace import Workspace
from compositectl.services.resolve import ResolveService, ServiceResolver, assert_services
from tests.conftest import MakePackage


class _RecordingStore(FilesystemPackageStore):
    def __init__(self, pkg_root: Path) -> None:
        super().__init__(pkg_root)
        self.installed: list[str] = []

    def install(self, reference: str) -> None:
        self.installed.append(reference)


class TestServiceResolver:
    def test_resolves_in_declaration_order(
        self, pkg_root: Path, make_package: MakePackage
    ) -> None:
        make_package("core/b/1.0.0/1")
        make_package("core/a/1.0.0/1")
        store = _RecordingStore(pkg_root)
        resolved = ServiceResolver(store).resolve(["core/b", "core/a"])
        assert list(resolved) == ["core/b", "core/a"]
        assert store.installed == ["core/b", "core/a"]
        assert str(resolved["core/a"].ident) == "core/a/1.0.0/1"

    def test_keyed_by_literal_reference(self, pkg_root: Path, make_package: MakePackage) -> None:
        make_package("core/a/1.0.0/1")
        resolved = ServiceResolver(FilesystemPackageStore(pkg_root)).resolve(["core/a/1.0.0"])
        assert list(resolved) == ["core/a/1.0.0"]
        assert resolved["core/a/1.0.0"].reference == "core/a/1.0.0"

    def test_duplicates_resolve_once(self, pkg_root: Path, make_package: MakePackage) -> None:
        make_package("core/a/1.0.0/1")
        store = _RecordingStore(pkg_root)
        ServiceResolver(store).resolve(["core/a", "core/a"])
        assert store.installed == ["core/a"]

    def test_nothing_installed(self, pkg_root: Path) -> None:
        with pytest.raises(ResolutionError) as exc_info:
            ServiceResolver(FilesystemPackageStore(pkg_root)).resolve(["core/missing"])
        assert exc_info.value.reference == "core/missing"

    def test_origin_required(self, pkg_root: Path) -> None:
        with pytest.raises(ResolutionError, match="origin required"):
            ServiceResolver(FilesystemPackageStore(pkg_root)).resolve(["redis"])

    def test_metadata_read_lazily(self, pkg_root: Path, make_package: MakePackage) -> None:
        make_package(
            "core/a/1.0.0/1",
            binds="router=port ip\n",
            binds_optional="cache=host\n",
            exports="port=80\n",
        )
        package = ServiceResolver(FilesystemPackageStore(pkg_root)).resolve_one("core/a")
        assert package.binds == {"router": frozenset({"port", "ip"})}
        assert package.binds_optional == {"cache": frozenset({"host"})}
        assert package.exports == frozenset({"port"})


class TestAssertServices:
    def test_all_services(self, pkg_root: Path, make_package: MakePackage) -> None:
        make_package("core/a/1/1")
        make_package("core/b/1/1", hook_dir=True)
        resolved = ServiceResolver(FilesystemPackageStore(pkg_root)).resolve(["core/a", "core/b"])
        assert_services(resolved)

    def test_library_rejected(self, pkg_root: Path, make_package: MakePackage) -> None:
        make_package("core/a/1/1")
        make_package("core/lib/1/1", service=False)
        resolved = ServiceResolver(FilesystemPackageStore(pkg_root)).resolve(
            ["core/a", "core/lib"]
        )
        with pytest.raises(NotAServiceError) as exc_info:
            assert_services(resolved)
        assert exc_info.value.reference == "core/lib"


class TestResolveService:
    def test_success(self, workspace: Workspace, make_package: MakePackage) -> None:
        make_package("core/a/1.0.0/1")
        make_package("core/lib/2.0.0/1", service=False)
        result = ResolveService(workspace).resolve(["core/lib", "core/a"])
        assert result.ok
        assert result.op == "resolve_services"
        assert result.data["count"] == 2
        first, second = result.data["items"]
        assert first["reference"] == "core/a"
        assert first["ident"] == "core/a/1.0.0/1"
        assert first["is_service"] is True
        assert second["is_service"] is False

    def test_failure(self, workspace: Workspace) -> None:
        result = ResolveService(workspace).resolve(["core/missing"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "RESOLUTION_FAILED"
        assert result.error.detail == {"reference": "core/missing"}
