"""PackageStore: the package installation collaborator.

The composite pipeline never installs or locates packages itself; it asks a
:class:`PackageStore`. :class:`FilesystemPackageStore` is the production
adapter: packages live under ``<pkg_root>/<origin>/<name>/<version>/<release>``
with a ``MANIFEST`` file marking each complete install, and installation is
delegated to an external installer command.

INVARIANT: ``install`` never raises for installer failures. Whether the
package is usable is decided by ``resolve_latest_installed`` afterwards.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from compositectl.domain.ident import ServiceReference, latest_version
from compositectl.domain.types import MetadataFile

logger = logging.getLogger(__name__)


class PackageStore(Protocol):
    """Install, locate, and read metadata of installed packages."""

    def install(self, reference: str) -> None:
        """Ensure *reference* is installed. Idempotent."""
        ...

    def resolve_latest_installed(self, reference: str) -> Path | None:
        """Return the install directory of the newest match, or None."""
        ...

    def read_metadata_file(self, path: Path, filename: str) -> str:
        """Return the contents of *filename* in *path*; ``""`` when absent.

        Raises:
            OSError: The file exists but cannot be read or is not UTF-8.
        """
        ...


class FilesystemPackageStore:
    """PackageStore backed by an on-disk package root and an installer command.

    Parameters:
        pkg_root: Root directory of installed packages.
        installer: Installer argv prefix, e.g. ``["hab", "pkg", "install"]``.
            Empty disables installation.
        channel: Channel tried first.
        fallback_channel: Channel tried when the first attempt fails.
        depot_url: Optional depot URL passed to the installer.
        install_enabled: When False, only already-installed packages resolve.
    """

    def __init__(
        self,
        pkg_root: Path,
        *,
        installer: Sequence[str] = (),
        channel: str = "stable",
        fallback_channel: str = "stable",
        depot_url: str | None = None,
        install_enabled: bool = True,
    ) -> None:
        self._pkg_root = pkg_root
        self._installer = tuple(installer)
        self._channel = channel
        self._fallback_channel = fallback_channel
        self._depot_url = depot_url
        self._install_enabled = install_enabled

    @property
    def pkg_root(self) -> Path:
        return self._pkg_root

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install(self, reference: str) -> None:
        if not self._install_enabled or not self._installer:
            logger.debug("Installation disabled; skipping install of %s", reference)
            return

        ref = ServiceReference.parse(reference)
        if ref.fully_qualified and (self._pkg_root / ref.raw / MetadataFile.MANIFEST).is_file():
            logger.debug("%s is already installed", reference)
            return

        if self._run_installer(reference, self._channel):
            return
        if self._fallback_channel != self._channel:
            logger.info("Trying to install '%s' from '%s'", reference, self._fallback_channel)
            self._run_installer(reference, self._fallback_channel)

    def _installer_argv(self, reference: str, channel: str) -> list[str]:
        argv = [*self._installer]
        if self._depot_url:
            argv.extend(["--url", self._depot_url])
        argv.extend(["--channel", channel, reference])
        return argv

    def _run_installer(self, reference: str, channel: str) -> bool:
        """Run the installer once; True on a zero exit status."""
        argv = self._installer_argv(reference, channel)
        logger.info("Installing %s from channel %s", reference, channel)
        try:
            completed = subprocess.run(argv, capture_output=True, text=True, check=False)
        except OSError as exc:
            logger.warning("Installer %s could not be started: %s", argv[0], exc)
            return False
        if completed.returncode != 0:
            logger.warning(
                "Installing %s from %s failed (exit %d): %s",
                reference,
                channel,
                completed.returncode,
                completed.stderr.strip(),
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_latest_installed(self, reference: str) -> Path | None:
        """Find the newest installed package matching *reference*.

        The number of segments in the reference decides how deep below
        ``<pkg_root>/<reference>`` a ``MANIFEST`` must sit: one level for a
        fully-qualified reference, two for ``origin/name/version``, three for
        ``origin/name``. Candidates are ordered with a version-aware sort.
        """
        ref = ServiceReference.parse(reference)
        base = self._pkg_root / ref.raw
        if not base.is_dir():
            logger.warning("No installed packages of '%s' were found", reference)
            return None

        pattern = "/".join(["*"] * (ref.search_depth - 1) + [str(MetadataFile.MANIFEST)])
        candidates: dict[str, Path] = {}
        for manifest in base.glob(pattern):
            if manifest.is_file():
                install_dir = manifest.parent
                candidates[install_dir.relative_to(base).as_posix()] = install_dir

        latest = latest_version(list(candidates))
        if latest is None:
            logger.warning("Could not find a suitable installed package for '%s'", reference)
            return None
        return candidates[latest]

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def read_metadata_file(self, path: Path, filename: str) -> str:
        full_path = path / filename
        if not full_path.exists():
            return ""
        try:
            return full_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            # Undecodable metadata is reported like any other store I/O failure.
            msg = f"{full_path}: not valid UTF-8 ({exc.reason} at byte {exc.start})"
            raise OSError(msg) from exc
