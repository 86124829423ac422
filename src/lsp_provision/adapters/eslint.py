"""vscode-eslint server, built from a GitHub release tarball."""

import asyncio
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import aiohttp

from lsp_provision.adapters.base import LspAdapter
from lsp_provision.constants import (
    ESLINT_REPO,
    ESLINT_REPO_DIR,
    ESLINT_SERVER_PATH,
    STAGING_PREFIX,
)
from lsp_provision.errors import (
    InstallError,
    PathResolutionMiss,
    ProvisionError,
    VersionLookupError,
)
from lsp_provision.logging import get_logger
from lsp_provision.types import GitHubLspBinaryVersion, LanguageServerBinary, ToolKind
from lsp_provision.utils.fetching import download_file, extract_archive
from lsp_provision.utils.fs import remove_matching, replace_path, visible_entries
from lsp_provision.utils.github import latest_github_release

logger = get_logger(__name__)


def eslint_server_binary_arguments(server_path: Path) -> tuple[str, ...]:
    return (str(server_path), "--stdio")


def destination_name(release_name: str) -> str:
    """Directory name for one release; release names may contain slashes."""
    return "vscode-eslint-" + re.sub(r"[^\w.-]", "-", release_name)


class EsLintLspAdapter(LspAdapter[GitHubLspBinaryVersion]):
    kind = ToolKind.ESLINT

    async def fetch_latest_server_version(
        self, session: aiohttp.ClientSession
    ) -> GitHubLspBinaryVersion:
        # The last stable vscode-eslint release needs custom protocol
        # extensions to initialize, so track prereleases instead.
        try:
            release = await latest_github_release(ESLINT_REPO, True, session)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, KeyError) as e:
            raise VersionLookupError(
                self.name, f"release lookup failed: {e}", {"repo": ESLINT_REPO}
            ) from e

        logger.info("latest_version_resolved", server=self.name, release=release.name)
        return GitHubLspBinaryVersion(name=release.name, url=release.tarball_url)

    async def fetch_server_binary(
        self,
        version: GitHubLspBinaryVersion,
        session: aiohttp.ClientSession,
        container_dir: Path,
    ) -> LanguageServerBinary:
        destination = container_dir / destination_name(version.name)
        server_path = destination / ESLINT_SERVER_PATH

        if not server_path.exists():
            await self._install(version, session, container_dir, destination)
        else:
            logger.debug("server_already_installed", path=str(server_path))

        try:
            node_path = await self.node.binary_path()
        except ProvisionError as e:
            raise InstallError(self.name, str(e), step="locate_node") from e

        return LanguageServerBinary(
            path=node_path,
            arguments=self.server_binary_arguments(server_path),
        )

    async def _install(
        self,
        version: GitHubLspBinaryVersion,
        session: aiohttp.ClientSession,
        container_dir: Path,
        destination: Path,
    ) -> None:
        try:
            remove_matching(container_dir, lambda entry: entry != destination)
        except OSError as e:
            raise InstallError(self.name, str(e), step="remove_stale") from e

        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=container_dir))
        try:
            with tempfile.TemporaryDirectory() as tmpdir:
                archive_path = Path(tmpdir) / "release.tar.gz"
                try:
                    await download_file(session, version.url, archive_path)
                except RuntimeError as e:
                    raise InstallError(
                        self.name, f"error downloading release: {e}", step="download"
                    ) from e

                try:
                    extract_archive(archive_path, staging)
                except ValueError as e:
                    raise InstallError(self.name, str(e), step="extract") from e

            # Tarballs unpack into one top-level directory with an
            # unpredictable name; give it a fixed one.
            entries = visible_entries(staging)
            if not entries:
                raise InstallError(self.name, "missing first file", step="extract")
            repo_root = staging / ESLINT_REPO_DIR
            try:
                entries[0].rename(repo_root)
            except OSError as e:
                raise InstallError(self.name, str(e), step="extract") from e

            try:
                await self.node.run_npm_subcommand(repo_root, "install")
                await self.node.run_npm_subcommand(repo_root, "run-script", "compile")
            except Exception as e:
                raise InstallError(self.name, str(e), step="build") from e

            try:
                replace_path(staging, destination)
            except OSError as e:
                raise InstallError(self.name, str(e), step="move_into_place") from e
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info(
            "server_installed",
            server=self.name,
            release=version.name,
            destination=str(destination),
        )

    async def find_cached_server_path(self, container_dir: Path) -> Path:
        # The version is unknown here. Several releases only coexist after
        # racing installs, so take the most recently installed one.
        entries = visible_entries(container_dir)
        if not entries:
            raise PathResolutionMiss(container_dir, "missing first file")

        newest = max(entries, key=lambda entry: (entry.stat().st_mtime, entry.name))
        if not newest.is_dir():
            raise PathResolutionMiss(container_dir, "newest entry is not a directory")

        server_path = newest / ESLINT_SERVER_PATH
        if not server_path.exists():
            raise PathResolutionMiss(container_dir, "missing executable")
        return server_path

    def server_binary_arguments(self, server_path: Path) -> tuple[str, ...]:
        return eslint_server_binary_arguments(server_path)

    def workspace_configuration(self) -> Optional[Dict[str, Any]]:
        return {
            "": {
                "validate": "on",
                "rulesCustomizations": [],
                "run": "onType",
                "nodePath": None,
            }
        }
