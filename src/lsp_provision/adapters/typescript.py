"""typescript-language-server, installed from the npm registry."""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiohttp

from lsp_provision.adapters.base import LspAdapter
from lsp_provision.constants import (
    STAGING_PREFIX,
    TYPESCRIPT_SERVER_PATHS,
    TYPESCRIPT_TSSERVER_PATH,
)
from lsp_provision.errors import (
    InstallError,
    PathResolutionMiss,
    ProvisionError,
    VersionLookupError,
)
from lsp_provision.logging import get_logger
from lsp_provision.types import LanguageServerBinary, ToolKind, TypeScriptVersions
from lsp_provision.utils.fs import remove_matching, replace_path

logger = get_logger(__name__)

# Moved out of the staging directory in this order; the server path only
# becomes visible with node_modules.
INSTALL_ENTRIES = ("package.json", "package-lock.json", "node_modules")


def typescript_server_binary_arguments(server_path: Path) -> tuple[str, ...]:
    return (
        str(server_path),
        "--stdio",
        "--tsserver-path",
        TYPESCRIPT_TSSERVER_PATH,
    )


class TypeScriptLspAdapter(LspAdapter[TypeScriptVersions]):
    kind = ToolKind.TYPESCRIPT

    async def fetch_latest_server_version(
        self, session: aiohttp.ClientSession
    ) -> TypeScriptVersions:
        try:
            typescript_version, server_version = await asyncio.gather(
                self.node.npm_package_latest_version("typescript"),
                self.node.npm_package_latest_version("typescript-language-server"),
            )
        except Exception as e:
            raise VersionLookupError(self.name, f"npm version lookup failed: {e}") from e

        logger.info(
            "latest_version_resolved",
            server=self.name,
            typescript=typescript_version,
            server_version=server_version,
        )
        return TypeScriptVersions(
            typescript_version=typescript_version, server_version=server_version
        )

    async def fetch_server_binary(
        self,
        version: TypeScriptVersions,
        session: aiohttp.ClientSession,
        container_dir: Path,
    ) -> LanguageServerBinary:
        server_path = container_dir / TYPESCRIPT_SERVER_PATHS[0]

        if not server_path.exists():
            await self._install(version, container_dir)
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

    async def _install(self, version: TypeScriptVersions, container_dir: Path) -> None:
        # Leftovers from installs that died before their cleanup ran.
        try:
            remove_matching(
                container_dir, lambda entry: entry.name.startswith(STAGING_PREFIX)
            )
        except OSError as e:
            raise InstallError(self.name, str(e), step="remove_stale") from e

        staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=container_dir))
        try:
            try:
                await self.node.npm_install_packages(
                    staging,
                    [
                        ("typescript", version.typescript_version),
                        ("typescript-language-server", version.server_version),
                    ],
                )
            except Exception as e:
                raise InstallError(self.name, str(e), step="npm_install") from e

            try:
                for entry in INSTALL_ENTRIES:
                    if (staging / entry).exists():
                        replace_path(staging / entry, container_dir / entry)
            except OSError as e:
                raise InstallError(self.name, str(e), step="move_into_place") from e
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info(
            "server_installed",
            server=self.name,
            typescript=version.typescript_version,
            server_version=version.server_version,
            container_dir=str(container_dir),
        )

    async def find_cached_server_path(self, container_dir: Path) -> Path:
        for relative in TYPESCRIPT_SERVER_PATHS:
            candidate = container_dir / relative
            if candidate.exists():
                return candidate
        raise PathResolutionMiss(container_dir, "missing executable")

    def server_binary_arguments(self, server_path: Path) -> tuple[str, ...]:
        return typescript_server_binary_arguments(server_path)

    def initialization_options(self) -> Optional[Dict[str, Any]]:
        return {"provideFormatter": True}

    def code_action_kinds(self) -> Optional[List[str]]:
        return ["quickfix", "refactor", "refactor.extract", "source"]
