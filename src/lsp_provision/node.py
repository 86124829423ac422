"""Node runtime handle shared by the npm-based adapters."""

import json
import shutil
from pathlib import Path
from typing import Iterable, Optional, Tuple

from lsp_provision.constants import NODE_BINARY
from lsp_provision.errors import BinNotFoundError
from lsp_provision.logging import get_logger
from lsp_provision.utils.fs import async_subprocess_run

logger = get_logger(__name__)


class NodeRuntime:
    """Locates node/npm and runs npm subcommands.

    Created once per process and passed to every adapter that needs it.
    """

    def __init__(self, node_path: Optional[str] = NODE_BINARY, npm_path: Optional[str] = None):
        self._node_path = node_path
        self._npm_path = npm_path

    async def binary_path(self) -> Path:
        node = self._node_path or shutil.which("node")
        if not node:
            raise BinNotFoundError("node")
        return Path(node)

    def npm_path(self) -> str:
        npm = self._npm_path or shutil.which("npm")
        if not npm:
            raise BinNotFoundError("npm")
        return npm

    async def run_npm_subcommand(
        self, directory: Optional[Path], subcommand: str, *args: str
    ) -> str:
        """Run `npm <subcommand> <args>` in directory and return its stdout."""
        returncode, stdout, stderr = await async_subprocess_run(
            self.npm_path(), subcommand, *args, cwd=directory
        )
        if returncode != 0:
            raise RuntimeError(
                f"npm {subcommand} failed with code {returncode}\n"
                f"stdout: {stdout}\n"
                f"stderr: {stderr}"
            )
        return stdout

    async def npm_package_latest_version(self, name: str) -> str:
        output = await self.run_npm_subcommand(None, "info", name, "--json")
        info = json.loads(output)

        latest = info.get("dist-tags", {}).get("latest")
        if latest:
            return latest

        versions = info.get("versions") or []
        if isinstance(versions, str):
            return versions
        if not versions:
            raise RuntimeError(f"No versions found for npm package {name}")
        return versions[-1]

    async def npm_install_packages(
        self, directory: Path, packages: Iterable[Tuple[str, str]]
    ) -> None:
        specs = [f"{name}@{version}" for name, version in packages]

        logger.info("npm_install", directory=str(directory), packages=specs)

        await self.run_npm_subcommand(
            directory,
            "install",
            "--prefix",
            str(directory),
            "--save-exact",
            "--no-audit",
            "--no-fund",
            *specs,
        )
