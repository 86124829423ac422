import io
import tarfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from lsp_provision.constants import TYPESCRIPT_SERVER_PATHS
from lsp_provision.node import NodeRuntime


def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


@pytest.fixture
def container_dir(tmp_path):
    """Empty caller-owned container directory"""
    path = tmp_path / "container"
    path.mkdir()
    return path


@pytest.fixture
def node_path():
    return Path("/opt/node/bin/node")


@pytest.fixture
def node(node_path):
    """NodeRuntime double whose npm commands lay out the files npm would"""

    async def npm_install_packages(directory, packages):
        _write(directory / TYPESCRIPT_SERVER_PATHS[0], "// cli")
        _write(directory / "package.json", "{}")

    async def run_npm_subcommand(directory, subcommand, *args):
        if subcommand == "run-script" and args == ("compile",):
            _write(directory / "server" / "out" / "eslintServer.js", "// server")
        return ""

    runtime = MagicMock(spec=NodeRuntime)
    runtime.binary_path = AsyncMock(return_value=node_path)
    runtime.npm_package_latest_version = AsyncMock(
        side_effect=lambda name: {"typescript": "5.4.2"}.get(name, "4.3.3")
    )
    runtime.npm_install_packages = AsyncMock(side_effect=npm_install_packages)
    runtime.run_npm_subcommand = AsyncMock(side_effect=run_npm_subcommand)
    return runtime


@pytest.fixture
def make_tarball(tmp_path):
    """Build a gzipped tarball whose entries all sit under one top-level directory"""

    def factory(top_dir: str = "microsoft-vscode-eslint-abc1234", empty: bool = False) -> Path:
        archive_path = tmp_path / f"{top_dir}.tar.gz"
        with tarfile.open(archive_path, "w:gz") as tf:
            if not empty:
                data = b'{"name": "vscode-eslint"}'
                info = tarfile.TarInfo(f"{top_dir}/package.json")
                info.size = len(data)
                tf.addfile(info, io.BytesIO(data))
        return archive_path

    return factory


@pytest.fixture
def session():
    """Stand-in for the shared aiohttp session"""
    return MagicMock()
