"""Language server provisioning flow."""
from pathlib import Path
from typing import Optional

import aiohttp

from lsp_provision.adapters import LspAdapter
from lsp_provision.constants import CONTAINER_ROOT
from lsp_provision.logging import get_logger
from lsp_provision.types import LanguageServerBinary, ToolKind

logger = get_logger(__name__)


def container_dir_for(kind: ToolKind, root: Optional[Path] = None) -> Path:
    """Container directory for one tool under root."""
    return (root or CONTAINER_ROOT) / kind.value


async def get_language_server_binary(
    adapter: LspAdapter,
    container_dir: Path,
    session: aiohttp.ClientSession,
) -> LanguageServerBinary:
    """Return a runnable server, installing the latest version on a cache miss.

    Raises:
        VersionLookupError: the latest version could not be determined
        InstallError: the download or build failed
    """
    container_dir.mkdir(parents=True, exist_ok=True)

    cached = await adapter.cached_server_binary(container_dir)
    if cached:
        logger.info(
            "using_cached_binary",
            server=adapter.name,
            path=str(cached.path),
            arguments=list(cached.arguments),
        )
        return cached

    version = await adapter.fetch_latest_server_version(session)
    binary = await adapter.fetch_server_binary(version, session, container_dir)

    logger.info(
        "binary_ready",
        server=adapter.name,
        path=str(binary.path),
        arguments=list(binary.arguments),
    )
    return binary
