"""Shared provisioning interface for language server adapters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar

import aiohttp

from lsp_provision.logging import get_logger
from lsp_provision.node import NodeRuntime
from lsp_provision.types import LanguageServerBinary, ToolKind

logger = get_logger(__name__)

V = TypeVar("V")


class LspAdapter(ABC, Generic[V]):
    """Resolve a version, install it, find a cached install, build the argv.

    V is the adapter's resolved version type, handed back unchanged from
    fetch_latest_server_version to fetch_server_binary.
    """

    kind: ToolKind

    def __init__(self, node: NodeRuntime):
        self.node = node

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    async def fetch_latest_server_version(self, session: aiohttp.ClientSession) -> V:
        """Raises VersionLookupError."""

    @abstractmethod
    async def fetch_server_binary(
        self, version: V, session: aiohttp.ClientSession, container_dir: Path
    ) -> LanguageServerBinary:
        """Raises InstallError."""

    @abstractmethod
    async def find_cached_server_path(self, container_dir: Path) -> Path:
        """Raises PathResolutionMiss when nothing usable is installed."""

    @abstractmethod
    def server_binary_arguments(self, server_path: Path) -> tuple[str, ...]:
        ...

    async def cached_server_binary(
        self, container_dir: Path
    ) -> Optional[LanguageServerBinary]:
        """Previously installed binary, or None. Never raises."""
        try:
            server_path = await self.find_cached_server_path(container_dir)
            return LanguageServerBinary(
                path=await self.node.binary_path(),
                arguments=self.server_binary_arguments(server_path),
            )
        except Exception as e:
            logger.warning(
                "cached_binary_missing",
                server=self.name,
                container_dir=str(container_dir),
                error=str(e),
            )
            return None

    def initialization_options(self) -> Optional[Dict[str, Any]]:
        return None

    def workspace_configuration(self) -> Optional[Dict[str, Any]]:
        return None

    def code_action_kinds(self) -> Optional[List[str]]:
        return None
