"""Core type definitions"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ToolKind(Enum):
    """Provisionable language servers, valued by their stable identity."""

    TYPESCRIPT = "typescript-language-server"
    ESLINT = "eslint"


@dataclass(frozen=True)
class TypeScriptVersions:
    """Pinned versions for the compiler and server npm packages"""

    typescript_version: str
    server_version: str


@dataclass(frozen=True)
class GitHubLspBinaryVersion:
    """Release-feed version: display name plus source tarball URL"""

    name: str
    url: str


@dataclass(frozen=True)
class GitHubRelease:
    """Subset of a GitHub release payload"""

    name: str
    tarball_url: str
    pre_release: bool


@dataclass(frozen=True)
class LanguageServerBinary:
    """Launcher executable plus the argument vector for one server"""

    path: Path
    arguments: tuple[str, ...] = ()

    def command(self) -> list[str]:
        return [str(self.path), *self.arguments]

    def to_dict(self) -> dict:
        return {"path": str(self.path), "arguments": list(self.arguments)}
