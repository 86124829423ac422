"""Language server binary provisioning."""

__version__ = "0.1.0"

from lsp_provision.types import (
    ToolKind,
    TypeScriptVersions,
    GitHubLspBinaryVersion,
    GitHubRelease,
    LanguageServerBinary,
)
from lsp_provision.errors import (
    ProvisionError,
    VersionLookupError,
    InstallError,
    BinNotFoundError,
    UnknownToolError,
    PathResolutionMiss,
)
from lsp_provision.node import NodeRuntime
from lsp_provision.adapters import (
    ADAPTERS,
    LspAdapter,
    TypeScriptLspAdapter,
    EsLintLspAdapter,
    create_adapter,
)
from lsp_provision.provision import container_dir_for, get_language_server_binary

__all__ = [
    # Types
    "ToolKind",
    "TypeScriptVersions",
    "GitHubLspBinaryVersion",
    "GitHubRelease",
    "LanguageServerBinary",

    # Adapters
    "ADAPTERS",
    "LspAdapter",
    "TypeScriptLspAdapter",
    "EsLintLspAdapter",
    "NodeRuntime",
    "create_adapter",

    # Provisioning
    "container_dir_for",
    "get_language_server_binary",

    # Error types
    "ProvisionError",
    "VersionLookupError",
    "InstallError",
    "BinNotFoundError",
    "UnknownToolError",
    "PathResolutionMiss",
]
