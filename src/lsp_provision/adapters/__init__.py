"""Language server adapters."""
from typing import Dict, Type

from lsp_provision.adapters.base import LspAdapter
from lsp_provision.adapters.eslint import EsLintLspAdapter
from lsp_provision.adapters.typescript import TypeScriptLspAdapter
from lsp_provision.errors import UnknownToolError
from lsp_provision.node import NodeRuntime
from lsp_provision.types import ToolKind

ADAPTERS: Dict[ToolKind, Type[LspAdapter]] = {
    ToolKind.TYPESCRIPT: TypeScriptLspAdapter,
    ToolKind.ESLINT: EsLintLspAdapter,
}


def tool_kind(name: str) -> ToolKind:
    try:
        return ToolKind(name)
    except ValueError:
        raise UnknownToolError(name) from None


def create_adapter(kind: ToolKind, node: NodeRuntime) -> LspAdapter:
    return ADAPTERS[kind](node)


__all__ = [
    "ADAPTERS",
    "LspAdapter",
    "EsLintLspAdapter",
    "TypeScriptLspAdapter",
    "create_adapter",
    "tool_kind",
]
