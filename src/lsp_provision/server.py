"""MCP server exposing language server provisioning."""
import asyncio
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import aiohttp
import mcp.types as types
from mcp.server import stdio
from mcp.server.lowlevel import Server
from mcp.server.models import InitializationOptions

from lsp_provision import __version__
from lsp_provision.adapters import create_adapter, tool_kind
from lsp_provision.constants import CONTAINER_ROOT
from lsp_provision.errors import ProvisionError, log_error
from lsp_provision.logging import configure_logging, get_logger
from lsp_provision.node import NodeRuntime
from lsp_provision.provision import container_dir_for, get_language_server_binary
from lsp_provision.types import ToolKind

logger = get_logger(__name__)

SERVER_NAME = "lsp-provision"

NAME_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {
            "type": "string",
            "enum": [kind.value for kind in ToolKind],
            "description": "Language server identity",
        }
    },
    "required": ["name"],
}

tools = [
    types.Tool(
        name="lsp_list_servers",
        description="List the language servers that can be provisioned",
        inputSchema={"type": "object", "properties": {}},
    ),
    types.Tool(
        name="lsp_cached_binary",
        description="Find an already installed language server without network access",
        inputSchema=NAME_SCHEMA,
    ),
    types.Tool(
        name="lsp_ensure_binary",
        description="Return a runnable language server, installing the latest version if needed",
        inputSchema=NAME_SCHEMA,
    ),
]


@dataclass
class ProvisionContext:
    """Process-wide handles shared by every tool call"""

    session: aiohttp.ClientSession
    node: NodeRuntime = field(default_factory=NodeRuntime)
    root: Path = CONTAINER_ROOT


async def handle_tool_call(
    name: str, arguments: Dict[str, Any], context: ProvisionContext
) -> Dict[str, Any]:
    """Dispatch one tool call and return the JSON-ready result."""
    if name == "lsp_list_servers":
        return {
            "success": True,
            "data": [
                {"name": kind.value, "container_dir": str(container_dir_for(kind, context.root))}
                for kind in ToolKind
            ],
        }

    if name in ("lsp_cached_binary", "lsp_ensure_binary"):
        kind = tool_kind(arguments.get("name", ""))
        adapter = create_adapter(kind, context.node)
        container_dir = container_dir_for(kind, context.root)

        if name == "lsp_cached_binary":
            binary = await adapter.cached_server_binary(container_dir)
        else:
            binary = await get_language_server_binary(
                adapter, container_dir, context.session
            )

        return {
            "success": True,
            "data": binary.to_dict() if binary else None,
        }

    return {"success": False, "error": f"Unknown tool: {name}"}


def init_server(context: ProvisionContext) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        logger.debug("tools_requested")
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: Dict[str, Any]) -> List[types.TextContent]:
        logger.debug("tool_call_received", tool=name, arguments=arguments)
        try:
            result = await handle_tool_call(name, arguments or {}, context)
        except ProvisionError as e:
            log_error(e, {"tool": name, "arguments": arguments}, logger)
            result = {"success": False, "error": str(e), "details": e.details}
        return [types.TextContent(type="text", text=json.dumps(result))]

    logger.info("tools_registered", tools=[t.name for t in tools])
    return server


async def serve() -> None:
    configure_logging()
    logger.info("server_starting", root=str(CONTAINER_ROOT))

    async with aiohttp.ClientSession() as session:
        server = init_server(ProvisionContext(session=session))
        async with stdio.stdio_server() as (read_stream, write_stream):
            init_options = InitializationOptions(
                server_name=SERVER_NAME,
                server_version=__version__,
                capabilities=types.ServerCapabilities(
                    tools=types.ToolsCapability(listChanged=False),
                    logging=types.LoggingCapability(),
                ),
            )
            await server.run(read_stream, write_stream, init_options)


def main() -> None:
    """Run the MCP server."""
    asyncio.run(serve())
