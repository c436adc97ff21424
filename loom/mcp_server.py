"""
MCP server exposing the Loom tools to automation clients.

The same server is mounted into the HTTP app (streamable HTTP at /mcp) and
can be run on its own over stdio.
"""

from mcp.server.fastmcp import FastMCP

from loom.logging_config import get_logger
from loom.tools import TOOL_NAMES, LoomTools

logger = get_logger(__name__)

INSTRUCTIONS = (
    "Loom tracks projects, tasks, task notes, problems, outcomes and goals. "
    "Deleting a project deletes its tasks and outcomes; problems and goals "
    "only lose their link. Use get_active_work_summary for an overview."
)


def build_mcp_server(tools: LoomTools) -> FastMCP:
    """Register every Loom tool on a new FastMCP server."""
    server = FastMCP("Loom", instructions=INSTRUCTIONS, streamable_http_path="/")
    for name in TOOL_NAMES:
        server.add_tool(getattr(tools, name), name=name)
    logger.debug(f"Registered {len(TOOL_NAMES)} MCP tools")
    return server
