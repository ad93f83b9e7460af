# =============================================================================
# agent/gemini_agent.py  —  Google ADK Agent wired to the Gemini tool server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds a Google ADK agent whose ONLY capabilities are the MCP tools in
#   tools/mcp_server.py.  It exists to drive the tool server end to end from
#   a console (main.py), exactly the way an external agent host would.
#
# HOW IT FITS TOGETHER:
#
#   ┌──────────────────────────┐   stdio (MCP)   ┌────────────────────────┐
#   │  ADK Agent (gemini-2.5)  │ ──────────────▶ │  FastMCP tool server   │
#   │  instruction + toolset   │ ◀────────────── │  (tools/mcp_server.py) │
#   └──────────────────────────┘                 └───────────┬────────────┘
#                                                            │
#                                                            ▼
#                                                ┌────────────────────────┐
#                                                │  core/ GeminiClient    │
#                                                │  → Gemini API          │
#                                                └────────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the tool server as a subprocess via "uv run", so the
#   subprocess uses the project's virtual environment, and talks to it over
#   stdin/stdout.  The tool list is discovered automatically.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_tool_host_prompt

AGENT_MODEL = "gemini-2.5-flash"


def create_agent(model: str = AGENT_MODEL) -> Agent:
    """Create an ADK agent connected to the Gemini MCP tool server.

    Args:
        model: Gemini model the agent itself reasons with.

    Returns:
        A configured Google ADK Agent instance.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=project_root,
        ),
    )

    return Agent(
        name="gemini_tool_host",
        model=model,
        instruction=get_tool_host_prompt(),
        tools=[mcp_tools],
    )
