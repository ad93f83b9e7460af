# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server for the Gemini adapter.
#
# ARCHITECTURAL ROLE:
#   tools/ is the "translation layer" between an MCP host and core/.
#     1. mcp_server.py registers one MCP tool per capability
#     2. media.py reads source images and saves generated ones
#     3. prompts.py holds the per-tool system instructions
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk to Gemini directly (that's core/gemini_client.py)
#   - They do NOT classify errors (core/errors.py already did)
#   - They do NOT know which host is calling them
# =============================================================================
