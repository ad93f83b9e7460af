# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent used as a console host for the
# Gemini tool server.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer plays the part of an external MCP host.  It:
#     1. Receives the user's request
#     2. Picks a Gemini tool (via MCP) to answer it
#     3. Relays the tool output back to the user
#
# WHAT THE AGENT IS NOT:
#   - It is NOT the Gemini adapter (that's in core/)
#   - It is NOT the tool implementations (that's in tools/)
#
# Nothing in core/ or tools/ imports this package.
# =============================================================================
