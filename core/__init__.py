# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the Gemini adapter: request validation, the
# deadline race, response normalization and failure classification.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK or any other
#   orchestration framework.  The only outside world it knows is the
#   google-genai SDK, and even that is injected into GeminiClient, so the
#   whole package is testable with fakes and no network.
# =============================================================================
