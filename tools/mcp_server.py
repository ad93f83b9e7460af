# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL Gemini tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool an agent host can call.  Each tool is a thin
#   wrapper around one GeminiClient method (core/gemini_client.py): it
#   handles file I/O, picks the model and system prompt, and formats the
#   normalized result as MCP content.
#
# HOW IT WORKS (the flow):
#   1. The host decides it needs a capability (e.g. a grounded web search)
#   2. It calls a tool by name via MCP (e.g. "search_web")
#   3. FastMCP validates the arguments against the type hints below
#   4. The tool calls core/, formats the result, and returns it
#   5. Failures come back as MCP errors carrying a readable message
#
# ERRORS:
#   core/ raises InvalidRequestError (bad input) or GeminiError (upstream
#   failure, already classified).  Both, plus OSError from reading or saving
#   local images, are re-raised as FastMCP ToolError so the host receives
#   isError=true with the message text, never a traceback.
#
# RUNNING THIS SERVER:
#     a) Installed:   gemini-mcp-server
#     b) From source: python -m tools.mcp_server
#   Either way it speaks MCP over stdio.
# =============================================================================

import base64
import logging
import os
import sys
from contextlib import contextmanager

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import ImageContent, TextContent

from core.config import DEFAULT_IMAGE_MODEL, Config, ConfigError, load_config
from core.errors import GeminiError, InvalidRequestError
from core.gemini_client import GeminiClient
from core.models import (
    CodeExecutionResult,
    ImageResult,
    MapsResult,
    SearchResult,
    ThinkingResult,
    UrlContextResult,
)
from core.requests import AspectRatio, Resolution, ThinkingLevel
from tools.media import auto_save_path, read_image, save_image
from tools.prompts import (
    BRAINSTORM_PROMPT,
    CODE_EXECUTION_PROMPT,
    CODE_REVIEW_PROMPT,
    EXPLAIN_PROMPT,
    GOOGLE_MAPS_PROMPT,
    IMAGE_GENERATION_PROMPT,
    SEARCH_WEB_PROMPT,
    URL_CONTEXT_PROMPT,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the host over STDOUT.
# Anything printed to stdout would corrupt the JSON-RPC stream.
#
# ANSI colours: CYAN for tool calls, YELLOW for progress, GREEN for
# responses, RED for failures.
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_MAX_LOGGED_CHARS = 300

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("gemini_mcp")


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={_truncate(v)!r}" for k, v in params.items() if v is not None)
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: str) -> str:
    """Log the (truncated) tool response in GREEN, then return it."""
    logger.info(f"{_GREEN}  ← {tool_name} response: {_truncate(result)!r}{_RESET}")
    return result


def _truncate(value):
    if isinstance(value, str) and len(value) > _MAX_LOGGED_CHARS:
        return value[:_MAX_LOGGED_CHARS] + "…"
    return value


@contextmanager
def _tool_errors(tool_name: str):
    """Re-raise adapter and local file failures as ToolError so the host sees isError."""
    try:
        yield
    except (GeminiError, InvalidRequestError, ConfigError, OSError) as exc:
        logger.info(f"{_RED}  ✗ {tool_name} failed: {exc}{_RESET}")
        raise ToolError(str(exc)) from exc


# =============================================================================
# Lazily-built configuration and client
# =============================================================================
# Built on first tool call, not at import, so the server can start (and
# list its tools) before GEMINI_API_KEY is checked.
# =============================================================================
_config: Config | None = None
_client: GeminiClient | None = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_client() -> GeminiClient:
    global _client
    if _client is None:
        _client = GeminiClient(get_config())
    return _client


def _default_model(model: str | None) -> str:
    return model or get_config().default_model


def _require_file(path: str, label: str) -> str:
    resolved = os.path.abspath(path)
    if not os.path.exists(resolved):
        raise ToolError(f"{label} not found: {resolved}")
    return resolved


# =============================================================================
# Result formatting (normalized result → Markdown text for the host)
# =============================================================================
def format_search(result: SearchResult) -> str:
    text = result.text
    if result.citations:
        text += "\n\n---\n**Sources:**\n"
        for citation in result.citations:
            text += f"- [{citation.title}]({citation.uri})\n"
    if result.search_queries:
        text += f"\n**Search queries:** {', '.join(result.search_queries)}"
    return text


def format_thinking(result: ThinkingResult) -> str:
    text = ""
    if result.thinking:
        text += f"<thinking>\n{result.thinking}\n</thinking>\n\n"
    text += result.text
    if result.thinking_tokens:
        text += f"\n\n---\n*Thinking tokens used: {result.thinking_tokens}*"
    return text


def format_code_execution(result: CodeExecutionResult) -> str:
    text = result.text
    if result.code:
        text += "\n\n```python\n" + result.code + "\n```"
    if result.output:
        text += "\n\n**Output:**\n```\n" + result.output + "\n```"
    return text


def format_url_context(result: UrlContextResult) -> str:
    text = result.text
    if result.url_metadata:
        text += "\n\n---\n**URL Retrieval Status:**\n"
        for meta in result.url_metadata:
            status = "OK" if meta.status == "URL_RETRIEVAL_STATUS_SUCCESS" else meta.status
            text += f"- {meta.url}: {status}\n"
    return text


def format_maps(result: MapsResult) -> str:
    text = result.text
    if result.places:
        text += "\n\n---\n**Places:**\n"
        for place in result.places:
            text += f"- **{place.title}**"
            if place.uri:
                text += f" ([View]({place.uri}))"
            if place.text:
                text += f"\n  {place.text}"
            text += "\n"
    return text


def _image_tool_result(result: ImageResult, save_path: str, label: str) -> ToolResult:
    """Save the first image and return it inline plus a text note."""
    image = result.images[0]
    saved_to = save_image(image.data, save_path)
    _log_status(f"Saved {len(image.data)} bytes to {saved_to}")

    note = f"{label} saved to: {saved_to}"
    if result.text:
        note += f"\nModel notes: {result.text}"
    return ToolResult(content=[
        ImageContent(
            type="image",
            data=base64.b64encode(image.data).decode("ascii"),
            mimeType=image.mime_type,
        ),
        TextContent(type="text", text=note),
    ])


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP("gemini-mcp-server")


# =============================================================================
# TEXT TOOLS: ask / brainstorm / code_review / explain
# =============================================================================
# All four are plain generation.  They differ only in model, system prompt
# and how the user's input is framed.
# =============================================================================
@mcp.tool()
async def ask(prompt: str, model: str | None = None) -> str:
    """Flexible, general-purpose interface to query any Gemini model.

    Args:
        prompt: The question or instruction for Gemini.
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("ask", prompt=prompt, model=model)
    with _tool_errors("ask"):
        text = await get_client().generate(_default_model(model), prompt)
    return _log_response("ask", text)


@mcp.tool()
async def brainstorm(topic: str) -> str:
    """Creative ideation and brainstorming assistant using Gemini 3 Pro.

    Args:
        topic: The subject to brainstorm about.
    """
    _log_request("brainstorm", topic=topic)
    with _tool_errors("brainstorm"):
        text = await get_client().generate(
            "gemini-3-pro-preview", f"Brainstorm ideas about: {topic}", BRAINSTORM_PROMPT
        )
    return _log_response("brainstorm", text)


@mcp.tool()
async def code_review(code: str) -> str:
    """Thorough code analysis and review using Gemini 2.5 Pro.

    Args:
        code: The code to review.
    """
    _log_request("code_review", code=code)
    with _tool_errors("code_review"):
        text = await get_client().generate(
            "gemini-2.5-pro", f"Review this code:\n\n{code}", CODE_REVIEW_PROMPT
        )
    return _log_response("code_review", text)


@mcp.tool()
async def explain(concept: str) -> str:
    """Clear explanations of concepts, code, or technical topics using Gemini 3 Flash.

    Args:
        concept: What to explain (code, concept, or technical topic).
    """
    _log_request("explain", concept=concept)
    with _tool_errors("explain"):
        text = await get_client().generate(
            "gemini-3-flash-preview", f"Explain: {concept}", EXPLAIN_PROMPT
        )
    return _log_response("explain", text)


# =============================================================================
# IMAGE TOOLS: generate_image / edit_image / analyze_image
# =============================================================================
# Generated images are saved to disk (save_path, or a timestamped file in
# GEMINI_OUTPUT_DIR) AND returned inline so the host can display them.
# =============================================================================
@mcp.tool()
async def generate_image(
    prompt: str,
    model: str | None = None,
    aspect_ratio: AspectRatio | None = None,
    resolution: Resolution | None = None,
    save_path: str | None = None,
    use_search: bool = False,
) -> ToolResult:
    """Generate images using Gemini or Imagen models. Returns the image inline and saves it to disk.

    Args:
        prompt: Image generation prompt describing what to create.
        model: gemini-2.5-flash-image (default), gemini-3-pro-image-preview,
            imagen-4.0-generate-001 or imagen-4.0-fast-generate-001.
        aspect_ratio: "1:1", "16:9", "9:16", "4:3" or "3:4".
        resolution: "1K", "2K" or "4K" (Gemini models only).
        save_path: File path to save the image. Auto-generated if omitted.
        use_search: Ground the image in Google Search (gemini-3-pro-image-preview only).
    """
    _log_request("generate_image", prompt=prompt, model=model, aspect_ratio=aspect_ratio,
                 resolution=resolution, save_path=save_path, use_search=use_search)
    with _tool_errors("generate_image"):
        result = await get_client().generate_image(
            model or DEFAULT_IMAGE_MODEL,
            prompt,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
            system_prompt=IMAGE_GENERATION_PROMPT,
            use_search=use_search,
        )
    if not result.images:
        raise ToolError(
            "No image was generated. The model may have declined the request or "
            "encountered a safety filter. Try rephrasing your prompt."
        )
    _log_status(f"Got {len(result.images)} image(s)")
    path = save_path or auto_save_path(get_config().output_dir, "generated")
    with _tool_errors("generate_image"):
        return _image_tool_result(result, path, "Image")


@mcp.tool()
async def edit_image(
    prompt: str,
    image_path: str,
    model: str | None = None,
    aspect_ratio: AspectRatio | None = None,
    resolution: Resolution | None = None,
    save_path: str | None = None,
) -> ToolResult:
    """Edit an existing image using Gemini. Returns the edited image inline and saves it to disk.

    Args:
        prompt: Edit instructions describing what changes to make.
        image_path: Absolute path to the source image file to edit.
        model: Model to use (optional, defaults to gemini-2.5-flash-image).
        aspect_ratio: "1:1", "16:9", "9:16", "4:3" or "3:4".
        resolution: "1K", "2K" or "4K".
        save_path: File path to save the edited image. Auto-generated if omitted.
    """
    _log_request("edit_image", prompt=prompt, image_path=image_path, model=model,
                 aspect_ratio=aspect_ratio, resolution=resolution, save_path=save_path)
    source_path = _require_file(image_path, "Source image")
    with _tool_errors("edit_image"):
        source = read_image(source_path)
        result = await get_client().edit_image(
            model or DEFAULT_IMAGE_MODEL,
            prompt,
            source,
            aspect_ratio=aspect_ratio,
            resolution=resolution,
            system_prompt=IMAGE_GENERATION_PROMPT,
        )
    if not result.images:
        raise ToolError(
            "No edited image was generated. The model may have declined the request or "
            "encountered a safety filter. Try rephrasing your prompt."
        )
    path = save_path or auto_save_path(get_config().output_dir, "edited")
    with _tool_errors("edit_image"):
        return _image_tool_result(result, path, "Edited image")


@mcp.tool()
async def analyze_image(
    image_path: str,
    prompt: str = "Describe this image in detail",
    model: str | None = None,
) -> str:
    """Analyze an image using Gemini's vision model.

    Args:
        image_path: Absolute path to the image file to analyze.
        prompt: Question or instruction about the image.
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("analyze_image", image_path=image_path, prompt=prompt, model=model)
    resolved = _require_file(image_path, "Image")
    with _tool_errors("analyze_image"):
        image = read_image(resolved)
        text = await get_client().analyze_image(_default_model(model), prompt, image)
    return _log_response("analyze_image", text)


# =============================================================================
# GROUNDED TOOLS: search_web / google_maps / fetch_url
# =============================================================================
@mcp.tool()
async def search_web(
    query: str,
    model: str | None = None,
    excluded_domains: list[str] | None = None,
) -> str:
    """Search the web using Gemini with Google Search grounding. Returns citations and source URLs.

    Args:
        query: The search query or question to research on the web.
        model: Model identifier (optional, defaults to gemini-2.5-flash).
        excluded_domains: Exclude these domains from search (max 5).
    """
    _log_request("search_web", query=query, model=model, excluded_domains=excluded_domains)
    with _tool_errors("search_web"):
        result = await get_client().search_web(
            _default_model(model), query,
            system_prompt=SEARCH_WEB_PROMPT,
            exclude_domains=excluded_domains,
        )
    _log_status(f"{len(result.citations)} citation(s), {len(result.search_queries)} query(ies)")
    return _log_response("search_web", format_search(result))


@mcp.tool()
async def google_maps(
    query: str,
    latitude: float | None = None,
    longitude: float | None = None,
    model: str | None = None,
) -> str:
    """Location-aware queries using Google Maps grounding. Find places, reviews and location info.

    Args:
        query: Location-related query (e.g. "best coffee shops near me").
        latitude: Optional latitude for location context (give with longitude).
        longitude: Optional longitude for location context (give with latitude).
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("google_maps", query=query, latitude=latitude, longitude=longitude, model=model)
    with _tool_errors("google_maps"):
        result = await get_client().search_maps(
            _default_model(model), query,
            system_prompt=GOOGLE_MAPS_PROMPT,
            latitude=latitude,
            longitude=longitude,
        )
    _log_status(f"{len(result.places)} place(s)")
    return _log_response("google_maps", format_maps(result))


@mcp.tool()
async def fetch_url(prompt: str, urls: list[str], model: str | None = None) -> str:
    """Fetch and analyze web page content using Gemini's URL context tool.

    Args:
        prompt: Question or instruction about the URL content.
        urls: URLs to fetch and analyze (max 20).
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("fetch_url", prompt=prompt, urls=urls, model=model)
    with _tool_errors("fetch_url"):
        result = await get_client().fetch_url(
            _default_model(model), prompt, urls, system_prompt=URL_CONTEXT_PROMPT
        )
    return _log_response("fetch_url", format_url_context(result))


# =============================================================================
# REASONING & COMPUTE TOOLS: search_with_thinking / run_code
# =============================================================================
@mcp.tool()
async def search_with_thinking(
    prompt: str,
    model: str | None = None,
    thinking_level: ThinkingLevel | None = None,
    thinking_budget: int | None = None,
) -> str:
    """Query Gemini with extended thinking enabled. Shows the thought process alongside the answer.

    Args:
        prompt: The question or problem requiring deep reasoning.
        model: Model identifier (optional, defaults to gemini-2.5-flash).
        thinking_level: "minimal", "low", "medium" or "high" (Gemini 3 models; default "high").
        thinking_budget: Token budget for thinking (Gemini 2.5 models; default 8192, -1 for automatic).
    """
    _log_request("search_with_thinking", prompt=prompt, model=model,
                 thinking_level=thinking_level, thinking_budget=thinking_budget)
    with _tool_errors("search_with_thinking"):
        result = await get_client().generate_with_thinking(
            _default_model(model), prompt,
            thinking_level=thinking_level,
            thinking_budget=thinking_budget,
        )
    _log_status(f"thinking_tokens={result.thinking_tokens}")
    return _log_response("search_with_thinking", format_thinking(result))


@mcp.tool()
async def run_code(prompt: str, model: str | None = None) -> str:
    """Execute Python in Gemini's sandbox (NumPy, Pandas, Matplotlib, SciPy) for calculations and analysis.

    Args:
        prompt: What to compute or analyze. Gemini writes and runs the code.
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("run_code", prompt=prompt, model=model)
    with _tool_errors("run_code"):
        result = await get_client().execute_code(
            _default_model(model), prompt, system_prompt=CODE_EXECUTION_PROMPT
        )
    return _log_response("run_code", format_code_execution(result))


# =============================================================================
# FILE TOOL: upload_file
# =============================================================================
@mcp.tool()
async def upload_file(
    file_path: str,
    query: str | None = None,
    model: str | None = None,
) -> str:
    """Upload a document (txt, md, py, js, csv, json, pdf, ...) for Gemini to analyze, and ask about it.

    Args:
        file_path: Absolute path to the file to upload.
        query: Optional question about the file (defaults to a detailed summary).
        model: Model identifier (optional, defaults to gemini-2.5-flash).
    """
    _log_request("upload_file", file_path=file_path, query=query, model=model)
    path = _require_file(file_path, "File")
    with _tool_errors("upload_file"):
        result = await get_client().upload_and_query(_default_model(model), path, query)
    _log_status(f"Uploaded as {result.file_name}")
    return _log_response("upload_file", f"{result.text}\n\n---\n*File: {result.file_name}*")


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    load_dotenv()
    logger.info("Gemini MCP Server running on stdio")
    mcp.run()


if __name__ == "__main__":
    main()
