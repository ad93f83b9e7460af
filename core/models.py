# =============================================================================
# core/models.py  —  Result Models (what every capability hands back)
# =============================================================================
#
# These dataclasses define the *shape* of every normalized result the Gemini
# client produces.  Upstream responses are deeply nested and vary per
# capability; the client flattens them into one of the records below.
#
# DESIGN PRINCIPLE — "Fixed Shapes":
#   A caller never has to probe an upstream response.  Empty answers come
#   back as empty strings and empty lists, never as None-or-missing.  The
#   only Optional fields are the ones where "absent" carries meaning
#   (e.g. upstream did not report a thinking token count).
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional


# -----------------------------------------------------------------------------
# Citation — one web source attached to a grounded answer
# -----------------------------------------------------------------------------
@dataclass
class Citation:
    """A web page the model grounded its answer on."""

    title: str                         # "Untitled" when upstream omits it
    uri: str


# -----------------------------------------------------------------------------
# SearchResult — output of Google Search grounding
# -----------------------------------------------------------------------------
@dataclass
class SearchResult:
    """Answer text plus the sources and sub-queries behind it."""

    text: str
    citations: list[Citation] = field(default_factory=list)
    search_queries: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# ThinkingResult — answer with the model's reasoning trace kept apart
# -----------------------------------------------------------------------------
@dataclass
class ThinkingResult:
    """Answer text and thought summary, never mixed."""

    text: str
    thinking: str = ""
    thinking_tokens: Optional[int] = None   # Only set when upstream reports it


# -----------------------------------------------------------------------------
# CodeExecutionResult — sandboxed Python run
# -----------------------------------------------------------------------------
@dataclass
class CodeExecutionResult:
    """Prose, generated code and execution output, each in its own field."""

    text: str
    code: str = ""                     # Code blocks joined with "\n"
    output: str = ""                   # Execution outputs joined with "\n"


# -----------------------------------------------------------------------------
# UrlMetadata / UrlContextResult — URL context retrieval
# -----------------------------------------------------------------------------
@dataclass
class UrlMetadata:
    url: str
    status: str                        # e.g. "URL_RETRIEVAL_STATUS_SUCCESS", or "UNKNOWN"


@dataclass
class UrlContextResult:
    text: str
    url_metadata: list[UrlMetadata] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Place / MapsResult — Google Maps grounding
# -----------------------------------------------------------------------------
@dataclass
class Place:
    """One place surfaced by Maps grounding."""

    title: str
    uri: str
    place_id: Optional[str] = None
    text: Optional[str] = None         # Short description, when upstream has one


@dataclass
class MapsResult:
    text: str
    places: list[Place] = field(default_factory=list)
    search_queries: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# FileQueryResult — upload + question about the uploaded file
# -----------------------------------------------------------------------------
@dataclass
class FileQueryResult:
    text: str
    file_name: str                     # Upstream identifier, e.g. "files/abc123"


# -----------------------------------------------------------------------------
# GeneratedImage / ImageResult — image generation and editing
# -----------------------------------------------------------------------------
# Both image endpoints (Imagen and Gemini native image output) produce this
# same record.  Image bytes are kept raw; encoding for transport (base64 for
# MCP) is the tool layer's job.
# -----------------------------------------------------------------------------
@dataclass
class GeneratedImage:
    data: bytes
    mime_type: str = "image/png"


@dataclass
class ImageResult:
    """Generated images in emission order plus any text the model added."""

    text: Optional[str] = None
    thinking: Optional[str] = None     # Only the Gemini endpoint emits thoughts
    images: list[GeneratedImage] = field(default_factory=list)
