# =============================================================================
# core/fragments.py  —  Response Fragment Classification
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Walks a Gemini GenerateContentResponse and sorts what it finds into the
#   fixed buckets the result models need.
#
# ONE CLASSIFIER, THREE USERS:
#   Thinking generation, image generation/editing and code execution all
#   need the same walk over candidate parts.  classify_parts() does it once;
#   each capability reads the buckets it cares about.
#
#   Every part goes into AT MOST ONE bucket, checked in this order:
#     thought=True          → thoughts (text only; draft images are dropped)
#     executable_code       → code
#     code_execution_result → output
#     inline_data           → images
#     text                  → text
#
# TOLERANCE:
#   Upstream omits fields freely (no candidates, no content, no grounding
#   metadata).  Everything here reads with getattr(..., None) and falls
#   back to empty values, so a response with nothing in it normalizes to an
#   empty-but-well-typed result instead of raising.
#
# PURITY:
#   These functions never mutate the response and never consult anything
#   but their argument.  Normalizing the same payload twice gives equal
#   results.
# =============================================================================

from dataclasses import dataclass, field

from core.models import Citation, GeneratedImage, Place, UrlMetadata

DEFAULT_IMAGE_MIME_TYPE = "image/png"
UNTITLED = "Untitled"
UNKNOWN_STATUS = "UNKNOWN"


@dataclass
class Fragments:
    """Buckets of one candidate's parts, each in emission order."""

    text: list[str] = field(default_factory=list)
    thoughts: list[str] = field(default_factory=list)
    code: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    images: list[GeneratedImage] = field(default_factory=list)

    @property
    def answer(self) -> str:
        return "".join(self.text)

    @property
    def thinking(self) -> str:
        return "".join(self.thoughts)


def _first_candidate(response):
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None


def _parts(response) -> list:
    candidate = _first_candidate(response)
    content = getattr(candidate, "content", None)
    return list(getattr(content, "parts", None) or [])


def classify_parts(response) -> Fragments:
    """Sort the first candidate's parts into mutually exclusive buckets."""
    fragments = Fragments()
    for part in _parts(response):
        executable = getattr(part, "executable_code", None)
        result = getattr(part, "code_execution_result", None)
        inline = getattr(part, "inline_data", None)
        text = getattr(part, "text", None)

        if getattr(part, "thought", False):
            if text:
                fragments.thoughts.append(text)
        elif executable is not None:
            if getattr(executable, "code", None):
                fragments.code.append(executable.code)
        elif result is not None:
            if getattr(result, "output", None):
                fragments.output.append(result.output)
        elif inline is not None:
            if getattr(inline, "data", None):
                fragments.images.append(GeneratedImage(
                    data=inline.data,
                    mime_type=getattr(inline, "mime_type", None) or DEFAULT_IMAGE_MIME_TYPE,
                ))
        elif text:
            fragments.text.append(text)
    return fragments


def response_text(response) -> str:
    """Concatenated non-thought text of the first candidate."""
    return classify_parts(response).answer


# -----------------------------------------------------------------------------
# Grounding metadata
# -----------------------------------------------------------------------------
def _grounding_metadata(response):
    return getattr(_first_candidate(response), "grounding_metadata", None)


def extract_citations(response) -> list[Citation]:
    """Web sources from grounding chunks; untitled ones become "Untitled"."""
    citations = []
    metadata = _grounding_metadata(response)
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        web = getattr(chunk, "web", None)
        if web is None or not getattr(web, "uri", None):
            continue
        citations.append(Citation(title=getattr(web, "title", None) or UNTITLED, uri=web.uri))
    return citations


def extract_places(response) -> list[Place]:
    """Places from maps grounding chunks only; web chunks are ignored."""
    places = []
    metadata = _grounding_metadata(response)
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        maps = getattr(chunk, "maps", None)
        if maps is None:
            continue
        places.append(Place(
            title=getattr(maps, "title", None) or UNTITLED,
            uri=getattr(maps, "uri", None) or "",
            place_id=getattr(maps, "place_id", None),
            text=getattr(maps, "text", None),
        ))
    return places


def extract_search_queries(response) -> list[str]:
    metadata = _grounding_metadata(response)
    return list(getattr(metadata, "web_search_queries", None) or [])


def extract_url_metadata(response) -> list[UrlMetadata]:
    """Per-URL retrieval status; missing status reads as "UNKNOWN"."""
    candidate = _first_candidate(response)
    context = getattr(candidate, "url_context_metadata", None)
    entries = []
    for meta in getattr(context, "url_metadata", None) or []:
        status = getattr(meta, "url_retrieval_status", None)
        # SDK statuses are enums; keep the wire name.
        status = getattr(status, "value", status)
        entries.append(UrlMetadata(
            url=getattr(meta, "retrieved_url", None) or "",
            status=str(status) if status else UNKNOWN_STATUS,
        ))
    return entries


def extract_thinking_tokens(response):
    usage = getattr(response, "usage_metadata", None)
    return getattr(usage, "thoughts_token_count", None)
