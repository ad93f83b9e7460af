# =============================================================================
# core/normalize.py  —  Upstream Response → Result Model
# =============================================================================
#
# One function per result shape.  Each takes the raw SDK response and
# returns a model from core/models.py, built only from core/fragments.py
# helpers.  Nothing here talks to the network, so every normalizer can be
# exercised with a hand-built fixture.
# =============================================================================

from core.fragments import (
    DEFAULT_IMAGE_MIME_TYPE,
    classify_parts,
    extract_citations,
    extract_places,
    extract_search_queries,
    extract_thinking_tokens,
    extract_url_metadata,
)
from core.models import (
    CodeExecutionResult,
    GeneratedImage,
    ImageResult,
    MapsResult,
    SearchResult,
    ThinkingResult,
    UrlContextResult,
)


def normalize_search(response) -> SearchResult:
    return SearchResult(
        text=classify_parts(response).answer,
        citations=extract_citations(response),
        search_queries=extract_search_queries(response),
    )


def normalize_thinking(response) -> ThinkingResult:
    fragments = classify_parts(response)
    return ThinkingResult(
        text=fragments.answer,
        thinking=fragments.thinking,
        thinking_tokens=extract_thinking_tokens(response),
    )


def normalize_code_execution(response) -> CodeExecutionResult:
    fragments = classify_parts(response)
    return CodeExecutionResult(
        text=fragments.answer,
        code="\n".join(fragments.code),
        output="\n".join(fragments.output),
    )


def normalize_url_context(response) -> UrlContextResult:
    return UrlContextResult(
        text=classify_parts(response).answer,
        url_metadata=extract_url_metadata(response),
    )


def normalize_maps(response) -> MapsResult:
    return MapsResult(
        text=classify_parts(response).answer,
        places=extract_places(response),
        search_queries=extract_search_queries(response),
    )


def normalize_image(response) -> ImageResult:
    """Gemini native image output: text, thoughts and inline images."""
    fragments = classify_parts(response)
    return ImageResult(
        text=fragments.answer or None,
        thinking=fragments.thinking or None,
        images=fragments.images,
    )


def normalize_imagen(response) -> ImageResult:
    """Imagen output: images only, no text and no thoughts."""
    images = []
    for generated in getattr(response, "generated_images", None) or []:
        image = getattr(generated, "image", None)
        data = getattr(image, "image_bytes", None)
        if not data:
            continue
        images.append(GeneratedImage(
            data=data,
            mime_type=getattr(image, "mime_type", None) or DEFAULT_IMAGE_MIME_TYPE,
        ))
    return ImageResult(images=images)
