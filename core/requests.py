# =============================================================================
# core/requests.py  —  Validated Invocation Records
# =============================================================================
#
# Every GeminiClient method builds one of these BEFORE touching the network.
# Pydantic does the shape checks (non-empty text, list bounds, coordinate
# ranges, enumerated aspect ratios); validate() turns a pydantic
# ValidationError into our InvalidRequestError so callers only ever catch
# one input-error type.
#
# ENUMERATIONS:
#   Aspect ratio and resolution tokens are passed to Gemini verbatim, so
#   they are kept exactly as the API spells them ("16:9", "2K", ...).
# =============================================================================

from typing import Annotated, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.errors import InvalidRequestError

AspectRatio = Literal["1:1", "16:9", "9:16", "4:3", "3:4"]
Resolution = Literal["1K", "2K", "4K"]
ThinkingLevel = Literal["minimal", "low", "medium", "high"]

MAX_EXCLUDED_DOMAINS = 5
MAX_URLS = 20
MAX_REFERENCE_IMAGES = 14
DEFAULT_FILE_QUERY = "Summarize this file in detail."

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: NonEmptyStr


class MediaInput(BaseModel):
    """Raw media bytes plus their declared type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(min_length=1)
    mime_type: NonEmptyStr


class GenerateRequest(_Request):
    prompt: NonEmptyStr
    system_prompt: Optional[str] = None


class SearchWebRequest(_Request):
    query: NonEmptyStr
    system_prompt: Optional[str] = None
    exclude_domains: Optional[list[str]] = Field(default=None, max_length=MAX_EXCLUDED_DOMAINS)


class ThinkingRequest(_Request):
    prompt: NonEmptyStr
    system_prompt: Optional[str] = None
    thinking_level: Optional[ThinkingLevel] = None
    thinking_budget: Optional[int] = Field(default=None, ge=-1)   # -1 = automatic


class CodeExecutionRequest(_Request):
    prompt: NonEmptyStr
    system_prompt: Optional[str] = None


class UrlContextRequest(_Request):
    prompt: NonEmptyStr
    urls: list[str] = Field(min_length=1, max_length=MAX_URLS)
    system_prompt: Optional[str] = None


class ImageGenerationRequest(_Request):
    prompt: NonEmptyStr
    aspect_ratio: Optional[AspectRatio] = None
    resolution: Optional[Resolution] = None
    system_prompt: Optional[str] = None
    use_search: bool = False
    reference_images: list[MediaInput] = Field(default_factory=list, max_length=MAX_REFERENCE_IMAGES)


class ImageEditRequest(_Request):
    prompt: NonEmptyStr
    image: MediaInput
    aspect_ratio: Optional[AspectRatio] = None
    resolution: Optional[Resolution] = None
    system_prompt: Optional[str] = None


class ImageAnalysisRequest(_Request):
    prompt: NonEmptyStr
    image: MediaInput


class FileQueryRequest(_Request):
    file_path: NonEmptyStr
    query: str = Field(default=DEFAULT_FILE_QUERY, min_length=1)


class MapsRequest(_Request):
    query: NonEmptyStr
    system_prompt: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _both_coordinates_or_neither(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

    @property
    def has_location(self) -> bool:
        return self.latitude is not None


RequestT = TypeVar("RequestT", bound=BaseModel)


def validate(request_cls: type[RequestT], **fields) -> RequestT:
    """Build ``request_cls`` from ``fields`` or raise InvalidRequestError.

    ``None`` values are dropped so that field defaults apply.
    """
    provided = {key: value for key, value in fields.items() if value is not None}
    try:
        return request_cls(**provided)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or request_cls.__name__}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidRequestError(f"Invalid {request_cls.__name__}: {problems}") from exc
