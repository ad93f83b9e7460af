# =============================================================================
# core/gemini_client.py  —  The Gemini Adapter
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps the google-genai async client and exposes ONE method per
#   capability.  Each method follows the same four steps:
#
#     1. VALIDATE   build a request record (core/requests.py); bad input
#                   raises InvalidRequestError before any network call
#     2. SHAPE      turn the record into SDK contents + GenerateContentConfig
#     3. RACE       await exactly one upstream call under a deadline
#                   (file upload: upload → serial poll → query)
#     4. NORMALIZE  flatten the response into a result model
#
#   Any failure in steps 2–4 leaves the method as a single GeminiError
#   (core/errors.py).
#
# THE DEADLINE RACE:
#   asyncio.wait_for() cancels the upstream task when the deadline fires,
#   and drops the timer when the call settles first.  A late upstream
#   result is never observed by the caller.
#
# NO SHARED CALL STATE:
#   The only attributes are the SDK client, the config and the sleep
#   function.  One GeminiClient can serve any number of sequential or
#   concurrent calls.
# =============================================================================

import asyncio
import logging
from contextlib import contextmanager

from google import genai
from google.genai import types

from core.config import (
    IMAGEN_PREFIX,
    SEARCH_IMAGE_MODEL,
    SUPPORTED_MODELS,
    THINKING_LEVEL_PREFIX,
    Config,
)
from core.errors import DeadlineExceeded, GeminiError, InvalidRequestError, classify_error
from core.fragments import response_text
from core.models import (
    CodeExecutionResult,
    FileQueryResult,
    ImageResult,
    MapsResult,
    SearchResult,
    ThinkingResult,
    UrlContextResult,
)
from core.normalize import (
    normalize_code_execution,
    normalize_image,
    normalize_imagen,
    normalize_maps,
    normalize_search,
    normalize_thinking,
    normalize_url_context,
)
from core.requests import (
    CodeExecutionRequest,
    FileQueryRequest,
    GenerateRequest,
    ImageAnalysisRequest,
    ImageEditRequest,
    ImageGenerationRequest,
    MapsRequest,
    MediaInput,
    SearchWebRequest,
    ThinkingRequest,
    UrlContextRequest,
    validate,
)
from core.uploads import FileUploadPoller, UploadFailed, upload_mime_type

logger = logging.getLogger(__name__)

DEFAULT_THINKING_LEVEL = "high"
DEFAULT_THINKING_BUDGET = 8192


def uses_thinking_level(model: str) -> bool:
    """Gemini 3 takes thinking_level; older families take thinking_budget."""
    return model.startswith(THINKING_LEVEL_PREFIX)


def is_imagen(model: str) -> bool:
    return model.startswith(IMAGEN_PREFIX)


def build_url_prompt(prompt: str, urls: list[str]) -> str:
    url_list = "\n".join(f"- {url}" for url in urls)
    return f"{prompt}\n\nURLs to analyze:\n{url_list}"


def _media_part(media: MediaInput) -> types.Part:
    return types.Part.from_bytes(data=media.data, mime_type=media.mime_type)


def _image_config(aspect_ratio, resolution):
    if not aspect_ratio and not resolution:
        return None
    return types.ImageConfig(aspect_ratio=aspect_ratio, image_size=resolution)


def _image_thinking(model: str):
    # Gemini 3 image models reason before drawing; older ones reject a
    # thinking config.
    if not uses_thinking_level(model):
        return None
    return types.ThinkingConfig(include_thoughts=True)


class GeminiClient:
    """Async adapter from tool calls to the Gemini API.

    Args:
        config: server settings (API key, base timeout).
        client: an existing ``genai.Client``; built from ``config`` if omitted.
        sleep: coroutine function used between file status polls.
    """

    def __init__(self, config: Config, client=None, sleep=asyncio.sleep):
        self._config = config
        self._client = client if client is not None else genai.Client(api_key=config.api_key)
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Plumbing: deadline race + failure classification
    # -------------------------------------------------------------------------
    async def _race(self, capability: str, awaitable):
        timeout = self._config.deadline(capability)
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError:
            raise DeadlineExceeded(f"{capability} exceeded {timeout:g}s") from None

    @contextmanager
    def _classified(self):
        try:
            yield
        except (GeminiError, InvalidRequestError):
            raise
        except Exception as exc:
            raise classify_error(exc) from exc

    async def _generate_content(self, capability: str, model: str, contents, config=None):
        logger.debug("%s → %s", capability, model)
        return await self._race(
            capability,
            self._client.aio.models.generate_content(model=model, contents=contents, config=config),
        )

    # -------------------------------------------------------------------------
    # Plain generation
    # -------------------------------------------------------------------------
    async def generate(self, model: str, prompt: str, system_prompt: str | None = None) -> str:
        request = validate(GenerateRequest, model=model, prompt=prompt, system_prompt=system_prompt)
        if request.model not in SUPPORTED_MODELS:
            raise InvalidRequestError(
                f"Unknown model '{request.model}'. "
                f"Available models: {', '.join(SUPPORTED_MODELS)}"
            )

        config = types.GenerateContentConfig(system_instruction=request.system_prompt)
        with self._classified():
            response = await self._generate_content("generate", request.model, request.prompt, config)
        return response_text(response)

    # -------------------------------------------------------------------------
    # Google Search grounding
    # -------------------------------------------------------------------------
    async def search_web(
        self,
        model: str,
        query: str,
        system_prompt: str | None = None,
        exclude_domains: list[str] | None = None,
    ) -> SearchResult:
        request = validate(
            SearchWebRequest,
            model=model, query=query, system_prompt=system_prompt,
            exclude_domains=exclude_domains,
        )
        search = types.GoogleSearch(exclude_domains=request.exclude_domains or None)
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            tools=[types.Tool(google_search=search)],
        )
        with self._classified():
            response = await self._generate_content("search_web", request.model, request.query, config)
        return normalize_search(response)

    # -------------------------------------------------------------------------
    # Thinking
    # -------------------------------------------------------------------------
    # The two thinking controls are mutually exclusive per model family, so
    # the model id decides which one is sent; the caller's other control
    # is ignored.
    # -------------------------------------------------------------------------
    async def generate_with_thinking(
        self,
        model: str,
        prompt: str,
        system_prompt: str | None = None,
        thinking_level: str | None = None,
        thinking_budget: int | None = None,
    ) -> ThinkingResult:
        request = validate(
            ThinkingRequest,
            model=model, prompt=prompt, system_prompt=system_prompt,
            thinking_level=thinking_level, thinking_budget=thinking_budget,
        )
        if uses_thinking_level(request.model):
            level = (request.thinking_level or DEFAULT_THINKING_LEVEL).upper()
            thinking = types.ThinkingConfig(include_thoughts=True, thinking_level=level)
        else:
            budget = request.thinking_budget
            if budget is None:
                budget = DEFAULT_THINKING_BUDGET
            thinking = types.ThinkingConfig(include_thoughts=True, thinking_budget=budget)

        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            thinking_config=thinking,
        )
        with self._classified():
            response = await self._generate_content("thinking", request.model, request.prompt, config)
        return normalize_thinking(response)

    # -------------------------------------------------------------------------
    # Code execution
    # -------------------------------------------------------------------------
    async def execute_code(
        self, model: str, prompt: str, system_prompt: str | None = None
    ) -> CodeExecutionResult:
        request = validate(CodeExecutionRequest, model=model, prompt=prompt, system_prompt=system_prompt)
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            tools=[types.Tool(code_execution=types.ToolCodeExecution())],
        )
        with self._classified():
            response = await self._generate_content("execute_code", request.model, request.prompt, config)
        return normalize_code_execution(response)

    # -------------------------------------------------------------------------
    # URL context
    # -------------------------------------------------------------------------
    async def fetch_url(
        self, model: str, prompt: str, urls: list[str], system_prompt: str | None = None
    ) -> UrlContextResult:
        request = validate(
            UrlContextRequest, model=model, prompt=prompt, urls=urls, system_prompt=system_prompt
        )
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            tools=[types.Tool(url_context=types.UrlContext())],
        )
        contents = build_url_prompt(request.prompt, request.urls)
        with self._classified():
            response = await self._generate_content("fetch_url", request.model, contents, config)
        return normalize_url_context(response)

    # -------------------------------------------------------------------------
    # Image generation
    # -------------------------------------------------------------------------
    # Two call shapes, picked by model id:
    #   imagen-*  → models.generate_images (dedicated synthesis endpoint)
    #   others    → models.generate_content with TEXT+IMAGE output
    # -------------------------------------------------------------------------
    async def generate_image(
        self,
        model: str,
        prompt: str,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        system_prompt: str | None = None,
        use_search: bool = False,
        reference_images: list[MediaInput] | None = None,
    ) -> ImageResult:
        request = validate(
            ImageGenerationRequest,
            model=model, prompt=prompt, aspect_ratio=aspect_ratio, resolution=resolution,
            system_prompt=system_prompt, use_search=use_search,
            reference_images=reference_images,
        )
        with self._classified():
            if is_imagen(request.model):
                return await self._generate_imagen(request)

            tools = None
            if request.use_search and request.model == SEARCH_IMAGE_MODEL:
                tools = [types.Tool(google_search=types.GoogleSearch())]
            elif request.use_search:
                logger.info("Search grounding not available for %s; ignoring", request.model)

            config = types.GenerateContentConfig(
                system_instruction=request.system_prompt,
                response_modalities=["TEXT", "IMAGE"],
                image_config=_image_config(request.aspect_ratio, request.resolution),
                thinking_config=_image_thinking(request.model),
                tools=tools,
            )
            contents = [_media_part(image) for image in request.reference_images]
            contents.append(request.prompt)
            response = await self._generate_content("generate_image", request.model, contents, config)
        return normalize_image(response)

    async def _generate_imagen(self, request: ImageGenerationRequest) -> ImageResult:
        config = types.GenerateImagesConfig(number_of_images=1, aspect_ratio=request.aspect_ratio)
        logger.debug("generate_image → %s (imagen)", request.model)
        response = await self._race(
            "generate_image",
            self._client.aio.models.generate_images(
                model=request.model, prompt=request.prompt, config=config
            ),
        )
        return normalize_imagen(response)

    # -------------------------------------------------------------------------
    # Image editing
    # -------------------------------------------------------------------------
    async def edit_image(
        self,
        model: str,
        prompt: str,
        image: MediaInput,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        system_prompt: str | None = None,
    ) -> ImageResult:
        request = validate(
            ImageEditRequest,
            model=model, prompt=prompt, image=image, aspect_ratio=aspect_ratio,
            resolution=resolution, system_prompt=system_prompt,
        )
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            response_modalities=["TEXT", "IMAGE"],
            image_config=_image_config(request.aspect_ratio, request.resolution),
            thinking_config=_image_thinking(request.model),
        )
        contents = [_media_part(request.image), request.prompt]
        with self._classified():
            response = await self._generate_content("edit_image", request.model, contents, config)
        return normalize_image(response)

    # -------------------------------------------------------------------------
    # Image analysis
    # -------------------------------------------------------------------------
    async def analyze_image(self, model: str, prompt: str, image: MediaInput) -> str:
        request = validate(ImageAnalysisRequest, model=model, prompt=prompt, image=image)
        config = types.GenerateContentConfig(response_modalities=["TEXT"])
        contents = [_media_part(request.image), request.prompt]
        with self._classified():
            response = await self._generate_content("analyze_image", request.model, contents, config)
        return response_text(response)

    # -------------------------------------------------------------------------
    # File upload + query
    # -------------------------------------------------------------------------
    async def upload_and_query(
        self, model: str, file_path: str, query: str | None = None
    ) -> FileQueryResult:
        request = validate(FileQueryRequest, model=model, file_path=file_path, query=query)
        mime_type = upload_mime_type(request.file_path)

        with self._classified():
            uploaded = await self._race(
                "file_upload",
                self._client.aio.files.upload(
                    file=request.file_path,
                    config=types.UploadFileConfig(mime_type=mime_type),
                ),
            )
            if not getattr(uploaded, "name", None):
                raise UploadFailed("File upload failed: no file name returned")
            logger.info("Uploaded %s as %s (%s)", request.file_path, uploaded.name, mime_type)

            poller = FileUploadPoller(self._file_status, sleep=self._sleep)
            active = await poller.wait_until_active(uploaded)

            file_part = types.Part.from_uri(
                file_uri=active.uri,
                mime_type=getattr(active, "mime_type", None) or mime_type,
            )
            response = await self._generate_content(
                "file_query", request.model, [file_part, request.query]
            )
        return FileQueryResult(text=response_text(response), file_name=uploaded.name)

    async def _file_status(self, name: str):
        return await self._race("file_status", self._client.aio.files.get(name=name))

    # -------------------------------------------------------------------------
    # Google Maps grounding
    # -------------------------------------------------------------------------
    async def search_maps(
        self,
        model: str,
        query: str,
        system_prompt: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> MapsResult:
        request = validate(
            MapsRequest,
            model=model, query=query, system_prompt=system_prompt,
            latitude=latitude, longitude=longitude,
        )
        tool_config = None
        if request.has_location:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(latitude=request.latitude, longitude=request.longitude)
                )
            )
        config = types.GenerateContentConfig(
            system_instruction=request.system_prompt,
            tools=[types.Tool(google_maps=types.GoogleMaps())],
            tool_config=tool_config,
        )
        with self._classified():
            response = await self._generate_content("search_maps", request.model, request.query, config)
        return normalize_maps(response)
