"""
Tests for request validation (core/requests.py).
"""

import pytest

from core.errors import InvalidRequestError
from core.requests import (
    DEFAULT_FILE_QUERY,
    FileQueryRequest,
    GenerateRequest,
    ImageEditRequest,
    ImageGenerationRequest,
    MapsRequest,
    MediaInput,
    SearchWebRequest,
    ThinkingRequest,
    UrlContextRequest,
    validate,
)

PNG = MediaInput(data=b"\x89PNG", mime_type="image/png")


class TestTextFields:

    def test_valid_generate_request(self):
        request = validate(GenerateRequest, model="gemini-2.5-flash", prompt="Hello")
        assert request.prompt == "Hello"
        assert request.system_prompt is None

    def test_empty_prompt_rejected(self):
        with pytest.raises(InvalidRequestError, match="prompt"):
            validate(GenerateRequest, model="gemini-2.5-flash", prompt="")

    def test_empty_model_rejected(self):
        with pytest.raises(InvalidRequestError, match="model"):
            validate(GenerateRequest, model="", prompt="Hello")

    def test_message_names_request_type(self):
        with pytest.raises(InvalidRequestError, match="Invalid GenerateRequest"):
            validate(GenerateRequest, model="gemini-2.5-flash", prompt="")

    def test_requests_are_immutable(self):
        request = validate(GenerateRequest, model="gemini-2.5-flash", prompt="Hello")
        with pytest.raises(Exception):
            request.prompt = "changed"


class TestExcludedDomains:

    def test_five_domains_accepted(self):
        domains = [f"site{i}.com" for i in range(5)]
        request = validate(SearchWebRequest, model="m", query="q", exclude_domains=domains)
        assert request.exclude_domains == domains

    def test_six_domains_rejected(self):
        domains = [f"site{i}.com" for i in range(6)]
        with pytest.raises(InvalidRequestError, match="exclude_domains"):
            validate(SearchWebRequest, model="m", query="q", exclude_domains=domains)


class TestUrls:

    def test_no_urls_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(UrlContextRequest, model="m", prompt="p", urls=[])

    def test_twenty_urls_accepted(self):
        urls = [f"https://example.com/{i}" for i in range(20)]
        assert len(validate(UrlContextRequest, model="m", prompt="p", urls=urls).urls) == 20

    def test_twenty_one_urls_rejected(self):
        urls = [f"https://example.com/{i}" for i in range(21)]
        with pytest.raises(InvalidRequestError):
            validate(UrlContextRequest, model="m", prompt="p", urls=urls)


class TestThinking:

    def test_unknown_level_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(ThinkingRequest, model="m", prompt="p", thinking_level="extreme")

    def test_automatic_budget_accepted(self):
        assert validate(ThinkingRequest, model="m", prompt="p", thinking_budget=-1).thinking_budget == -1

    def test_budget_below_automatic_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(ThinkingRequest, model="m", prompt="p", thinking_budget=-2)


class TestImages:

    def test_unknown_aspect_ratio_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(ImageGenerationRequest, model="m", prompt="p", aspect_ratio="2:1")

    def test_unknown_resolution_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(ImageGenerationRequest, model="m", prompt="p", resolution="8K")

    def test_fourteen_reference_images_accepted(self):
        request = validate(ImageGenerationRequest, model="m", prompt="p", reference_images=[PNG] * 14)
        assert len(request.reference_images) == 14

    def test_fifteen_reference_images_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(ImageGenerationRequest, model="m", prompt="p", reference_images=[PNG] * 15)

    def test_empty_image_bytes_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(MediaInput, data=b"", mime_type="image/png")

    def test_edit_requires_image(self):
        with pytest.raises(InvalidRequestError, match="image"):
            validate(ImageEditRequest, model="m", prompt="p")


class TestFileQuery:

    def test_default_query(self):
        request = validate(FileQueryRequest, model="m", file_path="/tmp/a.txt", query=None)
        assert request.query == DEFAULT_FILE_QUERY

    def test_empty_query_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(FileQueryRequest, model="m", file_path="/tmp/a.txt", query="")


class TestMapsLocation:

    def test_no_location(self):
        assert not validate(MapsRequest, model="m", query="coffee").has_location

    def test_both_coordinates(self):
        request = validate(MapsRequest, model="m", query="coffee", latitude=37.42, longitude=-122.08)
        assert request.has_location

    def test_latitude_only_rejected(self):
        with pytest.raises(InvalidRequestError, match="together"):
            validate(MapsRequest, model="m", query="coffee", latitude=37.42)

    def test_longitude_only_rejected(self):
        with pytest.raises(InvalidRequestError):
            validate(MapsRequest, model="m", query="coffee", longitude=-122.08)

    @pytest.mark.parametrize("latitude,longitude", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_out_of_range_rejected(self, latitude, longitude):
        with pytest.raises(InvalidRequestError):
            validate(MapsRequest, model="m", query="coffee", latitude=latitude, longitude=longitude)

    def test_range_limits_inclusive(self):
        request = validate(MapsRequest, model="m", query="q", latitude=-90, longitude=180)
        assert request.latitude == -90
