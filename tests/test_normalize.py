"""
Tests for response fragment classification and normalization
(core/fragments.py, core/normalize.py).

Responses are hand-built SimpleNamespace fixtures; see tests/_helpers.py.
"""

from types import SimpleNamespace

from core.fragments import classify_parts, response_text
from core.models import Citation, GeneratedImage, Place, UrlMetadata
from core.normalize import (
    normalize_code_execution,
    normalize_image,
    normalize_imagen,
    normalize_maps,
    normalize_search,
    normalize_thinking,
    normalize_url_context,
)
from tests._helpers import (
    code_part,
    empty_response,
    grounding,
    image_part,
    imagen_response,
    make_response,
    maps_chunk,
    output_part,
    text_part,
    url_context,
    web_chunk,
)


class TestClassifyParts:

    def test_each_part_lands_in_one_bucket(self):
        response = make_response(
            text_part("Let me think. ", thought=True),
            text_part("Answer: "),
            code_part("print(6 * 7)"),
            output_part("42\n"),
            image_part(b"img"),
            text_part("42"),
        )
        fragments = classify_parts(response)
        assert fragments.thoughts == ["Let me think. "]
        assert fragments.text == ["Answer: ", "42"]
        assert fragments.code == ["print(6 * 7)"]
        assert fragments.output == ["42\n"]
        assert fragments.images == [GeneratedImage(data=b"img", mime_type="image/png")]

    def test_thoughts_never_leak_into_answer(self):
        response = make_response(text_part("secret reasoning", thought=True), text_part("final"))
        assert response_text(response) == "final"

    def test_missing_image_mime_type_defaults_to_png(self):
        response = make_response(image_part(b"img", mime_type=None))
        assert classify_parts(response).images[0].mime_type == "image/png"

    def test_empty_response(self):
        fragments = classify_parts(empty_response())
        assert fragments.answer == ""
        assert fragments.thinking == ""
        assert fragments.images == []

    def test_candidate_without_content(self):
        response = SimpleNamespace(candidates=[SimpleNamespace(content=None)])
        assert response_text(response) == ""

    def test_only_first_candidate_is_read(self):
        first = SimpleNamespace(content=SimpleNamespace(parts=[text_part("one")]))
        second = SimpleNamespace(content=SimpleNamespace(parts=[text_part("two")]))
        assert response_text(SimpleNamespace(candidates=[first, second])) == "one"


class TestNormalizeSearch:

    def test_citations_and_queries(self):
        response = make_response(
            text_part("Python 3.13 is out."),
            grounding_metadata=grounding(
                chunks=[web_chunk("https://python.org", "Python"), web_chunk("https://docs.python.org")],
                queries=["python latest release"],
            ),
        )
        result = normalize_search(response)
        assert result.text == "Python 3.13 is out."
        assert result.citations == [
            Citation(title="Python", uri="https://python.org"),
            Citation(title="Untitled", uri="https://docs.python.org"),
        ]
        assert result.search_queries == ["python latest release"]

    def test_chunks_without_uri_are_skipped(self):
        response = make_response(
            text_part("x"),
            grounding_metadata=grounding(chunks=[web_chunk(None, "No link")]),
        )
        assert normalize_search(response).citations == []

    def test_no_grounding_metadata(self):
        result = normalize_search(make_response(text_part("plain")))
        assert result.citations == []
        assert result.search_queries == []

    def test_same_payload_same_result(self):
        response = make_response(
            text_part("a"),
            grounding_metadata=grounding(chunks=[web_chunk("https://a.com", "A")], queries=["q"]),
        )
        assert normalize_search(response) == normalize_search(response)


class TestNormalizeThinking:

    def test_thoughts_and_answer_separated(self):
        response = make_response(
            text_part("Step 1. ", thought=True),
            text_part("Step 2.", thought=True),
            text_part("Done."),
            thoughts_tokens=512,
        )
        result = normalize_thinking(response)
        assert result.thinking == "Step 1. Step 2."
        assert result.text == "Done."
        assert result.thinking_tokens == 512

    def test_no_thoughts(self):
        result = normalize_thinking(make_response(text_part("Done.")))
        assert result.thinking == ""
        assert result.thinking_tokens is None


class TestNormalizeCodeExecution:

    def test_blocks_joined_with_newlines(self):
        response = make_response(
            text_part("Computed."),
            code_part("a = 1"),
            output_part("1"),
            code_part("b = 2"),
            output_part("2"),
        )
        result = normalize_code_execution(response)
        assert result.text == "Computed."
        assert result.code == "a = 1\nb = 2"
        assert result.output == "1\n2"

    def test_text_only(self):
        result = normalize_code_execution(make_response(text_part("No code needed.")))
        assert result.code == ""
        assert result.output == ""


class TestNormalizeUrlContext:

    def test_statuses(self):
        status_enum = SimpleNamespace(value="URL_RETRIEVAL_STATUS_SUCCESS")
        response = make_response(
            text_part("Summary"),
            url_context_metadata=url_context(
                ("https://a.com", status_enum),
                ("https://b.com", "URL_RETRIEVAL_STATUS_ERROR"),
                ("https://c.com", None),
            ),
        )
        result = normalize_url_context(response)
        assert result.url_metadata == [
            UrlMetadata(url="https://a.com", status="URL_RETRIEVAL_STATUS_SUCCESS"),
            UrlMetadata(url="https://b.com", status="URL_RETRIEVAL_STATUS_ERROR"),
            UrlMetadata(url="https://c.com", status="UNKNOWN"),
        ]

    def test_no_metadata(self):
        assert normalize_url_context(make_response(text_part("x"))).url_metadata == []


class TestNormalizeMaps:

    def test_only_maps_chunks_become_places(self):
        response = make_response(
            text_part("Try these."),
            grounding_metadata=grounding(
                chunks=[
                    maps_chunk("Blue Bottle", "https://maps.google.com/?cid=1", "place-1", "Great pour-over"),
                    web_chunk("https://blog.example.com", "Coffee blog"),
                    maps_chunk(None, None),
                ],
                queries=["coffee near me"],
            ),
        )
        result = normalize_maps(response)
        assert result.places == [
            Place(title="Blue Bottle", uri="https://maps.google.com/?cid=1",
                  place_id="place-1", text="Great pour-over"),
            Place(title="Untitled", uri=""),
        ]
        assert result.search_queries == ["coffee near me"]


class TestNormalizeImage:

    def test_text_thoughts_and_images(self):
        response = make_response(
            text_part("Composing...", thought=True),
            image_part(b"png-bytes"),
            text_part("Here you go."),
        )
        result = normalize_image(response)
        assert result.text == "Here you go."
        assert result.thinking == "Composing..."
        assert [image.data for image in result.images] == [b"png-bytes"]

    def test_draft_images_in_thoughts_are_dropped(self):
        """Only the finished image is returned; the model's draft stays out."""
        response = make_response(
            text_part("plan", thought=True),
            image_part(b"DRAFT", thought=True),
            image_part(b"FINAL"),
        )
        result = normalize_image(response)
        assert [image.data for image in result.images] == [b"FINAL"]
        assert result.thinking == "plan"
        assert result.text is None

    def test_thought_flag_wins_over_code(self):
        part = code_part("print('draft')")
        part.thought = True
        result = normalize_code_execution(make_response(part, code_part("print('final')")))
        assert result.code == "print('final')"

    def test_empty_text_is_none(self):
        result = normalize_image(make_response(image_part(b"png-bytes")))
        assert result.text is None
        assert result.thinking is None

    def test_empty_response_has_no_images(self):
        assert normalize_image(empty_response()).images == []


class TestNormalizeImagen:

    def test_images_only(self):
        response = imagen_response((b"one", "image/jpeg"), (b"two", None))
        result = normalize_imagen(response)
        assert result.text is None
        assert result.thinking is None
        assert result.images == [
            GeneratedImage(data=b"one", mime_type="image/jpeg"),
            GeneratedImage(data=b"two", mime_type="image/png"),
        ]

    def test_no_generated_images(self):
        assert normalize_imagen(SimpleNamespace(generated_images=None)).images == []
