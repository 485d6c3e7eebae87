"""Tests for the generation client and Anthropic backend."""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import pytest

from conftest import FakeBackend
from seo_intelligence.config import PipelineConfig
from seo_intelligence.errors import (
    EmptyResponseError,
    GenerationFailure,
    MalformedOutputError,
    TransportFailure,
    ValidationError,
)
from seo_intelligence.generation_client import (
    STRATEGY_FALLBACK,
    AnthropicBackend,
    GenerationClient,
    build_content_blocks,
    parse_structured_output,
)
from seo_intelligence.models import BinaryInput, GenerationRequest, TextInput
from seo_intelligence.schemas import KEYWORD_LIST_SCHEMA, SMART_ANALYSIS_SCHEMA


class TestParseStructuredOutput:
    """Tests for parsing and validating backend text."""

    def test_valid_json(self, keyword_payload):
        """Test that conforming JSON is returned as parsed data."""
        result = parse_structured_output(json.dumps(keyword_payload), KEYWORD_LIST_SCHEMA)
        assert result == keyword_payload

    def test_code_fence_is_removed(self, keyword_payload):
        """Test that a single surrounding Markdown fence is treated as framing."""
        text = f"```json\n{json.dumps(keyword_payload)}\n```"
        assert parse_structured_output(text, KEYWORD_LIST_SCHEMA) == keyword_payload

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_empty_text(self, text):
        """Test that no text is an empty-response failure."""
        with pytest.raises(EmptyResponseError):
            parse_structured_output(text, KEYWORD_LIST_SCHEMA)

    def test_invalid_json(self):
        """Test that unparseable text is malformed output."""
        with pytest.raises(MalformedOutputError, match="not valid JSON"):
            parse_structured_output("Here are your keywords: [", KEYWORD_LIST_SCHEMA)

    def test_schema_violation_lists_details(self, keyword_payload):
        """Test that violations are attached to the error."""
        keyword_payload[0]["difficulty"] = 150

        with pytest.raises(MalformedOutputError) as exc_info:
            parse_structured_output(json.dumps(keyword_payload), KEYWORD_LIST_SCHEMA)

        assert exc_info.value.violations == ["$[0].difficulty: 150 is above maximum 100"]


class TestBuildContentBlocks:
    """Tests for assembling the prompt unit."""

    def test_prompt_only(self):
        """Test that the prompt is the only block without an attachment."""
        assert build_content_blocks("Analyze", None) == [{"type": "text", "text": "Analyze"}]

    def test_text_attachment(self):
        """Test that text content follows the prompt with its prefix."""
        blocks = build_content_blocks("Analyze", TextInput("Body copy"))

        assert blocks[0] == {"type": "text", "text": "Analyze"}
        assert blocks[1] == {"type": "text", "text": "Original Content:\nBody copy"}

    def test_pdf_attachment(self):
        """Test that a PDF becomes a document block followed by a restatement."""
        blocks = build_content_blocks("Analyze", BinaryInput("JVBERi0=", "application/pdf"))

        assert blocks[0]["text"] == "Analyze"
        assert blocks[1] == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": "JVBERi0="},
        }
        assert blocks[2] == {"type": "text", "text": "Here is the document to analyze and optimize."}

    def test_image_attachment(self):
        """Test that images become image blocks."""
        blocks = build_content_blocks("Analyze", BinaryInput("iVBORw==", "image/png"))
        assert blocks[1]["type"] == "image"

    def test_unsupported_attachment(self):
        """Test that unknown binary types are rejected before any call."""
        with pytest.raises(ValidationError, match="application/zip"):
            build_content_blocks("Analyze", BinaryInput("UEsDBA==", "application/zip"))


class TestGenerationClient:
    """Tests for GenerationClient.generate."""

    def test_structured_request(self, keyword_payload):
        """Test that the schema and profile reach the backend."""
        backend = FakeBackend(json.dumps(keyword_payload))
        client = GenerationClient(backend)

        result = client.generate("Find keywords", schema=KEYWORD_LIST_SCHEMA, profile="fast")

        assert result == keyword_payload
        request = backend.requests[0]
        assert request.output_schema is KEYWORD_LIST_SCHEMA
        assert request.profile == "fast"

    def test_free_form_text_is_verbatim(self):
        """Test that unstructured output is returned untouched."""
        html = "<section><h2>Month 1</h2></section>"
        client = GenerationClient(FakeBackend(html))

        assert client.generate("Plan") == html

    @pytest.mark.parametrize("response", [None, ""])
    def test_free_form_empty_uses_fallback(self, response):
        """Test that an empty strategy response yields the placeholder."""
        client = GenerationClient(FakeBackend(response))
        assert client.generate("Plan") == STRATEGY_FALLBACK

    def test_empty_prompt_rejected_before_call(self):
        """Test that a blank prompt never reaches the backend."""
        backend = FakeBackend("[]")
        client = GenerationClient(backend)

        with pytest.raises(ValidationError):
            client.generate("   ", attachment=BinaryInput("JVBERi0=", "application/pdf"))

        assert backend.requests == []

    def test_structured_empty_response(self):
        """Test that a structured call without text fails."""
        client = GenerationClient(FakeBackend(None))

        with pytest.raises(EmptyResponseError):
            client.generate("Analyze", schema=SMART_ANALYSIS_SCHEMA)


class TestAnthropicBackend:
    """Tests for the Anthropic backend with a mocked SDK client."""

    def _backend(self) -> AnthropicBackend:
        config = PipelineConfig(api_key="test-key", fast_model="fast-model", smart_model="smart-model")
        with patch("seo_intelligence.generation_client.anthropic.Anthropic"):
            backend = AnthropicBackend(config)
        backend.client = MagicMock()
        return backend

    def test_missing_api_key(self):
        """Test that the backend refuses to start without a key."""
        with pytest.raises(GenerationFailure, match="API key"):
            AnthropicBackend(PipelineConfig(api_key=None))

    def test_sdk_constructed_without_retries(self):
        """Test that the SDK never retries failed calls."""
        with patch("seo_intelligence.generation_client.anthropic.Anthropic") as mock_cls:
            AnthropicBackend(PipelineConfig(api_key="test-key"))

        assert mock_cls.call_args.kwargs["max_retries"] == 0
        assert mock_cls.call_args.kwargs["api_key"] == "test-key"

    def test_structured_send(self):
        """Test model selection, system prompt and text collection."""
        backend = self._backend()
        backend.client.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='[{"keyword": '),
                SimpleNamespace(type="text", text='"x"}]'),
            ]
        )
        request = GenerationRequest(
            prompt_text="Find keywords",
            output_schema=KEYWORD_LIST_SCHEMA,
            profile="fast",
            max_tokens=2048,
        )

        text = backend.send(request)

        assert text == '[{"keyword": "x"}]'
        kwargs = backend.client.messages.create.call_args.kwargs
        assert kwargs["model"] == "fast-model"
        assert kwargs["max_tokens"] == 2048
        assert '"difficulty"' in kwargs["system"]
        assert kwargs["messages"] == [
            {"role": "user", "content": [{"type": "text", "text": "Find keywords"}]}
        ]

    def test_free_form_send_has_no_system_prompt(self):
        """Test that unstructured requests carry no schema prompt."""
        backend = self._backend()
        backend.client.messages.create.return_value = SimpleNamespace(content=[])

        text = backend.send(GenerationRequest(prompt_text="Plan"))

        assert text == ""
        kwargs = backend.client.messages.create.call_args.kwargs
        assert "system" not in kwargs
        assert kwargs["model"] == "smart-model"

    def test_http_error_is_transport_failure(self):
        """Test that network errors surface once as TransportFailure."""
        backend = self._backend()
        backend.client.messages.create.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(TransportFailure, match="connection refused"):
            backend.send(GenerationRequest(prompt_text="Plan"))

        assert backend.client.messages.create.call_count == 1
