"""
Generation client for schema-constrained and free-form model output.

This module sends one prompt unit (instructions, optional attachment) to the
generative backend (Anthropic Claude), and turns the raw response text into
either validated JSON or free text. Failures surface once as typed errors;
nothing is retried.
"""

import json
import logging
import re
from typing import Any, Optional, Protocol, Union

import anthropic
import httpx

from .config import GenerationProfile, PipelineConfig
from .errors import (
    EmptyResponseError,
    GenerationFailure,
    MalformedOutputError,
    TransportFailure,
    ValidationError,
)
from .models import BinaryInput, GenerationRequest, NormalizedInput, TextInput
from .prompts import DOCUMENT_FOLLOWUP, JSON_OUTPUT_SYSTEM_PROMPT, ORIGINAL_CONTENT_PREFIX
from .schemas import SchemaDescriptor

logger = logging.getLogger(__name__)

# Returned by free-form generation when the backend produced no text
STRATEGY_FALLBACK = "<p>Could not generate strategy.</p>"

DOCUMENT_MEDIA_TYPES = {"application/pdf"}
IMAGE_MEDIA_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}

# A single ```json ... ``` wrapper around the whole response
_CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(.*?)\n?```$", re.DOTALL)


class GenerationBackend(Protocol):
    """Anything that can turn a GenerationRequest into raw response text."""

    def send(self, request: GenerationRequest) -> Optional[str]:
        """Return the backend's raw text, or None/empty when it produced none."""
        ...


class AnthropicBackend:
    """
    Generation backend talking directly to the Anthropic Messages API.

    Schema-constrained requests carry the rendered JSON Schema in the system
    prompt; the response text is returned untouched for the client to parse.
    """

    def __init__(self, config: PipelineConfig):
        """
        Initialize the backend.

        Args:
            config: Pipeline configuration (API key, models, timeouts).

        Raises:
            GenerationFailure: If no API key is configured.
        """
        if not config.has_api_key:
            raise GenerationFailure(
                "No API key provided. Set ANTHROPIC_API_KEY environment variable "
                "or pass --api-key."
            )

        self.config = config
        http_client = httpx.Client(
            timeout=httpx.Timeout(config.request_timeout, connect=config.connect_timeout),
            follow_redirects=True,
        )
        # Failed calls are surfaced to the caller once, never retried
        self.client = anthropic.Anthropic(
            api_key=config.api_key,
            http_client=http_client,
            max_retries=0,
        )

    def send(self, request: GenerationRequest) -> Optional[str]:
        """
        Send one request and collect the text of the response.

        Raises:
            ValidationError: If the attachment media type is not supported.
            TransportFailure: If the API is unreachable or rejects the call.
        """
        content = build_content_blocks(request.prompt_text, request.attachment)
        model = self.config.model_for(request.profile)

        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": request.max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        if request.output_schema is not None:
            kwargs["system"] = JSON_OUTPUT_SYSTEM_PROMPT.format(
                schema=json.dumps(request.output_schema.to_json_schema(), indent=2)
            )

        try:
            response = self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise TransportFailure(f"LLM API call failed: {e}")
        except httpx.HTTPError as e:
            raise TransportFailure(f"LLM API call failed: {e}")

        texts = [
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        ]
        return "".join(texts)


def build_content_blocks(
    prompt_text: str,
    attachment: Optional[NormalizedInput],
) -> list[dict[str, Any]]:
    """
    Assemble the user message content for one prompt unit.

    Args:
        prompt_text: Instructive prompt; always first.
        attachment: Optional text or binary document.

    Returns:
        List of Anthropic content blocks.

    Raises:
        ValidationError: If a binary attachment has an unsupported media type.
    """
    blocks: list[dict[str, Any]] = [{"type": "text", "text": prompt_text}]

    if isinstance(attachment, TextInput):
        blocks.append({"type": "text", "text": f"{ORIGINAL_CONTENT_PREFIX}{attachment.content}"})
    elif isinstance(attachment, BinaryInput):
        source = {
            "type": "base64",
            "media_type": attachment.mime_type,
            "data": attachment.data,
        }
        if attachment.mime_type in DOCUMENT_MEDIA_TYPES:
            blocks.append({"type": "document", "source": source})
        elif attachment.mime_type in IMAGE_MEDIA_TYPES:
            blocks.append({"type": "image", "source": source})
        else:
            raise ValidationError(f"Unsupported attachment type: {attachment.mime_type}")
        blocks.append({"type": "text", "text": DOCUMENT_FOLLOWUP})

    return blocks


def parse_structured_output(text: Optional[str], schema: SchemaDescriptor) -> Any:
    """
    Parse backend text as JSON and check it against a schema.

    A single Markdown code fence wrapping the whole response is treated as
    framing and removed. The JSON itself is never modified.

    Args:
        text: Raw backend text.
        schema: Expected output shape.

    Returns:
        The parsed JSON value.

    Raises:
        EmptyResponseError: If there is no text.
        MalformedOutputError: If the text is not JSON or violates the schema.
    """
    if text is None or not text.strip():
        raise EmptyResponseError()

    payload = text.strip()
    fenced = _CODE_FENCE.match(payload)
    if fenced:
        payload = fenced.group(1).strip()

    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"AI response is not valid JSON: {e}")

    violations = schema.validate(parsed)
    if violations:
        summary = "; ".join(violations[:5])
        if len(violations) > 5:
            summary += f" (+{len(violations) - 5} more)"
        raise MalformedOutputError(f"AI response does not match schema: {summary}", violations)

    return parsed


class GenerationClient:
    """
    Client for generation requests.

    Wraps a backend and applies the output contract of each request.
    """

    def __init__(self, backend: GenerationBackend):
        self.backend = backend

    def generate(
        self,
        prompt_text: str,
        attachment: Optional[NormalizedInput] = None,
        schema: Optional[SchemaDescriptor] = None,
        profile: GenerationProfile = "smart",
        max_tokens: int = 4096,
    ) -> Union[Any, str]:
        """
        Run one generation call.

        Args:
            prompt_text: Instructive prompt (required).
            attachment: Optional text or binary document.
            schema: Output contract. None means free-form text.
            profile: Model profile ("fast" or "smart").
            max_tokens: Output token limit.

        Returns:
            Parsed, schema-conformant JSON when a schema is given; otherwise
            the raw text, or STRATEGY_FALLBACK when the text is empty.

        Raises:
            ValidationError: If the request itself is invalid.
            EmptyResponseError: Structured call returned no text.
            MalformedOutputError: Structured call returned invalid output.
            TransportFailure: Backend unreachable.
        """
        request = GenerationRequest(
            prompt_text=prompt_text,
            attachment=attachment,
            output_schema=schema,
            profile=profile,
            max_tokens=max_tokens,
        )
        return self.run(request)

    def run(self, request: GenerationRequest) -> Union[Any, str]:
        """Run a prepared GenerationRequest. See generate()."""
        attachment_kind = type(request.attachment).__name__ if request.attachment else "none"
        logger.info(
            f"Generation request: profile={request.profile}, attachment={attachment_kind}, "
            f"structured={request.output_schema is not None}"
        )

        text = self.backend.send(request)

        if request.output_schema is None:
            if not text:
                logger.warning("Backend returned no text for free-form request; using fallback")
                return STRATEGY_FALLBACK
            logger.info(f"Free-form response received ({len(text)} chars)")
            return text

        parsed = parse_structured_output(text, request.output_schema)
        logger.info(f"Structured response received ({len(text or '')} chars)")
        return parsed


def create_generation_client(config: Optional[PipelineConfig] = None) -> GenerationClient:
    """
    Factory function to create a generation client backed by Anthropic.

    Args:
        config: Pipeline configuration. If None, read from the environment.

    Returns:
        Configured GenerationClient instance.
    """
    config = config or PipelineConfig.from_env()
    return GenerationClient(AnthropicBackend(config))
