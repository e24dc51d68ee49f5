# insights/generator.py
"""
External AI Generator
=====================

Thin client over the OpenAI Chat Completions API.

This module has NO Django ORM dependencies. It sends one prompt, returns the
text of the answer, and translates provider failures into
``GenerationError`` codes so that callers and the API error handler deal
with a single exception family.

Design Principles:
------------------
1. Deferred configuration: a missing API key never breaks start-up; it
   surfaces as ``GeneratorNotConfiguredError`` when a prompt is sent.
2. No silent fallbacks: every failure raises, nothing is cached upstream.
3. Testable: the OpenAI client can be injected and mocked.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from django.conf import settings
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    OpenAI,
    RateLimitError,
)

from .exceptions import (
    GenerationError,
    GeneratorNotConfiguredError,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*\n?")
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def parse_json(text: str) -> Dict[str, Any]:
    """
    Decode a JSON object from model output.

    Models wrap JSON in Markdown fences or add a sentence around it, so the
    fences are stripped first, then the whole text is tried, then the first
    ``{...}`` block.
    """
    cleaned = _CODE_FENCE_RE.sub("", text or "").strip()
    if not cleaned:
        raise MalformedResponseError("AI returned an empty response", "EMPTY_RESPONSE")

    candidates = [cleaned]
    match = _JSON_OBJECT_RE.search(cleaned)
    if match and match.group(0) != cleaned:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    logger.error(f"Failed to decode AI response as JSON: {cleaned[:200]}")
    raise MalformedResponseError("AI returned invalid JSON response")


class ExternalAIGenerator:
    """
    Sends prompts to the OpenAI Chat Completions API.

    Attributes:
        model (str): OpenAI model identifier.
        timeout (float): Per-request timeout in seconds.
        client (OpenAI | None): The OpenAI client, or None when unconfigured.
        is_configured (bool): Whether prompts can be sent.
        configuration_error (str | None): Why the generator is unconfigured.

    Example:
        >>> generator = ExternalAIGenerator()
        >>> if generator.is_configured:
        ...     text = generator.generate("Summarize the team in one sentence.")
    """

    DEFAULT_MODEL: str = "gpt-4o-mini"
    DEFAULT_TIMEOUT: float = 20.0  # Seconds
    DEFAULT_TEMPERATURE: float = 0.4
    DEFAULT_MAX_TOKENS: int = 800

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ) -> None:
        """
        Never raises. Missing settings leave ``is_configured`` False.

        Args:
            api_key: OpenAI API key. Falls back to settings.OPENAI_API_KEY.
            model: Model identifier. Falls back to settings.OPENAI_MODEL.
            timeout: Request timeout in seconds. Falls back to settings.OPENAI_TIMEOUT.
            client: A ready OpenAI client (tests inject a mock here).
        """
        self.model: str = model or getattr(settings, "OPENAI_MODEL", None) or self.DEFAULT_MODEL
        self.timeout: float = timeout or getattr(settings, "OPENAI_TIMEOUT", None) or self.DEFAULT_TIMEOUT

        self.client: Optional[OpenAI] = None
        self.is_configured: bool = False
        self.configuration_error: Optional[str] = None

        if client is not None:
            self.client = client
            self.is_configured = True
        else:
            self._configure(api_key)

    def _configure(self, api_key: Optional[str] = None) -> None:
        resolved_key = api_key or getattr(settings, "OPENAI_API_KEY", None) or ""
        if not resolved_key:
            self.configuration_error = (
                "OPENAI_API_KEY is not configured. "
                "Set the OPENAI_API_KEY environment variable or Django setting."
            )
            logger.warning(f"ExternalAIGenerator: {self.configuration_error}")
            return

        # The OpenAI constructor only validates its arguments; no network here
        self.client = OpenAI(api_key=resolved_key, timeout=self.timeout, max_retries=0)
        self.is_configured = True
        logger.info(f"ExternalAIGenerator initialized with model={self.model}")

    def generate(self, prompt: str, *, json_mode: bool = False) -> str:
        """
        Send one prompt and return the stripped text of the first choice.

        Raises:
            GeneratorNotConfiguredError: no API key.
            GenerationError: the provider failed or answered with nothing.
        """
        if not self.is_configured or self.client is None:
            raise GeneratorNotConfiguredError(
                self.configuration_error or "AI generator is not configured"
            )

        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.DEFAULT_TEMPERATURE,
            "max_tokens": self.DEFAULT_MAX_TOKENS,
            "timeout": self.timeout,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        logger.debug(f"ExternalAIGenerator: sending prompt ({len(prompt)} chars)")

        try:
            response = self.client.chat.completions.create(**request)

        # Order matters: the specific OpenAI errors subclass APIStatusError / APIConnectionError
        except AuthenticationError as e:
            logger.error(f"OpenAI authentication failed: {e}")
            raise GenerationError("Invalid API key or authentication failed", "AUTH_ERROR") from e

        except RateLimitError as e:
            logger.warning(f"OpenAI rate limit exceeded: {e}")
            raise GenerationError("API rate limit exceeded, please retry later", "RATE_LIMIT") from e

        except APITimeoutError as e:
            logger.warning(f"OpenAI API timeout: {e}")
            raise GenerationError("API request timed out", "TIMEOUT") from e

        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise GenerationError("Could not connect to OpenAI API", "CONNECTION_ERROR") from e

        except BadRequestError as e:
            logger.error(f"OpenAI bad request: {e}")
            raise GenerationError("Invalid request to OpenAI API", "BAD_REQUEST") from e

        except APIStatusError as e:
            logger.error(f"OpenAI API status error: {e.status_code} - {e}")
            raise GenerationError(
                f"OpenAI API error (status {e.status_code})", f"API_ERROR_{e.status_code}"
            ) from e

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()
        if not content:
            raise GenerationError("Empty response from AI", "EMPTY_RESPONSE")
        return content

    def generate_json(self, prompt: str) -> Dict[str, Any]:
        """``generate`` in JSON mode, decoded with ``parse_json``."""
        return parse_json(self.generate(prompt, json_mode=True))

    def health_check(self) -> Dict[str, Any]:
        return {
            "is_configured": self.is_configured,
            "model": self.model,
            "timeout": self.timeout,
            "configuration_error": self.configuration_error,
        }
