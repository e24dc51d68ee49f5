# insights/tests/test_generator.py
"""
External AI Generator Tests
===========================

Mock the OpenAI client to avoid costs and flakiness. Covers:
1. Deferred configuration (missing API key)
2. Success path and JSON mode
3. Mapping of provider failures to GenerationError codes
4. JSON extraction from model output
"""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
from django.test import SimpleTestCase, override_settings
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
)

from insights.exceptions import (
    GenerationError,
    GeneratorNotConfiguredError,
    MalformedResponseError,
)
from insights.generator import ExternalAIGenerator, parse_json

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def create_mock_openai_response(content: str | None) -> MagicMock:
    mock_choice = MagicMock()
    mock_choice.message.content = content

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    return mock_response


def status_error(cls, status_code: int):
    return cls(
        f"status {status_code}",
        response=httpx.Response(status_code, request=REQUEST),
        body=None,
    )


class TestConfiguration(SimpleTestCase):

    @override_settings(OPENAI_API_KEY="")
    def test_missing_key_leaves_generator_unconfigured(self) -> None:
        generator = ExternalAIGenerator()

        self.assertFalse(generator.is_configured)
        self.assertIn("OPENAI_API_KEY", generator.configuration_error)
        self.assertFalse(generator.health_check()["is_configured"])

    @override_settings(OPENAI_API_KEY="")
    def test_generate_without_key_raises_not_configured(self) -> None:
        with self.assertRaises(GeneratorNotConfiguredError) as ctx:
            ExternalAIGenerator().generate("hello")

        self.assertEqual(ctx.exception.error_code, "GENERATOR_NOT_CONFIGURED")

    @override_settings(OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-test", OPENAI_TIMEOUT=5)
    def test_settings_are_picked_up(self) -> None:
        generator = ExternalAIGenerator()

        self.assertTrue(generator.is_configured)
        self.assertEqual(generator.model, "gpt-test")
        self.assertEqual(generator.timeout, 5)


class TestGenerate(SimpleTestCase):

    def setUp(self) -> None:
        self.client = MagicMock()
        self.generator = ExternalAIGenerator(model="gpt-test", timeout=3, client=self.client)

    def test_returns_stripped_text(self) -> None:
        self.client.chat.completions.create.return_value = create_mock_openai_response("  Hello team.\n")

        self.assertEqual(self.generator.generate("Say hi"), "Hello team.")

        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["timeout"], 3)
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "Say hi"}])
        self.assertNotIn("response_format", kwargs)

    def test_json_mode_requests_json_object(self) -> None:
        self.client.chat.completions.create.return_value = create_mock_openai_response('{"a": 1}')

        self.assertEqual(self.generator.generate_json("Return JSON"), {"a": 1})

        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})

    def test_empty_response_raises(self) -> None:
        self.client.chat.completions.create.return_value = create_mock_openai_response(None)

        with self.assertRaises(GenerationError) as ctx:
            self.generator.generate("prompt")

        self.assertEqual(ctx.exception.error_code, "EMPTY_RESPONSE")

    def test_provider_errors_map_to_codes(self) -> None:
        cases = [
            (status_error(AuthenticationError, 401), "AUTH_ERROR"),
            (status_error(RateLimitError, 429), "RATE_LIMIT"),
            (APITimeoutError(request=REQUEST), "TIMEOUT"),
            (APIConnectionError(request=REQUEST), "CONNECTION_ERROR"),
            (status_error(BadRequestError, 400), "BAD_REQUEST"),
            (status_error(APIStatusError, 503), "API_ERROR_503"),
        ]

        for error, expected_code in cases:
            with self.subTest(expected_code=expected_code):
                self.client.chat.completions.create.side_effect = error

                with self.assertRaises(GenerationError) as ctx:
                    self.generator.generate("prompt")

                self.assertEqual(ctx.exception.error_code, expected_code)
                self.assertIs(ctx.exception.__cause__, error)


class TestParseJson(SimpleTestCase):

    def test_plain_json(self) -> None:
        self.assertEqual(parse_json('{"insight": "x"}'), {"insight": "x"})

    def test_code_fenced_json(self) -> None:
        self.assertEqual(parse_json('```json\n{"gaps": []}\n```'), {"gaps": []})

    def test_json_embedded_in_prose(self) -> None:
        text = 'Here is the result: {"skills": ["SQL"]} Hope this helps.'

        self.assertEqual(parse_json(text), {"skills": ["SQL"]})

    def test_invalid_json_raises(self) -> None:
        with self.assertRaises(MalformedResponseError) as ctx:
            parse_json("not json at all")

        self.assertEqual(ctx.exception.error_code, "JSON_PARSE_ERROR")

    def test_json_array_is_not_an_object(self) -> None:
        with self.assertRaises(MalformedResponseError):
            parse_json("[1, 2, 3]")

    def test_empty_text_raises(self) -> None:
        with self.assertRaises(MalformedResponseError) as ctx:
            parse_json("   ")

        self.assertEqual(ctx.exception.error_code, "EMPTY_RESPONSE")
