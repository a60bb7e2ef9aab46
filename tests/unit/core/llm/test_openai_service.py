"""
Unit tests for the OpenAI-compatible completion service.

Tests verify:
- The SDK client is built lazily, once, with retries disabled
- A missing credential puts the service in a sticky configuration-error state
- SDK failures surface as UpstreamError
- The first choice's text is returned, or "" when there is none
"""
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import openai

from core.errors import ConfigurationError, UpstreamError
from core.llm.interfaces import CompletionOptions
from core.llm.openai_service import ClientState, OpenAIService, env_credential_resolver

GROQ_URL = "https://api.groq.com/openai/v1"


def _response(*contents):
    choices = [SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    return SimpleNamespace(choices=choices)


class OpenAIServiceTestCase(unittest.TestCase):

    def setUp(self):
        self.client = MagicMock()
        self.client.chat.completions.create.return_value = _response("hello")
        self.factory = MagicMock(return_value=self.client)

    def make_service(self, resolver=lambda: "test-key", **kwargs):
        return OpenAIService(
            base_url=GROQ_URL,
            credential_resolver=resolver,
            client_factory=self.factory,
            **kwargs,
        )


class TestLazyInitialisation(OpenAIServiceTestCase):

    def test_client_is_not_built_until_first_completion(self):
        service = self.make_service()

        self.assertEqual(service.state, ClientState.UNINITIALIZED)
        self.factory.assert_not_called()

        service.complete([{"role": "user", "content": "hi"}])

        self.assertEqual(service.state, ClientState.READY)
        self.factory.assert_called_once_with(
            api_key="test-key",
            timeout=30.0,
            max_retries=0,
            base_url=GROQ_URL,
        )

    def test_client_is_built_once(self):
        service = self.make_service()

        service.complete([{"role": "user", "content": "one"}])
        service.complete([{"role": "user", "content": "two"}])

        self.assertEqual(self.factory.call_count, 1)

    def test_model_config_sets_model_and_timeout(self):
        service = self.make_service(model_config={"model": "llama-3.1-8b-instant", "timeout_seconds": 10})

        service.complete([{"role": "user", "content": "hi"}])

        self.assertEqual(self.factory.call_args.kwargs["timeout"], 10)
        self.assertEqual(self.client.chat.completions.create.call_args.kwargs["model"], "llama-3.1-8b-instant")

    def test_no_base_url_uses_sdk_default(self):
        service = OpenAIService(credential_resolver=lambda: "k", client_factory=self.factory)

        service.complete([{"role": "user", "content": "hi"}])

        self.assertNotIn("base_url", self.factory.call_args.kwargs)

    def test_explicit_api_key(self):
        service = OpenAIService(api_key="explicit", client_factory=self.factory)

        service.complete([{"role": "user", "content": "hi"}])

        self.assertEqual(self.factory.call_args.kwargs["api_key"], "explicit")


class TestConfigurationError(OpenAIServiceTestCase):

    def test_missing_credential_raises_and_is_sticky(self):
        resolver = MagicMock(return_value=None)
        service = self.make_service(resolver=resolver)

        with self.assertRaises(ConfigurationError):
            service.complete([{"role": "user", "content": "hi"}])
        self.assertEqual(service.state, ClientState.CONFIG_ERROR)

        # A credential appearing later is not picked up without reset()
        resolver.return_value = "late-key"
        with self.assertRaises(ConfigurationError):
            service.complete([{"role": "user", "content": "hi"}])

        self.assertEqual(resolver.call_count, 1)
        self.factory.assert_not_called()
        self.client.chat.completions.create.assert_not_called()

    def test_reset_resolves_credential_again(self):
        resolver = MagicMock(return_value="")
        service = self.make_service(resolver=resolver)
        with self.assertRaises(ConfigurationError):
            service.complete([{"role": "user", "content": "hi"}])

        resolver.return_value = "now-set"
        service.reset()

        self.assertEqual(service.complete([{"role": "user", "content": "hi"}]), "hello")
        self.assertEqual(service.state, ClientState.READY)

    def test_is_configured_does_not_build_client(self):
        configured = self.make_service()
        missing = self.make_service(resolver=lambda: None)

        self.assertTrue(configured.is_configured)
        self.assertFalse(missing.is_configured)
        self.factory.assert_not_called()

    def test_env_credential_resolver(self):
        resolver = env_credential_resolver("SKILLCONNECT_TEST_KEY")

        with patch.dict("os.environ", {"SKILLCONNECT_TEST_KEY": "from-env"}):
            self.assertEqual(resolver(), "from-env")
        with patch.dict("os.environ", {"SKILLCONNECT_TEST_KEY": ""}):
            self.assertIsNone(resolver())


class TestComplete(OpenAIServiceTestCase):

    def test_sends_messages_and_options(self):
        service = self.make_service()
        messages = [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "hi"},
        ]

        result = service.complete(messages, CompletionOptions(temperature=0.3, max_tokens=2000))

        self.assertEqual(result, "hello")
        self.client.chat.completions.create.assert_called_once_with(
            messages=messages,
            model="llama-3.3-70b-versatile",
            temperature=0.3,
            max_tokens=2000,
            top_p=1.0,
            stream=False,
        )

    def test_option_model_overrides_default(self):
        service = self.make_service()

        service.complete([{"role": "user", "content": "hi"}], CompletionOptions(model="other-model"))

        self.assertEqual(self.client.chat.completions.create.call_args.kwargs["model"], "other-model")

    def test_stream_option_is_never_forwarded(self):
        service = self.make_service()

        service.complete([{"role": "user", "content": "hi"}], CompletionOptions(stream=True))

        self.assertIs(self.client.chat.completions.create.call_args.kwargs["stream"], False)

    def test_first_choice_is_returned(self):
        self.client.chat.completions.create.return_value = _response("first", "second")
        self.assertEqual(self.make_service().complete([{"role": "user", "content": "hi"}]), "first")

    def test_no_choices_returns_empty_string(self):
        self.client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        self.assertEqual(self.make_service().complete([{"role": "user", "content": "hi"}]), "")

    def test_none_content_returns_empty_string(self):
        self.client.chat.completions.create.return_value = _response(None)
        self.assertEqual(self.make_service().complete([{"role": "user", "content": "hi"}]), "")


class TestUpstreamErrors(OpenAIServiceTestCase):

    def setUp(self):
        super().setUp()
        self.request = httpx.Request("POST", f"{GROQ_URL}/chat/completions")

    def test_timeout_becomes_upstream_error(self):
        self.client.chat.completions.create.side_effect = openai.APITimeoutError(request=self.request)

        with self.assertRaises(UpstreamError) as ctx:
            self.make_service().complete([{"role": "user", "content": "hi"}])

        self.assertIn("timed out", str(ctx.exception))

    def test_connection_error_becomes_upstream_error(self):
        self.client.chat.completions.create.side_effect = openai.APIConnectionError(request=self.request)

        with self.assertRaises(UpstreamError):
            self.make_service().complete([{"role": "user", "content": "hi"}])

    def test_status_error_becomes_upstream_error(self):
        response = httpx.Response(429, request=self.request)
        self.client.chat.completions.create.side_effect = openai.RateLimitError(
            "rate limited", response=response, body=None
        )

        with self.assertRaises(UpstreamError):
            self.make_service().complete([{"role": "user", "content": "hi"}])

    def test_upstream_error_keeps_state_ready(self):
        self.client.chat.completions.create.side_effect = openai.APIConnectionError(request=self.request)
        service = self.make_service()

        with self.assertRaises(UpstreamError):
            service.complete([{"role": "user", "content": "hi"}])

        self.assertEqual(service.state, ClientState.READY)


class TestCompletionOptions(unittest.TestCase):

    def test_defaults(self):
        options = CompletionOptions()

        self.assertIsNone(options.model)
        self.assertEqual(options.temperature, 0.7)
        self.assertEqual(options.max_tokens, 1024)
        self.assertEqual(options.top_p, 1.0)
        self.assertFalse(options.stream)

    def test_rejects_out_of_range_values(self):
        with self.assertRaises(ValueError):
            CompletionOptions(temperature=1.5)
        with self.assertRaises(ValueError):
            CompletionOptions(temperature=-0.1)
        with self.assertRaises(ValueError):
            CompletionOptions(max_tokens=0)


if __name__ == "__main__":
    unittest.main()
