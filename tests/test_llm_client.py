"""Unit tests for the LLM client adapter."""

import asyncio
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from src.referral_writer.errors import EmptyResponseError, GenerationError, MalformedResponseError
from src.referral_writer.llm_client import LLMClient, describe_response, extract_text


class TestExtractText(unittest.TestCase):
    """Test envelope probing."""

    def test_text_key(self):
        self.assertEqual(extract_text({"text": "Subject: X"}), "Subject: X")

    def test_text_attribute(self):
        self.assertEqual(extract_text(SimpleNamespace(text="hello")), "hello")

    def test_candidates_parts_concatenated_in_order(self):
        response = {"candidates": [{"content": {"parts": [{"text": "Sub"}, {"text": "ject: X"}]}}]}
        self.assertEqual(extract_text(response), "Subject: X")

    def test_candidates_skip_parts_without_text(self):
        response = {"candidates": [{"content": {"parts": [{"text": "A"}, {}, {"text": "B"}]}}]}
        self.assertEqual(extract_text(response), "AB")

    def test_none_text_falls_through_to_candidates(self):
        response = SimpleNamespace(
            text=None,
            candidates=[SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text="ok")]))],
        )
        self.assertEqual(extract_text(response), "ok")

    def test_chat_completion_shape(self):
        response = {"choices": [{"message": {"content": "from chat"}}]}
        self.assertEqual(extract_text(response), "from chat")

    def test_messages_shape(self):
        response = SimpleNamespace(content=[SimpleNamespace(text="from "), SimpleNamespace(text="claude")])
        self.assertEqual(extract_text(response), "from claude")

    def test_unknown_shape_raises_with_payload(self):
        with self.assertLogs("referral_writer", level="ERROR"):
            with self.assertRaises(MalformedResponseError) as ctx:
                extract_text({"foo": "bar"})
        self.assertIn('"foo"', ctx.exception.payload)
        self.assertNotIn("foo", str(ctx.exception))

    def test_empty_candidates_raises(self):
        with self.assertLogs("referral_writer", level="ERROR"):
            with self.assertRaises(MalformedResponseError):
                extract_text({"candidates": []})

    def test_describe_response_truncates(self):
        dump = describe_response({"text": "x" * 10000})
        self.assertTrue(dump.endswith("... [truncated]"))
        self.assertTrue(dump.startswith("dict: "))


class TestLLMClientInit(unittest.TestCase):
    """Test provider selection."""

    def setUp(self):
        self.env_patcher = patch.dict("os.environ", {
            "GEMINI_API_KEY": "test-gemini-key",
            "OPENAI_API_KEY": "test-openai-key",
            "ANTHROPIC_API_KEY": "test-anthropic-key",
            "GROQ_API_KEY": "test-groq-key",
            "LLM_MODEL": "gemini",
        })
        self.env_patcher.start()

    def tearDown(self):
        self.env_patcher.stop()

    @patch("src.referral_writer.llm_client.genai.Client")
    def test_default_is_gemini(self, mock_genai):
        client = LLMClient()
        self.assertEqual(client.provider, "gemini")
        self.assertEqual(client.model_name, "gemini-2.5-flash")
        mock_genai.assert_called_once_with(api_key="test-gemini-key")

    @patch("src.referral_writer.llm_client.openai.AsyncOpenAI")
    def test_gpt4o(self, mock_openai):
        client = LLMClient(model_name="gpt-4o")
        self.assertEqual(client.provider, "openai")
        mock_openai.assert_called_once_with(api_key="test-openai-key")
        self.assertIsNone(client.gemini_client)

    @patch("src.referral_writer.llm_client.AsyncAnthropic")
    def test_opus(self, mock_anthropic):
        client = LLMClient(model_name="opus")
        self.assertIn("opus", client.model_name)
        mock_anthropic.assert_called_once()

    @patch("src.referral_writer.llm_client.AsyncGroq")
    def test_llama(self, mock_groq):
        client = LLMClient(model_name="llama")
        self.assertEqual(client.provider, "groq")
        mock_groq.assert_called_once()

    @patch("src.referral_writer.llm_client.genai.Client")
    def test_unknown_model_falls_back(self, mock_genai):
        client = LLMClient(model_name="nonexistent")
        self.assertEqual(client.provider, "gemini")

    def test_missing_key_raises_value_error(self):
        with patch.dict("os.environ", {"GEMINI_API_KEY": ""}):
            with self.assertRaises(ValueError) as ctx:
                LLMClient(model_name="gemini")
        self.assertIn("GEMINI_API_KEY", str(ctx.exception))


class TestLLMClientGenerate(unittest.TestCase):
    """Test generate() against mocked SDK clients."""

    def setUp(self):
        self.genai_patcher = patch("src.referral_writer.llm_client.genai.Client")
        self.mock_genai = self.genai_patcher.start()
        self.sdk = MagicMock()
        self.sdk.aio.models.generate_content = AsyncMock()
        self.mock_genai.return_value = self.sdk
        self.client = LLMClient(model_name="gemini", api_key="k")

    def tearDown(self):
        self.genai_patcher.stop()

    def test_returns_untrimmed_text(self):
        self.sdk.aio.models.generate_content.return_value = {"text": "  Subject: X\n"}
        self.assertEqual(asyncio.run(self.client.generate("prompt")), "  Subject: X\n")

    def test_request_shape(self):
        self.sdk.aio.models.generate_content.return_value = {"text": "ok"}
        asyncio.run(self.client.generate("the prompt"))
        self.sdk.aio.models.generate_content.assert_awaited_once_with(
            model="gemini-2.5-flash",
            contents=[{"role": "user", "parts": [{"text": "the prompt"}]}],
        )

    def test_empty_text_raises(self):
        self.sdk.aio.models.generate_content.return_value = {"text": "   \n"}
        with self.assertLogs("referral_writer", level="ERROR"):
            with self.assertRaises(EmptyResponseError):
                asyncio.run(self.client.generate("prompt"))

    def test_sdk_error_wrapped(self):
        self.sdk.aio.models.generate_content.side_effect = RuntimeError("quota exceeded")
        with self.assertLogs("referral_writer", level="ERROR"):
            with self.assertRaises(GenerationError) as ctx:
                asyncio.run(self.client.generate("prompt"))
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)

    def test_malformed_is_generation_error(self):
        self.sdk.aio.models.generate_content.return_value = {"unexpected": True}
        with self.assertLogs("referral_writer", level="ERROR"):
            with self.assertRaises(GenerationError):
                asyncio.run(self.client.generate("prompt"))


class TestLLMClientOtherProviders(unittest.TestCase):
    """Test request routing for chat-style providers."""

    @patch("src.referral_writer.llm_client.AsyncAnthropic")
    def test_anthropic_messages(self, mock_anthropic):
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(return_value=SimpleNamespace(content=[SimpleNamespace(text="hi")]))
        mock_anthropic.return_value = sdk
        client = LLMClient(model_name="opus", api_key="k")

        self.assertEqual(asyncio.run(client.generate("p")), "hi")
        kwargs = sdk.messages.create.call_args.kwargs
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "p"}])
        self.assertEqual(kwargs["max_tokens"], LLMClient.MAX_TOKENS)

    @patch("src.referral_writer.llm_client.AsyncGroq")
    def test_groq_chat(self, mock_groq):
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(
            return_value={"choices": [{"message": {"content": "llama says"}}]}
        )
        mock_groq.return_value = sdk
        client = LLMClient(model_name="llama", api_key="k")

        self.assertEqual(asyncio.run(client.generate("p")), "llama says")
        self.assertEqual(sdk.chat.completions.create.call_args.kwargs["model"], "llama-3.3-70b-versatile")


if __name__ == "__main__":
    unittest.main()
