"""LLM client adapter: one prompt in, plain text out."""

import json
from typing import Any, Optional

import openai
from anthropic import AsyncAnthropic
from google import genai
from groq import AsyncGroq

from . import config
from .errors import EmptyResponseError, GenerationError, MalformedResponseError
from .logging_config import get_logger

logger = get_logger(__name__)

# Diagnostic dumps longer than this are truncated in the logs
MAX_PAYLOAD_CHARS = 4000


def _get(obj: Any, key: str) -> Any:
    """Read ``key`` from a dict or an attribute from an SDK object."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def describe_response(response: Any) -> str:
    """Dump a response envelope for debugging its shape."""
    try:
        if hasattr(response, "model_dump"):
            data = response.model_dump(exclude_none=True)
        else:
            data = response
        dump = json.dumps(data, indent=2, default=repr)
    except (TypeError, ValueError):
        dump = repr(response)
    if len(dump) > MAX_PAYLOAD_CHARS:
        dump = dump[:MAX_PAYLOAD_CHARS] + "... [truncated]"
    return f"{type(response).__name__}: {dump}"


def extract_text(response: Any) -> str:
    """Pull the generated text out of a response envelope.

    Probed in order:
        1. ``response.text``
        2. ``response.candidates[0].content.parts[*].text`` (concatenated)
        3. ``response.choices[0].message.content`` (OpenAI / Groq chat)
        4. ``response.content[*].text`` (Anthropic messages)

    Raises:
        MalformedResponseError: If no path yields text
    """
    text = _get(response, "text")
    if isinstance(text, str):
        return text

    candidates = _get(response, "candidates")
    if isinstance(candidates, (list, tuple)) and candidates:
        parts = _get(_get(candidates[0], "content"), "parts")
        if isinstance(parts, (list, tuple)):
            return "".join(_get(part, "text") or "" for part in parts)

    choices = _get(response, "choices")
    if isinstance(choices, (list, tuple)) and choices:
        content = _get(_get(choices[0], "message"), "content")
        if isinstance(content, str):
            return content

    blocks = _get(response, "content")
    if isinstance(blocks, (list, tuple)) and blocks:
        texts = [_get(block, "text") for block in blocks]
        if any(isinstance(t, str) for t in texts):
            return "".join(t for t in texts if isinstance(t, str))

    payload = describe_response(response)
    logger.error("Unexpected response structure: %s", payload)
    raise MalformedResponseError(
        "Unexpected response format from the language model.", payload=payload
    )


class LLMClient:
    """Send prompts to the configured language model.

    No retries, timeouts or cancellation: one call, one round trip.
    """

    # Model shortcut -> (provider, model id)
    AVAILABLE_MODELS = {
        "gemini": ("gemini", "gemini-2.5-flash"),
        "gpt-4o": ("openai", "gpt-4o"),
        "opus": ("anthropic", "claude-3-opus-20240229"),
        "llama": ("groq", "llama-3.3-70b-versatile"),
    }
    DEFAULT_MODEL = "gemini"

    MAX_TOKENS = 2500
    TEMPERATURE = 0.3

    def __init__(self, model_name: Optional[str] = None, api_key: Optional[str] = None):
        """Initialize the client.

        Args:
            model_name: Shortcut from AVAILABLE_MODELS (default: LLM_MODEL env
                variable, then "gemini"). Unknown names fall back to the default.
            api_key: Provider API key (default: read from the environment)

        Raises:
            ValueError: If the provider's API key is not configured
        """
        model_selection = (model_name or config.get_model_selection()).lower()
        if model_selection not in self.AVAILABLE_MODELS:
            logger.warning("Unknown model '%s', using %s", model_selection, self.DEFAULT_MODEL)
            model_selection = self.DEFAULT_MODEL

        self.provider, self.model_name = self.AVAILABLE_MODELS[model_selection]
        api_key = api_key or config.get_api_key(self.provider)

        self.gemini_client = None
        self.openai_client = None
        self.claude_client = None
        self.groq_client = None

        if self.provider == "gemini":
            self.gemini_client = genai.Client(api_key=api_key)
        elif self.provider == "openai":
            self.openai_client = openai.AsyncOpenAI(api_key=api_key)
        elif self.provider == "anthropic":
            self.claude_client = AsyncAnthropic(api_key=api_key)
        else:
            self.groq_client = AsyncGroq(api_key=api_key)

    async def _request(self, prompt: str) -> Any:
        """Issue the provider call and return the raw response envelope."""
        if self.provider == "gemini":
            return await self.gemini_client.aio.models.generate_content(
                model=self.model_name,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
            )
        if self.provider == "anthropic":
            return await self.claude_client.messages.create(
                model=self.model_name,
                max_tokens=self.MAX_TOKENS,
                temperature=self.TEMPERATURE,
                messages=[{"role": "user", "content": prompt}],
            )
        chat_client = self.openai_client if self.provider == "openai" else self.groq_client
        return await chat_client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.TEMPERATURE,
            max_tokens=self.MAX_TOKENS,
        )

    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt``.

        Returns:
            The model's text, untrimmed

        Raises:
            GenerationError: If the provider call fails
            MalformedResponseError: If the envelope has no recognizable text
            EmptyResponseError: If the text is empty after trimming
        """
        logger.info("Generating with %s (prompt: %d chars)", self.model_name, len(prompt))
        try:
            response = await self._request(prompt)
        except Exception as e:
            logger.exception("LLM request to %s failed", self.model_name)
            raise GenerationError(f"Error calling {self.model_name}: {e}") from e

        text = extract_text(response)
        if not text.strip():
            logger.error("Empty response from %s: %s", self.model_name, describe_response(response))
            raise EmptyResponseError(f"Received empty response from {self.model_name}")

        logger.info("Generated %d chars", len(text))
        return text
