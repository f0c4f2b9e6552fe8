"""Multi-provider LLM client for free-text generation."""

from __future__ import annotations

import logging

from interestmap.config import InterestmapSettings
from interestmap.providers import PROVIDERS

logger = logging.getLogger(__name__)


class LLMUsageTracker:
    """Accumulates token usage across multiple LLM calls.

    Safe to share across concurrent asyncio tasks (single-threaded event loop).
    """

    def __init__(self) -> None:
        self.input_tokens: int = 0
        self.output_tokens: int = 0
        self.calls: int = 0

    def record(self, input_tokens: int, output_tokens: int) -> None:
        """Record token usage from a single API call."""
        self.input_tokens += input_tokens
        self.output_tokens += output_tokens
        self.calls += 1

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMClient:
    """Unified interface for single-prompt text generation.

    Supports Gemini (Google), Claude (Anthropic), ChatGPT (OpenAI) and Local
    (Ollama).  SDK clients are created lazily on first use.
    """

    def __init__(self, settings: InterestmapSettings) -> None:
        self.settings = settings
        self.provider = settings.llm_provider
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")
        self.model = settings.llm_model or PROVIDERS[self.provider].default_model
        self._google_client: object | None = None
        self._anthropic_client: object | None = None
        self._openai_client: object | None = None
        self._local_client: object | None = None
        self.tracker = LLMUsageTracker()

        self._validate_api_key()

    def _validate_api_key(self) -> None:
        """Check that the required API key is configured (cloud providers only)."""
        spec = PROVIDERS[self.provider]
        if not spec.key_setting:
            return
        if not getattr(self.settings, spec.key_setting, ""):
            raise ValueError(
                f"{spec.display_name} API key not set. "
                f"Set {spec.env_var} in your .env file or environment. "
                f"Get a key from {spec.key_url}"
            )

    async def generate(self, prompt: str, max_tokens: int | None = None) -> str:
        """Send one user prompt and return the model's text reply.

        Raises:
            RuntimeError: If the provider returns no text.
        """
        max_tokens = max_tokens or self.settings.llm_max_tokens

        if self.provider == "google":
            return await self._generate_google(prompt, max_tokens)
        elif self.provider == "anthropic":
            return await self._generate_anthropic(prompt, max_tokens)
        elif self.provider == "openai":
            return await self._generate_openai(prompt, max_tokens)
        elif self.provider == "local":
            return await self._generate_local(prompt, max_tokens)
        else:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")

    async def _generate_google(self, prompt: str, max_tokens: int) -> str:
        """Call the Gemini API through the google-genai async client."""
        from google import genai
        from google.genai import types

        if self._google_client is None:
            self._google_client = genai.Client(api_key=self.settings.google_api_key)

        client: genai.Client = self._google_client  # type: ignore[assignment]

        logger.debug("Calling Gemini API: model=%s", self.model)

        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=max_tokens,
                temperature=self.settings.llm_temperature,
            ),
        )

        usage = getattr(response, "usage_metadata", None)
        if usage:
            self.tracker.record(
                usage.prompt_token_count or 0,
                usage.candidates_token_count or 0,
            )

        text = response.text
        if not text:
            raise RuntimeError("Empty response from Gemini")
        return text

    async def _generate_anthropic(self, prompt: str, max_tokens: int) -> str:
        """Call the Anthropic Messages API."""
        import anthropic

        if self._anthropic_client is None:
            self._anthropic_client = anthropic.AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
            )

        client: anthropic.AsyncAnthropic = self._anthropic_client  # type: ignore[assignment]

        logger.debug("Calling Anthropic API: model=%s", self.model)

        response = await client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=self.settings.llm_temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        if getattr(response, "usage", None):
            self.tracker.record(response.usage.input_tokens, response.usage.output_tokens)

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise RuntimeError("Empty response from Anthropic")
        return text

    async def _generate_openai(self, prompt: str, max_tokens: int) -> str:
        """Call the OpenAI chat completions API."""
        import openai

        if self._openai_client is None:
            self._openai_client = openai.AsyncOpenAI(
                api_key=self.settings.openai_api_key,
            )

        client: openai.AsyncOpenAI = self._openai_client  # type: ignore[assignment]

        logger.debug("Calling OpenAI API: model=%s", self.model)

        return await self._chat_completion(client, self.model, prompt, max_tokens, "OpenAI")

    async def _generate_local(self, prompt: str, max_tokens: int) -> str:
        """Call a local Ollama server through its OpenAI-compatible endpoint."""
        import openai

        if self._local_client is None:
            self._local_client = openai.AsyncOpenAI(
                base_url=self.settings.local_url,
                api_key="ollama",  # Required by SDK but ignored by Ollama
            )

        client: openai.AsyncOpenAI = self._local_client  # type: ignore[assignment]

        # local_model, when set, overrides llm_model (which load_settings fills in)
        model = self.settings.local_model or self.model
        logger.debug("Calling local API: url=%s model=%s", self.settings.local_url, model)

        return await self._chat_completion(client, model, prompt, max_tokens, "local model")

    async def _chat_completion(
        self,
        client: object,
        model: str,
        prompt: str,
        max_tokens: int,
        label: str,
    ) -> str:
        response = await client.chat.completions.create(  # type: ignore[attr-defined]
            model=model,
            max_tokens=max_tokens,
            temperature=self.settings.llm_temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        if getattr(response, "usage", None):
            self.tracker.record(
                response.usage.prompt_tokens or 0,
                response.usage.completion_tokens or 0,
            )

        content = response.choices[0].message.content
        if not content:
            raise RuntimeError(f"Empty response from {label}")
        return content
