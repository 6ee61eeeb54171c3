"""
Text generation providers

Both providers go through the OpenAI SDK: OpenAI directly, and Google Gemini
through its OpenAI-compatible endpoint. The rest of the system only sees
TextGenerator.generate_text(prompt) -> str.
"""

import logging
from typing import Optional

from .config import AssistantConfig

logger = logging.getLogger(__name__)

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class TextGenerator:
    """Provider-agnostic text generation contract."""

    provider: str = "base"

    def generate_text(self, prompt: str) -> str:
        raise NotImplementedError("Subclasses must implement generate_text()")


class ChatCompletionGenerator(TextGenerator):
    """
    Single-turn chat completion through an OpenAI-compatible API.

    The client is created lazily on first use and cached.
    """

    provider = "openai"
    _env_var_name = "OPENAI_API_KEY"

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.1,
        timeout: float = 120.0,
        client=None,
    ):
        self.model = model
        self.temperature = temperature
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    def _get_client(self):
        """Get or create cached OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise RuntimeError(
                    f"{self.provider} client not initialized. Check {self._env_var_name}."
                )
            from openai import OpenAI
            kwargs = {"api_key": self._api_key, "timeout": self._timeout}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def generate_text(self, prompt: str) -> str:
        response = self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
        )
        content = response.choices[0].message.content
        logger.debug(f"{self.provider}/{self.model} returned {len(content or '')} chars")
        return content or ""


class GeminiGenerator(ChatCompletionGenerator):
    """Gemini models through Google's OpenAI-compatible endpoint."""

    provider = "google"
    _env_var_name = "GEMINI_API_KEY"

    def __init__(self, model: str, api_key: Optional[str] = None, **kwargs):
        kwargs.setdefault("base_url", GEMINI_OPENAI_BASE_URL)
        super().__init__(model, api_key=api_key, **kwargs)


def get_text_generator(config: Optional[AssistantConfig] = None) -> TextGenerator:
    """
    Factory function returning the generator for config.ai_provider.

    Args:
        config: AssistantConfig. "openai" or "google" (default).
    """
    config = config or AssistantConfig()
    if config.ai_provider == "openai":
        generator = ChatCompletionGenerator(
            model=config.openai_model,
            api_key=config.openai_api_key,
            temperature=config.temperature,
            timeout=config.request_timeout,
        )
    else:
        generator = GeminiGenerator(
            model=config.gemini_model,
            api_key=config.gemini_api_key,
            temperature=config.temperature,
            timeout=config.request_timeout,
        )
    logger.info(f"Text generation provider: {generator.provider} ({generator.model})")
    return generator
