"""
LLM Client Abstraction

Provides unified interface for Google Gemini, Anthropic Claude and OpenAI.
Handles provider switching and fallback.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: LLMProvider
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    model: Optional[str] = None  # Overrides the primary provider's default
    max_tokens: int = 2048
    temperature: float = 0.2


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: LLMProvider
    usage: dict


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    DEFAULT_MODEL: str = ""

    def __init__(self, config: LLMConfig, model: Optional[str] = None):
        self.config = config
        self.model = model or self.DEFAULT_MODEL
        self._client = None

    @property
    @abstractmethod
    def provider(self) -> LLMProvider:
        pass

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass

    async def health_check(self) -> bool:
        """Check if the LLM service is accessible."""
        try:
            response = await self.generate("", "Hi", max_tokens=10)
            return response is not None
        except Exception as e:
            logger.error(f"{self.provider.value} health check failed: {e}")
            return False

    def _params(self, temperature: Optional[float], max_tokens: Optional[int]) -> tuple[float, int]:
        temp = temperature if temperature is not None else self.config.temperature
        tokens = max_tokens if max_tokens is not None else self.config.max_tokens
        return temp, tokens


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude client implementation."""

    DEFAULT_MODEL = "claude-3-5-haiku-latest"

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.ANTHROPIC

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic

                self._client = anthropic.AsyncAnthropic(
                    api_key=self.config.anthropic_api_key
                )
            except ImportError:
                raise RuntimeError(
                    "anthropic package not installed. Run: pip install anthropic"
                )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate response using Claude."""
        client = self._get_client()
        temp, tokens = self._params(temperature, max_tokens)

        kwargs = {
            "model": self.model,
            "max_tokens": tokens,
            "temperature": temp,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        try:
            response = await client.messages.create(**kwargs)
            return LLMResponse(
                content=response.content[0].text,
                model=self.model,
                provider=self.provider,
                usage={
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                },
            )
        except Exception as e:
            logger.error(f"Anthropic API error: {e}")
            raise


class OpenAIClient(BaseLLMClient):
    """OpenAI GPT client implementation."""

    DEFAULT_MODEL = "gpt-4o-mini"

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.OPENAI

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                import openai

                self._client = openai.AsyncOpenAI(api_key=self.config.openai_api_key)
            except ImportError:
                raise RuntimeError(
                    "openai package not installed. Run: pip install openai"
                )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate response using GPT."""
        client = self._get_client()
        temp, tokens = self._params(temperature, max_tokens)

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": temp,
            "max_tokens": tokens,
        }
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
            return LLMResponse(
                content=response.choices[0].message.content,
                model=self.model,
                provider=self.provider,
                usage={
                    "prompt_tokens": response.usage.prompt_tokens,
                    "completion_tokens": response.usage.completion_tokens,
                    "total_tokens": response.usage.total_tokens,
                },
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise


class GeminiClient(BaseLLMClient):
    """Google Gemini client implementation."""

    DEFAULT_MODEL = "gemini-2.5-flash"

    @property
    def provider(self) -> LLMProvider:
        return LLMProvider.GEMINI

    def _get_model(self):
        """Lazy initialization of the Gemini model."""
        if self._client is None:
            try:
                import google.generativeai as genai

                genai.configure(api_key=self.config.gemini_api_key)
                self._client = genai.GenerativeModel(self.model)
            except ImportError:
                raise RuntimeError(
                    "google-generativeai package not installed. Run: pip install google-generativeai"
                )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """Generate response using Gemini."""
        model = self._get_model()
        temp, tokens = self._params(temperature, max_tokens)

        # Gemini takes a single prompt
        full_prompt = f"{system_prompt}\n\n---\n\n{user_prompt}" if system_prompt else user_prompt

        generation_config = {
            "temperature": temp,
            "max_output_tokens": tokens,
        }
        if json_output:
            generation_config["response_mime_type"] = "application/json"

        try:
            # Gemini's generate_content is synchronous, wrap in executor
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: model.generate_content(
                    full_prompt,
                    generation_config=generation_config,
                ),
            )
            usage = getattr(response, "usage_metadata", None)
            return LLMResponse(
                content=response.text,
                model=self.model,
                provider=self.provider,
                usage={
                    "prompt_tokens": usage.prompt_token_count if usage else 0,
                    "completion_tokens": usage.candidates_token_count if usage else 0,
                },
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise


CLIENT_CLASSES = {
    LLMProvider.GEMINI: GeminiClient,
    LLMProvider.ANTHROPIC: AnthropicClient,
    LLMProvider.OPENAI: OpenAIClient,
}

# Fallback order after the primary provider
FALLBACK_ORDER = {
    LLMProvider.GEMINI: (LLMProvider.ANTHROPIC, LLMProvider.OPENAI),
    LLMProvider.ANTHROPIC: (LLMProvider.GEMINI, LLMProvider.OPENAI),
    LLMProvider.OPENAI: (LLMProvider.GEMINI, LLMProvider.ANTHROPIC),
}


class LLMClient:
    """
    Unified LLM client with provider switching and fallback.

    Primary provider is tried first.
    Falls back to the first other provider with a key on failure.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self._primary: Optional[BaseLLMClient] = None
        self._fallback: Optional[BaseLLMClient] = None
        self._setup_clients()

    def _has_key(self, provider: LLMProvider) -> bool:
        return bool(getattr(self.config, f"{provider.value}_api_key"))

    def _setup_clients(self):
        """Setup primary and fallback clients based on config."""
        if self._has_key(self.config.provider):
            self._primary = CLIENT_CLASSES[self.config.provider](self.config, self.config.model)

        for provider in FALLBACK_ORDER[self.config.provider]:
            if self._has_key(provider):
                self._fallback = CLIENT_CLASSES[provider](self.config)
                break

        if not self.is_configured:
            logger.warning("No LLM API keys configured. LLM features disabled.")

    @property
    def is_configured(self) -> bool:
        return self._primary is not None or self._fallback is not None

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_output: bool = False,
    ) -> LLMResponse:
        """
        Generate LLM response with automatic fallback.

        Tries primary provider first, falls back to secondary on failure.
        """
        if not self.is_configured:
            raise RuntimeError("No LLM providers configured")

        kwargs = {
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "json_output": json_output,
        }

        if self._primary:
            try:
                return await self._primary.generate(**kwargs)
            except Exception as e:
                logger.warning(f"Primary LLM failed: {e}, trying fallback...")
                if self._fallback is None:
                    raise

        return await self._fallback.generate(**kwargs)

    async def health_check(self) -> bool:
        """Check if any LLM provider is accessible."""
        if self._primary and await self._primary.health_check():
            return True
        if self._fallback and await self._fallback.health_check():
            return True
        return False

    def get_active_provider(self) -> Optional[LLMProvider]:
        """Get the provider that will be tried first."""
        if self._primary:
            return self._primary.provider
        if self._fallback:
            return self._fallback.provider
        return None


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from tradeguard.core.config import settings

        config = LLMConfig(
            provider=LLMProvider(settings.llm_primary_provider),
            anthropic_api_key=settings.anthropic_api_key,
            openai_api_key=settings.openai_api_key,
            gemini_api_key=settings.gemini_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        _llm_client = LLMClient(config)
    return _llm_client
