from typing import ClassVar

from supervision.ai.chat import ChatResponder
from supervision.ai.client_base import BaseTextGenerationClient
from supervision.ai.example_client_adapter import ExampleClientAdapter
from supervision.ai.fallback import AiFallbackAdapter
from supervision.ai.openai_client_adapter import OpenAIClientAdapter
from supervision.config.settings import Settings


class AiClientFactory:
    """Creates the configured text generation client and the services built on it."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create_client(cls, settings: Settings) -> BaseTextGenerationClient:
        provider = settings.ai_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=settings.ai_api_key,
            timeout_seconds=settings.ai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def create_fallback(cls, settings: Settings) -> AiFallbackAdapter | None:
        """Return the fallback adapter, or None when the fallback is disabled."""
        if not settings.ai_fallback_enabled:
            return None
        return AiFallbackAdapter(
            client=cls.create_client(settings),
            model=settings.ai_model_name,
            temperature=settings.ai_temperature,
        )

    @classmethod
    def create_chat(cls, settings: Settings) -> ChatResponder:
        return ChatResponder(
            client=cls.create_client(settings),
            model=settings.ai_model_name,
            temperature=settings.ai_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        override = settings.ai_base_url.strip()
        if provider == "openai":
            return override or None
        if provider == "openai_compatible":
            if not override:
                raise ValueError(
                    "ai_base_url is required for ai_provider=openai_compatible"
                )
            return override
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return override or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown AI provider '{provider}'. Choose from: {supported}")
