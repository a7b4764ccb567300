from typing import ClassVar

from docshield.config.settings import Settings
from docshield.scan.client_base import BaseChatClient
from docshield.scan.example_client_adapter import ExampleClientAdapter
from docshield.scan.exceptions import ScanError
from docshield.scan.ollama_client_adapter import OllamaClientAdapter
from docshield.scan.openai_client_adapter import OpenAIClientAdapter


class ChatClientFactory:
    """Creates the configured chat model client."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("example", "ollama", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings, base_url: str | None = None) -> BaseChatClient:
        """Create a client; *base_url* overrides the configured endpoint for one request."""
        provider = settings.model_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "ollama":
            return OllamaClientAdapter(
                base_url=base_url or settings.ollama_base_url,
                timeout_seconds=settings.ollama_timeout_seconds,
            )
        if provider == "openai_compatible":
            url = (base_url or settings.openai_compatible_base_url or "").strip()
            if not url:
                raise ScanError(
                    "openai_compatible_base_url is required for "
                    "model_provider=openai_compatible"
                )
            return OpenAIClientAdapter(
                api_key=settings.openai_compatible_api_key,
                timeout_seconds=settings.openai_compatible_timeout_seconds,
                base_url=url,
            )
        raise ScanError(
            f"Unknown model provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def resolve_model_name(cls, settings: Settings, override: str | None = None) -> str:
        if override:
            return override
        provider = settings.model_provider.lower()
        if provider == "openai_compatible":
            return settings.openai_compatible_model_name
        if provider == "example":
            return "example"
        return settings.ollama_model_name
