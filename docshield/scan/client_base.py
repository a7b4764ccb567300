from abc import ABC, abstractmethod

from docshield.scan.models import GenerationOptions


class BaseChatClient(ABC):
    """Contract for provider-specific chat model clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        """Return the assistant message content as plain text.

        Raises:
            ModelNetworkError: on connection failure, timeout or non-2xx status.
            ModelResponseError: when the reply carries no message content.
        """

    @abstractmethod
    async def list_models(self) -> list[str]:
        """Return the names of the models the endpoint can serve."""

    async def aclose(self) -> None:
        """Release network resources held by the client."""
