"""Example chat client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseChatClient and register the provider in ChatClientFactory.
"""

from docshield.scan.client_base import BaseChatClient
from docshield.scan.models import GenerationOptions


class ExampleClientAdapter(BaseChatClient):
    """Example adapter that answers every chunk with the same reply.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE = ""

    def __init__(self, response: str | None = None) -> None:
        self._response = self.DEFAULT_RESPONSE if response is None else response

    async def create_chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        _ = model, system_prompt, user_prompt, options
        return self._response

    async def list_models(self) -> list[str]:
        return ["example"]
