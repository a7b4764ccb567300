import httpx
import openai

from docshield.scan.client_base import BaseChatClient
from docshield.scan.exceptions import ModelNetworkError, ModelResponseError
from docshield.scan.models import GenerationOptions


class OpenAIClientAdapter(BaseChatClient):
    """Chat client for OpenAI-compatible endpoints (LM Studio, vLLM, Ollama ``/v1``)."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str | None = None,
    ) -> None:
        # Local servers ignore the key, but the SDK refuses an empty one.
        self._client = openai.AsyncOpenAI(
            api_key=api_key or "unused",
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=options.temperature,
                max_tokens=options.num_predict,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                extra_body={"options": options.as_dict()},
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ModelNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ModelNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise ModelResponseError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise ModelResponseError("AI returned empty response")
        return content

    async def list_models(self) -> list[str]:
        try:
            page = await self._client.models.list()
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ModelNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise ModelNetworkError(f"AI provider API error: {exc}") from exc
        return [model.id for model in page.data]

    async def aclose(self) -> None:
        await self._client.close()
