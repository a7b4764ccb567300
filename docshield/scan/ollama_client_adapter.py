import httpx

from docshield.scan.client_base import BaseChatClient
from docshield.scan.exceptions import ModelNetworkError, ModelResponseError
from docshield.scan.models import GenerationOptions


class OllamaClientAdapter(BaseChatClient):
    """Chat client for a local Ollama server (native ``/api/chat`` endpoint)."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        options: GenerationOptions,
    ) -> str:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "stream": False,
            "options": options.as_dict(),
        }
        data = await self._request("POST", "/api/chat", json=payload)

        message = data.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ModelResponseError("Model returned no message content")
        return content

    async def list_models(self) -> list[str]:
        data = await self._request("GET", "/api/tags")
        models = data.get("models")
        if not isinstance(models, list):
            raise ModelResponseError("Model server returned no model list")
        return [str(m.get("name", "")) for m in models if isinstance(m, dict)]

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: object) -> dict[str, object]:
        try:
            response = await self._client.request(method, path, **kwargs)  # type: ignore[arg-type]
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ModelNetworkError(
                f"Model server error: status {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ModelNetworkError(f"Model server network error: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelResponseError(f"Invalid JSON response: {exc}") from exc
        if not isinstance(data, dict):
            raise ModelResponseError("JSON response must be an object")
        return data
