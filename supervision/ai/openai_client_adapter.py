from typing import Any

import httpx
import openai

from supervision.ai.client_base import BaseTextGenerationClient
from supervision.ai.exceptions import AiError, AiNetworkError


class OpenAIClientAdapter(BaseTextGenerationClient):
    """Text generation over any OpenAI-compatible chat completions API (Gemini included).

    SDK retries are disabled; callers already fall back to the heuristic
    result or a fixed reply when a request fails.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=self._build_messages(system_prompt, user_prompt),  # type: ignore[arg-type]
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AiNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AiNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AiError(f"AI model {model} returned no choices")
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise AiError(f"AI model {model} returned an empty response")
        return content

    @staticmethod
    def _build_messages(system_prompt: str, user_prompt: str) -> list[dict[str, Any]]:
        user_message = {"role": "user", "content": user_prompt}
        if not system_prompt:
            return [user_message]
        return [{"role": "system", "content": system_prompt}, user_message]
