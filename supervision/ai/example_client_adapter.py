"""Offline text generation client.

Returns a canned reply without any network call. Useful for local
development and tests; also the smallest example of a provider adapter.
"""

from supervision.ai.client_base import BaseTextGenerationClient


class ExampleClientAdapter(BaseTextGenerationClient):
    """Answers every prompt with the same fixed text."""

    DEFAULT_RESPONSE = (
        "Resultado análisis:\n"
        'El estado del "Techos" es No Determinado\n'
        "\n"
        "Observaciones:\n"
        "• Sin observaciones"
    )

    def __init__(self, response: str | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt
        return self._response
