from pathlib import Path

from supervision.ai.client_base import BaseTextGenerationClient
from supervision.ai.prompt_loader import load_prompt_template
from supervision.logging.logger import Log


class ChatResponder:
    """Answers user questions about one processed document."""

    def __init__(
        self,
        *,
        client: BaseTextGenerationClient,
        model: str,
        temperature: float = 0.2,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._prompt_template = load_prompt_template("chat_prompt.txt", prompt_template_path)

    def respond(self, message: str, document_text: str, analysis_text: str) -> str:
        prompt = self._prompt_template.format(
            document_text=document_text,
            analysis_text=analysis_text,
            message=message,
        )
        Log.debug(f"Chat prompt:\n{prompt}")
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt="",
            user_prompt=prompt,
        )
