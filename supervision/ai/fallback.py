from pathlib import Path

from supervision.ai.client_base import BaseTextGenerationClient
from supervision.ai.prompt_loader import load_prompt_template
from supervision.inspection.elements import CLEANING_ELEMENTS
from supervision.logging.logger import Log


class AiFallbackAdapter:
    """Asks a generative model for the analysis text when the heuristics come up short.

    The reply is returned verbatim; its grammar is not validated.
    """

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
        self._prompt_template = load_prompt_template("fallback_prompt.txt", prompt_template_path)

    def analyze(self, text: str) -> str:
        """Return the model's analysis text for the document.

        Raises:
            AiError: if the provider call fails or returns nothing.
        """
        prompt = self.build_prompt(text)
        Log.info(f"Requesting AI analysis with model {self._model} ({len(text)} chars of text)")
        reply = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt="",
            user_prompt=prompt,
        )
        Log.info(f"AI analysis completed: {len(reply)} chars")
        return reply

    def build_prompt(self, text: str) -> str:
        element_lines = "\n".join(
            f'El estado del "{element}" es [estado]' for element in CLEANING_ELEMENTS
        )
        return self._prompt_template.format(element_lines=element_lines, document_text=text)
