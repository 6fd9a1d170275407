from abc import ABC, abstractmethod


class BaseTextGenerationClient(ABC):
    """A chat-style model that answers one prompt with free text."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Send one exchange and return the reply.

        An empty system_prompt sends the user prompt alone.

        Raises:
            AiError: if the provider fails or replies with nothing.
        """
