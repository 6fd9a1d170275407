from pathlib import Path

from supervision.ai.exceptions import AiError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load a prompt template bundled under ai/prompts.

    Args:
        name: File name of the bundled template, e.g. "fallback_prompt.txt".
        path: Explicit path overriding the bundled file.

    Returns:
        The raw template string with placeholders.

    Raises:
        AiError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AiError(f"Failed to load prompt template: {exc}") from exc
