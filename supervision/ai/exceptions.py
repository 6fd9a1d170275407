class AiError(Exception):
    """Raised when the generative text provider cannot produce an answer."""


class AiNetworkError(AiError):
    """Raised when the provider call fails due to network/infrastructure issues."""
