"""
Service Exceptions

Exception classes shared by the translation service, the LLM providers and the
HTTP error handlers. Kept separate to avoid circular imports.
"""


class TranslationError(Exception):
    """Translation pipeline error with optional code and details."""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class LLMProviderError(Exception):
    """Raised by an LLM provider when the chat completion call fails."""

    def __init__(self, message: str, provider: str = None):
        super().__init__(message)
        self.provider = provider
