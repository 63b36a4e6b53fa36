"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
"""


class LLMError(Exception):
    """Base exception for LLM-related errors.

    Provider failures are raised from the underlying SDK or transport error,
    so the root cause stays reachable through ``__cause__``.
    """

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass
