"""Request and response models for diffscribe.

Contains Pydantic models for the service boundary:
- CommitSuggestionRequest: Options for generating suggestions
- CommitSuggestionResponse: Suggested messages plus a status message
- CommitExecutionRequest: A message to commit with
- ConnectionStatus: Result of an LLM connectivity check
"""

from typing import Optional

from pydantic import BaseModel, Field

from diffscribe.config import DEFAULT_MAX_SUGGESTIONS


class CommitSuggestionRequest(BaseModel):
    """Options for a suggestion run."""

    max_suggestions: int = Field(default=DEFAULT_MAX_SUGGESTIONS, ge=1)
    staged_first: bool = True  # Prefer 'git diff --cached' over 'git diff'
    heuristic_only: bool = False  # Skip the LLM entirely


class CommitSuggestionResponse(BaseModel):
    """Suggested commit messages and a human-readable status."""

    suggestions: list[str] = Field(default_factory=list)
    message: str


class CommitExecutionRequest(BaseModel):
    """A commit message chosen by the user.

    Blank messages are accepted here and rejected by the service.
    """

    message: Optional[str] = None


class ConnectionStatus(BaseModel):
    """Outcome of sending a trivial prompt to the configured LLM."""

    ok: bool
    provider: str
    model: str
    reply: Optional[str] = None
    error: Optional[str] = None
    diagnosis: Optional[str] = None
