"""Commit message service for diffscribe.

Contains:
- CommitMessageService: Collects the diff, analyzes it and asks the LLM for
  commit message suggestions, falling back to heuristics when no LLM is
  available. Also checks LLM connectivity and commits with a chosen message.
"""

import logging
import os
import tempfile
import threading
import time
from typing import Optional

from diffscribe import config
from diffscribe.analysis import AnalysisSummary, analyze_changes, parse_diff, synthesize_messages
from diffscribe.config import LanguageProfile
from diffscribe.git import (
    GitError,
    GitRunner,
    NoChangesError,
    collect_changed_files,
    require_diff,
)
from diffscribe.llm import (
    BaseLLMProvider,
    LanguageComplianceGate,
    MissingAPIKeyError,
    RetryingInvoker,
    build_prompt,
    diagnose,
    get_provider,
    parse_suggestions,
    summarize,
)
from diffscribe.models import (
    CommitExecutionRequest,
    CommitSuggestionRequest,
    CommitSuggestionResponse,
    ConnectionStatus,
)

logger = logging.getLogger(__name__)

NO_CHANGES_MESSAGE = "No changes found."
CONNECTION_TEST_PROMPT = "Hello, respond with just 'OK'"


class CommitMessageService:
    """Turns pending git changes into commit message suggestions.

    Each call collects its own diff and builds its own analysis; the service
    keeps no state between requests.
    """

    def __init__(
        self,
        runner: GitRunner,
        provider: Optional[BaseLLMProvider] = None,
        language: Optional[LanguageProfile] = None,
        max_attempts: Optional[int] = None,
        base_backoff: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """Initialize the service.

        Args:
            runner: Git runner bound to the repository.
            provider: LLM provider to use. Defaults to the configured provider,
                built on first use.
            language: Target language. Defaults to ACTIVE_LANGUAGE.
            max_attempts: Retry ceiling for model calls. Defaults to config.
            base_backoff: First retry delay in seconds. Defaults to config.
            cancel_event: Set to abort a pending retry backoff.
        """
        self.runner = runner
        self._provider = provider
        self.language = language or config.ACTIVE_LANGUAGE
        self.max_attempts = max_attempts
        self.base_backoff = base_backoff
        self.cancel_event = cancel_event

    def _invoker(self) -> RetryingInvoker:
        return RetryingInvoker(
            max_attempts=self.max_attempts,
            base_backoff=self.base_backoff,
            cancel_event=self.cancel_event,
        )

    def resolve_provider(self) -> tuple[Optional[BaseLLMProvider], Optional[str]]:
        """Build the LLM provider and make sure it has credentials.

        Returns:
            (provider, None) when usable, otherwise (None, reason).
        """
        try:
            provider = self._provider or get_provider()
            provider.get_api_key()
        except (MissingAPIKeyError, ValueError) as e:
            logger.warning("No LLM provider available: %s", str(e).splitlines()[0])
            return None, str(e)
        return provider, None

    def _heuristic_response(self, summary: AnalysisSummary, reason: str) -> CommitSuggestionResponse:
        suggestions = synthesize_messages(summary)
        return CommitSuggestionResponse(
            suggestions=suggestions,
            message=f"{reason} Generated {len(suggestions)} heuristic messages.",
        )

    def generate_commit_message(
        self, request: Optional[CommitSuggestionRequest] = None
    ) -> CommitSuggestionResponse:
        """Suggest commit messages for the pending changes.

        Args:
            request: Suggestion options. Defaults to CommitSuggestionRequest().

        Returns:
            The suggestions and a status message. Failures never raise; they
            yield an empty suggestion list and an explanatory message.
        """
        request = request or CommitSuggestionRequest()
        started = time.perf_counter()

        try:
            diff = require_diff(self.runner, request.staged_first)
        except NoChangesError:
            return CommitSuggestionResponse(suggestions=[], message=NO_CHANGES_MESSAGE)

        files = collect_changed_files(self.runner, request.staged_first)
        records = parse_diff(diff)
        summary = analyze_changes(records)
        logger.debug(
            "Analyzed %d change records: intent=%s scope=%s complexity=%d",
            len(records),
            summary.primary_intent.value,
            summary.scope,
            summary.complexity,
        )

        if request.heuristic_only:
            return self._heuristic_response(summary, "Heuristic mode requested.")

        provider, reason = self.resolve_provider()
        if provider is None:
            first_line = reason.splitlines()[0] if reason else "unknown reason"
            return self._heuristic_response(
                summary,
                f"LLM provider is not configured ({first_line}); using heuristic suggestions.",
            )

        prompt = build_prompt(diff, files, request.max_suggestions, self.language, summary)
        logger.info("Generating commit messages with %s (%s)", provider.display_name, provider.model)

        try:
            gate = LanguageComplianceGate(self.language)
            reply = gate.call(provider, prompt, self._invoker().invoke)
        except Exception as e:
            elapsed = time.perf_counter() - started
            logger.error(
                "Commit message generation failed after %d ms (%.3f s), provider=%s, model=%s, cause=%s",
                elapsed * 1000,
                elapsed,
                provider.display_name,
                provider.model,
                summarize(e),
            )
            return CommitSuggestionResponse(
                suggestions=[],
                message=f"LLM call failed ({provider.display_name}): {e}\n{diagnose(e)}",
            )

        suggestions = parse_suggestions(reply)
        elapsed = time.perf_counter() - started
        logger.info(
            "Generated commit messages in %d ms (%.3f s), provider=%s, model=%s, suggestions=%d",
            elapsed * 1000,
            elapsed,
            provider.display_name,
            provider.model,
            len(suggestions),
        )

        return CommitSuggestionResponse(
            suggestions=suggestions,
            message=f"{provider.display_name} ({provider.model}) produced {len(suggestions)} messages",
        )

    def check_connection(self) -> ConnectionStatus:
        """Send a trivial prompt to the configured LLM.

        Returns:
            A ConnectionStatus with the reply, or the error and a hint.
        """
        provider, reason = self.resolve_provider()
        if provider is None:
            return ConnectionStatus(
                ok=False,
                provider=config.ACTIVE_PROVIDER.name,
                model=config.ACTIVE_MODEL,
                error=reason,
                diagnosis="Configure an API key or switch to a local provider such as Ollama.",
            )

        try:
            reply = self._invoker().invoke(lambda: provider.call(CONNECTION_TEST_PROMPT))
        except Exception as e:
            logger.warning("LLM connection check failed: %s", summarize(e))
            return ConnectionStatus(
                ok=False,
                provider=provider.display_name,
                model=provider.model,
                error=str(e),
                diagnosis=diagnose(e),
            )

        return ConnectionStatus(
            ok=True,
            provider=provider.display_name,
            model=provider.model,
            reply=reply.strip(),
        )

    def commit_with_message(self, request: CommitExecutionRequest) -> str:
        """Run 'git commit -F' with the requested message.

        The message is written to a temporary file that is removed afterwards.

        Args:
            request: The commit message to use.

        Returns:
            A human-readable result starting with 'Success' or 'Failed'.
        """
        if request is None or not request.message or not request.message.strip():
            return "Failed: a commit message is required."

        message_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix="diffscribe-commit-msg-",
                suffix=".txt",
                delete=False,
            ) as handle:
                message_file = handle.name
                handle.write(request.message)

            exit_code = self.runner.run(["commit", "-F", message_file])
        except (GitError, OSError) as e:
            logger.warning("Commit failed: %s", e)
            return f"Failed: {e}"
        finally:
            if message_file is not None and os.path.exists(message_file):
                os.unlink(message_file)

        if exit_code == 0:
            return "Success: commit created."
        return f"Failed: git commit exited with code {exit_code}."
