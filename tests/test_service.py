"""Tests for diffscribe.service."""

from pathlib import Path

from diffscribe.git.exceptions import GitError, GitTimeoutError
from diffscribe.llm.exceptions import LLMError, MissingAPIKeyError
from diffscribe.models import CommitExecutionRequest, CommitSuggestionRequest
from diffscribe.service import CommitMessageService


def _runner_with(mock_runner, staged_diff="", unstaged_diff="", staged_files="", unstaged_files=""):
    outputs = {
        ("diff", "--cached"): staged_diff,
        ("diff",): unstaged_diff,
        ("diff", "--name-only", "--cached"): staged_files,
        ("diff", "--name-only"): unstaged_files,
    }
    mock_runner.run_capture.side_effect = lambda args: outputs[tuple(args)]
    return mock_runner


def _refused() -> LLMError:
    try:
        raise ConnectionRefusedError("Connection refused")
    except ConnectionRefusedError as e:
        try:
            raise LLMError("Ollama API call failed: connection refused") from e
        except LLMError as wrapped:
            return wrapped


class TestGenerateCommitMessage:
    """Tests for CommitMessageService.generate_commit_message."""

    def test_empty_diff_skips_model(self, mock_runner, fake_provider_factory, korean):
        provider = fake_provider_factory([])
        service = CommitMessageService(_runner_with(mock_runner), provider=provider, language=korean)

        response = service.generate_commit_message(CommitSuggestionRequest())

        assert response.suggestions == []
        assert response.message == "No changes found."
        assert provider.prompts == []

    def test_suggestions_from_model(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory(["1. feat(core): 요청 처리 추가\n2. feat(core): HTTP 처리기 추가"])
        runner = _runner_with(mock_runner, staged_diff=service_diff, staged_files="src/Service.x\n")
        service = CommitMessageService(runner, provider=provider, language=korean, base_backoff=0)

        response = service.generate_commit_message(CommitSuggestionRequest(max_suggestions=2))

        assert response.suggestions == ["feat(core): 요청 처리 추가", "feat(core): HTTP 처리기 추가"]
        assert response.message == "OLLAMA (fake-model) produced 2 messages"
        prompt = provider.prompts[0]
        assert "- src/Service.x" in prompt
        assert "handleRequest" in prompt
        assert prompt.count("[commit message]") == 2

    def test_staged_first_falls_back_to_unstaged(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory(["1. feat(core): 기능 추가"])
        runner = _runner_with(mock_runner, unstaged_diff=service_diff)
        service = CommitMessageService(runner, provider=provider, language=korean)

        response = service.generate_commit_message(CommitSuggestionRequest(staged_first=True))

        assert response.suggestions == ["feat(core): 기능 추가"]
        assert "- (no file information)" in provider.prompts[0]

    def test_unstaged_first_order(self, mock_runner, fake_provider_factory, korean):
        provider = fake_provider_factory(["1. feat(core): 기능 추가"])
        runner = _runner_with(
            mock_runner,
            staged_diff="diff --git a/S b/S\n+staged()",
            unstaged_diff="diff --git a/U b/U\n+unstaged()",
        )
        service = CommitMessageService(runner, provider=provider, language=korean)

        service.generate_commit_message(CommitSuggestionRequest(staged_first=False))

        assert "+unstaged()" in provider.prompts[0]
        assert "+staged()" not in provider.prompts[0]

    def test_language_retry(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory(["1. feat(core): add handler", "1. feat(core): 처리기 추가"])
        service = CommitMessageService(
            _runner_with(mock_runner, staged_diff=service_diff), provider=provider, language=korean
        )

        response = service.generate_commit_message()

        assert response.suggestions == ["feat(core): 처리기 추가"]
        assert len(provider.prompts) == 2

    def test_transient_failures_are_retried(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory([_refused(), "1. feat(core): 기능 추가"])
        service = CommitMessageService(
            _runner_with(mock_runner, staged_diff=service_diff),
            provider=provider,
            language=korean,
            base_backoff=0,
        )

        response = service.generate_commit_message()

        assert response.suggestions == ["feat(core): 기능 추가"]

    def test_model_failure_degrades_to_message(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory([_refused()] * 3)
        service = CommitMessageService(
            _runner_with(mock_runner, staged_diff=service_diff),
            provider=provider,
            language=korean,
            base_backoff=0,
        )

        response = service.generate_commit_message()

        assert response.suggestions == []
        assert response.message.startswith("LLM call failed (OLLAMA)")
        assert "connection refused" in response.message
        assert len(provider.prompts) == 3

    def test_missing_key_uses_heuristics(self, mocker, mock_runner, korean, service_diff):
        mocker.patch(
            "diffscribe.service.get_provider",
            side_effect=MissingAPIKeyError("OpenAI API key not found. Set it using:\n..."),
        )
        service = CommitMessageService(_runner_with(mock_runner, staged_diff=service_diff), language=korean)

        response = service.generate_commit_message()

        assert response.suggestions[0] == "feat(core): add method"
        assert "OpenAI API key not found" in response.message
        assert "heuristic" in response.message

    def test_heuristic_only(self, mock_runner, fake_provider_factory, korean, service_diff):
        provider = fake_provider_factory([])
        service = CommitMessageService(
            _runner_with(mock_runner, staged_diff=service_diff), provider=provider, language=korean
        )

        response = service.generate_commit_message(CommitSuggestionRequest(heuristic_only=True))

        assert response.suggestions == ["feat(core): add method", "feat(core): improve functionality"]
        assert provider.prompts == []

    def test_diff_collection_failure_is_no_changes(self, mock_runner, fake_provider_factory, korean):
        mock_runner.run_capture.side_effect = GitTimeoutError("timed out")
        provider = fake_provider_factory([])
        service = CommitMessageService(mock_runner, provider=provider, language=korean)

        response = service.generate_commit_message()

        assert response.message == "No changes found."
        assert provider.prompts == []


class TestCheckConnection:
    """Tests for CommitMessageService.check_connection."""

    def test_ok(self, mock_runner, fake_provider_factory):
        provider = fake_provider_factory([" OK \n"])
        status = CommitMessageService(mock_runner, provider=provider).check_connection()

        assert status.ok
        assert status.reply == "OK"
        assert status.provider == "OLLAMA"
        assert provider.prompts == ["Hello, respond with just 'OK'"]

    def test_failure_has_diagnosis(self, mock_runner, fake_provider_factory):
        provider = fake_provider_factory([LLMError("model 'x' not found")])
        status = CommitMessageService(mock_runner, provider=provider).check_connection()

        assert not status.ok
        assert "not found" in status.error
        assert "not available" in status.diagnosis

    def test_no_provider(self, mocker, mock_runner):
        mocker.patch("diffscribe.service.get_provider", side_effect=ValueError("Unsupported provider: x"))
        status = CommitMessageService(mock_runner).check_connection()

        assert not status.ok
        assert status.error == "Unsupported provider: x"


class TestCommitWithMessage:
    """Tests for CommitMessageService.commit_with_message."""

    def test_blank_message_rejected(self, mock_runner):
        service = CommitMessageService(mock_runner)

        assert service.commit_with_message(CommitExecutionRequest(message="  ")).startswith("Failed")
        assert service.commit_with_message(CommitExecutionRequest()).startswith("Failed")
        mock_runner.run.assert_not_called()

    def test_commits_from_temp_file(self, mock_runner):
        seen = {}

        def fake_run(args):
            path = Path(args[2])
            seen["args"] = args
            seen["content"] = path.read_text(encoding="utf-8")
            seen["path"] = path
            return 0

        mock_runner.run.side_effect = fake_run
        result = CommitMessageService(mock_runner).commit_with_message(
            CommitExecutionRequest(message="feat(core): 기능 추가")
        )

        assert result.startswith("Success")
        assert seen["args"][:2] == ["commit", "-F"]
        assert seen["content"] == "feat(core): 기능 추가"
        assert not seen["path"].exists()

    def test_nonzero_exit(self, mock_runner):
        mock_runner.run.return_value = 1
        result = CommitMessageService(mock_runner).commit_with_message(CommitExecutionRequest(message="x"))
        assert result == "Failed: git commit exited with code 1."

    def test_temp_file_failure_is_reported(self, mocker, mock_runner):
        mocker.patch("diffscribe.service.tempfile.NamedTemporaryFile", side_effect=OSError("no tmp"))

        result = CommitMessageService(mock_runner).commit_with_message(
            CommitExecutionRequest(message="feat: x")
        )

        assert result == "Failed: no tmp"
        mock_runner.run.assert_not_called()

    def test_write_failure_removes_temp_file(self, mocker, mock_runner, temp_dir):
        path = temp_dir / "msg.txt"
        path.write_text("")
        handle = mocker.MagicMock()
        handle.__enter__.return_value.name = str(path)
        handle.__enter__.return_value.write.side_effect = OSError("No space left on device")
        mocker.patch("diffscribe.service.tempfile.NamedTemporaryFile", return_value=handle)

        result = CommitMessageService(mock_runner).commit_with_message(
            CommitExecutionRequest(message="feat: x")
        )

        assert result == "Failed: No space left on device"
        assert not path.exists()
        mock_runner.run.assert_not_called()

    def test_git_error_is_reported(self, mock_runner):
        mock_runner.run.side_effect = GitError("Git is not installed or not in PATH.")
        result = CommitMessageService(mock_runner).commit_with_message(CommitExecutionRequest(message="x"))
        assert result == "Failed: Git is not installed or not in PATH."
