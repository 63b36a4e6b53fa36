"""Tests for diffscribe.cli module."""

import json
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from diffscribe.cli import app
from diffscribe.config import LLMProvider
from diffscribe.models import CommitSuggestionResponse, ConnectionStatus


runner = CliRunner()


@pytest.fixture
def service(mocker):
    """Replace the service used by every command with a mock."""
    mock_service = MagicMock()
    for module in ("main", "status", "commit"):
        mocker.patch(f"diffscribe.cli.{module}.prepare")
        mocker.patch(f"diffscribe.cli.{module}.build_service", return_value=mock_service)
    return mock_service


class TestSuggestCommand:
    """Tests for the default command and 'suggest'."""

    def test_prints_numbered_suggestions(self, service):
        """Test that suggestions are printed as a numbered list."""
        service.generate_commit_message.return_value = CommitSuggestionResponse(
            suggestions=["feat(core): 요청 처리 추가", "fix(api): 오류 수정"],
            message="OLLAMA (llama3.1:8b) produced 2 messages",
        )

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "1. feat(core): 요청 처리 추가" in result.output
        assert "2. fix(api): 오류 수정" in result.output
        assert "produced 2 messages" in result.output

    def test_json_output(self, service):
        service.generate_commit_message.return_value = CommitSuggestionResponse(
            suggestions=["feat(core): add method"],
            message="Heuristic mode requested. Generated 1 heuristic messages.",
        )

        result = runner.invoke(app, ["suggest", "--json", "--heuristic", "-n", "3"])

        assert result.exit_code == 0
        assert json.loads(result.output)["suggestions"] == ["feat(core): add method"]
        request = service.generate_commit_message.call_args.args[0]
        assert request.max_suggestions == 3
        assert request.heuristic_only
        assert request.staged_first

    def test_unstaged_first_flag(self, service):
        service.generate_commit_message.return_value = CommitSuggestionResponse(
            suggestions=["feat(core): add method"], message="ok"
        )

        runner.invoke(app, ["suggest", "--unstaged-first"])

        assert not service.generate_commit_message.call_args.args[0].staged_first

    def test_no_changes_is_not_an_error(self, service):
        service.generate_commit_message.return_value = CommitSuggestionResponse(
            suggestions=[], message="No changes found."
        )

        result = runner.invoke(app, ["suggest"])

        assert result.exit_code == 0
        assert "No changes found." in result.output

    def test_failure_exits_nonzero(self, service):
        service.generate_commit_message.return_value = CommitSuggestionResponse(
            suggestions=[], message="LLM call failed (OLLAMA): refused"
        )

        result = runner.invoke(app, ["suggest"])

        assert result.exit_code == 1
        assert "LLM call failed" in result.output

    def test_rejects_zero_max(self, service):
        result = runner.invoke(app, ["suggest", "--max", "0"])

        assert result.exit_code == 1
        assert "at least 1" in result.output
        service.generate_commit_message.assert_not_called()


class TestStatusCommand:
    """Tests for 'status'."""

    def test_connection_ok(self, service):
        service.check_connection.return_value = ConnectionStatus(
            ok=True, provider="OLLAMA", model="llama3.1:8b", reply="OK"
        )

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "✓ LLM connection OK" in result.output
        assert "llama3.1:8b" in result.output

    def test_connection_failed(self, service):
        service.check_connection.return_value = ConnectionStatus(
            ok=False,
            provider="OLLAMA",
            model="llama3.1:8b",
            error="connection refused",
            diagnosis="Probable cause: cannot connect to the server (connection refused).",
        )

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "✗ LLM connection failed" in result.output
        assert "Probable cause" in result.output


class TestCommitCommand:
    """Tests for 'commit'."""

    def test_commit_with_yes(self, service):
        service.commit_with_message.return_value = "Success: commit created."

        result = runner.invoke(app, ["commit", "feat(core): 기능 추가", "--yes"])

        assert result.exit_code == 0
        assert "Success" in result.output
        request = service.commit_with_message.call_args.args[0]
        assert request.message == "feat(core): 기능 추가"

    def test_commit_cancelled(self, service):
        result = runner.invoke(app, ["commit", "feat: x"], input="n\n")

        assert result.exit_code == 0
        assert "cancelled" in result.output.lower()
        service.commit_with_message.assert_not_called()

    def test_commit_failure(self, service):
        service.commit_with_message.return_value = "Failed: git commit exited with code 1."

        result = runner.invoke(app, ["commit", "feat: x", "-y"])

        assert result.exit_code == 1
        assert "Failed" in result.output

    def test_blank_message(self, service):
        result = runner.invoke(app, ["commit", "   ", "-y"])

        assert result.exit_code == 1
        service.commit_with_message.assert_not_called()


class TestConfigCommands:
    """Tests for 'config' subcommands."""

    def test_show_without_config(self, mocker):
        mocker.patch("diffscribe.cli.config.global_config.is_configured", return_value=False)

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "No configuration found" in result.output

    def test_show_masks_key(self, mocker):
        mocker.patch("diffscribe.cli.config.global_config.is_configured", return_value=True)
        mocker.patch(
            "diffscribe.cli.config.global_config.load_global_config",
            return_value={"provider": "openai", "model": "gpt-4o", "language": "ko"},
        )
        mocker.patch(
            "diffscribe.cli.config.global_config.load_credentials",
            return_value={"OPENAI_API_KEY": "sk-abcdefghijklmnop"},
        )

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "gpt-4o" in result.output
        assert "sk-abcde...mnop" in result.output
        assert "sk-abcdefghijklmnop" not in result.output

    def test_set_language(self, mocker):
        mock_set = mocker.patch("diffscribe.cli.config.global_config.set_language")

        result = runner.invoke(app, ["config", "set-language", "JA"])

        assert result.exit_code == 0
        assert "Japanese" in result.output
        mock_set.assert_called_once_with("ja")

    def test_set_language_rejects_unknown(self, mocker):
        mock_set = mocker.patch("diffscribe.cli.config.global_config.set_language")

        result = runner.invoke(app, ["config", "set-language", "xx"])

        assert result.exit_code == 1
        mock_set.assert_not_called()

    def test_set_provider_with_model(self, mocker):
        mock_set = mocker.patch("diffscribe.cli.config.global_config.set_provider_and_model")

        result = runner.invoke(app, ["config", "set-provider", "groq", "-m", "llama-3.1-8b-instant"])

        assert result.exit_code == 0
        mock_set.assert_called_once_with(LLMProvider.GROQ, "llama-3.1-8b-instant")

    def test_set_provider_invalid(self):
        result = runner.invoke(app, ["config", "set-provider", "mystery"])

        assert result.exit_code == 1
        assert "Invalid provider" in result.output

    def test_set_key_for_ollama_is_noop(self, mocker):
        mock_save = mocker.patch("diffscribe.cli.config.global_config.save_credential")

        result = runner.invoke(app, ["config", "set-key", "ollama"])

        assert result.exit_code == 0
        mock_save.assert_not_called()

    def test_list_models_for_provider(self):
        result = runner.invoke(app, ["config", "list-models", "ollama"])

        assert result.exit_code == 0
        assert "llama3.1:8b" in result.output
        assert "gpt-4o" not in result.output
