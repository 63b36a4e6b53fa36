"""Tests for diffscribe.llm.retry and diffscribe.llm.compliance."""

import socket
import threading
from unittest.mock import MagicMock

import httpx
import pytest

from diffscribe.llm.compliance import LanguageComplianceGate
from diffscribe.llm.exceptions import LLMError
from diffscribe.llm.retry import (
    RetryingInvoker,
    diagnose,
    is_transient,
    root_cause,
    summarize,
)


def _wrapped(cause: BaseException) -> LLMError:
    """Build an LLMError chained to cause, as providers raise them."""
    try:
        try:
            raise cause
        except BaseException as e:
            raise LLMError(f"call failed: {e}") from e
    except LLMError as wrapped:
        return wrapped


class FlakyCall:
    """Callable failing with the given errors before returning a value."""

    def __init__(self, errors, value="ok"):
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


class TestRootCause:
    """Tests for root_cause and is_transient."""

    def test_follows_cause_chain(self):
        refused = ConnectionRefusedError("refused")
        assert root_cause(_wrapped(refused)) is refused

    def test_follows_implicit_context(self):
        try:
            try:
                raise TimeoutError("slow")
            except TimeoutError:
                raise RuntimeError("while handling")
        except RuntimeError as e:
            assert isinstance(root_cause(e), TimeoutError)

    def test_exception_without_chain_is_its_own_root(self):
        error = ValueError("x")
        assert root_cause(error) is error

    @pytest.mark.parametrize(
        "cause",
        [
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
            socket.timeout("timed out"),
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("read timeout"),
        ],
    )
    def test_transient_roots(self, cause):
        assert is_transient(_wrapped(cause))

    @pytest.mark.parametrize(
        "cause",
        [
            socket.gaierror(-2, "Name or service not known"),
            ValueError("model 'x' not found"),
            PermissionError("denied"),
        ],
    )
    def test_non_transient_roots(self, cause):
        assert not is_transient(_wrapped(cause))


class TestDiagnose:
    """Tests for diagnose and summarize."""

    def test_connection_refused(self):
        assert "connection refused" in diagnose(_wrapped(ConnectionRefusedError()))

    def test_timeout(self):
        assert "timeout" in diagnose(_wrapped(httpx.ReadTimeout("slow")))

    def test_unknown_host(self):
        hint = diagnose(_wrapped(socket.gaierror(-2, "Name or service not known")))
        assert "base URL" in hint

    def test_model_not_found(self):
        hint = diagnose(LLMError("Ollama API call failed (404): model 'nope' not found"))
        assert "model" in hint and "not available" in hint

    def test_other(self):
        assert "logs" in diagnose(RuntimeError("boom"))

    def test_summarize_names_root(self):
        assert summarize(_wrapped(ConnectionRefusedError("refused"))) == "ConnectionRefusedError: refused"


class TestRetryingInvoker:
    """Tests for RetryingInvoker."""

    def test_success_on_first_attempt(self):
        invoker = RetryingInvoker(max_attempts=3, base_backoff=0)

        assert invoker.invoke(lambda: "value") == "value"
        assert invoker.attempts == 1

    def test_transient_twice_then_success(self):
        call = FlakyCall([_wrapped(ConnectionRefusedError()), _wrapped(TimeoutError())], value="done")
        invoker = RetryingInvoker(max_attempts=3, base_backoff=0)

        assert invoker.invoke(call) == "done"
        assert invoker.attempts == 3
        assert call.calls == 3

    def test_non_transient_propagates_immediately(self):
        original = _wrapped(socket.gaierror(-2, "Name or service not known"))
        call = FlakyCall([original])
        invoker = RetryingInvoker(max_attempts=3, base_backoff=0)

        with pytest.raises(LLMError) as exc_info:
            invoker.invoke(call)

        assert exc_info.value is original
        assert invoker.attempts == 1

    def test_exhausted_attempts_raise_last_failure(self):
        failures = [_wrapped(ConnectionRefusedError(str(i))) for i in range(3)]
        invoker = RetryingInvoker(max_attempts=3, base_backoff=0)

        with pytest.raises(LLMError) as exc_info:
            invoker.invoke(FlakyCall(list(failures)))

        assert exc_info.value is failures[-1]
        assert invoker.attempts == 3

    def test_exponential_backoff(self, mocker):
        sleep = mocker.patch("diffscribe.llm.retry.time.sleep")
        call = FlakyCall([_wrapped(ConnectionRefusedError()), _wrapped(ConnectionRefusedError())])
        invoker = RetryingInvoker(max_attempts=3, base_backoff=0.4)

        invoker.invoke(call)

        delays = [c.args[0] for c in sleep.call_args_list]
        assert delays == pytest.approx([0.4, 0.8])

    def test_cancel_during_backoff_raises_original(self):
        event = threading.Event()
        event.set()
        original = _wrapped(ConnectionRefusedError())
        call = FlakyCall([original])
        invoker = RetryingInvoker(max_attempts=3, base_backoff=10, cancel_event=event)

        with pytest.raises(LLMError) as exc_info:
            invoker.invoke(call)

        assert exc_info.value is original
        assert invoker.attempts == 1

    def test_defaults_come_from_config(self, mocker):
        mocker.patch("diffscribe.config.RETRY_MAX_ATTEMPTS", 5)
        mocker.patch("diffscribe.config.RETRY_BASE_BACKOFF", 0.1)

        invoker = RetryingInvoker()

        assert invoker.max_attempts == 5
        assert invoker.base_backoff == 0.1


class TestLanguageComplianceGate:
    """Tests for LanguageComplianceGate."""

    def test_compliant_reply_single_call(self, korean, fake_provider_factory):
        provider = fake_provider_factory(["1. feat(core): 기능 추가"])
        gate = LanguageComplianceGate(korean)

        assert gate.call(provider, "PROMPT") == "1. feat(core): 기능 추가"
        assert provider.prompts == ["PROMPT"]
        assert not gate.corrected

    def test_one_corrective_call(self, korean, fake_provider_factory):
        provider = fake_provider_factory(["1. feat(core): add thing", "1. feat(core): 기능 추가"])
        gate = LanguageComplianceGate(korean)

        assert gate.call(provider, "PROMPT") == "1. feat(core): 기능 추가"
        assert gate.corrected
        corrective = provider.prompts[1]
        assert [m.role for m in corrective] == ["system", "user"]
        assert corrective[1].content == "PROMPT"

    def test_second_reply_accepted_unconditionally(self, korean, fake_provider_factory):
        provider = fake_provider_factory(["english", "still english"])
        gate = LanguageComplianceGate(korean)

        assert gate.call(provider, "PROMPT") == "still english"
        assert len(provider.prompts) == 2

    def test_each_call_goes_through_invoke(self, korean, fake_provider_factory):
        provider = fake_provider_factory(["english", "한국어"])
        invoke = MagicMock(side_effect=lambda fn: fn())

        LanguageComplianceGate(korean).call(provider, "PROMPT", invoke)

        assert invoke.call_count == 2
