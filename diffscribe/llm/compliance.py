"""Language compliance gate for model replies."""

import logging
from typing import Callable, Optional

from diffscribe import config
from diffscribe.config import LanguageProfile
from diffscribe.llm.base import BaseLLMProvider
from diffscribe.llm.parsing import is_language_minority
from diffscribe.llm.prompts import build_corrective_messages

logger = logging.getLogger(__name__)

Invoke = Callable[[Callable[[], str]], str]


def _direct(fn: Callable[[], str]) -> str:
    return fn()


class LanguageComplianceGate:
    """Re-prompt once when a reply is not written in the target language.

    The corrective reply is accepted as-is; there is no second check.
    """

    def __init__(self, language: Optional[LanguageProfile] = None):
        self.language = language or config.ACTIVE_LANGUAGE
        self.corrected = False

    def call(self, client: BaseLLMProvider, prompt: str, invoke: Optional[Invoke] = None) -> str:
        """Call the model and enforce the target language.

        Args:
            client: The LLM provider.
            prompt: The suggestion prompt.
            invoke: Wrapper used for each model call, typically
                RetryingInvoker.invoke. Defaults to a plain call.

        Returns:
            The first reply, or the corrective reply if the first one was
            mostly in another language.
        """
        invoke = invoke or _direct
        self.corrected = False

        response = invoke(lambda: client.call(prompt))
        if not is_language_minority(response, self.language):
            return response

        logger.info("Reply is not in %s, issuing one corrective prompt", self.language.name)
        self.corrected = True
        messages = build_corrective_messages(prompt, self.language)
        return invoke(lambda: client.call(messages))
