"""
Interactive input for the AirSpace scripts.

Orchestrators never read the terminal directly; they receive an
:class:`InputProvider` so the same flows run under tests with scripted
answers.
"""
import getpass
import logging
from typing import Callable, Protocol, TypeVar

from .exceptions import InvalidInputError

T = TypeVar('T')

MAX_PROMPT_ATTEMPTS = 3

logger = logging.getLogger(__name__)


class InputProvider(Protocol):
    """Protocol for answering interactive questions"""

    def ask(self, question: str) -> str:
        """Return a free-text answer"""
        ...

    def get_secret(self, question: str) -> str:
        """Return an answer without echoing it"""
        ...

    def get_confirmation(self, question: str) -> bool:
        """Return True only for an explicit "yes" """
        ...


class ConsoleInputProvider:
    """Line-based prompts on stdin/stdout"""

    def ask(self, question: str) -> str:
        return input(f"{question}: ").strip()

    def get_secret(self, question: str) -> str:
        return getpass.getpass(f"{question}: ").strip()

    def get_confirmation(self, question: str) -> bool:
        return input(f"{question} (yes/no): ").strip().lower() == "yes"


def ask_until_valid(
    inputs: InputProvider,
    question: str,
    parse: Callable[[str], T],
    attempts: int = MAX_PROMPT_ATTEMPTS
) -> T:
    """
    Ask a question until the answer parses.

    Args:
        inputs: Input provider to ask
        question: Prompt text
        parse: Converts an answer, raising InvalidInputError when it is unusable
        attempts: Number of answers accepted before giving up

    Raises:
        InvalidInputError: If no answer parses within the allowed attempts
    """
    error = None
    for _ in range(attempts):
        try:
            return parse(inputs.ask(question))
        except InvalidInputError as e:
            error = e
            logger.warning(f"{e}. Please try again.")
    raise InvalidInputError(f"{error} (gave up after {attempts} attempts)")
