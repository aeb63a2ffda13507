"""Prompt provider - the question/answer seam between the session and a user.

The session never reads from the terminal itself. It builds Question objects
and hands them to a PromptProvider, which returns a validated answer. The
console provider asks on stdin; tests substitute a scripted provider.
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, TextIO

from csvgen.column_builder import parse_number


class QuestionKind(Enum):
    """Shape of the answer a question expects."""

    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    CHOICE = "choice"
    MULTI_CHOICE = "multi_choice"


@dataclass(frozen=True)
class Choice:
    """One selectable option of a choice question."""

    label: str
    value: Any


@dataclass
class Question:
    """A single question put to the user.

    Attributes:
        key: Stable identifier of the question, independent of its wording.
        message: Text shown to the user.
        kind: Expected answer shape.
        choices: Options for CHOICE and MULTI_CHOICE questions.
        default: Answer used when the user enters nothing. For CHOICE
            questions this is the index of the default option.
        validate: Optional check returning an error message for a bad
            answer, or None when the answer is acceptable.
    """

    key: str
    message: str
    kind: QuestionKind = QuestionKind.TEXT
    choices: List[Choice] = field(default_factory=list)
    default: Any = None
    validate: Optional[Callable[[Any], Optional[str]]] = None

    def check(self, answer: Any) -> Optional[str]:
        """Run the validator, if any, against an answer."""
        if self.validate is None:
            return None
        return self.validate(answer)


class PromptProvider(ABC):
    """Source of answers for the interactive session."""

    @abstractmethod
    def ask(self, question: Question) -> Any:
        """Return a validated answer to ``question``."""

    def tell(self, message: str = '') -> None:
        """Show an informational message. Silent by default."""


def require_non_empty(answer: Any) -> Optional[str]:
    if not str(answer).strip():
        return "Value cannot be empty"
    return None


def require_positive(answer: Any) -> Optional[str]:
    if answer <= 0:
        return "Please enter a valid positive number"
    return None


class ConsolePromptProvider(PromptProvider):
    """Asks questions on the terminal, re-asking until the answer is valid.

    Attributes:
        input_func: Callable used to read a line (default: ``input``).
        output: Stream for messages and option lists (default: stdout).
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None
    ) -> None:
        self.input_func = input_func
        self.output = output

    def tell(self, message: str = '') -> None:
        print(message, file=self.output or sys.stdout)

    def ask(self, question: Question) -> Any:
        while True:
            answer, error = self._read(question)
            if error is None:
                error = question.check(answer)
            if error is None:
                return answer
            self.tell(f">> {error}")

    def _prompt_text(self, question: Question) -> str:
        if question.default is not None and question.kind in (
            QuestionKind.TEXT, QuestionKind.NUMBER, QuestionKind.INTEGER
        ):
            return f"{question.message} ({question.default}) "
        return f"{question.message} "

    def _read(self, question: Question):
        """Read one raw answer and convert it; returns (answer, error)."""
        if question.kind in (QuestionKind.CHOICE, QuestionKind.MULTI_CHOICE):
            self.tell(question.message)
            for number, choice in enumerate(question.choices, start=1):
                marker = '*' if question.default == number - 1 else ' '
                self.tell(f" {marker}{number}. {choice.label}")
            if question.kind is QuestionKind.CHOICE:
                raw = self.input_func("Select an option: ").strip()
                return self._parse_choice(question, raw)
            raw = self.input_func("Select options (comma-separated, blank for none): ").strip()
            return self._parse_multi_choice(question, raw)

        raw = self.input_func(self._prompt_text(question)).strip()

        if not raw and question.default is not None:
            return question.default, None

        if question.kind is QuestionKind.NUMBER:
            number = parse_number(raw)
            if number is None:
                return None, "Please enter a number"
            return number, None

        if question.kind is QuestionKind.INTEGER:
            number = parse_number(raw)
            if not isinstance(number, int):
                return None, "Please enter a whole number"
            return number, None

        return raw, None

    def _index(self, question: Question, raw: str) -> Optional[int]:
        try:
            index = int(raw) - 1
        except ValueError:
            return None
        if 0 <= index < len(question.choices):
            return index
        return None

    def _parse_choice(self, question: Question, raw: str):
        if not raw and question.default is not None:
            return question.choices[question.default].value, None
        index = self._index(question, raw)
        if index is None:
            return None, f"Please enter a number between 1 and {len(question.choices)}"
        return question.choices[index].value, None

    def _parse_multi_choice(self, question: Question, raw: str):
        if not raw:
            return [], None
        values = []
        for part in raw.split(','):
            index = self._index(question, part.strip())
            if index is None:
                return None, f"Invalid selection: {part.strip()!r}"
            value = question.choices[index].value
            if value not in values:
                values.append(value)
        return values, None
