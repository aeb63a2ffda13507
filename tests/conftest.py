"""Shared pytest fixtures for the csvgen test suite.

Provides a scripted prompt provider so interactive sessions can run without a
terminal, plus sample source files and tables.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from csvgen.csv_io import SourceTable
from csvgen.logsetup import shutdown_logging
from csvgen.prompts import PromptProvider, Question, QuestionKind
from csvgen.pytest_helpers import (  # noqa: F401
    generated_csv,
    seeded_rng,
    temp_csv_file,
    template_store,
)


SAMPLE_CSV = (
    "id,name,status,score,notes\n"
    "1,Alice,active,10,\n"
    "2,Bob,inactive,abc,\n"
    "3,Carol,active,30,\n"
)


class ScriptedPrompts(PromptProvider):
    """Prompt provider answering from a script keyed by question key.

    Each key maps to a list of answers consumed in order. Questions without a
    scripted answer take their default. Choice answers may be a choice value
    or a fragment of a choice label.

    Attributes:
        answers: Remaining scripted answers per question key.
        asked: Keys of every question asked, in order.
        messages: Every message passed to ``tell``.
        strict: Fail when an answer does not pass the question's validator.
    """

    def __init__(self, answers: Optional[Dict[str, List[Any]]] = None, strict: bool = True):
        self.answers = {key: list(values) for key, values in (answers or {}).items()}
        self.asked: List[str] = []
        self.messages: List[str] = []
        self.strict = strict

    def ask(self, question: Question) -> Any:
        self.asked.append(question.key)
        queue = self.answers.get(question.key)

        if queue:
            answer = self._resolve(question, queue.pop(0))
        elif question.kind is QuestionKind.CHOICE and question.default is not None:
            answer = question.choices[question.default].value
        elif question.default is not None:
            answer = question.default
        else:
            raise AssertionError(f"No scripted answer for question {question.key!r}")

        if self.strict:
            error = question.check(answer)
            assert error is None, f"Answer {answer!r} to {question.key!r} rejected: {error}"
        return answer

    def tell(self, message: str = '') -> None:
        self.messages.append(message)

    @staticmethod
    def _resolve(question: Question, answer: Any) -> Any:
        if question.kind is not QuestionKind.CHOICE:
            return answer
        for choice in question.choices:
            if choice.value is answer or (type(choice.value) is type(answer) and choice.value == answer):
                return choice.value
        if isinstance(answer, str):
            for choice in question.choices:
                if answer in choice.label:
                    return choice.value
        raise AssertionError(f"{answer!r} is not a choice of {question.key!r}")


@pytest.fixture
def scripted_prompts():
    """Factory fixture building ScriptedPrompts from keyword answers."""
    def make(strict: bool = True, **answers: List[Any]) -> ScriptedPrompts:
        return ScriptedPrompts(answers, strict=strict)
    return make


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    """Write the sample source CSV and return its path."""
    path = tmp_path / "people.csv"
    path.write_text(SAMPLE_CSV, encoding='utf-8')
    return path


@pytest.fixture
def column_table() -> SourceTable:
    """In-memory table with a single column ``c``."""
    values = ["b", "a", "b", "", "a"]
    return SourceTable(
        path='memory',
        columns=('c',),
        records=tuple({'c': value} for value in values),
    )


@pytest.fixture
def restore_root_logger():
    """Put the root logger's level back after tests that configure logging."""
    root = logging.getLogger()
    level = root.level
    yield root
    shutdown_logging()
    root.setLevel(level)
