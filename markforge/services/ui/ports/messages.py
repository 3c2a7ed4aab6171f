from __future__ import annotations

from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable


class Question(Enum):
    """Button set for a question dialog."""

    YES_NO = auto()
    OK_CANCEL = auto()


@runtime_checkable
class IMessageService(Protocol):
    """UI port for message boxes."""

    def info(self, parent: Any | None, title: str, text: str) -> None: ...
    def warning(self, parent: Any | None, title: str, text: str) -> None: ...
    def error(self, parent: Any | None, title: str, text: str) -> None: ...

    def ask(
        self,
        parent: Any | None,
        title: str,
        text: str,
        kind: Question = Question.YES_NO,
    ) -> bool:
        """True for the affirmative button (Yes/OK), False otherwise."""
        ...
