from __future__ import annotations

from typing import Any

from PyQt6.QtWidgets import QMessageBox

from markforge.services.ui.ports.messages import IMessageService, Question

_Btn = QMessageBox.StandardButton

# (buttons shown, button that counts as "yes")
_BUTTONS: dict[Question, tuple[_Btn, _Btn]] = {
    Question.YES_NO: (_Btn.Yes | _Btn.No, _Btn.Yes),
    Question.OK_CANCEL: (_Btn.Ok | _Btn.Cancel, _Btn.Ok),
}


class QtMessageService(IMessageService):
    """QMessageBox-backed messages and questions."""

    def info(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.information(parent, title, text)

    def warning(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.warning(parent, title, text)

    def error(self, parent: Any | None, title: str, text: str) -> None:
        QMessageBox.critical(parent, title, text)

    def ask(
        self,
        parent: Any | None,
        title: str,
        text: str,
        kind: Question = Question.YES_NO,
    ) -> bool:
        buttons, affirmative = _BUTTONS[kind]
        return QMessageBox.question(parent, title, text, buttons) == affirmative
