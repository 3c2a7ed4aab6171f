from __future__ import annotations

from collections import deque
from typing import Callable

from markforge.domain.commands import Command, CommandResult


class CommandQueue:
    """
    Single-consumer FIFO of UI commands.

    Commands posted from inside a handler are appended and handled by the drain
    that is already running, so ordering is preserved and handlers never nest.
    """

    def __init__(self) -> None:
        self._pending: deque[Command] = deque()
        self._draining = False

    def post(self, command: Command) -> None:
        self._pending.append(command)

    def __len__(self) -> int:
        return len(self._pending)

    def drain(self, handler: Callable[[Command], CommandResult]) -> list[CommandResult]:
        if self._draining:
            return []
        self._draining = True
        results: list[CommandResult] = []
        try:
            while self._pending:
                results.append(handler(self._pending.popleft()))
        finally:
            self._draining = False
        return results
