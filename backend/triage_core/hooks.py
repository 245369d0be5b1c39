from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .pipeline import IntakeTurn


TurnObserver = Callable[[str, "IntakeTurn"], None]


class HookRunner:
    """After-turn observers. They see the finished (frozen) turn and cannot change it."""

    def __init__(self) -> None:
        self._after_hooks: list[TurnObserver] = []

    def add_after(self, hook: TurnObserver) -> None:
        self._after_hooks.append(hook)

    def remove_after(self, hook: TurnObserver) -> None:
        if hook in self._after_hooks:
            self._after_hooks.remove(hook)

    def run_after(self, message: str, turn: IntakeTurn) -> None:
        for hook in self._after_hooks:
            hook(message, turn)
