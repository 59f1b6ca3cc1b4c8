"""
The tracking context keeps a stack of the reactions that are currently
running. Reads on observable nodes subscribe the reaction on top of
the stack to the channel that was read.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Optional

logger = logging.getLogger("autotrack.tracking")


class ReactionDepthError(RecursionError):
    """
    Raised when reactions trigger each other deeper than
    TrackingContext.max_depth allows.
    """

    pass


class TrackingContext:
    __slots__ = ("stack",)
    max_depth: ClassVar[int] = 100

    def __init__(self) -> None:
        self.stack: list[Callable] = []

    def current_reaction(self) -> Optional[Callable]:
        if self.stack:
            return self.stack[-1]
        return None

    def is_running(self, reaction: Callable) -> bool:
        return reaction in self.stack

    def run(self, reaction: Callable, fn: Callable[[], Any]) -> Any:
        if len(self.stack) >= self.max_depth:
            raise ReactionDepthError(
                f"Reactions nested more than {self.max_depth} levels deep, "
                f"while starting {reaction!r}"
            )
        self.stack.append(reaction)
        try:
            return fn()
        finally:
            self.stack.pop()

    def clear(self) -> None:
        if self.stack:
            logger.warning("Clearing %d active reaction(s)", len(self.stack))
        self.stack.clear()


# Create the global tracking context
context = TrackingContext()
