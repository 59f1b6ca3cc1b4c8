"""
Reactions perform dependency tracking by running a function that reads
from observable nodes, and run that function again whenever one of
the values it read is changed.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Callable

from .channels import ChannelKey, channels
from .tracking import context

logger = logging.getLogger("autotrack.reaction")

# Every Reaction gets a unique ID which makes it easy
# to tell reactions apart when debugging
_ids = count()


class Reaction:
    __slots__ = ("__weakref__", "_deps", "_new_deps", "fn", "id", "runs")

    def __init__(self, fn: Callable[[], Any]) -> None:
        if not callable(fn):
            raise TypeError(f"Expected a callable, got {type(fn).__name__}")
        self.id = next(_ids)
        self.fn = fn
        self.runs = 0
        self._deps: set[ChannelKey] = set()
        self._new_deps: set[ChannelKey] = set()

    def __call__(self, *args: Any) -> None:
        """
        Runs the reaction. Any arguments passed along by a publish are
        ignored. A reaction that is already running is not started
        again: writes it makes to values it read don't re-run it.
        """
        if context.is_running(self):
            logger.debug("%r is already running, skipping", self)
            return
        context.run(self, self._run)

    def _run(self) -> None:
        self.runs += 1
        logger.debug("running %r (run %d)", self, self.runs)
        try:
            self.fn()
        finally:
            self.cleanup_deps()

    def add_dep(self, channel_key: ChannelKey) -> None:
        if channel_key not in self._new_deps:
            self._new_deps.add(channel_key)
            if channel_key not in self._deps:
                channels.subscribe(channel_key, self)

    def cleanup_deps(self) -> None:
        """
        Unsubscribes from the channels that were read during the previous
        run but not during the run that just finished
        """
        for channel_key in self._deps:
            if channel_key not in self._new_deps:
                channels.unsubscribe(channel_key, self)
        self._deps, self._new_deps = self._new_deps, self._deps
        self._new_deps.clear()

    @property
    def dependencies(self) -> frozenset[ChannelKey]:
        return frozenset(self._deps)

    def __repr__(self) -> str:
        name = getattr(self.fn, "__qualname__", repr(self.fn))
        return f"Reaction({name}, id={self.id})"


def autorun(fn: Callable[[], Any]) -> Reaction:
    """
    Runs `fn` immediately and runs it again every time a value that it
    read during its most recent run is changed.

    Returns the reaction, mostly useful for inspecting its dependencies.
    """
    reaction = Reaction(fn)
    reaction()
    return reaction
