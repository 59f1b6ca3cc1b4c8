"""
Channels implement the classic publish/subscribe pattern and
are keyed on a (node id, property) pair of an observable node.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Hashable, NamedTuple

logger = logging.getLogger("autotrack.channels")


class _Iterate:
    """Marker key for the structural channel of a node"""

    __slots__ = ()

    def __repr__(self):
        return "ITERATE"


ITERATE = _Iterate()


class ChannelKey(NamedTuple):
    node_id: int
    key: Hashable


class ChannelRegistry:
    __slots__ = ("_channels",)

    def __init__(self) -> None:
        # dicts are used as ordered sets: the values are always None
        self._channels: dict[ChannelKey, dict[Callable, None]] = {}

    def subscribe(self, channel_key: ChannelKey, reaction: Callable) -> None:
        subs = self._channels.get(channel_key)
        if subs is None:
            subs = self._channels[channel_key] = {}
        if reaction not in subs:
            subs[reaction] = None

    def unsubscribe(self, channel_key: ChannelKey, reaction: Callable) -> None:
        subs = self._channels.get(channel_key)
        if not subs:
            return
        subs.pop(reaction, None)
        if not subs:
            del self._channels[channel_key]

    def publish(self, channel_key: ChannelKey, *args: Any) -> None:
        subs = self._channels.get(channel_key)
        if not subs:
            return
        # reactions re-subscribe while they run, so iterate over a
        # snapshot that is taken before the first one is called
        snapshot = tuple(subs)
        logger.debug("publish %r to %d reaction(s)", channel_key, len(snapshot))
        for reaction in snapshot:
            reaction(*args)

    def subscribers(self, channel_key: ChannelKey) -> tuple[Callable, ...]:
        return tuple(self._channels.get(channel_key, ()))

    def clear(self) -> None:
        self._channels.clear()

    def __len__(self) -> int:
        return len(self._channels)

    def __contains__(self, channel_key) -> bool:
        return channel_key in self._channels


# Create the global channel registry
channels = ChannelRegistry()
