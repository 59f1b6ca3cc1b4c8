"""
Observable nodes intercept reads and writes on a backing dict. Reads
subscribe the currently running reaction to the channel of the key
that was read, writes publish to that channel when the value changed.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any, Hashable, Iterator

from .channels import ITERATE, ChannelKey, channels
from .node_db import node_db
from .proxy import NotObservableError, Proxy, snapshot, strict_equal
from .tracking import context


class ObservableNode(Proxy[dict], MutableMapping):
    """
    Observable wrapper around one dict.

    Keys can be accessed with subscription (``node["key"]``) and, for
    keys that are valid identifiers and don't start with an underscore,
    as attributes (``node.key``). Mapping methods such as ``keys`` and
    ``get`` take precedence over keys with the same name.
    """

    __slots__ = ()

    def __init__(self, target: dict) -> None:
        object.__setattr__(self, "__target__", target)
        object.__setattr__(self, "__children__", {})
        object.__setattr__(self, "__id__", node_db.next_id())
        node_db.reference(self)

    def _track(self, key: Hashable) -> None:
        reaction = context.current_reaction()
        if reaction is not None:
            reaction.add_dep(ChannelKey(self.__id__, key))

    def _wrap(self, key: Hashable, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        children = self.__children__
        child = children.get(key)
        if child is None or child.__target__ is not value:
            child = children[key] = ObservableNode(value)
        return child

    def __getitem__(self, key: Hashable) -> Any:
        self._track(key)
        return self._wrap(key, self.__target__[key])

    def __setitem__(self, key: Hashable, value: Any) -> None:
        target = self.__target__
        is_new = key not in target
        if not is_new:
            child = self.__children__.get(key)
            if child is not None and value is child:
                return
            if strict_equal(target[key], value):
                return
        target[key] = snapshot(value)
        self.__children__.pop(key, None)
        channels.publish(ChannelKey(self.__id__, key))
        if is_new:
            channels.publish(ChannelKey(self.__id__, ITERATE))

    def __delitem__(self, key: Hashable) -> None:
        del self.__target__[key]
        self.__children__.pop(key, None)
        channels.publish(ChannelKey(self.__id__, key))
        channels.publish(ChannelKey(self.__id__, ITERATE))

    def setdefault(self, key: Hashable, default: Any = None) -> Any:
        if key not in self.__target__:
            self[key] = default
        return self[key]

    def __iter__(self) -> Iterator[Hashable]:
        self._track(ITERATE)
        # iterate over a copy so that keys can be written while iterating
        return iter(list(self.__target__))

    def __len__(self) -> int:
        self._track(ITERATE)
        return len(self.__target__)

    def __getattr__(self, name: str) -> Any:
        # only called when regular attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no key '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            return object.__setattr__(self, name, value)
        self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            return object.__delattr__(self, name)
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.__target__!r})"


def observable(data: Mapping) -> ObservableNode:
    """
    Returns an observable node for a copy of the given mapping.

    Reads on the node (and on every nested node reached through it) made
    while a reaction runs are tracked, writes re-run the reactions that
    read the written key. The given `data` is not modified and later
    changes to it are not seen by the node.
    """
    if isinstance(data, ObservableNode):
        return data
    if not isinstance(data, Mapping):
        raise NotObservableError(
            f"Can only observe mappings, got {type(data).__name__}"
        )
    return ObservableNode(snapshot(data))
