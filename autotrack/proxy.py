from __future__ import annotations

from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class NotObservableError(TypeError):
    """
    Raised when something other than tree shaped plain data
    is passed to `observable`.
    """

    pass


class Proxy(Generic[T]):
    """
    Proxy for a backing container.

    The backing container is a private snapshot made when the data was
    passed in, so it is never shared with the caller. Please use
    `observable` to create proxies instead of instantiating them directly.
    """

    __hash__ = None
    # the slots have to be very unique since every other attribute
    # name is forwarded to a key of the backing container
    __slots__ = ("__children__", "__id__", "__target__", "__weakref__")


def is_observable(value: Any) -> bool:
    return isinstance(value, Proxy)


def is_container(value: Any) -> bool:
    return isinstance(value, (Proxy, Mapping))


def strict_equal(old: Any, new: Any) -> bool:
    """
    Returns whether writing `new` over `old` is not a change at all:
    either the very same object, or two plain values of the exact same
    type that compare equal. Containers are only equal to themselves.
    """
    if old is new:
        return True
    if is_container(old) or is_container(new):
        return False
    return type(old) is type(new) and old == new


def snapshot(value: T, _path: tuple[int, ...] = ()) -> T:
    """
    Returns a private copy of `value` to store in a backing container.

    Mappings are copied into fresh dicts (which are wrapped lazily),
    sequences become tuples and sets become frozensets. Containers found
    inside sequences and sets are frozen as well, because nothing can
    intercept changes made to them. Shared references are copied
    separately, so the result is always a tree.
    """
    if isinstance(value, Proxy):
        value = value.__target__
    if isinstance(value, Mapping):
        path = _enter(value, _path)
        return {key: snapshot(item, path) for key, item in value.items()}
    if isinstance(value, (list, tuple, Set)):
        return _freeze(value, _path)
    return value


def _freeze(value, path):
    if isinstance(value, Proxy):
        value = value.__target__
    if isinstance(value, Mapping):
        path = _enter(value, path)
        return MappingProxyType({k: _freeze(v, path) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        path = _enter(value, path)
        return tuple(_freeze(item, path) for item in value)
    if isinstance(value, Set):
        return frozenset(value)
    return value


def _enter(value, path):
    if id(value) in path:
        raise NotObservableError(
            f"Can't observe data with reference cycles: {type(value).__name__} "
            "contains itself"
        )
    return path + (id(value),)


def to_raw(target: Proxy[T] | T) -> T:
    """
    Returns a plain copy of the given value in which every observable
    node has been replaced by a dict and every frozen mapping by a dict.
    """
    if isinstance(target, Proxy):
        return to_raw(target.__target__)

    if isinstance(target, Mapping):
        return {key: to_raw(value) for key, value in target.items()}

    if isinstance(target, tuple):
        return tuple(to_raw(t) for t in target)

    return target
