"""
This module is used as a unified resource for types that are primarily used for type hints.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing import Union

    JSON = Union[None, str, int, bool, dict[str, 'JSON'], list['JSON']]
    JSONDict = dict[str, JSON]

    buf = Union[bytes, bytearray, memoryview]
    KeyInput = Union[str, bytes, bytearray, memoryview]

else:
    JSON = Any
    JSONDict = Any
    buf = Any
    KeyInput = Any


__all__ = [
    'asbuffer',
    'buf',
    'JSON',
    'JSONDict',
    'KeyInput',
    'typename',
]


def asbuffer(obj) -> memoryview | None:
    """
    Attempts to acquire a memoryview of the given object. This works for bytes and bytearrays, or
    memoryview objects themselves. The return value is `None` for objects that do not support the
    buffer protocol.
    """
    try:
        return memoryview(obj)
    except TypeError:
        return None


def typename(thing):
    """
    Determines the name of the type of an object.
    """
    if not isinstance(thing, type):
        thing = type(thing)
    try:
        return thing.__name__
    except AttributeError:
        return repr(thing)
