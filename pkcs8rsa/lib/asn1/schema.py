from __future__ import annotations

import enum

from typing import NamedTuple, Union

CLASS_UNIVERSAL = 0
CLASS_CONTEXT = 2


class Tag(enum.IntEnum):
    """
    Universal tag numbers of the ASN.1 types that occur in RSA key containers.
    """
    INTEGER = 2
    BIT_STRING = 3
    OCTET_STRING = 4
    NULL = 5
    OID = 6
    SEQUENCE = 16
    SET = 17

    def __str__(self):
        return self.name.replace('_', ' ')


TagType = Union[Tag, int]


class DERElement(NamedTuple):
    """
    A single tag-length-value triplet. The `content` is a read-only view into the buffer that
    was parsed; it is not copied.
    """
    tag: TagType
    constructed: bool
    length: int
    content: memoryview
    tag_class: int = CLASS_UNIVERSAL

    @property
    def is_sequence(self) -> bool:
        return self.tag_class == CLASS_UNIVERSAL and self.tag is Tag.SEQUENCE and self.constructed

    def describe(self) -> str:
        if self.tag_class == CLASS_UNIVERSAL:
            name = str(self.tag)
        else:
            name = F'[{self.tag_class}:{self.tag}]'
        return F'{name} of length {self.length}'


class DecodeError(ValueError):
    """
    Base class of all errors that occur while decoding key material. Whenever it is raised, no
    part of the decoded data can be trusted.
    """


class MalformedEncoding(DecodeError):
    """
    Raised when the input is not valid DER: The buffer was truncated, a length used the
    indefinite or reserved form, an unexpected tag was encountered, or data trails the
    outermost element.
    """
