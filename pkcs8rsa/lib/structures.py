"""
Interfaces and classes to read structured data from memory.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar, Union

if TYPE_CHECKING:
    from pkcs8rsa.lib.types import buf

    T = TypeVar('T', bound=Union[bytearray, bytes, memoryview])
else:
    T = TypeVar('T')


class EOF(EOFError):
    """
    While reading from a `pkcs8rsa.lib.structures.MemoryFile`, less bytes were available than
    requested. The exception contains a copy of the data from the incomplete read; it never
    refers to the buffer that was being read.
    """
    def __init__(self, size: int, rest: buf = B''):
        super().__init__(F'Unexpected end of buffer; attempted to read {size} bytes, but got only {len(rest)}.')
        self.rest = bytes(rest)
        self.size = size


class MemoryFile(Generic[T]):
    """
    A thin, read-only wrapper around a byte sequence which gives it the reading features of a
    file-like object. Reads return slices of the same type as the wrapped data, so a reader over
    a `memoryview` hands out views rather than copies.
    """
    _data: T
    _cursor: int

    def __init__(self, data: T | MemoryFile[T]):
        if isinstance(data, MemoryFile):
            self._data = data._data
            self._cursor = data._cursor
        elif isinstance(data, (bytes, bytearray, memoryview)):
            self._data = data
            self._cursor = 0
        else:
            raise TypeError(F'Invalid input: {data!r}.')

    def __len__(self):
        return len(self._data)

    @property
    def eof(self) -> bool:
        return self._cursor >= len(self._data)

    @property
    def remaining_bytes(self) -> int:
        return len(self._data) - self._cursor

    def read(self, size: int | None = None, peek: bool = False) -> T:
        beginning = self._cursor
        if size is None or size < 0:
            end = len(self._data)
        else:
            end = min(self._cursor + size, len(self._data))
        result = self._data[beginning:end]
        if not peek:
            self._cursor = end
        return result

    def tell(self) -> int:
        return self._cursor


class StructReader(MemoryFile[T]):
    """
    An extension of a `pkcs8rsa.lib.structures.MemoryFile` which provides methods to read
    structured data.
    """
    def __init__(self, data: T | StructReader[T], bigendian: bool | None = None):
        super().__init__(data)
        if bigendian is None:
            if isinstance(data, StructReader):
                bigendian = data.bigendian
            else:
                bigendian = False
        self.bigendian = bigendian

    @property
    def byteorder_name(self):
        return 'big' if self.bigendian else 'little'

    def read_exactly(self, size: int | None = None, peek: bool = False) -> T:
        """
        Read bytes from the underlying buffer. Raises an exception of type
        `pkcs8rsa.lib.structures.EOF` when fewer data is available than requested via the `size`
        parameter. The remaining data can be extracted from the exception.
        """
        data = self.read(size, peek)
        if size and len(data) < size:
            raise EOF(size, data)
        return data

    def read_integer(self, size: int, peek: bool = False) -> int:
        """
        Read an unsigned integer of the given size (in bits) from the stream.
        """
        nbytes, rest = divmod(size, 8)
        if rest > 0:
            raise ValueError(
                F'A {self.__class__.__name__} cannot read {size} bit{"s" * (size > 1)}, only multiples of 8 are possible.')
        data = self.read_exactly(nbytes, peek)
        return int.from_bytes(data, self.byteorder_name)

    def read_byte(self, peek: bool = False) -> int:
        try:
            b = self._data[self._cursor]
        except IndexError:
            raise EOF(1)
        if not peek:
            self._cursor += 1
        return b

    u8 = read_byte
