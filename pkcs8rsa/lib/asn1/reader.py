from __future__ import annotations

from typing import TYPE_CHECKING

from pkcs8rsa.lib.structures import EOF, StructReader

from pkcs8rsa.lib.asn1.schema import (
    CLASS_UNIVERSAL,
    DERElement,
    MalformedEncoding,
    Tag,
    TagType,
)

if TYPE_CHECKING:
    from pkcs8rsa.lib.types import buf


class DERReader(StructReader[memoryview]):
    """
    A cursor over a DER encoded buffer. Every element that is read is returned as a
    `pkcs8rsa.lib.asn1.schema.DERElement` whose content is a view into the buffer. Nested
    structures are parsed by spawning a new reader over the content of an element, see
    `pkcs8rsa.lib.asn1.reader.DERReader.enter`; this never copies any data.
    """

    _TAGS = {t.value: t for t in Tag}

    _OID_NAMES = {
        '1.2.840.113549.1.1.1'  : 'rsaEncryption',
        '1.2.840.113549.1.1.10' : 'rsaPSS',
        '1.2.840.10040.4.1'     : 'dsa',
        '1.2.840.10045.2.1'     : 'ecPublicKey',
        '1.2.840.10046.2.1'     : 'dhpublicnumber',
        '1.3.101.110'           : 'x25519',
        '1.3.101.111'           : 'x448',
        '1.3.101.112'           : 'ed25519',
        '1.3.101.113'           : 'ed448',
    }

    def __init__(self, data: buf | DERReader):
        if not isinstance(data, StructReader):
            data = memoryview(data).toreadonly()
        super().__init__(data, bigendian=True)

    def _read_tag(self) -> tuple[int, bool, TagType]:
        b = self.u8()
        tag_class = (b >> 6) & 3
        constructed = bool(b & 0x20)
        tag_number = b & 0x1F
        if tag_number == 0x1F:
            tag_number = 0
            while True:
                b = self.u8()
                tag_number = (tag_number << 7) | (b & 0x7F)
                if not (b & 0x80):
                    break
        if tag_class == CLASS_UNIVERSAL:
            tag_number = self._TAGS.get(tag_number, tag_number)
        return tag_class, constructed, tag_number

    def _read_length(self) -> int:
        b = self.u8()
        if b < 0x80:
            return b
        if b == 0x80:
            raise MalformedEncoding('indefinite length encoding is not permitted in DER')
        if b == 0xFF:
            raise MalformedEncoding('the length octet 0xFF is reserved')
        return self.read_integer((b & 0x7F) * 8)

    def read_element(self) -> DERElement:
        """
        Read the tag-length-value triplet at the current position and advance the cursor past it.
        """
        offset = self.tell()
        try:
            tag_class, constructed, tag = self._read_tag()
            length = self._read_length()
        except EOF as E:
            raise MalformedEncoding(F'buffer ended inside the header of the element at offset {offset}') from E
        if length > self.remaining_bytes:
            raise MalformedEncoding(
                F'element at offset {offset} declares {length} bytes of content, '
                F'but only {self.remaining_bytes} remain')
        content = self.read_exactly(length)
        return DERElement(tag, constructed, length, content, tag_class)

    def read_expected(self, tag: Tag) -> DERElement:
        """
        Read the next element and verify that it carries the given universal tag.
        """
        if self.eof:
            raise MalformedEncoding(F'expected {tag}, but the buffer ended at offset {self.tell()}')
        offset = self.tell()
        element = self.read_element()
        if element.tag_class != CLASS_UNIVERSAL or element.tag is not tag:
            raise MalformedEncoding(F'expected {tag} at offset {offset}, got {element.describe()}')
        if element.constructed != (tag in (Tag.SEQUENCE, Tag.SET)):
            raise MalformedEncoding(F'{tag} at offset {offset} has an invalid constructed bit')
        return element

    @classmethod
    def enter(cls, element: DERElement) -> DERReader:
        """
        Return a new reader whose buffer is the content of the given element.
        """
        return cls(element.content)

    def enter_sequence(self) -> DERReader:
        return self.enter(self.read_expected(Tag.SEQUENCE))

    def read_integer_bytes(self) -> memoryview:
        """
        Read an INTEGER element and return its raw two's complement content.
        """
        element = self.read_expected(Tag.INTEGER)
        if not element.length:
            raise MalformedEncoding('an INTEGER must have at least one content byte')
        return element.content

    def read_small_integer(self) -> int:
        return int.from_bytes(self.read_integer_bytes(), 'big', signed=True)

    def read_oid(self) -> str:
        """
        Read an OBJECT IDENTIFIER and return its name, or the dotted notation if the name is not known.
        """
        return self.decode_oid(self.read_expected(Tag.OID).content)

    @classmethod
    def decode_oid(cls, data: buf) -> str:
        subids: list[int] = []
        value = 0
        for b in data:
            value = (value << 7) | (b & 0x7F)
            if not (b & 0x80):
                subids.append(value)
                value = 0
        if not subids:
            return ''
        first = subids[0]
        if first < 40:
            components = [0, first]
        elif first < 80:
            components = [1, first - 40]
        else:
            components = [2, first - 80]
        components.extend(subids[1:])
        dotted = '.'.join(str(c) for c in components)
        return cls._OID_NAMES.get(dotted, dotted)

    def expect_end(self, what: str = 'structure'):
        if not self.eof:
            raise MalformedEncoding(F'{self.remaining_bytes} bytes of trailing data after the {what}')
