"""
Reading of PEM armored data. A PEM block consists of a `-----BEGIN <LABEL>-----` line, optional
RFC 1421 header lines of the form `Name: Value`, a Base64 encoded body, and an
`-----END <LABEL>-----` line. Binary input that does not look like text is passed through as DER.
"""
from __future__ import annotations

import base64
import re

from typing import NamedTuple

from pkcs8rsa.lib.asn1.schema import MalformedEncoding
from pkcs8rsa.lib.types import KeyInput, asbuffer, typename

_PEM_BLOCK = re.compile(
    R'-----BEGIN (?P<label>[\x21-\x2C\x2E-\x7E](?:[- ]?[\x21-\x2C\x2E-\x7E])*)?-----'
    R'(?P<body>.*?)'
    R'-----END (?P<end>[^\r\n]*?)-----',
    flags=re.DOTALL
)

_PEM_HEADER = re.compile(R'^([\w-]+):\s*(.*)$')


class PEMBlock(NamedTuple):
    label: str
    headers: dict[str, str]
    data: bytes

    @property
    def encrypted(self) -> bool:
        if self.label.startswith('ENCRYPTED'):
            return True
        return 'ENCRYPTED' in self.headers.get('Proc-Type', '').upper()


def is_pem(data: KeyInput) -> bool:
    """
    Determine whether the input contains a PEM armor line.
    """
    if isinstance(data, str):
        return '-----BEGIN ' in data
    view = asbuffer(data)
    if view is None:
        return False
    return B'-----BEGIN ' in view.tobytes()


def read_pem(data: KeyInput) -> PEMBlock:
    """
    Parse the first PEM block in the input. Raises `pkcs8rsa.lib.asn1.schema.MalformedEncoding`
    when no complete block is found, when the labels of the begin and end lines differ, or when
    the body is not valid Base64.
    """
    if not isinstance(data, str):
        view = asbuffer(data)
        if view is None:
            raise TypeError(F'Unable to read PEM data from object of type {typename(data)}.')
        try:
            data = view.tobytes().decode('ascii')
        except UnicodeDecodeError as E:
            raise MalformedEncoding('PEM input contains non-ASCII characters') from E
    match = _PEM_BLOCK.search(data)
    if match is None:
        raise MalformedEncoding('no complete PEM block was found in the input')
    label = match['label'] or ''
    if match['end'] != label:
        raise MalformedEncoding(F'PEM block begins with label {label!r} but ends with {match["end"]!r}')
    headers: dict[str, str] = {}
    lines = match['body'].strip().splitlines()
    while lines and (header := _PEM_HEADER.match(lines[0].strip())):
        headers[header[1]] = header[2]
        del lines[0]
    body = ''.join(''.join(line.split()) for line in lines)
    try:
        decoded = base64.b64decode(body, validate=True)
    except ValueError as E:
        raise MalformedEncoding(F'the body of the PEM block {label!r} is not valid Base64') from E
    return PEMBlock(label, headers, decoded)


def write_pem(label: str, data: bytes, width: int = 64) -> str:
    """
    Armor the given data as a PEM block with the given label.
    """
    encoded = base64.b64encode(data).decode('ascii')
    lines = [encoded[k:k + width] for k in range(0, len(encoded), width)]
    return '\n'.join([F'-----BEGIN {label}-----', *lines, F'-----END {label}-----', ''])
