"""
Decoding of RSA private keys in PKCS#8 (RFC 5958) and PKCS#1 (RFC 8017) containers into the
individual key parameters. The layout of both structures is fixed:

    PrivateKeyInfo ::= SEQUENCE {
        version                 INTEGER,
        privateKeyAlgorithm     AlgorithmIdentifier,
        privateKey              OCTET STRING,    -- contains an RSAPrivateKey
        attributes          [0] Attributes OPTIONAL
    }

    RSAPrivateKey ::= SEQUENCE {
        version           INTEGER,  -- 0 for two-prime keys
        modulus           INTEGER,  -- n
        publicExponent    INTEGER,  -- e
        privateExponent   INTEGER,  -- d
        prime1            INTEGER,  -- p
        prime2            INTEGER,  -- q
        exponent1         INTEGER,  -- d mod (p-1)
        exponent2         INTEGER,  -- d mod (q-1)
        coefficient       INTEGER,  -- (inverse of q) mod p
        otherPrimeInfos   OtherPrimeInfos OPTIONAL
    }

All integers are returned as unsigned big-endian byte strings, see
`pkcs8rsa.lib.pkcs8.trim_leading_zeroes`.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from pkcs8rsa.lib.asn1.reader import DERReader
from pkcs8rsa.lib.asn1.schema import CLASS_UNIVERSAL, DecodeError, MalformedEncoding, Tag
from pkcs8rsa.lib.environment import environment, logger
from pkcs8rsa.lib.pem import is_pem, read_pem
from pkcs8rsa.lib.types import asbuffer, typename

if TYPE_CHECKING:
    from Cryptodome.PublicKey.RSA import RsaKey

    from pkcs8rsa.lib.types import JSONDict, KeyInput, buf

__all__ = [
    'RSAParameters',
    'UnsupportedKeyStructure',
    'decode_rsa_parameters',
    'decode_rsa_private_key',
    'trim_leading_zeroes',
]

RSA_ENCRYPTION = 'rsaEncryption'

_log = logger(__name__)


class UnsupportedKeyStructure(DecodeError):
    """
    Raised for structurally valid input that is not a two-prime RSA private key; for example a
    multi-prime key, an encrypted container, or a key for another algorithm in strict mode.
    """


class RSAParameters(NamedTuple):
    """
    The numeric fields of an RSA private key as unsigned big-endian byte strings. The field names
    follow the `RSAParameters` convention that is common to most platform crypto libraries.
    """
    modulus: bytes
    exponent: bytes
    d: bytes
    p: bytes
    q: bytes
    dp: bytes
    dq: bytes
    inverse_q: bytes

    def to_dict(self) -> dict[str, bytes]:
        return self._asdict()

    def __json__(self) -> JSONDict:
        return {name: value.hex().upper() for name, value in self._asdict().items()}

    def integers(self) -> dict[str, int]:
        return {name: int.from_bytes(value, 'big') for name, value in self._asdict().items()}

    def to_key(self) -> RsaKey:
        """
        Import the parameters into a `Cryptodome.PublicKey.RSA.RsaKey`. The library checks the
        consistency of the key material and raises a `ValueError` if the parameters do not form
        a valid key.
        """
        from Cryptodome.PublicKey import RSA
        v = self.integers()
        return RSA.construct((v['modulus'], v['exponent'], v['d'], v['p'], v['q']), consistency_check=True)


def trim_leading_zeroes(data: buf, align_to_8_bytes: bool = True) -> bytes:
    """
    Convert the content of a DER INTEGER to its minimal unsigned magnitude by removing all leading
    zero bytes. A value of zero is returned as a single zero byte. When `align_to_8_bytes` is set,
    the result is then left-padded with zero bytes until its length is a multiple of 8. The result
    is always a new bytes object, never a view into the input.
    """
    view = memoryview(data)
    size = len(view)
    if not size:
        raise ValueError('Cannot normalize an empty integer encoding.')
    start = 0
    while start < size - 1 and view[start] == 0:
        start += 1
    trimmed = view[start:].tobytes()
    if align_to_8_bytes:
        trimmed = bytes(-len(trimmed) % 8) + trimmed
    return trimmed


def _read_rsa_private_key(reader: DERReader, align: bool) -> RSAParameters:
    rsa = reader.enter_sequence()
    reader.expect_end('RSAPrivateKey')
    version = rsa.read_small_integer()
    if version != 0:
        raise UnsupportedKeyStructure(
            F'RSAPrivateKey has version {version}; only two-prime keys with version 0 are supported')
    integers: list[memoryview] = []
    for name in RSAParameters._fields:
        if rsa.eof:
            raise UnsupportedKeyStructure(
                F'RSAPrivateKey ends after {len(integers) + 1} integers; a two-prime key has exactly 9')
        value = rsa.read_integer_bytes()
        if value[0] & 0x80:
            raise UnsupportedKeyStructure(F'RSAPrivateKey contains a negative value for {name}')
        integers.append(value)
    if not rsa.eof:
        raise UnsupportedKeyStructure('RSAPrivateKey contains more than the 9 integers of a two-prime key')
    n, e, d, p, q, dp, dq, qi = integers
    _log.debug(F'decoded RSAPrivateKey with a modulus of {int.from_bytes(n, "big").bit_length()} bits')
    return RSAParameters(
        modulus=trim_leading_zeroes(n, align),
        exponent=trim_leading_zeroes(e, False),
        d=trim_leading_zeroes(d, align),
        p=trim_leading_zeroes(p, align),
        q=trim_leading_zeroes(q, align),
        dp=trim_leading_zeroes(dp, align),
        dq=trim_leading_zeroes(dq, align),
        inverse_q=trim_leading_zeroes(qi, align),
    )


def _algorithm_oid(algorithm: DERReader) -> str | None:
    try:
        element = algorithm.read_element()
    except MalformedEncoding:
        return None
    if element.tag_class != CLASS_UNIVERSAL or element.tag is not Tag.OID:
        return None
    return DERReader.decode_oid(element.content)


def _read_private_key_info(reader: DERReader, align: bool, strict: bool) -> RSAParameters:
    info = reader.enter_sequence()
    reader.expect_end('PrivateKeyInfo')
    version = info.read_small_integer()
    _log.debug(F'reading PrivateKeyInfo with version {version}')
    oid = _algorithm_oid(info.enter_sequence())
    if oid is None:
        if strict:
            raise UnsupportedKeyStructure('the PrivateKeyInfo algorithm identifier does not start with an OID')
        _log.debug('the PrivateKeyInfo algorithm identifier does not start with an OID; ignoring it')
    elif oid != RSA_ENCRYPTION:
        if strict:
            raise UnsupportedKeyStructure(F'the PrivateKeyInfo algorithm is {oid}, not {RSA_ENCRYPTION}')
        _log.warning(F'the PrivateKeyInfo algorithm is {oid}; attempting to decode the key as RSA anyway')
    payload = info.read_expected(Tag.OCTET_STRING)
    return _read_rsa_private_key(DERReader.enter(payload), align)


def _der(data: KeyInput, *labels: str) -> tuple[str | None, memoryview]:
    if not is_pem(data):
        if isinstance(data, str):
            raise MalformedEncoding('textual input does not contain a PEM block')
        view = asbuffer(data)
        if view is None:
            raise TypeError(F'Unable to decode key from object of type {typename(data)}.')
        return None, view
    block = read_pem(data)
    _log.debug(F'found PEM block with label {block.label!r}')
    if block.encrypted:
        raise UnsupportedKeyStructure(F'the PEM block {block.label!r} is encrypted')
    if block.label not in labels:
        raise UnsupportedKeyStructure(F'unexpected PEM label {block.label!r}')
    return block.label, memoryview(block.data)


def decode_rsa_private_key(data: KeyInput, align: bool = True) -> RSAParameters:
    """
    Decode a PKCS#1 `RSAPrivateKey`, given either as DER or as a PEM block with the label
    `RSA PRIVATE KEY`.
    """
    _, der = _der(data, 'RSA PRIVATE KEY')
    return _read_rsa_private_key(DERReader(der), align)


def decode_rsa_parameters(data: KeyInput, align: bool = True, strict: bool | None = None) -> RSAParameters:
    """
    Decode an RSA private key from a PKCS#8 `PrivateKeyInfo` structure. The input can be a PEM
    block labeled `PRIVATE KEY` or the DER encoding as a binary buffer. PEM blocks labeled
    `RSA PRIVATE KEY` are decoded as PKCS#1.

    With `align` enabled, all fields except the public exponent are left-padded with zero bytes
    to a multiple of 8 bytes. The algorithm identifier is not required to name RSA unless `strict`
    is set; when `strict` is `None`, the `PKCS8RSA_STRICT` environment setting is used.

    Any failure raises a `pkcs8rsa.lib.asn1.schema.DecodeError`; there is no partial result.
    """
    if strict is None:
        strict = bool(environment.strict.value)
    label, der = _der(data, 'PRIVATE KEY', 'RSA PRIVATE KEY')
    if label == 'RSA PRIVATE KEY':
        return _read_rsa_private_key(DERReader(der), align)
    return _read_private_key_info(DERReader(der), align, strict)
