"""
Decode RSA private keys from PKCS#8 `PrivateKeyInfo` containers into their numeric fields.

    >>> from pkcs8rsa import decode_rsa_parameters
    >>> key = decode_rsa_parameters(open('service-account.pem').read())
    >>> key.exponent.hex()
    '010001'

The package is structured as follows:

1. `pkcs8rsa.lib.pem`: reading PEM armor around DER data
2. `pkcs8rsa.lib.asn1.reader`: a cursor based reader for DER tag-length-value triplets
3. `pkcs8rsa.lib.pkcs8`: extraction and normalization of the RSA key fields
4. `pkcs8rsa.lib.environment`: logging and configuration via environment variables
"""
from __future__ import annotations

__version__ = '0.3.1'
__distribution__ = 'pkcs8-rsa'

from pkcs8rsa.lib.asn1.schema import DecodeError, MalformedEncoding
from pkcs8rsa.lib.pkcs8 import (
    RSAParameters,
    UnsupportedKeyStructure,
    decode_rsa_parameters,
    decode_rsa_private_key,
    trim_leading_zeroes,
)

__all__ = [
    'DecodeError',
    'MalformedEncoding',
    'RSAParameters',
    'UnsupportedKeyStructure',
    'decode_rsa_parameters',
    'decode_rsa_private_key',
    'trim_leading_zeroes',
]
