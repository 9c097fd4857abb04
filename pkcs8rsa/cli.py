#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command line interface: Decode an RSA private key from a PKCS#8 or PKCS#1 container and print its
numeric fields.
"""
from __future__ import annotations

import argparse
import base64
import enum
import json
import sys
import textwrap

from typing import Iterable, Sequence

import pkcs8rsa

from pkcs8rsa.lib.asn1.schema import DecodeError
from pkcs8rsa.lib.environment import LogLevel, environment, logger, set_log_level
from pkcs8rsa.lib.pkcs8 import RSAParameters, decode_rsa_parameters, trim_leading_zeroes


class OutputFormat(str, enum.Enum):
    TEXT = 'text'
    JSON = 'json'
    XKMS = 'xkms'


XKMS_TAGS = {
    'modulus'   : 'Modulus',
    'exponent'  : 'Exponent',
    'd'         : 'D',
    'p'         : 'P',
    'q'         : 'Q',
    'dp'        : 'DP',
    'dq'        : 'DQ',
    'inverse_q' : 'InverseQ',
}


def format_text(key: RSAParameters) -> Iterable[str]:
    for name, value in key.__json__().items():
        value = '\n'.join(textwrap.wrap(value, 80))
        yield F'-- {name + " ":-<77}\n{value}'


def format_json(key: RSAParameters) -> Iterable[str]:
    yield json.dumps(key.__json__(), indent=4)


def format_xkms(key: RSAParameters) -> Iterable[str]:
    yield '<RSAKeyPair>'
    for name, value in key.to_dict().items():
        tag = XKMS_TAGS[name]
        value = base64.b64encode(trim_leading_zeroes(value, False)).decode('ascii')
        yield F'\t<{tag}>{value}</{tag}>'
    yield '</RSAKeyPair>'


FORMATTERS = {
    OutputFormat.TEXT: format_text,
    OutputFormat.JSON: format_json,
    OutputFormat.XKMS: format_xkms,
}


def argparser() -> argparse.ArgumentParser:
    argp = argparse.ArgumentParser(
        prog='pkcs8rsa',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=__doc__.strip(),
    )
    argp.add_argument(
        'file',
        nargs='?',
        type=argparse.FileType('rb'),
        default=None,
        help='A file containing the key in PEM or DER format. The key is read from stdin if omitted.'
    )
    argp.add_argument(
        '-f', '--format',
        type=OutputFormat,
        choices=list(OutputFormat),
        default=OutputFormat.TEXT,
        metavar='FORMAT',
        help='Select an output format ({}), default is {}.'.format(
            ', '.join(f.value for f in OutputFormat), OutputFormat.TEXT.value)
    )
    argp.add_argument(
        '-m', '--minimal',
        action='store_true',
        help='Output the minimal encoding of all fields rather than aligning them to 8 bytes.'
    )
    argp.add_argument(
        '-s', '--strict',
        action='store_true',
        default=None,
        help='Reject PKCS#8 containers whose algorithm identifier is not rsaEncryption.'
    )
    argp.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase the verbosity; specify twice for debug output.'
    )
    argp.add_argument(
        '-V', '--version',
        action='version',
        version=F'%(prog)s {pkcs8rsa.__version__}',
    )
    return argp


def main(argv: Sequence[str] | None = None) -> int:
    args = argparser().parse_args(argv)
    log = logger(__name__)
    level = environment.verbosity.value
    if level is None or args.verbose:
        level = LogLevel.FromVerbosity(args.verbose)
    set_log_level(level)
    if args.file is None:
        data = sys.stdin.buffer.read()
    else:
        with args.file as source:
            data = source.read()
    log.info(F'read {len(data)} bytes of input')
    try:
        key = decode_rsa_parameters(data, align=not args.minimal, strict=args.strict)
    except DecodeError as E:
        log.error(F'unable to decode key: {E!s}')
        return 1
    for line in FORMATTERS[args.format](key):
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
