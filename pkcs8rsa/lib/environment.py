#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
The decoder reads two settings from environment variables, both prefixed with `PKCS8RSA_`:

- `PKCS8RSA_VERBOSITY` is a log level name like `DEBUG` or a number of `-v` flags.
- `PKCS8RSA_STRICT` rejects PKCS#8 containers whose algorithm is not `rsaEncryption`.

This module is also host to the logging configuration.
"""
from __future__ import annotations

import os
import logging

from enum import IntEnum
from typing import Optional, TypeVar, Generic

_T = TypeVar('_T')


class LogLevel(IntEnum):
    """
    An enumeration representing the current log level:
    """
    DETACHED = logging.CRITICAL + 100
    """
    The decoder is not attached to a terminal but has been called from code. This means that
    the only way to communicate problems is to throw an exception.
    """
    NONE = logging.CRITICAL + 50

    @classmethod
    def FromVerbosity(cls, verbosity: int):
        if verbosity < 0:
            return cls.DETACHED
        return {
            0: cls.WARNING,
            1: cls.INFO,
        }.get(verbosity, cls.DEBUG)

    CRITICAL = logging.CRITICAL  # noqa
    ERROR    = logging.ERROR     # noqa
    WARNING  = logging.WARNING   # noqa
    INFO     = logging.INFO      # noqa
    DEBUG    = logging.DEBUG     # noqa


class KeyDecoderFormatter(logging.Formatter):
    """
    Prints log levels the way the command line tool talks about them.
    """
    NAMES = {
        logging.CRITICAL : 'failure',
        logging.ERROR    : 'failure',
        logging.WARNING  : 'warning',
        logging.INFO     : 'comment',
        logging.DEBUG    : 'verbose',
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        record.custom_level_name = self.NAMES.get(record.levelno, record.levelname.lower())
        return super().formatMessage(record)


def logger(name: str) -> logging.Logger:
    """
    Obtain a logger which is configured with the default format. When the verbosity is set via
    the environment, it is applied to the logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        stream = logging.StreamHandler()
        stream.setFormatter(KeyDecoderFormatter(
            '({asctime}) {custom_level_name} in {name}: {message}',
            style='{',
            datefmt='%H:%M:%S',
        ))
        logger.addHandler(stream)
        if (level := environment.verbosity.value) is not None:
            logger.setLevel(level)
    logger.propagate = False
    return logger


class EnvironmentSetting(Generic[_T]):
    """
    A setting that is parsed once from the environment variable `PKCS8RSA_<name>` when the
    module is loaded.
    """
    key: str
    value: Optional[_T]

    def __init__(self, name: str):
        self.key = F'PKCS8RSA_{name}'
        self.value = self.parse(os.environ.get(self.key))

    def parse(self, value: Optional[str]) -> Optional[_T]:
        raise NotImplementedError


class EVBool(EnvironmentSetting[bool]):
    def parse(self, value):
        value = (value or '').lower().strip()
        if not value:
            return False
        if value.isdigit():
            return bool(int(value))
        return value not in {'no', 'off', 'false'}


class EVLog(EnvironmentSetting[LogLevel]):
    def parse(self, value):
        if value is None:
            return None
        if value.isdigit():
            return LogLevel.FromVerbosity(int(value))
        try:
            return LogLevel[value.upper()]
        except KeyError:
            levels = ', '.join(ll.name for ll in LogLevel)
            logging.getLogger(__name__).warning(
                F'ignoring unknown verbosity {value!r}; pick from: {levels}')
            return None


class environment:
    verbosity = EVLog('VERBOSITY')
    strict = EVBool('STRICT')


def set_log_level(level: LogLevel, package: str = 'pkcs8rsa'):
    """
    Apply the given log level to all loggers of the package that have been created so far.
    """
    for name in list(logging.root.manager.loggerDict):
        if name.partition('.')[0] == package:
            logging.getLogger(name).setLevel(level)
