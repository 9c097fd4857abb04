#!/usr/bin/env python3
from __future__ import annotations

import os
import setuptools
import pathlib
import sys

__minver__ = '3.8'
__author__ = 'pkcs8rsa contributors'
__slogan__ = 'Decode RSA private keys from PKCS#8 containers into their numeric fields.'
__topics__ = [
    'Development Status :: 4 - Beta',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Security',
    'Topic :: Security :: Cryptography',
]

__requirements__ = [
    'pycryptodomex',
]

__extras__ = {
    'test': [
        'pytest',
        'flake8',
    ],
}


def get_config():
    sys.path.insert(0, str(pathlib.Path(__file__).parent.absolute()))

    import pkcs8rsa

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = pathlib.Path(__file__).parent.joinpath('README.md')
        with open(filename, 'r', encoding='UTF8') as README:
            return README.read()

    config = dict(
        name=pkcs8rsa.__distribution__,
        version=pkcs8rsa.__version__,
        long_description=get_setup_readme(),
        author=__author__,
        description=__slogan__,
        long_description_content_type='text/markdown',
        python_requires=F'>={__minver__}',
        classifiers=__topics__,
        packages=setuptools.find_packages(include=('pkcs8rsa*',)),
        install_requires=__requirements__,
        extras_require=__extras__,
        entry_points={'console_scripts': ['pkcs8rsa=pkcs8rsa.cli:main']},
    )

    return config


if __name__ == '__main__':
    os.chdir(pathlib.Path(__file__).parent)
    setuptools.setup(**get_config())
