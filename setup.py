#!/usr/bin/env python
#encoding: utf8

import io
import os
import re

from setuptools import setup
from setuptools import find_packages

with io.open(os.path.join(os.path.dirname(__file__), 'dtokit', '__init__.py'), 'r') as v:
    VERSION = re.match(r".*__version__ = '(.*?)'", v.read(), re.S).group(1)

SHORT_DESC="Typed, validated data transfer objects built out of loosely-typed" \
" input like request parameters, decoded json and configuration."

LONG_DESC = """dtokit derives validation rules from the type annotations of
plain Python classes, validates untyped input against them, builds typed
instances out of the validated input and serializes them back to plain dicts
and json responses.
"""

try:
    os.stat('CHANGELOG.rst')
    with io.open('CHANGELOG.rst', 'rb') as f:
        LONG_DESC += u"\n\n" + f.read().decode('utf8')
except OSError:
    pass


setup(
    name='dtokit',
    packages=find_packages(include=['dtokit', 'dtokit.*']),

    version=VERSION,
    description=SHORT_DESC,
    long_description=LONG_DESC,
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: Implementation :: CPython',
        'Operating System :: OS Independent',
        'Natural Language :: English',
        'Intended Audience :: Developers',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
    ],
    keywords='dto validation wsgi json request response',
    license='LGPL-2.1',
    zip_safe=False,
    python_requires='>=3.9',
    install_requires=[
      'pytz',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
)
