#! /usr/bin/env python
"""
Copyright (c) 2016-present, Facebook, Inc.
All rights reserved.

This source code is licensed under the BSD-style license found in the
LICENSE file in the root directory of this source tree. An additional grant
of patent rights can be found in the PATENTS file in the same directory.
"""

"""Package definition."""

from setuptools import setup


with open('requirements.txt') as f:
    required_libs = [l.strip() for l in f if l.strip()]

with open('README.md') as f:
    readme = f.read()

version = '1.0'

# perform the setup action
setup(
    name='smsgate',
    version=version,
    description='SMS-DELIVER PDU decoding and multi-part SMS reassembly',
    long_description=readme,
    long_description_content_type='text/markdown',
    author='Facebook',
    author_email='CommunityCellularManager@fb.com',
    license='BSD',
    packages=['smsgate'],
    install_requires=required_libs,
    extras_require={
        'test': ['pytest', 'mock'],
    },
    entry_points={
        'console_scripts': ['smsgate-decode = smsgate.__main__:main'],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Topic :: Communications :: Telephony',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'License :: OSI Approved :: BSD License',
    ],
    zip_safe=False
)
