#!/usr/bin/env python
"""
VelocityShell - Interactive SSH shell sessions for automation

A small library that keeps one authenticated shell per host, writes
commands into it, and reads output back until a prompt marker shows up
or a deadline passes.
"""

import os
from setuptools import setup, find_packages

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Version
VERSION = '0.1.0'

setup(
    name='velocityshell',
    version=VERSION,
    description='Interactive SSH shell sessions with prompt-bounded reads',
    long_description=long_description,
    long_description_content_type='text/markdown',

    author='Scott Peterman',
    author_email='scottpeterman@gmail.com',
    url='https://github.com/scottpeterman/velocityshell',

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: System :: Networking',
        'Topic :: System :: Systems Administration',
    ],

    keywords='network automation ssh shell expect paramiko',

    packages=find_packages(exclude=['tests', 'tests.*']),

    python_requires='>=3.10',

    install_requires=[
        'paramiko>=3.0',
        'PyYAML>=6.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },

    project_urls={
        'Bug Reports': 'https://github.com/scottpeterman/velocityshell/issues',
        'Source': 'https://github.com/scottpeterman/velocityshell',
    },
)
