#!/usr/bin/env python3
"""
Setup script for SimStation
"""

from setuptools import setup, find_packages
import os
import re


def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()


# Read the version without importing the package
__version__ = re.search(
    r"__version__\s*=\s*'([^']+)'",
    read_file(os.path.join('simstation', '__version__.py')),
).group(1)

setup(
    name='simstation',
    version=__version__,
    description='SimStation - manage iOS simulators (boot, erase, battery, apps) through xcrun simctl',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*', 'docs']),
    python_requires='>=3.9',
    install_requires=[],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
        ],
    },
    entry_points={
        'console_scripts': [
            'simstation=simstation.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Testing',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Operating System :: MacOS :: MacOS X',
    ],
)
