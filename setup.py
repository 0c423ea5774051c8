#!/usr/bin/env python3
"""
Setup script for Noverna Database package.
"""

import re

from setuptools import setup, find_packages

# Read metadata from package without importing it
with open("noverna_db/__init__.py") as f:
    version = dict(re.findall(r'^(__\w+__) = "([^"]*)"', f.read(), re.MULTILINE))

# Read requirements
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="noverna-db",
    version=version["__version__"],
    author=version["__author__"],
    description="Pooled PostgreSQL access with named parameters for scripting hosts",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "noverna-db=noverna_db.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="postgresql database pool named parameters transactions",
    project_urls={
        "Source": "https://github.com/your-org/noverna-db",
        "Bug Reports": "https://github.com/your-org/noverna-db/issues",
    },
)
