#!/usr/bin/env python3
"""
Setup script for redis-session-store package.
This is provided for backward compatibility with older pip versions.
Modern installations should use pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
