"""Setuptools build hooks for indexarith."""

from __future__ import annotations

from setuptools import setup

# Metadata lives in pyproject.toml; the wheel is pure Python (py3-none-any).
setup()
