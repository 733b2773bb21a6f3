# src/__init__.py — v1
"""neuroreport — generation orchestration for multi-section neuropsychological reports."""

from neuroreport.version import __version__

__all__ = ["__version__"]
