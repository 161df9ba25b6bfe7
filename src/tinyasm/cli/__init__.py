"""
tinyasm Command-Line Interface
==============================

- **tinyasm**: the assembler

Implemented as a Click application with help text and uniform error
reporting (see tinyasm.cli.errors).
"""

__all__ = ["tinyasm"]
