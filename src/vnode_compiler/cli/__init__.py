"""Command-line interface module for the template compiler.

This module provides the ``vnode-compile`` tool for inspecting the code,
static map and metrics a template compiles to.
"""

from .main import main

__all__ = ["main"]
