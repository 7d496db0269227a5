"""
gbdispatch Command-Line Interface
=================================

This package provides the command-line tool of the dispatch generator:

- **gbdgen**: SM83 dispatch code generator

The tool is a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["gbdgen"]
