"""
dsp56k-fmt Command-Line Interface
=================================

This package provides the command-line tools:

- **dspfmt**: formats DSP56000 assembly source
- **dspparse**: dumps the fields of every source line as JSON

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["dspfmt", "dspparse"]
