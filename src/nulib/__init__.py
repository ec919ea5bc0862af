"""
nulib - zip archive manager with a one-letter command line.

Parses "-command[modifiers] archive [files]" invocations into a validated
intent and dispatches it to an archive operation.
"""

from __future__ import annotations

__version__ = "0.3.0"

from nulib.core.scanner import parse_args
from nulib.nulib import run

__all__ = ["parse_args", "run", "__version__"]
