"""
Archive operation handlers for nulib.

Each handler module exports:
- COMMANDS: list[Command] - commands this handler performs
- run(state: ParseState, ctx: HandlerContext) -> bool - True on success
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, TextIO

from nulib.core import features
from nulib.core.capabilities import Command
from nulib.core.errors import DispatchError
from nulib.core.state import ParseState


@dataclass(frozen=True)
class HandlerContext:
    """Streams and environment passed to handlers."""

    prog: str = "nulib"
    cwd: Path = field(default_factory=Path.cwd)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    stdin: BinaryIO = field(default_factory=lambda: sys.stdin.buffer)
    pipe_out: BinaryIO = field(default_factory=lambda: sys.stdout.buffer)
    has_feature: Callable[[str], bool] = features.is_available

    def resolve(self, path: str) -> Path:
        """Resolve a user-supplied path against cwd."""
        return self.cwd / Path(path).expanduser()

    def say(self, message: str) -> None:
        print(message, file=self.stdout)

    def error(self, message: str) -> None:
        print(f"{self.prog}: {message}", file=self.stderr)


class OperationHandler(Protocol):
    """Protocol for operation handler modules."""

    def run(self, state: ParseState, ctx: HandlerContext) -> bool:
        """Perform the operation.

        Returns True if it succeeded. Why it failed is the handler's business
        to report; the dispatcher only sees the outcome.
        """
        ...


def _discover_handlers() -> dict[Command, str]:
    """Discover handler modules and build command -> module mapping."""
    handlers = {}
    ops_dir = Path(__file__).parent
    for file in sorted(ops_dir.glob("*.py")):
        if file.name.startswith("_"):
            continue
        module_name = file.stem
        try:
            module = importlib.import_module(f".{module_name}", package="nulib.ops")
        except ImportError:
            continue
        for cmd in getattr(module, "COMMANDS", []):
            handlers[cmd] = module_name
    return handlers


def get_handler(command: Command) -> Optional[OperationHandler]:
    """
    Get the handler module for a command.

    Returns None if no handler exists for the command.
    """
    module_name = KNOWN_HANDLERS.get(command)
    if not module_name:
        return None
    return importlib.import_module(f".{module_name}", package="nulib.ops")


def dispatch(state: ParseState, ctx: HandlerContext | None = None) -> bool:
    """Run the handler for state.command and return whether it succeeded.

    Raises DispatchError if no handler is registered for the command.
    """
    handler = get_handler(state.command)
    if handler is None:
        raise DispatchError(state.command)
    if ctx is None:
        ctx = HandlerContext()
    return bool(handler.run(state, ctx))


# Build handler mapping at import time
KNOWN_HANDLERS = _discover_handlers()
