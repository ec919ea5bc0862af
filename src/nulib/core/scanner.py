"""
Argument scanner for nulib.

Turns the argument list (without the program name) into a ParseState:

    nulib -command[modifiers] [-modifiers ...] archive [filespec ...]

Scanning never touches the filesystem. Every failure is raised as a
NulibError subclass before anything is dispatched.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from nulib.core import features
from nulib.core.capabilities import (
    COMMAND_LETTERS,
    DEFAULT_TABLE,
    CapabilityTable,
    Command,
)
from nulib.core.errors import (
    ConflictingModifiers,
    MissingFilespec,
    PipeNotAllowed,
    UnknownCommand,
    UsageError,
)
from nulib.core.modifiers import interpret_bundle
from nulib.core.state import STDIN_SENTINEL, ParseState, StateBuilder


def _is_bare_help(token: str) -> bool:
    return token.lower() in ("h", "-h")


def _select_command(token: str) -> tuple[Command, str]:
    """Return the command named by the first token and its trailing bundle."""
    body = token[1:] if token.startswith("-") else token
    if not body:
        raise UsageError("You must specify a command after the '-'")
    letter = body[0].lower()
    command = COMMAND_LETTERS.get(letter)
    if command is None:
        raise UnknownCommand(body[0])
    return command, body[1:]


def parse_args(
    tokens: Sequence[str],
    table: CapabilityTable = DEFAULT_TABLE,
    has_feature: Callable[[str], bool] = features.is_available,
    prog: str = "nulib",
) -> ParseState:
    """Parse argv (minus the program name) into a validated ParseState.

    prog is only used to prefix the table diagnostic for a command with
    no capability entry.

    Raises UsageError, UnknownCommand, UnknownModifier, IllegalModifier,
    ConflictingModifiers, PipeNotAllowed or MissingFilespec.
    """
    if len(tokens) == 1 and _is_bare_help(tokens[0]):
        return ParseState(command=Command.HELP)
    if len(tokens) < 2:
        raise UsageError("missing command or archive name", show_usage=True)

    command, bundle = _select_command(tokens[0])
    builder = StateBuilder(command)
    interpret_bundle(builder, bundle, table, has_feature)

    idx = 1
    while idx < len(tokens):
        token = tokens[idx]
        if not token.startswith("-") or token == STDIN_SENTINEL:
            break
        interpret_bundle(builder, token[1:], table, has_feature)
        idx += 1

    if idx >= len(tokens):
        raise UsageError("You must specify an archive name")

    if builder.has_flag("no_compression") and builder.has_flag("compress_deflate"):
        raise ConflictingModifiers("0", "z")

    archive = tokens[idx]
    builder.archive = archive
    if archive == STDIN_SENTINEL and not table.is_pipe_allowed(command):
        raise PipeNotAllowed(command)

    builder.filespecs = list(tokens[idx + 1 :])
    if not builder.filespecs and table.is_filespec_required(command, prog):
        raise MissingFilespec(command)

    return builder.build()
