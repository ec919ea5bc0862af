"""
Command capability table for nulib.

Which modifiers are valid with which commands, which commands may read an
archive from a pipe, and which commands need a file list.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from nulib.core.errors import InternalTableError


class Command(Enum):
    """The nine nulib commands. The value is the command letter."""

    ADD = "a"
    DELETE = "d"
    EXTRACT = "x"
    EXTRACT_TO_PIPE = "p"
    LIST_SHORT = "t"
    LIST_VERBOSE = "v"
    LIST_DEBUG = "g"
    TEST = "i"
    HELP = "h"


COMMAND_LETTERS: Mapping[str, Command] = MappingProxyType(
    {cmd.value: cmd for cmd in Command}
)


@dataclass(frozen=True)
class CapabilityEntry:
    """What a single command accepts."""

    command: Command
    pipe_allowed: bool
    filespec_required: bool
    legal_modifiers: frozenset[str]


class CapabilityTable:
    """Read-only lookup from Command to CapabilityEntry.

    Built once and handed to whoever needs it; nothing mutates it after
    construction.
    """

    def __init__(self, entries: Iterable[CapabilityEntry]):
        table = {}
        for entry in entries:
            if entry.command in table:
                raise ValueError(f"duplicate capability entry for {entry.command}")
            table[entry.command] = entry
        self._entries: Mapping[Command, CapabilityEntry] = MappingProxyType(table)

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, command: object) -> bool:
        return command in self._entries

    def lookup(self, command: Command) -> CapabilityEntry | None:
        """Return the entry for command, or None if the table lacks it."""
        return self._entries.get(command)

    def require(self, command: Command) -> CapabilityEntry:
        """Return the entry for command. A missing entry is a nulib bug."""
        entry = self._entries.get(command)
        if entry is None:
            raise InternalTableError(command)
        return entry

    def is_modifier_legal(self, command: Command, letter: str) -> bool:
        entry = self._entries.get(command)
        if entry is None:
            return False
        return letter in entry.legal_modifiers

    def is_pipe_allowed(self, command: Command) -> bool:
        entry = self._entries.get(command)
        if entry is None:
            return False
        return entry.pipe_allowed

    def is_filespec_required(self, command: Command, prog: str = "nulib") -> bool:
        """Unlike the other queries, a missing entry is reported on stderr.

        prog prefixes the diagnostic, as in every other nulib message.
        """
        entry = self._entries.get(command)
        if entry is None:
            print(
                f"{prog}: Command {command!r} not found in capability table",
                file=sys.stderr,
            )
            return False
        return entry.filespec_required


def _entry(
    command: Command, pipe: bool, filespec: bool, modifiers: str
) -> CapabilityEntry:
    return CapabilityEntry(command, pipe, filespec, frozenset(modifiers))


DEFAULT_TABLE = CapabilityTable([
    _entry(Command.ADD,             False, True,  "ekcz0jrfu"),
    _entry(Command.DELETE,          False, True,  "r"),
    _entry(Command.EXTRACT,         True,  False, "beslcjrfu"),
    _entry(Command.EXTRACT_TO_PIPE, True,  False, "blr"),
    _entry(Command.LIST_SHORT,      True,  False, "br"),
    _entry(Command.LIST_VERBOSE,    True,  False, "br"),
    _entry(Command.LIST_DEBUG,      True,  False, "b"),
    _entry(Command.TEST,            True,  False, "br"),
    _entry(Command.HELP,            False, False, ""),
])
