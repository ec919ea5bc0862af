"""
Error taxonomy for nulib.

User-facing parse errors derive from NulibError and are reported before any
archive is opened. InternalTableError is a separate branch: it means the
capability table or the handler registry is out of sync with the Command
enum, which is a bug in nulib rather than bad input.
"""

from __future__ import annotations


class NulibError(Exception):
    """Base class for invocation errors caused by the user's arguments."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UsageError(NulibError):
    """Too few tokens, missing command, or missing archive name.

    show_usage is set when the general usage text should be printed instead
    of a one-line message (the bare invocation case).
    """

    def __init__(self, message: str, show_usage: bool = False):
        super().__init__(message)
        self.show_usage = show_usage


class UnknownToken(NulibError):
    """A command or modifier letter that nulib does not know."""

    def __init__(self, message: str, letter: str):
        super().__init__(message)
        self.letter = letter


class UnknownCommand(UnknownToken):
    def __init__(self, letter: str):
        super().__init__(f"Unknown command '{letter}'", letter)


class UnknownModifier(UnknownToken):
    def __init__(self, letter: str):
        super().__init__(f"Unknown modifier '{letter}'", letter)


class IllegalModifier(NulibError):
    """A known modifier that is not legal for the selected command."""

    def __init__(self, letter: str, command):
        super().__init__(
            f"The '{letter}' modifier doesn't make sense with '-{command.value}'"
        )
        self.letter = letter
        self.command = command


class ConflictingModifiers(NulibError):
    """Mutually exclusive modifiers were given together."""

    def __init__(self, first: str, second: str):
        super().__init__(f"Can't specify both -{first} and -{second}")
        self.letters = (first, second)


class PipeNotAllowed(NulibError):
    def __init__(self, command):
        super().__init__(f"You can't do that with a pipe ('-{command.value}')")
        self.command = command


class MissingFilespec(NulibError):
    def __init__(self, command):
        super().__init__(
            f"This command requires a list of files ('-{command.value}')"
        )
        self.command = command


class InternalTableError(RuntimeError):
    """A Command has no capability entry. Never caused by user input."""

    def __init__(self, command):
        super().__init__(f"Command {command!r} not found in capability table")
        self.command = command


class DispatchError(InternalTableError):
    """A Command has no registered operation handler."""

    def __init__(self, command):
        RuntimeError.__init__(self, f"unexpected command {command!r}: no handler")
        self.command = command
