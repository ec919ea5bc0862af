"""Parse state: the validated intent handed to the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace

from nulib.core.capabilities import Command

STDIN_SENTINEL = "-"


@dataclass(frozen=True)
class Modifiers:
    """Independent modifier flags. At most one pair is mutually exclusive."""

    update: bool = False
    freshen: bool = False
    recurse: bool = False
    junk_paths: bool = False
    no_compression: bool = False
    overwrite_existing: bool = False
    add_as_disk: bool = False
    comments: bool = False
    binary_ii: bool = False
    compress_deflate: bool = False
    compress_bzip2: bool = False
    preserve_type: bool = False
    preserve_type_extended: bool = False
    convert_text: bool = False
    convert_all: bool = False

    def enabled(self) -> list[str]:
        """Names of the flags that are set, in declaration order."""
        return [f.name for f in fields(self) if getattr(self, f.name)]


@dataclass(frozen=True)
class ParseState:
    """Result of a successful parse.

    archive is None only for the bare "-h" invocation, which needs no
    archive name.
    """

    command: Command
    modifiers: Modifiers = field(default_factory=Modifiers)
    archive: str | None = None
    filespecs: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def uses_pipe(self) -> bool:
        return self.archive == STDIN_SENTINEL

    def describe(self) -> str:
        """Multi-line dump for verbose mode and bin/nulib-dump.py."""
        lines = [
            f"command: {self.command.name} (-{self.command.value})",
            f"archive: {self.archive!r}{' [pipe]' if self.uses_pipe else ''}",
            f"modifiers: {', '.join(self.modifiers.enabled()) or '(none)'}",
            f"filespecs: {list(self.filespecs)}",
        ]
        for warning in self.warnings:
            lines.append(f"warning: {warning}")
        return "\n".join(lines)


class StateBuilder:
    """Mutable accumulator used while scanning. build() freezes it."""

    def __init__(self, command: Command):
        self.command = command
        self.flags: dict[str, bool] = {}
        self.archive: str | None = None
        self.filespecs: list[str] = []
        self.warnings: list[str] = []

    def set_flag(self, name: str) -> None:
        if name not in _FLAG_NAMES:
            raise AttributeError(f"no modifier flag named '{name}'")
        self.flags[name] = True

    def has_flag(self, name: str) -> bool:
        return self.flags.get(name, False)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def build(self) -> ParseState:
        return ParseState(
            command=self.command,
            modifiers=replace(Modifiers(), **self.flags),
            archive=self.archive,
            filespecs=tuple(self.filespecs),
            warnings=tuple(self.warnings),
        )


_FLAG_NAMES = frozenset(f.name for f in fields(Modifiers))
