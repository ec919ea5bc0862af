"""Usage text and extended help (-h)."""

from __future__ import annotations

from collections.abc import Callable

from nulib import __version__
from nulib.core import features
from nulib.core.capabilities import DEFAULT_TABLE, CapabilityTable, Command
from nulib.core.modifiers import DOUBLED_FLAGS, MODIFIER_ALPHABET
from nulib.core.state import ParseState
from nulib.ops import HandlerContext

COMMANDS = [Command.HELP]

# (command, short description) in the order extended help shows them
COMMAND_HELP = [
    (Command.LIST_VERBOSE, "verbose listing of archive contents"),
    (Command.LIST_SHORT, "quick dump of table of contents"),
    (Command.LIST_DEBUG, "debug dump of every record"),
    (Command.ADD, "add files, creating the archive if necessary"),
    (Command.DELETE, "delete files from archive"),
    (Command.EXTRACT, "extract files from an archive"),
    (Command.EXTRACT_TO_PIPE, "extract files to pipe"),
    (Command.TEST, "test archive integrity"),
    (Command.HELP, "show extended help"),
]


def usage_text(
    prog: str, has_feature: Callable[[str], bool] = features.is_available
) -> str:
    """General usage, shown when nulib is invoked with too few arguments."""
    if has_feature(features.DEFLATE):
        deflate = "use zip 'deflate' compression"
    else:
        deflate = "use deflate [not included]"
    if has_feature(features.BZIP2):
        bzip2 = "use bzip2 'BWT' compression"
    else:
        bzip2 = "use BWT [not included]"
    return (
        f"\nnulib v{__version__}\n\n"
        f"Usage: {prog} -command[modifiers] archive [filename-list]\n\n"
        "  -a  add files, create arc if needed   -x  extract files\n"
        "  -t  list files (short)                -v  list files (verbose)\n"
        "  -p  extract files to pipe, no msgs    -i  test archive integrity\n"
        "  -d  delete files from archive         -h  extended help message\n"
        "\n"
        " modifiers:\n"
        "  -u  update files (add + keep newest)  -f  freshen (update, no add)\n"
        "  -r  recurse into subdirs              -j  junk (don't record) dir names\n"
        "  -0  don't use compression             -c  add one-line comments\n"
        f"  -z  {deflate:<34}-zz {bzip2}\n"
        "  -l  auto-convert text files           -ll convert CR/LF on ALL files\n"
        "  -s  stomp existing files w/o asking   -k  store files as disk images\n"
        "  -e  preserve file types               -ee preserve types and extend names\n"
        "  -b  force Binary II mode\n"
    )


def _modifier_list(command: Command, table: CapabilityTable) -> str:
    shown = []
    for letter in MODIFIER_ALPHABET:
        if not table.is_modifier_legal(command, letter):
            continue
        shown.append(f"-{letter}")
        if letter in DOUBLED_FLAGS:
            shown.append(f"-{letter}{letter}")
    return " ".join(shown) if shown else "(none)"


def extended_help(
    has_feature: Callable[[str], bool] = features.is_available,
    table: CapabilityTable = DEFAULT_TABLE,
    report: Callable[[str], None] | None = None,
) -> str:
    """Build the extended help text.

    A command missing from the table is passed to report (if given) and
    left out of the text.
    """
    lines = [
        "",
        "nulib manages zip archives from a compact command line. Commands and",
        "modifiers are single letters; modifiers may be bundled after the",
        "command letter (-xsr) or given as separate hyphenated tokens.",
    ]
    for command, description in COMMAND_HELP:
        if command not in table:
            if report is not None:
                report(f"internal error: couldn't find {command.name} in table")
            continue
        lines.append("")
        lines.append(f'Command "-{command.value}": {description}')
        lines.append(f"  Valid modifiers: {_modifier_list(command, table)}")
    lines.append("")
    lines.append("Compression algorithms supported by this copy of zipfile:")
    for label, feature in (
        ("Deflate ..............", features.DEFLATE),
        ("bzip2 ................", features.BZIP2),
        ("LZMA .................", features.LZMA),
    ):
        lines.append(f"  {label} {'yes' if has_feature(feature) else 'no'}")
    return "\n".join(lines) + "\n"


def run(state: ParseState, ctx: HandlerContext) -> bool:
    ctx.stdout.write(extended_help(ctx.has_feature, report=ctx.error))
    return True
