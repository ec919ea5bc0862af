"""Delete entries from an archive (-d)."""

from __future__ import annotations

import zipfile

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import ARCHIVE_ERRORS, rewrite_archive, select_entries

COMMANDS = [Command.DELETE]


def run(state: ParseState, ctx: HandlerContext) -> bool:
    archive = ctx.resolve(state.archive)
    try:
        with zipfile.ZipFile(archive) as zf:
            doomed = {info.filename for info in select_entries(zf, state)}
        if not doomed:
            ctx.error("no records match")
            return False
        rewrite_archive(archive, keep=lambda info: info.filename not in doomed)
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to delete from '{state.archive}': {e}")
        return False
    for name in sorted(doomed):
        ctx.say(f"  deleting {name}")
    return True
