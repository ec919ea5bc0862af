"""Extract files to stdout with no messages (-p)."""

from __future__ import annotations

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import (
    ARCHIVE_ERRORS,
    convert_eol,
    open_for_reading,
    select_entries,
)

COMMANDS = [Command.EXTRACT_TO_PIPE]


def run(state: ParseState, ctx: HandlerContext) -> bool:
    try:
        with open_for_reading(state, ctx) as zf:
            entries = [info for info in select_entries(zf, state) if not info.is_dir()]
            if not entries:
                ctx.error("no records match")
                return False
            for info in entries:
                ctx.pipe_out.write(convert_eol(zf.read(info), state.modifiers))
            ctx.pipe_out.flush()
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to extract from '{state.archive}': {e}")
        return False
    return True
