"""Test archive integrity (-i).

Every selected entry is decompressed and its CRC checked; nothing is
written to disk.
"""

from __future__ import annotations

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import ARCHIVE_ERRORS, open_for_reading, select_entries

COMMANDS = [Command.TEST]

_CHUNK = 64 * 1024


def run(state: ParseState, ctx: HandlerContext) -> bool:
    failures = 0
    try:
        with open_for_reading(state, ctx) as zf:
            entries = select_entries(zf, state)
            if not entries:
                ctx.error("no records match")
                return False
            for info in entries:
                if info.is_dir():
                    continue
                try:
                    with zf.open(info) as f:
                        while f.read(_CHUNK):
                            pass
                except ARCHIVE_ERRORS as e:
                    ctx.say(f"  testing {info.filename}... FAILED ({e})")
                    failures += 1
                else:
                    ctx.say(f"  testing {info.filename}... OK")
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to open '{state.archive}': {e}")
        return False
    if failures:
        ctx.error(f"{failures} record(s) failed")
    return failures == 0
