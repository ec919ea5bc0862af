"""Extract files from an archive into the current directory (-x).

Existing files are never replaced unless -s is given, or -u/-f is given and
the archived copy is newer. nulib does not prompt.
"""

from __future__ import annotations

import os

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import (
    ARCHIVE_ERRORS,
    convert_eol,
    entry_mtime,
    is_newer,
    open_for_reading,
    safe_entry_path,
    select_entries,
)

COMMANDS = [Command.EXTRACT]


def _should_write(target, info, state: ParseState, ctx: HandlerContext) -> bool:
    mods = state.modifiers
    if not target.exists():
        if mods.freshen:
            return False
        return True
    if mods.update or mods.freshen:
        return is_newer(entry_mtime(info), target.stat().st_mtime)
    if mods.overwrite_existing:
        return True
    ctx.error(f"'{target}' exists, not overwriting (use -s)")
    return False


def run(state: ParseState, ctx: HandlerContext) -> bool:
    mods = state.modifiers
    ok = True
    try:
        with open_for_reading(state, ctx) as zf:
            entries = select_entries(zf, state)
            if not entries:
                ctx.error("no records match")
                return False
            for info in entries:
                rel = safe_entry_path(info.filename, mods.junk_paths)
                if rel is None:
                    continue
                target = ctx.cwd / rel
                if info.is_dir():
                    if not mods.junk_paths:
                        target.mkdir(parents=True, exist_ok=True)
                    continue
                if not _should_write(target, info, state, ctx):
                    continue
                try:
                    data = convert_eol(zf.read(info), mods)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(data)
                    mtime = entry_mtime(info)
                    os.utime(target, (mtime, mtime))
                except ARCHIVE_ERRORS as e:
                    ctx.error(f"unable to extract '{info.filename}': {e}")
                    ok = False
                    continue
                ctx.say(f"  extracting {rel.as_posix()}")
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to open '{state.archive}': {e}")
        return False
    return ok
