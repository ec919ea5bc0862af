"""Archive listings: short (-t), verbose (-v) and debug (-g)."""

from __future__ import annotations

import zipfile

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import (
    ARCHIVE_ERRORS,
    METHOD_NAMES,
    open_for_reading,
    select_entries,
)

COMMANDS = [Command.LIST_SHORT, Command.LIST_VERBOSE, Command.LIST_DEBUG]


def _ratio(info: zipfile.ZipInfo) -> str:
    if not info.file_size:
        return "0%"
    return f"{100 * info.compress_size // info.file_size}%"


def _stamp(info: zipfile.ZipInfo) -> str:
    year, month, day, hour, minute, _ = info.date_time
    return f"{year:04d}-{month:02d}-{day:02d} {hour:02d}:{minute:02d}"


def list_short(entries, ctx: HandlerContext) -> None:
    for info in entries:
        ctx.say(info.filename)


def list_verbose(archive: str, entries, ctx: HandlerContext) -> None:
    ctx.say(f" {archive}  Records: {len(entries)}")
    ctx.say("")
    ctx.say(f" {'Name':<40} {'Date':<16} {'Format':<8} {'Ratio':>5} {'Length':>10}")
    ctx.say(" " + "-" * 83)
    total_size = total_packed = 0
    for info in entries:
        method = METHOD_NAMES.get(info.compress_type, str(info.compress_type))
        ctx.say(
            f" {info.filename:<40} {_stamp(info):<16} {method:<8} "
            f"{_ratio(info):>5} {info.file_size:>10}"
        )
        total_size += info.file_size
        total_packed += info.compress_size
    ctx.say(" " + "-" * 83)
    overall = f"{100 * total_packed // total_size}%" if total_size else "0%"
    uncomp = f"Uncomp: {total_size}"
    comp = f"Comp: {total_packed}"
    ctx.say(f" {uncomp:<40} {comp:<25} {overall:>5}")


def list_debug(entries, ctx: HandlerContext) -> None:
    for info in entries:
        ctx.say(f"*** {info.filename!r}")
        ctx.say(
            f"    header_offset={info.header_offset}"
            f" flag_bits=0x{info.flag_bits:04x}"
        )
        ctx.say(
            f"    compress_type={info.compress_type} compress_size={info.compress_size}"
            f" file_size={info.file_size} CRC=0x{info.CRC:08x}"
        )
        ctx.say(
            f"    create_system={info.create_system}"
            f" create_version={info.create_version}"
            f" extract_version={info.extract_version}"
            f" external_attr=0x{info.external_attr:08x}"
        )
        ctx.say(
            f"    date_time={info.date_time} extra={len(info.extra)} bytes"
            f" comment={info.comment!r}"
        )


def run(state: ParseState, ctx: HandlerContext) -> bool:
    try:
        with open_for_reading(state, ctx) as zf:
            entries = select_entries(zf, state)
            if state.command == Command.LIST_SHORT:
                list_short(entries, ctx)
            elif state.command == Command.LIST_VERBOSE:
                list_verbose(state.archive, entries, ctx)
            else:
                ctx.say(f"archive comment={zf.comment!r} entries={len(zf.infolist())}")
                list_debug(entries, ctx)
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to open '{state.archive}': {e}")
        return False
    return True
