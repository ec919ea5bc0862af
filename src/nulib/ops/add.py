"""Add files to an archive, creating it if needed (-a).

-u adds files that are new or newer than their archived copy, -f only
replaces entries that already exist and are older. Replacing an entry means
rewriting the archive, since zip files cannot drop entries in place.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path, PurePosixPath

from nulib.core.capabilities import Command
from nulib.core.state import ParseState
from nulib.ops import HandlerContext
from nulib.ops._archive import (
    ARCHIVE_ERRORS,
    METHOD_NAMES,
    compression_for,
    entry_mtime,
    is_newer,
    rewrite_archive,
)

COMMANDS = [Command.ADD]


def _archive_name(spec: str, junk_paths: bool) -> str:
    parts = PurePosixPath(Path(spec).as_posix()).parts
    parts = [p for p in parts if p not in ("/", ".", "..")]
    if junk_paths:
        return parts[-1] if parts else spec
    return "/".join(parts)


def _collect(
    state: ParseState, ctx: HandlerContext
) -> tuple[list[tuple[Path, str]], bool]:
    """Expand the file specs into (source path, entry name) pairs.

    Returns the pairs and whether every spec could be used. Each entry name
    appears once; a file named twice is added once, and two different files
    that map to the same name (e.g. with -j) are reported and the second is
    skipped.
    """
    mods = state.modifiers
    found: dict[str, Path] = {}
    ok = True

    def keep(path: Path, name: str) -> None:
        nonlocal ok
        previous = found.get(name)
        if previous is None:
            found[name] = path
        elif previous.resolve() != path.resolve():
            ctx.error(f"'{path}' and '{previous}' would both be stored as '{name}'")
            ok = False

    for spec in state.filespecs:
        path = ctx.resolve(spec)
        if path.is_dir():
            if not mods.recurse:
                ctx.error(f"skipping directory '{spec}' (use -r to recurse)")
                continue
            for child in sorted(path.rglob("*")):
                if child.is_file():
                    inner = child.relative_to(path).as_posix()
                    name = f"{spec.rstrip('/')}/{inner}"
                    keep(child, _archive_name(name, mods.junk_paths))
        elif path.is_file():
            keep(path, _archive_name(spec, mods.junk_paths))
        else:
            ctx.error(f"couldn't find '{spec}'")
            ok = False
    return [(path, name) for name, path in found.items()], ok


def _wanted(
    path: Path, name: str, existing: dict[str, zipfile.ZipInfo], state: ParseState
) -> bool:
    mods = state.modifiers
    old = existing.get(name)
    if old is None:
        return not mods.freshen
    if mods.update or mods.freshen:
        return is_newer(path.stat().st_mtime, entry_mtime(old))
    return True


def _prompt_comment(ctx: HandlerContext, name: str) -> bytes:
    ctx.stderr.write(f"Comment for '{name}': ")
    ctx.stderr.flush()
    line = ctx.stdin.readline().decode("utf-8", errors="replace").strip()
    return line.encode("utf-8")


def _write_entries(
    zf: zipfile.ZipFile, files, method: int, state: ParseState, ctx: HandlerContext
) -> None:
    for path, name in files:
        info = zipfile.ZipInfo.from_file(path, name, strict_timestamps=False)
        info.compress_type = method
        if state.modifiers.comments:
            info.comment = _prompt_comment(ctx, name)
        with open(path, "rb") as src, zf.open(info, "w") as dst:
            shutil.copyfileobj(src, dst)
        ctx.say(f"  adding {name} ({METHOD_NAMES.get(method, method)})")


def run(state: ParseState, ctx: HandlerContext) -> bool:
    files, ok = _collect(state, ctx)
    archive = ctx.resolve(state.archive)
    method = compression_for(state.modifiers, ctx.has_feature)

    try:
        existing: dict[str, zipfile.ZipInfo] = {}
        if archive.exists():
            with zipfile.ZipFile(archive) as zf:
                existing = {info.filename: info for info in zf.infolist()}

        files = [(p, n) for p, n in files if _wanted(p, n, existing, state)]
        if not files:
            ctx.say("No files to add.")
            return ok

        replaced = {name for _, name in files if name in existing}
        if replaced:
            rewrite_archive(
                archive,
                keep=lambda info: info.filename not in replaced,
                append=lambda zf: _write_entries(zf, files, method, state, ctx),
            )
        else:
            mode = "a" if archive.exists() else "w"
            with zipfile.ZipFile(archive, mode) as zf:
                _write_entries(zf, files, method, state, ctx)
    except ARCHIVE_ERRORS as e:
        ctx.error(f"unable to add to '{state.archive}': {e}")
        return False
    return ok
