"""Shared zipfile plumbing for the operation handlers."""

from __future__ import annotations

import fnmatch
import io
import os
import tempfile
import time
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path, PurePosixPath

from nulib.core import features
from nulib.core.state import Modifiers, ParseState

# Errors the archive library raises for a bad or unreadable archive
ARCHIVE_ERRORS = (
    OSError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    RuntimeError,
    NotImplementedError,
)

METHOD_NAMES = {
    zipfile.ZIP_STORED: "stored",
    zipfile.ZIP_DEFLATED: "deflate",
    zipfile.ZIP_BZIP2: "bzip2",
    zipfile.ZIP_LZMA: "lzma",
}

# Zip timestamps have two-second resolution
_TIMESTAMP_SLOP = 2


def open_for_reading(state: ParseState, ctx) -> zipfile.ZipFile:
    """Open the archive named in state, reading it from stdin for "-"."""
    if state.uses_pipe:
        # zipfile needs a seekable file; a pipe is not one
        return zipfile.ZipFile(io.BytesIO(ctx.stdin.read()))
    return zipfile.ZipFile(ctx.resolve(state.archive))


def matches_filespec(name: str, filespecs: Iterable[str], recurse: bool) -> bool:
    """Check an entry name against the file-spec list.

    An empty list selects everything. With recurse, a spec naming a
    directory also selects everything beneath it.
    """
    filespecs = list(filespecs)
    if not filespecs:
        return True
    name = name.rstrip("/")
    for spec in filespecs:
        spec = spec.rstrip("/")
        if fnmatch.fnmatchcase(name, spec):
            return True
        if recurse and name.startswith(spec + "/"):
            return True
    return False


def select_entries(zf: zipfile.ZipFile, state: ParseState) -> list[zipfile.ZipInfo]:
    return [
        info
        for info in zf.infolist()
        if matches_filespec(info.filename, state.filespecs, state.modifiers.recurse)
    ]


def compression_for(modifiers: Modifiers, has_feature: Callable[[str], bool]) -> int:
    """Pick the zipfile compression method for an add."""
    if modifiers.no_compression:
        return zipfile.ZIP_STORED
    if modifiers.compress_bzip2:
        return zipfile.ZIP_BZIP2
    if modifiers.compress_deflate or has_feature(features.DEFLATE):
        return zipfile.ZIP_DEFLATED
    return zipfile.ZIP_STORED


def entry_mtime(info: zipfile.ZipInfo) -> float:
    return time.mktime(info.date_time + (0, 0, -1))


def is_newer(mtime: float, than: float) -> bool:
    return mtime > than + _TIMESTAMP_SLOP


def looks_like_text(data: bytes) -> bool:
    """Heuristic used by -l: no NULs and mostly printable in the first 4K."""
    sample = data[:4096]
    if not sample:
        return True
    if b"\0" in sample:
        return False
    printable = sum(1 for b in sample if b >= 0x20 or b in b"\t\r\n\f")
    return printable / len(sample) > 0.95


def convert_eol(data: bytes, modifiers: Modifiers) -> bytes:
    """Convert CR and CR/LF line ends to the host convention for -l / -ll."""
    wanted = modifiers.convert_all or (modifiers.convert_text and looks_like_text(data))
    if not wanted:
        return data
    data = data.replace(b"\r\n", b"\n").replace(b"\r", b"\n")
    if os.linesep != "\n":
        data = data.replace(b"\n", os.linesep.encode())
    return data


def safe_entry_path(name: str, junk_paths: bool) -> PurePosixPath | None:
    """Turn an entry name into a relative output path, or None to skip it."""
    parts = [p for p in PurePosixPath(name).parts if p not in ("/", "", ".", "..")]
    if not parts:
        return None
    if junk_paths:
        return PurePosixPath(parts[-1])
    return PurePosixPath(*parts)


def _clone(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    copy = zipfile.ZipInfo(info.filename, info.date_time)
    copy.compress_type = info.compress_type
    copy.comment = info.comment
    copy.extra = info.extra
    copy.create_system = info.create_system
    copy.external_attr = info.external_attr
    return copy


def rewrite_archive(
    path: Path,
    keep: Callable[[zipfile.ZipInfo], bool],
    append: Callable[[zipfile.ZipFile], None] | None = None,
) -> None:
    """Rewrite path keeping the entries keep() accepts, then call append().

    The new archive is built next to the old one and renamed over it, so a
    failure leaves the original untouched.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".nulib-", suffix=".tmp")
    os.close(fd)
    try:
        with zipfile.ZipFile(path) as src, zipfile.ZipFile(tmp_name, "w") as dst:
            dst.comment = src.comment
            for info in src.infolist():
                if keep(info):
                    dst.writestr(_clone(info), src.read(info))
            if append is not None:
                append(dst)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
