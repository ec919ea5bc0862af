"""
nulib - zip archive manager with a one-letter command line.

    nulib -command[modifiers] [-modifiers ...] archive [filename-list]

The argument list is parsed and validated completely before any archive is
opened. Parse errors are reported on stderr with a usage reminder.

Exit codes:
- 0: the operation succeeded.
- 1: the operation failed (or nulib hit an internal error).
- 2: usage or parse error; nothing was attempted.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO, TextIO

from nulib.core import features
from nulib.core.config import Config, configure_logging, load_config, log_event
from nulib.core.errors import InternalTableError, NulibError, UsageError
from nulib.core.scanner import parse_args
from nulib.ops import HandlerContext, dispatch
from nulib.ops.help import usage_text

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def get_prog_name(argv0: str) -> str:
    """Separate the program name out of argv[0]."""
    return Path(argv0).name or "nulib"


def _load_config(cwd: Path, stderr: TextIO) -> Config:
    try:
        return load_config(cwd)
    except (OSError, ValueError) as e:
        print(f"Warning: Failed to load config: {e}", file=stderr)
        return Config()


def run(
    argv: Sequence[str],
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    stdin: BinaryIO | None = None,
    pipe_out: BinaryIO | None = None,
    config: Config | None = None,
    cwd: Path | None = None,
) -> int:
    """Run one nulib invocation and return the process exit code.

    argv includes the program name, as in sys.argv.
    """
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    cwd = cwd if cwd is not None else Path.cwd()
    prog = get_prog_name(argv[0]) if argv else "nulib"
    args = list(argv[1:])

    if config is None:
        config = _load_config(cwd, stderr)
    configure_logging(config)
    has_feature = features.probe(config.disabled_features)

    def reject(message: str) -> int:
        print(f"{prog}: {message}", file=stderr)
        print(
            f"{prog}: (invoke without arguments to see usage information)",
            file=stderr,
        )
        return EXIT_USAGE

    try:
        state = parse_args(args, has_feature=has_feature, prog=prog)
    except UsageError as e:
        log_event("rejected", argv=args, error=type(e).__name__, reason=e.message)
        if e.show_usage:
            stdout.write(usage_text(prog, has_feature))
            return EXIT_USAGE
        return reject(e.message)
    except NulibError as e:
        log_event("rejected", argv=args, error=type(e).__name__, reason=e.message)
        return reject(e.message)

    for warning in state.warnings:
        print(f"{prog}: WARNING: {warning}", file=stderr)
    if config.verbose:
        print(state.describe(), file=stderr)
    log_event(
        "parsed",
        argv=args,
        cmd=state.command.name,
        modifiers=state.modifiers.enabled(),
    )

    ctx_fields = {
        "prog": prog,
        "cwd": cwd,
        "stdout": stdout,
        "stderr": stderr,
        "has_feature": has_feature,
    }
    if stdin is not None:
        ctx_fields["stdin"] = stdin
    if pipe_out is not None:
        ctx_fields["pipe_out"] = pipe_out
    ctx = HandlerContext(**ctx_fields)

    try:
        ok = dispatch(state, ctx)
    except InternalTableError as e:
        log_event("internal_error", argv=args, reason=str(e))
        print(f"{prog}: internal error: {e}", file=stderr)
        return EXIT_FAILED

    log_event("dispatched", argv=args, cmd=state.command.name, ok=ok)
    if not ok:
        print("Failed.", file=stdout)
        return EXIT_FAILED
    return EXIT_OK


# === Entry point ===


def main() -> None:
    sys.exit(run(sys.argv))


if __name__ == "__main__":
    main()
