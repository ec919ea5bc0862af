"""
Shared test fixtures for nulib tests.
"""

import io
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pytest
import structlog

from nulib.core.config import Config, configure_logging


@dataclass
class RunResult:
    """Outcome of one run() invocation."""

    code: int
    out: str
    err: str
    piped: bytes


def all_features(feature: str) -> bool:
    return True


def no_features(feature: str) -> bool:
    return False


@pytest.fixture(autouse=True)
def _reset_logging():
    """Leave no structlog configuration or open log file behind."""
    yield
    configure_logging(Config())
    structlog.reset_defaults()


@pytest.fixture
def parse():
    """Return a parse_args wrapper that splits a command string."""
    from nulib.core.scanner import parse_args

    def _parse(command: str, has_feature=all_features, **kwargs):
        return parse_args(command.split(), has_feature=has_feature, **kwargs)

    return _parse


@pytest.fixture
def nulib(tmp_path):
    """Return a run() wrapper with captured streams, default config and tmp cwd."""
    from nulib.nulib import run

    def _run(*args: str, stdin: bytes = b"", config: Config | None = None, cwd: Path | None = None):
        stdout, stderr = io.StringIO(), io.StringIO()
        pipe_out = io.BytesIO()
        code = run(
            ["nulib", *args],
            stdout=stdout,
            stderr=stderr,
            stdin=io.BytesIO(stdin),
            pipe_out=pipe_out,
            config=config if config is not None else Config(),
            cwd=cwd if cwd is not None else tmp_path,
        )
        return RunResult(code, stdout.getvalue(), stderr.getvalue(), pipe_out.getvalue())

    return _run


@pytest.fixture
def make_zip(tmp_path):
    """Factory for zip archives in tmp_path: make_zip("a.zip", {"name": b"data"})."""

    def _make(name: str, entries: dict[str, bytes], method: int = zipfile.ZIP_DEFLATED) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", compression=method) as zf:
            for entry, data in entries.items():
                zf.writestr(entry, data)
        return path

    return _make


def zip_names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as zf:
        return zf.namelist()


def is_usage_error(result: RunResult) -> bool:
    """Check a result is a parse rejection with the usage reminder."""
    return result.code == 2 and "(invoke without arguments to see usage information)" in result.err
