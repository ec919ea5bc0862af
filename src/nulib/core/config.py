"""nulib configuration and logging."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import structlog

from nulib.core import features

USER_CONFIG = Path.home() / ".nulib" / "config"
PROJECT_CONFIG_NAME = ".nulib"
ENV_CONFIG = "NULIB_CONFIG"


# Config scopes in priority order (lowest to highest)
SCOPE_USER = "user"
SCOPE_PROJECT = "project"
SCOPE_ENV = "env"


@dataclass
class Config:
    """Parsed configuration."""

    verbose: bool = False
    log: Path | None = None  # None = no logging
    log_full: bool = False  # log full argv (requires log path)
    disabled_features: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    """Files this config was loaded from, in load order."""


# === Config Loading ===


def _find_project_config(cwd: Path) -> Path | None:
    """Walk up from cwd to find .nulib file."""
    current = cwd.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:  # reached root
            return None
        current = parent


def _merge_configs(base: Config, overlay: Config) -> Config:
    """Merge overlay config into base. Lists accumulate, settings override."""
    return replace(
        base,
        verbose=overlay.verbose if overlay.verbose else base.verbose,
        log=overlay.log if overlay.log is not None else base.log,
        log_full=overlay.log_full if overlay.log_full else base.log_full,
        disabled_features=base.disabled_features
        + [f for f in overlay.disabled_features if f not in base.disabled_features],
        sources=base.sources + overlay.sources,
    )


def _load_file(path: Path, scope: str) -> Config:
    try:
        config = parse_config(path.read_text())
    except ValueError as e:
        raise ValueError(f"{path} ({scope}): {e}") from None
    return replace(config, sources=[str(path)])


def load_config(cwd: Path) -> Config:
    """Load config from ~/.nulib/config, .nulib, and $NULIB_CONFIG. Last one wins."""
    config = Config()

    # 1. User config (lowest priority)
    if USER_CONFIG.is_file():
        config = _merge_configs(config, _load_file(USER_CONFIG, SCOPE_USER))

    # 2. Project config (walk up from cwd)
    project_path = _find_project_config(cwd)
    if project_path is not None:
        config = _merge_configs(config, _load_file(project_path, SCOPE_PROJECT))

    # 3. Env override (highest priority)
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        env_config_path = Path(env_path).expanduser()
        if env_config_path.is_file():
            config = _merge_configs(config, _load_file(env_config_path, SCOPE_ENV))

    return config


def parse_config(text: str) -> Config:
    """Parse config text into Config object. Raises ValueError on syntax errors."""
    settings: dict[str, bool | Path] = {}
    disabled: list[str] = []

    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        directive = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        try:
            if directive == "set":
                _apply_setting(settings, disabled, rest)
            else:
                raise ValueError(f"unknown directive '{directive}'")
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from None

    return Config(
        verbose=settings.get("verbose", False),
        log=settings.get("log"),
        log_full=settings.get("log_full", False),
        disabled_features=disabled,
    )


def _apply_setting(
    settings: dict[str, bool | Path], disabled: list[str], rest: str
) -> None:
    """Parse and apply a 'set' directive. Raises ValueError on invalid setting."""
    if not rest:
        raise ValueError("'set' requires a setting name")

    parts = rest.split(None, 1)
    key = parts[0].lower()
    value = parts[1] if len(parts) > 1 else None
    key_normalized = key.replace("-", "_")

    # Boolean settings (no value required)
    if key_normalized in ("verbose", "log_full"):
        if value is not None:
            raise ValueError(f"'{key}' takes no value")
        settings[key_normalized] = True

    # Path settings
    elif key_normalized == "log":
        if value is None:
            raise ValueError("'log' requires a path")
        settings[key_normalized] = Path(value).expanduser()

    # Feature names
    elif key_normalized == "disable_feature":
        if value is None:
            raise ValueError("'disable-feature' requires a feature name")
        name = value.strip().lower()
        if name not in features.FEATURE_MODULES:
            known = ", ".join(sorted(features.FEATURE_MODULES))
            raise ValueError(f"unknown feature '{name}' (expected one of: {known})")
        if name not in disabled:
            disabled.append(name)

    else:
        raise ValueError(f"unknown setting '{key}'")


# === Logging ===

_logger: structlog.typing.FilteringBoundLogger | None = None
_log_full = False
_log_file = None


def configure_logging(config: Config) -> None:
    """Configure logging based on config settings. Call once at startup."""
    global _logger, _log_full, _log_file
    if _log_file is not None:
        _log_file.close()
        _log_file = None
    if config.log is None:
        _logger = None
        return

    # Ensure log directory exists
    config.log.parent.mkdir(parents=True, exist_ok=True)
    _log_file = open(config.log, "a")

    # JSON lines to the log file
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=_log_file),
        cache_logger_on_first_use=False,
    )
    _logger = structlog.get_logger()
    _log_full = config.log_full


def log_event(event: str, argv: list[str] | None = None, **fields) -> None:
    """Log an invocation event. No-op if logging not configured.

    Only the first argument (the command token) is recorded unless log-full
    is set.
    """
    if _logger is None:
        return
    if argv is not None:
        if _log_full:
            fields["argv"] = list(argv)
        elif argv:
            fields["command"] = argv[0]
    _logger.info(event, **fields)
