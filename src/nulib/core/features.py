"""Optional compression features of the archive library.

zipfile only supports deflate, bzip2 and lzma when the matching stdlib
compression module was built into the interpreter.
"""

from __future__ import annotations

import importlib.util
from collections.abc import Callable, Iterable
from functools import lru_cache

DEFLATE = "deflate"
BZIP2 = "bzip2"
LZMA = "lzma"

# feature name -> module zipfile needs for it
FEATURE_MODULES = {
    DEFLATE: "zlib",
    BZIP2: "bz2",
    LZMA: "lzma",
}


@lru_cache(maxsize=None)
def _module_present(module_name: str) -> bool:
    return importlib.util.find_spec(module_name) is not None


def is_available(feature: str) -> bool:
    """Return True if the archive library can use the named feature."""
    module_name = FEATURE_MODULES.get(feature)
    if module_name is None:
        raise ValueError(f"unknown feature '{feature}'")
    return _module_present(module_name)


def probe(disabled: Iterable[str] = ()) -> Callable[[str], bool]:
    """Return an is_available() that also reports the disabled features as missing."""
    disabled = frozenset(disabled)

    def _has_feature(feature: str) -> bool:
        return feature not in disabled and is_available(feature)

    return _has_feature
