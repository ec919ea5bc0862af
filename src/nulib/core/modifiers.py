"""
Modifier letters and the bundle interpreter.

A modifier bundle is the text of one hyphen-prefixed token (or the letters
after the command letter in the first token). Each letter sets one flag,
except e, l and z, which mean something else when typed twice in a row.
"""

from __future__ import annotations

from collections.abc import Callable

from nulib.core import features
from nulib.core.capabilities import CapabilityTable
from nulib.core.errors import IllegalModifier, UnknownModifier
from nulib.core.state import StateBuilder

# letter -> flag set by a single occurrence
MODIFIER_FLAGS = {
    "u": "update",
    "f": "freshen",
    "r": "recurse",
    "j": "junk_paths",
    "0": "no_compression",
    "s": "overwrite_existing",
    "k": "add_as_disk",
    "c": "comments",
    "b": "binary_ii",
    "e": "preserve_type",
    "l": "convert_text",
    "z": "compress_deflate",
}

# letter -> flag set by the doubled form (ee, ll, zz) instead of the single one
DOUBLED_FLAGS = {
    "e": "preserve_type_extended",
    "l": "convert_all",
    "z": "compress_bzip2",
}

# flags that only work if the archive library has the feature
REQUIRED_FEATURES = {
    "compress_deflate": features.DEFLATE,
    "compress_bzip2": features.BZIP2,
}

MODIFIER_ALPHABET = "".join(MODIFIER_FLAGS)


def lex_bundle(bundle: str) -> list[str]:
    """Split a bundle into single letters and doubled pairs.

    pending holds the previous letter of this bundle when it is a doubling
    letter that has not been paired yet. A doubling letter pairs only with
    that immediately preceding letter, so "ee" is one pair and "eee" is a
    pair followed by a single "e". Letters never pair across bundles.
    """
    tokens: list[str] = []
    pending: str | None = None
    # longer runs pair off left to right: "eeee" is ee, ee and never sets -e
    for ch in bundle.lower():
        if ch == pending:
            assert tokens and tokens[-1] == ch, "pair must follow its own letter"
            tokens[-1] = ch + ch
            pending = None
            continue
        tokens.append(ch)
        pending = ch if ch in DOUBLED_FLAGS else None
    return tokens


def _flag_for(token: str) -> str:
    letter = token[0]
    if letter not in MODIFIER_FLAGS:
        raise UnknownModifier(letter)
    if len(token) == 2:
        return DOUBLED_FLAGS[letter]
    return MODIFIER_FLAGS[letter]


def apply_modifier(
    builder: StateBuilder,
    token: str,
    table: CapabilityTable,
    has_feature: Callable[[str], bool],
) -> None:
    """Apply one lexed token to builder, then check it is legal."""
    flag = _flag_for(token)
    feature = REQUIRED_FEATURES.get(flag)
    if feature is not None and not has_feature(feature):
        builder.warn(f"{feature} support not available, ignoring '-{token}'")
    else:
        builder.set_flag(flag)

    letter = token[0]
    if not table.is_modifier_legal(builder.command, letter):
        raise IllegalModifier(letter, builder.command)


def interpret_bundle(
    builder: StateBuilder,
    bundle: str,
    table: CapabilityTable,
    has_feature: Callable[[str], bool],
) -> None:
    """Apply every letter of a bundle, left to right."""
    for token in lex_bundle(bundle):
        apply_modifier(builder, token, table, has_feature)
