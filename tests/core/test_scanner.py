"""
Tests for the argument scanner.

Each case is a command line (without the program name) and what parse_args
should make of it.
"""

from __future__ import annotations

import dataclasses

import pytest

from conftest import no_features
from nulib.core.capabilities import DEFAULT_TABLE, CapabilityEntry, CapabilityTable, Command
from nulib.core.errors import (
    ConflictingModifiers,
    IllegalModifier,
    MissingFilespec,
    NulibError,
    PipeNotAllowed,
    UnknownCommand,
    UnknownModifier,
    UnknownToken,
    UsageError,
)
from nulib.core.scanner import parse_args

# (command line, command, archive, filespecs, modifier flags set)
ACCEPTED = [
    #
    # --- Basic shapes ---
    ("a archive.shk f1 f2", Command.ADD, "archive.shk", ["f1", "f2"], []),
    ("-a archive.shk f1", Command.ADD, "archive.shk", ["f1"], []),
    ("-x archive.shk", Command.EXTRACT, "archive.shk", [], []),
    ("-t arc", Command.LIST_SHORT, "arc", [], []),
    ("-v arc", Command.LIST_VERBOSE, "arc", [], []),
    ("-g arc", Command.LIST_DEBUG, "arc", [], []),
    ("-i arc", Command.TEST, "arc", [], []),
    ("-p arc", Command.EXTRACT_TO_PIPE, "arc", [], []),
    ("-d arc f1", Command.DELETE, "arc", ["f1"], []),
    ("h arc", Command.HELP, "arc", [], []),
    #
    # --- Case-insensitive letters ---
    ("-X arc", Command.EXTRACT, "arc", [], []),
    ("-XS arc", Command.EXTRACT, "arc", [], ["overwrite_existing"]),
    ("-aEE arc f", Command.ADD, "arc", ["f"], ["preserve_type_extended"]),
    #
    # --- Modifiers bundled with the command or in separate tokens ---
    ("-xsr arc", Command.EXTRACT, "arc", [], ["recurse", "overwrite_existing"]),
    ("-x -s -r arc", Command.EXTRACT, "arc", [], ["recurse", "overwrite_existing"]),
    ("-x -sr arc docs", Command.EXTRACT, "arc", ["docs"], ["recurse", "overwrite_existing"]),
    ("-aufrj arc f", Command.ADD, "arc", ["f"], ["update", "freshen", "recurse", "junk_paths"]),
    ("-akc arc f", Command.ADD, "arc", ["f"], ["add_as_disk", "comments"]),
    ("-xb arc", Command.EXTRACT, "arc", [], ["binary_ii"]),
    ("-tbr arc", Command.LIST_SHORT, "arc", [], ["recurse", "binary_ii"]),
    #
    # --- Doubled letters ---
    ("-ae arc f", Command.ADD, "arc", ["f"], ["preserve_type"]),
    ("-aee arc f", Command.ADD, "arc", ["f"], ["preserve_type_extended"]),
    ("-aeee arc f", Command.ADD, "arc", ["f"], ["preserve_type", "preserve_type_extended"]),
    ("-aeeee arc f", Command.ADD, "arc", ["f"], ["preserve_type_extended"]),
    ("-a -e -e arc f", Command.ADD, "arc", ["f"], ["preserve_type"]),
    ("-a -ee arc f", Command.ADD, "arc", ["f"], ["preserve_type_extended"]),
    ("-xl arc", Command.EXTRACT, "arc", [], ["convert_text"]),
    ("-xll arc", Command.EXTRACT, "arc", [], ["convert_all"]),
    ("-xlsl arc", Command.EXTRACT, "arc", [], ["overwrite_existing", "convert_text"]),
    ("-pll arc", Command.EXTRACT_TO_PIPE, "arc", [], ["convert_all"]),
    ("-az arc f", Command.ADD, "arc", ["f"], ["compress_deflate"]),
    ("-azz arc f", Command.ADD, "arc", ["f"], ["compress_bzip2"]),
    ("-a -z -z arc f", Command.ADD, "arc", ["f"], ["compress_deflate"]),
    #
    # --- -0 only conflicts with the single z ---
    ("-a0 arc f", Command.ADD, "arc", ["f"], ["no_compression"]),
    ("-a0zz arc f", Command.ADD, "arc", ["f"], ["no_compression", "compress_bzip2"]),
    #
    # --- Pipes ---
    ("-p -", Command.EXTRACT_TO_PIPE, "-", [], []),
    ("-x - f1", Command.EXTRACT, "-", ["f1"], []),
    ("-t -", Command.LIST_SHORT, "-", [], []),
    ("-i -", Command.TEST, "-", [], []),
    #
    # --- After the archive name everything is a file spec ---
    ("-x arc -r -s", Command.EXTRACT, "arc", ["-r", "-s"], []),
    ("-d arc a b c", Command.DELETE, "arc", ["a", "b", "c"], []),
]


@pytest.mark.parametrize("command,expected,archive,filespecs,flags", ACCEPTED)
def test_accepted(parse, command, expected, archive, filespecs, flags) -> None:
    state = parse(command)
    assert state.command == expected
    assert state.archive == archive
    assert list(state.filespecs) == filespecs
    assert sorted(state.modifiers.enabled()) == sorted(flags)
    assert state.warnings == ()


# (command line, error class)
REJECTED = [
    #
    # --- Usage ---
    ("", UsageError),
    ("-a", UsageError),
    ("x", UsageError),
    ("arc.zip", UsageError),
    ("- arc", UsageError),
    ("-a -r", UsageError),
    ("-x -s -r", UsageError),
    #
    # --- Unknown letters ---
    ("-q arc", UnknownCommand),
    ("-0 -z archive.shk f1", UnknownCommand),
    ("-xq arc", UnknownModifier),
    ("-x -q arc", UnknownModifier),
    ("-x -- arc", UnknownModifier),
    #
    # --- Known letters in the wrong place ---
    ("-tz arc", IllegalModifier),
    ("-hr arc", IllegalModifier),
    ("-gr arc", IllegalModifier),
    ("-ds arc f", IllegalModifier),
    ("-as arc f", IllegalModifier),
    ("-xz arc", IllegalModifier),
    ("-xk arc", IllegalModifier),
    ("-pe arc", IllegalModifier),
    ("-x -0 arc", IllegalModifier),
    #
    # --- Conflicts ---
    ("-a0z archive.shk f1", ConflictingModifiers),
    ("-a0 -z archive.shk f1", ConflictingModifiers),
    ("-a -0 -z archive.shk f1", ConflictingModifiers),
    ("-az0 archive.shk f1", ConflictingModifiers),
    #
    # --- Pipes ---
    ("-a -", PipeNotAllowed),
    ("-a - f1", PipeNotAllowed),
    ("-d - f1", PipeNotAllowed),
    ("h -", PipeNotAllowed),
    #
    # --- File specs ---
    ("-d archive.shk", MissingFilespec),
    ("-a archive.shk", MissingFilespec),
    ("-ar archive.shk", MissingFilespec),
]


@pytest.mark.parametrize("command,error", REJECTED)
def test_rejected(parse, command, error) -> None:
    with pytest.raises(error):
        parse(command)


class TestHelpShortCircuit:
    @pytest.mark.parametrize("token", ["-h", "h", "-H", "H"])
    def test_bare_help_needs_no_archive(self, token):
        state = parse_args([token])
        assert state.command == Command.HELP
        assert state.archive is None
        assert state.filespecs == ()

    def test_other_single_tokens_show_usage(self):
        with pytest.raises(UsageError) as exc:
            parse_args(["-x"])
        assert exc.value.show_usage

    def test_no_tokens_show_usage(self):
        with pytest.raises(UsageError) as exc:
            parse_args([])
        assert exc.value.show_usage


class TestErrorDetails:
    def test_bare_hyphen_command(self, parse):
        with pytest.raises(UsageError) as exc:
            parse("- arc")
        assert not exc.value.show_usage
        assert "specify a command" in exc.value.message

    def test_unknown_command_names_letter(self, parse):
        with pytest.raises(UnknownToken) as exc:
            parse("-q arc")
        assert exc.value.letter == "q"
        assert "'q'" in str(exc.value)

    def test_unknown_modifier_names_letter(self, parse):
        with pytest.raises(UnknownModifier) as exc:
            parse("-xw arc")
        assert exc.value.letter == "w"

    def test_illegal_modifier_names_letter_and_command(self, parse):
        with pytest.raises(IllegalModifier) as exc:
            parse("-tz arc")
        assert exc.value.letter == "z"
        assert exc.value.command == Command.LIST_SHORT
        assert "'z'" in exc.value.message and "-t" in exc.value.message

    def test_doubled_illegal_letter_reports_single_letter(self, parse):
        with pytest.raises(IllegalModifier) as exc:
            parse("-tee arc")
        assert exc.value.letter == "e"

    def test_all_parse_errors_are_nulib_errors(self, parse):
        for command, _ in REJECTED:
            with pytest.raises(NulibError):
                parse(command)


class TestCheckOrder:
    """Modifier problems are found before archive or file-spec problems."""

    def test_illegal_modifier_before_pipe(self, parse):
        with pytest.raises(IllegalModifier):
            parse("-as -")

    def test_conflict_before_pipe(self, parse):
        with pytest.raises(ConflictingModifiers):
            parse("-a0z -")

    def test_pipe_before_missing_filespec(self, parse):
        with pytest.raises(PipeNotAllowed):
            parse("-d -")

    def test_first_bad_letter_wins(self, parse):
        with pytest.raises(UnknownModifier):
            parse("-xqz arc")
        with pytest.raises(IllegalModifier):
            parse("-xzq arc")


class TestMissingFeatures:
    def test_deflate_missing_warns_and_leaves_flag_unset(self, parse):
        state = parse("-az arc f", has_feature=no_features)
        assert not state.modifiers.compress_deflate
        assert len(state.warnings) == 1
        assert "deflate" in state.warnings[0]

    def test_bzip2_missing_warns(self, parse):
        state = parse("-azz arc f", has_feature=no_features)
        assert not state.modifiers.compress_bzip2
        assert not state.modifiers.compress_deflate
        assert "bzip2" in state.warnings[0]

    def test_missing_deflate_means_no_conflict(self, parse):
        state = parse("-a0z arc f", has_feature=no_features)
        assert state.modifiers.no_compression
        assert state.warnings

    def test_legality_still_checked(self, parse):
        with pytest.raises(IllegalModifier):
            parse("-xz arc", has_feature=no_features)

    def test_only_missing_feature_warns(self, parse):
        state = parse("-az -zz arc f", has_feature=lambda f: f == "deflate")
        assert state.modifiers.compress_deflate
        assert not state.modifiers.compress_bzip2
        assert len(state.warnings) == 1


class TestInjectedTable:
    def test_custom_table_changes_legality(self, parse):
        entries = [e for e in DEFAULT_TABLE if e.command != Command.ADD]
        entries.append(CapabilityEntry(Command.ADD, True, False, frozenset("r")))
        table = CapabilityTable(entries)
        state = parse("-a -", table=table)
        assert state.uses_pipe
        with pytest.raises(IllegalModifier):
            parse("-a0 arc f", table=table)


class TestParseState:
    def test_state_is_immutable(self, parse):
        state = parse("-x arc")
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.archive = "other"
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.modifiers.recurse = True

    def test_uses_pipe(self, parse):
        assert parse("-p -").uses_pipe
        assert not parse("-p arc").uses_pipe

    def test_filespecs_preserve_order(self, parse):
        assert parse("-x arc c b a").filespecs == ("c", "b", "a")

    def test_describe(self, parse):
        text = parse("-xsr - f1").describe()
        assert "EXTRACT" in text
        assert "[pipe]" in text
        assert "recurse" in text and "overwrite_existing" in text
        assert "['f1']" in text

    def test_tokens_not_mutated(self):
        tokens = ["-xs", "arc", "f1"]
        parse_args(tokens)
        assert tokens == ["-xs", "arc", "f1"]
