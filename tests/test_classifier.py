"""
Tests for the import classifier.

Covers the three resolution shapes, the helper-first tie-break, the
per-context restrictions and adjacent address construction.
"""

import pytest

from scriptbundle.classifier import (
    adjacent_address,
    classify_line,
    dotted_import_path,
    extract_symbol_names,
    is_import_line,
    logical_lines,
)
from scriptbundle.config import Settings
from scriptbundle.model import ImportKind, ResolutionContext
from scriptbundle.paths import describe_paths

ENTRY = ResolutionContext.ENTRY
SAME_FAMILY = ResolutionContext.SAME_FAMILY
ADJACENT = ResolutionContext.ADJACENT


class TestSymbolNames:
    """Parsing the requested-symbol clause of a helper import."""

    def test_names_are_split_and_trimmed(self):
        names = extract_symbol_names("from common.helpers import CONST_X,  helper_fn ")
        assert names == {"CONST_X", "helper_fn"}

    def test_duplicates_collapse(self):
        assert extract_symbol_names("from common.helpers import a, a") == {"a"}

    def test_parentheses_and_comment_ignored(self):
        names = extract_symbol_names("from common.helpers import (a, b)  # shared")
        assert names == {"a", "b"}

    def test_plain_import_has_no_names(self):
        assert extract_symbol_names("import common.helpers") == frozenset()


class TestDottedPath:

    def test_three_segments(self):
        assert dotted_import_path("from groupA.scriptB.utils import x") == "groupA.scriptB.utils"

    def test_two_segments_rejected(self):
        assert dotted_import_path("from os.path import join") is None

    def test_relative_path_rejected(self):
        assert dotted_import_path("from .script.sub.mod import x") is None


class TestLogicalLines:
    """Joining parenthesized imports that span several lines."""

    def test_parenthesized_import_is_joined(self):
        source = [
            "from common.helpers import (",
            "    CONST_X,  # the x",
            "    helper_fn,",
            ")",
            "x = 1",
        ]
        grouped = list(logical_lines(source))
        assert grouped[0] == ("from common.helpers import ( CONST_X, helper_fn, )", source[:4])
        assert grouped[1] == ("x = 1", ["x = 1"])
        assert extract_symbol_names(grouped[0][0]) == {"CONST_X", "helper_fn"}

    def test_single_line_group_is_left_alone(self):
        line = "from common.helpers import (a, b)"
        assert list(logical_lines([line])) == [(line, [line])]

    def test_parenthesis_outside_imports_is_left_alone(self):
        source = ["print(", "    1,", ")"]
        assert [physical for _, physical in logical_lines(source)] == [[s] for s in source]

    def test_unterminated_group_runs_to_end(self):
        source = ["from common.helpers import (", "    a,"]
        assert list(logical_lines(source)) == [("from common.helpers import ( a,", source)]


def test_import_keyword_must_start_the_line():
    assert is_import_line("import os")
    assert is_import_line("from x import y")
    assert not is_import_line("    import os")
    assert not is_import_line("important = 1")
    assert not is_import_line("x = 1")


def test_ordinary_line_passes_through(settings):
    assert classify_line("x = 1", ENTRY, settings) is None
    assert classify_line("", ENTRY, settings) is None


@pytest.mark.parametrize("line", ["import os", "from os.path import join", "import json, re"])
def test_unrelated_imports_pass_through(settings, line):
    assert classify_line(line, ENTRY, settings) is None


def test_helper_import(settings):
    statement = classify_line("from common.helpers import CONST_X, helper_fn", ENTRY, settings)
    assert statement.kind is ImportKind.HELPER
    assert statement.symbols == {"CONST_X", "helper_fn"}


def test_helper_marker_wins_over_dotted_path(settings):
    statement = classify_line("from common.helpers.extra import a", ENTRY, settings)
    assert statement.kind is ImportKind.HELPER
    assert statement.dotted_path is None


def test_helper_import_without_names_is_malformed(settings):
    statement = classify_line("import common.helpers", ENTRY, settings)
    assert statement.kind is ImportKind.MALFORMED


def test_same_family_import_in_entry(settings):
    statement = classify_line("from .script import run", ENTRY, settings)
    assert statement.kind is ImportKind.SAME_FAMILY


def test_same_family_import_not_resolved_below_entry(settings):
    statement = classify_line("from .script import run", SAME_FAMILY, settings)
    assert statement.kind is ImportKind.MALFORMED


def test_adjacent_import(settings):
    statement = classify_line("from groupA.scriptB.utils import thing", ENTRY, settings)
    assert statement.kind is ImportKind.ADJACENT
    assert statement.dotted_path == "groupA.scriptB.utils"


def test_script_prefixed_name_is_not_same_family(settings):
    statement = classify_line("import groupA.scriptB.utils", ENTRY, settings)
    assert statement.kind is ImportKind.ADJACENT


def test_dotted_sibling_import_is_same_family(settings):
    statement = classify_line("from g.s.script import run", ENTRY, settings)
    assert statement.kind is ImportKind.SAME_FAMILY


def test_adjacent_import_resolved_in_same_family(settings):
    statement = classify_line("import groupA.scriptB.utils", SAME_FAMILY, settings)
    assert statement.kind is ImportKind.ADJACENT


def test_adjacent_context_only_resolves_helpers(settings):
    assert classify_line("from groupA.scriptB.utils import x", ADJACENT, settings) is None
    assert classify_line("from .script import x", ADJACENT, settings) is None
    statement = classify_line("from common.helpers import a", ADJACENT, settings)
    assert statement.kind is ImportKind.HELPER


def test_custom_helper_module():
    settings = Settings(root_directory="/r", helper_module="shared.tools")
    assert classify_line("from shared.tools import a", ENTRY, settings).kind is ImportKind.HELPER
    assert classify_line("from common.helpers import a", ENTRY, settings) is None


class TestAdjacentAddress:

    def test_address_from_project_root(self, settings):
        paths = describe_paths(settings, "origGroup", "origScript")
        assert adjacent_address("groupA.scriptB.utils", paths) == "/r/groupA/scriptB/utils.py"

    def test_independent_of_requesting_script(self, settings):
        first = describe_paths(settings, "g1", "s1")
        second = describe_paths(settings, "g2", "s2")
        assert adjacent_address("groupA.scriptB.utils", first) == adjacent_address("groupA.scriptB.utils", second)

    def test_extra_segments_ignored(self, settings):
        paths = describe_paths(settings, "g", "s")
        assert adjacent_address("a.b.c.d", paths) == "/r/a/b/c.py"
