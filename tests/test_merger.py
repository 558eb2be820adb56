"""Tests for merging imports that share a source."""

import pytest

from sortimports.core.merger import (
    can_merge_clauses,
    dedupe_named_specifiers,
    merge_clauses,
    merge_import_statements,
)
from sortimports.core.types import ImportClause, SortConfig


@pytest.fixture
def config():
    """Default core configuration."""
    return SortConfig()


def test_merge_named_imports(config):
    """Test that named specifiers from the same source are combined."""
    blocks = ["import { map } from 'lodash';", "import { filter } from 'lodash';"]
    assert merge_import_statements(blocks, config) == ["import { map, filter } from 'lodash';"]


def test_merge_removes_duplicate_specifiers(config):
    """Test de-duplication of specifiers."""
    blocks = ["import { a, b } from 'lib';", "import { b, c } from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import { a, b, c } from 'lib';"]


def test_merge_default_with_named(config):
    """Test combining a default import with named specifiers."""
    blocks = ["import A from 'lib';", "import { b } from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import A, { b } from 'lib';"]


def test_conflicting_defaults_are_not_merged(config):
    """Test that two different default bindings stay separate."""
    blocks = ["import A from 'lib';", "import B from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import A from 'lib';", "import B from 'lib';"]


def test_namespace_and_named_are_not_merged(config):
    """Test that a namespace never combines with named specifiers."""
    blocks = ["import * as lib from 'lib';", "import { a } from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import * as lib from 'lib';", "import { a } from 'lib';"]


def test_type_only_imports_are_kept_apart(config):
    """Test that type-only and value imports do not merge."""
    blocks = ["import type { A } from 'lib';", "import { b } from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import type { A } from 'lib';", "import { b } from 'lib';"]


def test_semicolon_is_kept_when_any_duplicate_has_one(config):
    """Test semicolon presence after a merge."""
    blocks = ["import { a } from 'lib'", "import { b } from 'lib';"]
    assert merge_import_statements(blocks, config) == ["import { a, b } from 'lib';"]


def test_side_effect_imports_are_deduplicated(config):
    """Test side-effect imports of the same source."""
    blocks = ["import 'polyfill'", "import 'polyfill';"]
    assert merge_import_statements(blocks, config) == ["import 'polyfill';"]


def test_commented_and_unmergeable_imports_pass_through(config):
    """Test that imports that cannot merge come after the merged ones."""
    blocks = [
        "import { a } from 'lib'; // keep",
        "import * as ns, { x } from 'other';",
        "import { b } from 'lib';",
    ]
    assert merge_import_statements(blocks, config) == [
        "import { b } from 'lib';",
        "import { a } from 'lib'; // keep",
        "import * as ns, { x } from 'other';",
    ]


def test_can_merge_clauses():
    """Test the merge safety rules."""
    assert can_merge_clauses(ImportClause(default="A"), ImportClause(default="A"))
    assert can_merge_clauses(ImportClause(named=["a"]), ImportClause(default="A"))
    assert not can_merge_clauses(ImportClause(default="A"), ImportClause(default="B"))
    assert not can_merge_clauses(ImportClause(namespace="* as a"), ImportClause(namespace="* as b"))
    assert not can_merge_clauses(ImportClause(named=["a"]), ImportClause(namespace="* as b"))


def test_merge_clauses():
    """Test combining two compatible clauses."""
    merged = merge_clauses(ImportClause(default="A", named=["a"]), ImportClause(named=["b", "a"]))
    assert merged.default == "A"
    assert merged.named == ["a", "b"]


def test_dedupe_named_specifiers():
    """Test first-seen order of de-duplicated specifiers."""
    assert dedupe_named_specifiers(["b", " a ", "b", ""]) == ["b", "a"]
