# src/sortimports/core/comparator.py

import unicodedata
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional

from .collectors import normalize_whitespace
from .imports import parse_import_block
from .types import SortMode


def _base_form(text: str) -> str:
    """Case and accent folded form used for "base" sensitivity comparison."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_alphabetically(a: str, b: str) -> int:
    return _cmp(_base_form(a), _base_form(b))


def compare_strings(a: str, b: str, mode: SortMode) -> int:
    """Compare two strings with the active comparator mode."""
    if mode is SortMode.ALPHABETICAL:
        return compare_alphabetically(a, b)

    return len(a) - len(b) or compare_alphabetically(a, b)


def sorted_by_mode(
    items: Iterable[str], mode: SortMode, key: Optional[Callable[[str], str]] = None
) -> List[str]:
    """Stable sort of ``items`` using ``compare_strings`` on ``key(item)``."""
    key = key or (lambda item: item)
    return sorted(items, key=cmp_to_key(lambda a, b: compare_strings(key(a), key(b), mode)))


def _clause_rank(clause: Optional[str]) -> int:
    if not clause or not clause.strip():
        return 3

    trimmed = clause.strip()
    if "{" in trimmed:
        return 1 if trimmed.startswith("{") else 0

    return 0


def compare_import_statements(a: str, b: str, mode: SortMode) -> int:
    """Order two rendered import statements inside one group.

    Alphabetical mode orders by source path, then type-only imports first,
    then by clause shape. Length mode compares the whole statement text.
    """
    parsed_a = parse_import_block(normalize_whitespace(a))
    parsed_b = parse_import_block(normalize_whitespace(b))

    if mode is not SortMode.ALPHABETICAL or parsed_a is None or parsed_b is None:
        return compare_strings(a, b, mode)

    return (
        compare_alphabetically(parsed_a.source, parsed_b.source)
        or _cmp(not parsed_a.type_only, not parsed_b.type_only)
        or _clause_rank(parsed_a.clause) - _clause_rank(parsed_b.clause)
        or compare_alphabetically(parsed_a.clause or "", parsed_b.clause or "")
    )


def sort_import_statements(statements: Iterable[str], mode: SortMode) -> List[str]:
    return sorted(statements, key=cmp_to_key(lambda a, b: compare_import_statements(a, b, mode)))
