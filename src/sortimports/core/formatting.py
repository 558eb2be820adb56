# src/sortimports/core/formatting.py

from typing import List

from .collectors import normalize_whitespace
from .comparator import sorted_by_mode
from .imports import find_named_imports_range, named_sort_key, parse_import_block, parse_named_imports
from .scanner import contains_comment
from .types import MergedImport, SortConfig


def render_import(
    clause: str, source: str, quote: str, type_only: bool = False, has_semicolon: bool = True
) -> str:
    """Render an import statement from its parts."""
    keyword = "import type" if type_only else "import"
    semicolon = ";" if has_semicolon else ""
    if not clause:
        return f"{keyword} {quote}{source}{quote}{semicolon}"
    return f"{keyword} {clause} from {quote}{source}{quote}{semicolon}"


def sort_named_specifiers(specifiers: List[str], config: SortConfig) -> List[str]:
    return sorted_by_mode(
        specifiers, config.sort_mode, key=lambda specifier: named_sort_key(specifier, config.sort_mode)
    )


def format_import_block(block: str, config: SortConfig) -> str:
    """Sort the named specifiers of one import and wrap it if too long.

    Imports carrying comments, side-effect imports and text that does not
    parse are returned as they are.
    """
    if contains_comment(block):
        return block

    normalized = normalize_whitespace(block)
    parsed = parse_import_block(normalized)
    if parsed is None or parsed.clause is None:
        return block

    named_range = find_named_imports_range(parsed.clause)
    if named_range is None:
        return normalized

    open_idx, close_idx = named_range
    before_named = parsed.clause[:open_idx].strip().rstrip(",").strip()
    after_named = parsed.clause[close_idx + 1:].strip()
    specifiers = sort_named_specifiers(
        parse_named_imports(parsed.clause[open_idx + 1:close_idx]), config
    )
    if not specifiers:
        return normalized

    named_single_line = f"{{ {', '.join(specifiers)} }}"
    single_line = render_import(
        ", ".join(part for part in (before_named, named_single_line, after_named) if part),
        parsed.source,
        parsed.quote,
        parsed.type_only,
        parsed.has_semicolon,
    )
    if len(single_line) <= config.max_line_length:
        return single_line

    separator = f",\n{config.indent}"
    named_multi_line = f"{{\n{config.indent}{separator.join(specifiers)},\n}}"
    return render_import(
        ", ".join(part for part in (before_named, named_multi_line, after_named) if part),
        parsed.source,
        parsed.quote,
        parsed.type_only,
        parsed.has_semicolon,
    )


def format_merged_import(entry: MergedImport, config: SortConfig) -> str:
    """Render a merged entry and pass it through the regular formatter."""
    if entry.clause is None:
        return render_import("", entry.source, entry.quote, entry.type_only, entry.has_semicolon)

    parts: List[str] = []
    if entry.clause.default:
        parts.append(entry.clause.default)

    if entry.clause.namespace:
        parts.append(entry.clause.namespace)
    elif entry.clause.named:
        parts.append(f"{{ {', '.join(entry.clause.named)} }}")

    statement = render_import(
        ", ".join(parts), entry.source, entry.quote, entry.type_only, entry.has_semicolon
    )
    return format_import_block(statement, config)
