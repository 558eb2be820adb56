# src/sortimports/core/imports.py

import re
from typing import Iterable, List, Optional, Tuple

from .scanner import NOT_FOUND, find_matching_close, find_next_open
from .types import GroupKey, ImportClause, ParsedImport, SortConfig, SortMode

_SIDE_EFFECT_IMPORT = re.compile(r"import\s+(type\s+)?(['\"])([^'\"]+)\2\s*(;)?")
_CLAUSE_IMPORT = re.compile(r"import\s+(type\s+)?(.+?)\s+from\s+(['\"])([^'\"]+)\3\s*(;)?")
_FROM_SOURCE = re.compile(r"\bfrom\s+['\"]([^'\"]+)['\"]\s*;?$")
_SIDE_EFFECT_SOURCE = re.compile(r"^import\s+(?:type\s+)?['\"]([^'\"]+)['\"]\s*;?$")
_TYPE_MARKER = re.compile(r"^type\s+", re.IGNORECASE)


def parse_import_block(block: str) -> Optional[ParsedImport]:
    """Split a whitespace-normalized import statement into its parts.

    Returns None when the text matches none of the recognized shapes.
    """
    match = _SIDE_EFFECT_IMPORT.fullmatch(block)
    if match:
        return ParsedImport(
            source=match.group(3),
            quote=match.group(2),
            clause=None,
            type_only=bool(match.group(1)),
            has_semicolon=bool(match.group(4)),
        )

    match = _CLAUSE_IMPORT.fullmatch(block)
    if not match:
        return None

    return ParsedImport(
        source=match.group(4),
        quote=match.group(3),
        clause=match.group(2).strip(),
        type_only=bool(match.group(1)),
        has_semicolon=bool(match.group(5)),
    )


def get_import_source(block: str) -> Optional[str]:
    """Best-effort source path of an import that did not fully parse."""
    match = _SIDE_EFFECT_SOURCE.search(block) or _FROM_SOURCE.search(block)
    return match.group(1) if match else None


def find_named_imports_range(clause: str) -> Optional[Tuple[int, int]]:
    """Locate the ``{ ... }`` named-specifier block of an import clause."""
    open_idx = find_next_open(clause, 0, "{")
    if open_idx == NOT_FOUND:
        return None

    close_idx = find_matching_close(clause, open_idx, "{", "}")
    if close_idx == NOT_FOUND:
        return None

    return open_idx, close_idx


def parse_named_imports(specifiers_block: str) -> List[str]:
    return [specifier.strip() for specifier in specifiers_block.split(",") if specifier.strip()]


def named_sort_key(specifier: str, mode: SortMode) -> str:
    """Sort key of a named specifier; alphabetical mode ignores ``type``."""
    if mode is SortMode.ALPHABETICAL:
        return _TYPE_MARKER.sub("", specifier).strip()
    return specifier


def split_top_level_clause(clause: str) -> List[str]:
    """Split a clause on commas that are not inside braces."""
    segments: List[str] = []
    start = 0
    depth = 0

    for idx, char in enumerate(clause):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == "," and depth == 0:
            part = clause[start:idx].strip()
            if part:
                segments.append(part)
            start = idx + 1

    tail = clause[start:].strip()
    if tail:
        segments.append(tail)

    return segments


def parse_import_clause(clause: str) -> ImportClause:
    """Decompose a clause into default, namespace and named bindings."""
    trimmed = clause.strip()

    if "{" in trimmed:
        named_range = find_named_imports_range(trimmed)
        if named_range is None:
            return ImportClause(mergeable=False)

        open_idx, close_idx = named_range
        before = re.sub(r",\s*$", "", trimmed[:open_idx].strip())
        after = trimmed[close_idx + 1:].strip()
        named = parse_named_imports(trimmed[open_idx + 1:close_idx])
        default_is_simple = "," not in before and not before.startswith("*")

        return ImportClause(
            default=before or None,
            named=named,
            mergeable=not after and default_is_simple and bool(before or named),
        )

    segments = split_top_level_clause(trimmed)
    if not segments or len(segments) > 2:
        return ImportClause(mergeable=False)

    result = ImportClause()
    for segment in segments:
        if segment.startswith("* as "):
            if result.namespace:
                return ImportClause(mergeable=False)
            result.namespace = segment
            continue

        if result.default:
            return ImportClause(mergeable=False)
        result.default = segment

    return result


def is_style_import(source: str, style_extensions: Iterable[str]) -> bool:
    normalized = source.lower()
    return any(normalized.endswith(ext) for ext in style_extensions)


def is_alias_import(source: str, alias_prefixes: Iterable[str]) -> bool:
    """Check a source path against the alias prefixes."""
    for prefix in alias_prefixes:
        trimmed = prefix.strip()
        if not trimmed:
            continue

        if trimmed.endswith("/"):
            if source.startswith(trimmed):
                return True
        elif source == trimmed or source.startswith(f"{trimmed}/"):
            return True

    return False


def is_relative_import(source: str) -> bool:
    return source.startswith(".") or source.startswith("/")


def is_external_lib(source: str, alias_prefixes: Iterable[str]) -> bool:
    return not is_relative_import(source) and not is_alias_import(source, alias_prefixes)


def classify_source(source: str, config: SortConfig) -> GroupKey:
    """Map the source path of a binding import to its output group."""
    if is_style_import(source, config.style_extensions):
        return GroupKey.STYLES
    elif source == "react" or source.startswith("react/"):
        return GroupKey.REACT
    elif is_alias_import(source, config.alias_prefixes):
        return GroupKey.ABSOLUTE
    elif is_relative_import(source):
        return GroupKey.RELATIVE
    elif is_external_lib(source, config.alias_prefixes):
        return GroupKey.LIBRARIES
    else:
        return GroupKey.ABSOLUTE


def classify_import(parsed: ParsedImport, config: SortConfig) -> GroupKey:
    """Output group of a parsed import.

    Side-effect imports carry no bindings, so they are only told apart as
    styles or plain side effects.
    """
    if parsed.is_side_effect:
        if is_style_import(parsed.source, config.style_extensions):
            return GroupKey.STYLES
        return GroupKey.SIDE_EFFECT

    return classify_source(parsed.source, config)
