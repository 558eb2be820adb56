# src/sortimports/core/merger.py

from typing import Iterable, List, Optional

from .collectors import normalize_whitespace
from .formatting import format_import_block, format_merged_import
from .imports import parse_import_block, parse_import_clause
from .logging import get_debug_logger
from .scanner import contains_comment
from .types import ImportClause, MergedImport, ParsedImport, SortConfig

debug_log = get_debug_logger()


def dedupe_named_specifiers(specifiers: Iterable[str]) -> List[str]:
    """Drop repeated specifiers, keeping first-seen order."""
    seen = set()
    result = []
    for specifier in specifiers:
        normalized = specifier.strip()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
    return result


def can_merge_clauses(existing: ImportClause, incoming: ImportClause) -> bool:
    """Check whether two clauses combine into one legal clause."""
    if existing.default and incoming.default and existing.default != incoming.default:
        return False

    if existing.namespace and incoming.namespace and existing.namespace != incoming.namespace:
        return False

    combines_namespace_with_named = (existing.namespace and incoming.named) or (
        incoming.namespace and existing.named
    )
    return not combines_namespace_with_named


def merge_clauses(existing: ImportClause, incoming: ImportClause) -> ImportClause:
    return ImportClause(
        default=existing.default or incoming.default,
        namespace=existing.namespace or incoming.namespace,
        named=dedupe_named_specifiers([*existing.named, *incoming.named]),
    )


def _find_side_effect_entry(
    entries: List[MergedImport], parsed: ParsedImport
) -> Optional[MergedImport]:
    for entry in entries:
        if entry.clause is None and entry.source == parsed.source and entry.type_only == parsed.type_only:
            return entry
    return None


def _find_merge_target(
    entries: List[MergedImport], parsed: ParsedImport, clause: ImportClause
) -> Optional[MergedImport]:
    for entry in entries:
        if (
            entry.clause is not None
            and entry.source == parsed.source
            and entry.type_only == parsed.type_only
            and can_merge_clauses(entry.clause, clause)
        ):
            return entry
    return None


def merge_import_statements(blocks: Iterable[str], config: SortConfig) -> List[str]:
    """Combine imports of one group that share a source and type-only flag.

    Statements that cannot be merged safely are formatted on their own and
    returned after the merged entries.
    """
    entries: List[MergedImport] = []
    passthrough: List[str] = []

    for block in blocks:
        if contains_comment(block):
            passthrough.append(block)
            continue

        parsed = parse_import_block(normalize_whitespace(block))
        if parsed is None:
            debug_log.debug(f"Passing through unparseable import: {block!r}")
            passthrough.append(block)
            continue

        if parsed.is_side_effect:
            existing = _find_side_effect_entry(entries, parsed)
            if existing:
                existing.has_semicolon = existing.has_semicolon or parsed.has_semicolon
            else:
                entries.append(
                    MergedImport(
                        source=parsed.source,
                        quote=parsed.quote,
                        type_only=parsed.type_only,
                        has_semicolon=parsed.has_semicolon,
                    )
                )
            continue

        clause = parse_import_clause(parsed.clause)
        if not clause.mergeable:
            passthrough.append(format_import_block(block, config))
            continue

        target = _find_merge_target(entries, parsed, clause)
        if target is None:
            entries.append(
                MergedImport(
                    source=parsed.source,
                    quote=parsed.quote,
                    type_only=parsed.type_only,
                    has_semicolon=parsed.has_semicolon,
                    clause=merge_clauses(ImportClause(), clause),
                )
            )
            continue

        debug_log.debug(f"Merging import from {parsed.source!r}")
        target.has_semicolon = target.has_semicolon or parsed.has_semicolon
        target.clause = merge_clauses(target.clause, clause)

    return [format_merged_import(entry, config) for entry in entries] + passthrough
