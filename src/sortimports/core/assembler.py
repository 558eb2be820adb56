# src/sortimports/core/assembler.py

import re
from typing import List, Optional, Tuple

from .collectors import (
    collect_brace_block,
    collect_comment_block,
    collect_function_block,
    collect_import_block,
    collect_type_block,
    is_function_like_start,
    normalize_whitespace,
)
from .comparator import sort_import_statements, sorted_by_mode
from .config import normalize_group_order
from .formatting import format_import_block
from .imports import classify_import, classify_source, get_import_source, parse_import_block
from .logging import get_debug_logger
from .merger import merge_import_statements
from .structured import StructuredTypeSorter
from .types import (
    SEPARATOR,
    CollectedBlock,
    GroupBuckets,
    GroupKey,
    SortConfig,
    SortMode,
    Unit,
    UnitKind,
    empty_buckets,
)

debug_log = get_debug_logger()

DIRECTIVE_PATTERN = re.compile(r"^['\"](use (?:client|server))['\"]\.?;?$", re.IGNORECASE)
COMMENT_PREFIXES = ("//", "/*", "*")
INTERFACE_PREFIXES = ("interface ", "export interface ")
TYPE_PREFIXES = ("type ", "export type ")

IMPORT_GROUPS = frozenset(
    {
        GroupKey.REACT,
        GroupKey.LIBRARIES,
        GroupKey.ABSOLUTE,
        GroupKey.RELATIVE,
        GroupKey.SIDE_EFFECT,
        GroupKey.STYLES,
    }
)

# An in-place section is a run of units whose groups are not in the order;
# None marks where the configured groups are rendered.
Section = Optional[List[Unit]]


def extract_directives(lines: List[str]) -> List[Unit]:
    """Pull every directive out of the file, blanking the source lines."""
    directives: List[Unit] = []
    seen = set()

    for idx, line in enumerate(lines):
        match = DIRECTIVE_PATTERN.match(line.strip())
        if not match:
            continue

        lines[idx] = ""
        text = f"'{match.group(1).lower()}';"
        if text not in seen:
            seen.add(text)
            directives.append(Unit(UnitKind.DIRECTIVE, text, idx, idx, GroupKey.DIRECTIVES))

    return directives


def _import_group(block: str, config: SortConfig) -> GroupKey:
    normalized = normalize_whitespace(block)
    parsed = parse_import_block(normalized)
    if parsed is not None:
        return classify_import(parsed, config)

    source = get_import_source(normalized)
    return classify_source(source, config) if source else GroupKey.ABSOLUTE


def collect_units(lines: List[str], start_idx: int, config: SortConfig) -> Tuple[List[Unit], int]:
    """Walk the leading region and return its units plus the index where it ends."""
    sorter = StructuredTypeSorter(config)
    units: List[Unit] = []
    idx = start_idx

    while idx < len(lines):
        line = lines[idx].strip()

        if not line:
            idx += 1
            continue

        if line.startswith("/*"):
            comment = collect_comment_block(lines, idx)
            if comment is None:
                debug_log.debug(f"Unterminated block comment at line {idx + 1}, leaving the rest untouched")
                break
            units.append(Unit(UnitKind.COMMENT, comment.block, idx, comment.next_idx - 1, GroupKey.COMMENTS))
            idx = comment.next_idx
            continue

        if line.startswith(COMMENT_PREFIXES):
            units.append(Unit(UnitKind.COMMENT, lines[idx], idx, idx, GroupKey.COMMENTS))
            idx += 1
            continue

        result: Optional[CollectedBlock]
        if line.startswith(INTERFACE_PREFIXES):
            kind, result = UnitKind.STRUCTURED_TYPE, collect_brace_block(lines, idx)
        elif line.startswith(TYPE_PREFIXES):
            kind, result = UnitKind.STRUCTURED_TYPE, collect_type_block(lines, idx)
        elif is_function_like_start(line):
            kind, result = UnitKind.EXECUTABLE, collect_function_block(lines, idx)
        elif line.startswith("import"):
            kind, result = UnitKind.IMPORT, collect_import_block(lines, idx)
        else:
            break

        if result is None:
            debug_log.debug(f"Incomplete {kind.value} at line {idx + 1}, leaving the rest untouched")
            break

        end = result.next_idx - 1
        if kind is UnitKind.IMPORT:
            units.append(Unit(kind, result.block, idx, end, _import_group(result.block, config)))
        elif kind is UnitKind.STRUCTURED_TYPE:
            units.append(Unit(kind, sorter.sort(result.block), idx, end, GroupKey.INTERFACES))
        else:
            units.append(Unit(kind, result.block, idx, end, GroupKey.FUNCTIONS))

        idx = result.next_idx

    return units, idx


def render_imports(group: GroupKey, units: List[Unit], config: SortConfig) -> List[str]:
    blocks = [unit.text for unit in units]
    if config.merge_duplicates:
        statements = merge_import_statements(blocks, config)
    else:
        statements = [format_import_block(block, config) for block in blocks]

    if group is GroupKey.REACT:
        if config.sort_mode is SortMode.ALPHABETICAL:
            return statements
        return sorted_by_mode(statements, SortMode.LENGTH)

    return sort_import_statements(statements, config.sort_mode)


def render_group(group: GroupKey, units: List[Unit], config: SortConfig) -> Optional[str]:
    """Render one group bucket, or None when it is empty."""
    if not units:
        return None

    if group is GroupKey.COMMENTS:
        return "\n".join(unit.text for unit in sorted(units, key=lambda unit: unit.start))

    if group in IMPORT_GROUPS:
        return "\n".join(render_imports(group, units, config))

    if group is GroupKey.FUNCTIONS:
        return "\n\n".join(unit.text for unit in units)

    return "\n".join(unit.text for unit in units)


def render_groups(buckets: GroupBuckets, config: SortConfig) -> str:
    """Concatenate the configured groups, honouring separator markers."""
    parts: List[str] = []
    pending_blank_line = False

    for item in normalize_group_order(config.groups_order, config.keep_omitted_in_place):
        if item == SEPARATOR:
            pending_blank_line = bool(parts)
            continue

        block = render_group(item, buckets[item], config)
        if block:
            if parts:
                parts.append("\n\n" if pending_blank_line else "\n")
            parts.append(block)
            pending_blank_line = False

    return "".join(parts)


def render_in_place(units: List[Unit], config: SortConfig) -> str:
    """Render units of omitted groups in the order they were found."""
    parts: List[str] = []
    previous: Optional[GroupKey] = None

    for unit in units:
        text = format_import_block(unit.text, config) if unit.kind is UnitKind.IMPORT else unit.text
        if parts:
            spaced = GroupKey.FUNCTIONS in (previous, unit.group)
            parts.append("\n\n" if spaced else "\n")
        parts.append(text)
        previous = unit.group

    return "".join(parts)


def build_sections(units: List[Unit], config: SortConfig) -> Tuple[List[Section], GroupBuckets]:
    """Split units into group buckets and in-place runs.

    Units of groups that take part in the order go to their bucket; units of
    omitted groups stay where they were relative to the configured block.
    """
    order = normalize_group_order(config.groups_order, config.keep_omitted_in_place)
    configured = {item for item in order if isinstance(item, GroupKey)}
    buckets = empty_buckets()
    sections: List[Section] = []

    for unit in units:
        if unit.group in configured:
            if None not in sections:
                sections.append(None)
            buckets[unit.group].append(unit)
        elif sections and sections[-1] is not None:
            sections[-1].append(unit)
        else:
            sections.append([unit])

    return sections, buckets


def _strip_blank_lines(lines: List[str]) -> List[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def reorganize(text: str, config: SortConfig) -> str:
    """Reorganize the leading declaration region of a source file.

    Pure function of ``(text, config)``: callers compare the result with the
    input to decide whether there is anything to apply.
    """
    lines = re.split(r"\r?\n", text)
    directives = extract_directives(lines)

    start_idx = 0
    while start_idx < len(lines) and not lines[start_idx].strip():
        start_idx += 1

    units, end_idx = collect_units(lines, start_idx, config)
    sections, buckets = build_sections(directives + units, config)

    rendered = []
    for section in sections:
        block = render_groups(buckets, config) if section is None else render_in_place(section, config)
        if block:
            rendered.append(block)

    header = re.sub(r"\n{3,}", "\n\n", "\n\n".join(rendered)).strip("\n")
    rest = "\n".join(_strip_blank_lines(lines[end_idx:]))

    output = "\n\n".join(part for part in (header, rest) if part)
    if not output:
        return text

    return f"{output}\n"
