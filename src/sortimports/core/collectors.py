# src/sortimports/core/collectors.py

import re
from typing import List, Optional

from .scanner import DepthTracker
from .types import CollectedBlock

FUNCTION_LIKE_PREFIXES = (
    "export const ",
    "const ",
    "export function ",
    "function ",
    "export default ",
    "export {",
)

_QUOTED = r"['\"][^'\"]+['\"]"
_TYPE_SIDE_EFFECT_IMPORT = re.compile(rf"import\s+type\s+{_QUOTED}\s*;?")
_SIDE_EFFECT_IMPORT = re.compile(rf"import\s+{_QUOTED}\s*;?")
_FROM_IMPORT = re.compile(rf"import\b.*\bfrom\s+{_QUOTED}\s*;?", re.DOTALL)

# Trailing characters that mean a type alias continues on the next line
_TYPE_CONTINUATIONS = ("=", "|", "&", ",", "<", "(", "?", ":", "=>")


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space."""
    return re.sub(r"\s+", " ", text).strip()


def is_complete_import(block: str) -> bool:
    """Check whether the joined lines form a whole import statement."""
    normalized = normalize_whitespace(block)
    return bool(
        _TYPE_SIDE_EFFECT_IMPORT.fullmatch(normalized)
        or _SIDE_EFFECT_IMPORT.fullmatch(normalized)
        or _FROM_IMPORT.fullmatch(normalized)
    )


def is_function_like_start(line: str) -> bool:
    return line.startswith(FUNCTION_LIKE_PREFIXES)


def collect_import_block(lines: List[str], start_idx: int) -> Optional[CollectedBlock]:
    """Consume lines until an import statement is complete.

    Gives up on the first blank line so an unterminated import never swallows
    the code that follows it.
    """
    idx = start_idx
    block_lines: List[str] = []

    while idx < len(lines):
        block_lines.append(lines[idx])
        idx += 1

        block = "\n".join(block_lines).strip()
        if is_complete_import(block):
            return CollectedBlock(block=block, next_idx=idx)

        if idx < len(lines) and not lines[idx].strip():
            break

    return None


def collect_function_block(lines: List[str], start_idx: int) -> Optional[CollectedBlock]:
    """Collect a const/function/export declaration."""
    first_line = lines[start_idx].strip()

    if first_line.endswith(";"):
        return CollectedBlock(block=lines[start_idx].rstrip(), next_idx=start_idx + 1)

    if "{" not in first_line:
        return None

    return collect_brace_block(lines, start_idx)


def collect_brace_block(lines: List[str], start_idx: int) -> Optional[CollectedBlock]:
    """Collect lines until the first opened brace is closed again."""
    tracker = DepthTracker("{")

    for idx in range(start_idx, len(lines)):
        tracker.feed_line(lines[idx])
        if tracker.opened and tracker.depth("{") == 0:
            block = "\n".join(lines[start_idx:idx + 1]).strip()
            return CollectedBlock(block=block, next_idx=idx + 1)

    return None


def collect_type_block(lines: List[str], start_idx: int) -> Optional[CollectedBlock]:
    """Collect a type alias, balancing braces, parens and brackets."""
    tracker = DepthTracker("{([")

    for idx in range(start_idx, len(lines)):
        tracker.feed_line(lines[idx])
        if not tracker.balanced:
            continue

        trimmed = lines[idx].strip()
        terminated = tracker.last_code.endswith((";", "}"))
        # Aliases written without semicolons end at a blank line or end of file
        next_is_blank = idx + 1 >= len(lines) or not lines[idx + 1].strip()
        if terminated or (next_is_blank and not trimmed.endswith(_TYPE_CONTINUATIONS)):
            block = "\n".join(lines[start_idx:idx + 1]).strip()
            return CollectedBlock(block=block, next_idx=idx + 1)

    return None


def collect_comment_block(lines: List[str], start_idx: int) -> Optional[CollectedBlock]:
    """Collect a ``/* ... */`` comment, keeping its lines verbatim."""
    tracker = DepthTracker()

    for idx in range(start_idx, len(lines)):
        tracker.feed_line(lines[idx])
        if not tracker.in_block_comment:
            return CollectedBlock(block="\n".join(lines[start_idx:idx + 1]), next_idx=idx + 1)

    return None
