# src/sortimports/core/structured.py

import re
from typing import List, Optional, Tuple

from .collectors import normalize_whitespace
from .comparator import sorted_by_mode
from .scanner import NOT_FOUND, DepthTracker, find_matching_close, find_next_open
from .types import SortConfig, SortMode

_INTERFACE_START = re.compile(r"^\s*(?:export\s+)?(?:declare\s+)?interface\b")
_TYPE_START = re.compile(r"^\s*(?:export\s+)?(?:declare\s+)?type\b")
_MEMBER_TERMINATORS = (";", ",")


def _trailing_indent(body: str) -> str:
    """Whitespace that precedes the closing brace on its own line."""
    last_line = body[body.rfind("\n") + 1:]
    return last_line if "\n" in body and not last_line.strip() else ""


def _is_terminated(member: str) -> bool:
    tracker = DepthTracker("{([")
    last_code = ""
    for line in member.split("\n"):
        tracker.feed_line(line)
        last_code = tracker.last_code or last_code
    return last_code.endswith(_MEMBER_TERMINATORS)


class StructuredTypeSorter:
    """Sorts the members of interfaces and object-shaped type aliases."""

    def __init__(self, config: SortConfig):
        self.config = config

    def sort(self, block: str) -> str:
        """Return ``block`` with its top-level members (and nested ones) sorted.

        Unions, primitives, single-line bodies and anything without members
        are returned unchanged.
        """
        body_range = self.find_top_level_body_range(block)
        if body_range is None:
            return block

        open_idx, close_idx = body_range
        header = block[:open_idx + 1]
        body = block[open_idx + 1:close_idx]
        footer = block[close_idx:]

        if "\n" not in body:
            return block

        sorted_members = self.sort_members(body)
        if not sorted_members:
            return block

        return f"{header}\n" + "\n".join(sorted_members) + f"\n{_trailing_indent(body)}{footer}"

    def find_top_level_body_range(self, block: str) -> Optional[Tuple[int, int]]:
        if _INTERFACE_START.match(block):
            open_idx = find_next_open(block, 0, "{")
        elif _TYPE_START.match(block):
            open_idx = self._find_object_literal_after_equals(block)
        else:
            return None

        if open_idx == NOT_FOUND:
            return None

        close_idx = find_matching_close(block, open_idx, "{", "}")
        if close_idx == NOT_FOUND:
            return None

        return open_idx, close_idx

    @staticmethod
    def _find_object_literal_after_equals(block: str) -> int:
        # The first "=" outside generic parameters starts the right-hand side
        angle_depth = 0
        equals_idx = NOT_FOUND
        for idx, char in enumerate(block):
            if char == "<":
                angle_depth += 1
            elif char == ">" and angle_depth:
                angle_depth -= 1
            elif char == "=" and angle_depth == 0:
                equals_idx = idx
                break

        if equals_idx == NOT_FOUND:
            return NOT_FOUND

        rest = block[equals_idx + 1:]
        stripped = rest.lstrip()
        if not stripped.startswith("{"):
            return NOT_FOUND

        return equals_idx + 1 + (len(rest) - len(stripped))

    def collect_top_level_members(self, body: str) -> List[str]:
        """Split a body into members cut at depth zero on ``;`` or ``,``."""
        members: List[str] = []
        current: List[str] = []
        tracker = DepthTracker("{([")

        for line in body.split("\n"):
            if not line.strip() and not current:
                continue

            current.append(line)
            tracker.feed_line(line)

            if tracker.at_zero and tracker.last_code.endswith(_MEMBER_TERMINATORS):
                members.append("\n".join(current))
                current = []

        while current and not current[-1].strip():
            current.pop()
        if current:
            members.append("\n".join(current))

        return members

    def member_sort_value(self, member: str) -> str:
        if self.config.sort_mode is SortMode.ALPHABETICAL:
            return next((line.strip() for line in member.split("\n") if line.strip()), "")
        return normalize_whitespace(member)

    def sort_members(self, body: str) -> List[str]:
        members = [self.sort_nested_object_literals(member) for member in self.collect_top_level_members(body)]

        # An unterminated last member would glue onto its new neighbour
        trailing = None
        if members and not _is_terminated(members[-1]):
            trailing = members.pop()

        result = sorted_by_mode(members, self.config.sort_mode, key=self.member_sort_value)
        if trailing is not None:
            result.append(trailing)
        return result

    def sort_nested_object_literals(self, text: str) -> str:
        """Sort the members of every multi-line ``{ ... }`` region in ``text``."""
        parts: List[str] = []
        cursor = 0

        while cursor < len(text):
            open_idx = find_next_open(text, cursor, "{")
            if open_idx == NOT_FOUND:
                parts.append(text[cursor:])
                break

            close_idx = find_matching_close(text, open_idx, "{", "}")
            if close_idx == NOT_FOUND:
                parts.append(text[cursor:])
                break

            parts.append(text[cursor:open_idx + 1])
            body = text[open_idx + 1:close_idx]
            nested_members = self.sort_members(body) if "\n" in body else []

            if nested_members:
                parts.append("\n" + "\n".join(nested_members) + f"\n{_trailing_indent(body)}")
            else:
                parts.append(body)

            parts.append(text[close_idx])
            cursor = close_idx + 1

        return "".join(parts)
