# src/sortimports/core/types.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class GroupKey(Enum):
    """Output groups of the leading declaration region."""
    DIRECTIVES = "directives"
    REACT = "react"
    LIBRARIES = "libraries"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    SIDE_EFFECT = "sideEffect"
    STYLES = "styles"
    INTERFACES = "interfaces"
    COMMENTS = "comments"
    FUNCTIONS = "functions"

class SortMode(Enum):
    """Ordering rule applied to imports and structured type members."""
    LENGTH = "length"
    ALPHABETICAL = "alphabetical"

class UnitKind(Enum):
    """Kinds of syntactic units recognized in the leading region."""
    IMPORT = "import"
    DIRECTIVE = "directive"
    COMMENT = "comment"
    STRUCTURED_TYPE = "structured_type"
    EXECUTABLE = "executable"


# Marker placed between groups that should be separated by a blank line
SEPARATOR = "__separator__"
SPACING_TOKEN = "spacing"

GroupOrderItem = Union[GroupKey, str]

DEFAULT_GROUP_ORDER: Tuple[GroupKey, ...] = (
    GroupKey.DIRECTIVES,
    GroupKey.REACT,
    GroupKey.LIBRARIES,
    GroupKey.ABSOLUTE,
    GroupKey.RELATIVE,
    GroupKey.SIDE_EFFECT,
    GroupKey.STYLES,
    GroupKey.INTERFACES,
    GroupKey.COMMENTS,
    GroupKey.FUNCTIONS,
)

DEFAULT_GROUP_ORDER_WITH_SEPARATORS: Tuple[GroupOrderItem, ...] = tuple(
    item
    for index, group in enumerate(DEFAULT_GROUP_ORDER)
    for item in ((SEPARATOR, group) if index else (group,))
)

DEFAULT_ALIAS_PREFIXES: Tuple[str, ...] = ("@/", "~/", "src/")
DEFAULT_STYLE_EXTENSIONS: Tuple[str, ...] = (".css", ".scss", ".sass", ".less")
DEFAULT_MAX_LINE_LENGTH = 100
DEFAULT_INDENT = "  "


@dataclass(frozen=True)
class SortConfig:
    """Normalized configuration threaded through every core call."""
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    indent: str = DEFAULT_INDENT
    alias_prefixes: Tuple[str, ...] = DEFAULT_ALIAS_PREFIXES
    sort_mode: SortMode = SortMode.LENGTH
    style_extensions: Tuple[str, ...] = DEFAULT_STYLE_EXTENSIONS
    groups_order: Tuple[GroupOrderItem, ...] = DEFAULT_GROUP_ORDER_WITH_SEPARATORS
    merge_duplicates: bool = True
    keep_omitted_in_place: bool = False

@dataclass(frozen=True)
class CollectedBlock:
    """Text of a completed unit and the index of the first line after it."""
    block: str
    next_idx: int

@dataclass(frozen=True)
class ParsedImport:
    """One import statement split into its parts."""
    source: str
    quote: str
    clause: Optional[str]
    type_only: bool
    has_semicolon: bool

    @property
    def is_side_effect(self) -> bool:
        return self.clause is None

@dataclass
class ImportClause:
    """Bindings of an import clause."""
    default: Optional[str] = None
    namespace: Optional[str] = None
    named: List[str] = field(default_factory=list)
    mergeable: bool = True

@dataclass
class MergedImport:
    """Import entry produced by merging statements with the same source."""
    source: str
    quote: str
    type_only: bool
    has_semicolon: bool
    clause: Optional[ImportClause] = None

@dataclass(frozen=True)
class Unit:
    """A contiguous span of lines recognized as one syntactic construct."""
    kind: UnitKind
    text: str
    start: int
    end: int
    group: GroupKey

GroupBuckets = Dict[GroupKey, List[Unit]]


def empty_buckets() -> GroupBuckets:
    """Create one empty bucket per output group."""
    return {group: [] for group in GroupKey}
