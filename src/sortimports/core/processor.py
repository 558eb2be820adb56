# src/sortimports/core/processor.py

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .aliases import resolve_alias_prefixes
from .assembler import reorganize
from .config import Settings
from .logging import get_audit_logger, get_debug_logger
from .types import SortConfig

audit_log = get_audit_logger()
debug_log = get_debug_logger()

SUPPORTED_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts", ".cts"})
SKIPPED_DIRECTORIES = frozenset({"node_modules", ".git", "dist", "build"})


@dataclass
class SortResult:
    """Outcome of reorganizing one buffer."""
    original: str
    updated: str
    path: Optional[Path] = None

    @property
    def changed(self) -> bool:
        return self.updated != self.original


def is_supported_file(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS


def iter_source_files(paths: Iterable[Path]) -> Iterator[Path]:
    """Expand files and directories into the source files to process."""
    for path in paths:
        path = Path(path)
        if path.is_dir():
            for child in sorted(path.rglob("*")):
                relative_parts = child.relative_to(path).parts
                if any(part in SKIPPED_DIRECTORIES for part in relative_parts):
                    continue
                if child.is_file() and is_supported_file(child):
                    yield child
        elif path.is_file():
            yield path


def process_text(text: str, config: SortConfig, path: Optional[Path] = None) -> SortResult:
    """Run the core on a buffer, keeping CRLF line endings when present."""
    uses_crlf = "\r\n" in text
    updated = reorganize(text, config)
    if uses_crlf and updated != text:
        updated = updated.replace("\r\n", "\n").replace("\n", "\r\n")
    return SortResult(original=text, updated=updated, path=path)


def build_config(settings: Settings, path: Optional[Path] = None) -> SortConfig:
    """Resolve project aliases for ``path`` and build the core configuration."""
    alias_prefixes = resolve_alias_prefixes(path, settings.alias_prefixes, settings.detect_aliases)
    return settings.to_sort_config(alias_prefixes)


def process_file(path: Path, settings: Settings, write: bool = True) -> SortResult:
    """Reorganize one file, writing it back only when something changed."""
    path = Path(path)
    debug_log.debug(f"Processing {path}")

    with open(path, "r", encoding="utf-8", newline="") as f:
        original = f.read()

    result = process_text(original, build_config(settings, path), path)

    if not result.changed:
        debug_log.debug(f"No import changes needed for {path}")
        return result

    if write:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(result.updated)
        audit_log.info(f"Reorganized imports in {path}")

    return result


def render_diff(result: SortResult, path: Optional[Path] = None) -> str:
    """Unified diff between the original and the reorganized text."""
    name = str(path or result.path or "<stdin>")
    diff = difflib.unified_diff(
        result.original.splitlines(keepends=True),
        result.updated.splitlines(keepends=True),
        fromfile=f"a/{name}",
        tofile=f"b/{name}",
    )
    return "".join(diff)
