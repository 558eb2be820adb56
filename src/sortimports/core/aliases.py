# src/sortimports/core/aliases.py

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from .logging import get_debug_logger
from .scanner import NOT_FOUND, find_matching_close
from .types import DEFAULT_ALIAS_PREFIXES

debug_log = get_debug_logger()

PROJECT_CONFIG_FILES = ("tsconfig.json", "jsconfig.json")
BUNDLER_CONFIG_FILES = tuple(
    f"{tool}.config.{ext}"
    for tool in ("vite", "webpack")
    for ext in ("ts", "js", "mts", "mjs", "cts", "cjs")
)

_OBJECT_ALIAS_KEY = re.compile(r"""(?:['"`]([^'"`]+)['"`]|([A-Za-z_$][\w$-]*))\s*:""")
_ARRAY_ALIAS_FIND = re.compile(r"""find\s*:\s*(['"`])([^'"`]+)\1""")


def normalize_alias_prefix(prefix: str) -> Optional[str]:
    """Turn ``@app/*`` or ``@app$`` into ``@app/``."""
    trimmed = re.sub(r"\*+$", "", prefix.strip())
    trimmed = re.sub(r"\$$", "", trimmed)
    if not trimmed:
        return None
    return trimmed if trimmed.endswith("/") else f"{trimmed}/"


def unique_preserving_order(values: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    result = []
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def normalize_alias_prefixes(prefixes: Iterable[str]) -> List[str]:
    return unique_preserving_order(
        prefix for prefix in (normalize_alias_prefix(p) for p in prefixes) if prefix
    )


def strip_jsonc(content: str) -> str:
    """Remove comments and trailing commas from JSON with comments."""
    result = []
    i = 0
    in_string = False

    while i < len(content):
        char = content[i]

        if in_string:
            result.append(char)
            if char == "\\" and i + 1 < len(content):
                result.append(content[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
        elif char == '"':
            in_string = True
            result.append(char)
            i += 1
        elif content.startswith("//", i):
            # Skip until end of line
            while i < len(content) and content[i] != "\n":
                i += 1
        elif content.startswith("/*", i):
            end = content.find("*/", i + 2)
            i = len(content) if end == -1 else end + 2
        else:
            result.append(char)
            i += 1

    return re.sub(r",(\s*[}\]])", r"\1", "".join(result))


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        debug_log.debug(f"Could not read {path}: {e}")
        return None


def parse_jsonc_file(path: Path) -> Optional[Dict[str, Any]]:
    content = _read_text(path)
    if content is None:
        return None

    try:
        data = json.loads(strip_jsonc(content))
    except json.JSONDecodeError as e:
        debug_log.debug(f"Invalid JSON in {path}: {e}")
        return None

    return data if isinstance(data, dict) else None


def has_any_project_config(directory: Path) -> bool:
    return any((directory / name).exists() for name in (*PROJECT_CONFIG_FILES, *BUNDLER_CONFIG_FILES))


def find_nearest_project_root(file_path: Path, workspace_root: Optional[Path] = None) -> Optional[Path]:
    """Walk up from ``file_path`` to the first directory with a project config."""
    current = Path(file_path).resolve().parent
    boundary = Path(workspace_root).resolve() if workspace_root else None

    for directory in (current, *current.parents):
        if boundary is not None and boundary != directory and boundary not in directory.parents:
            break
        if has_any_project_config(directory):
            return directory
        if directory == boundary:
            break

    return None


def _resolve_config_candidate(base_path: Path) -> Optional[Path]:
    candidates = [base_path]
    if base_path.suffix != ".json":
        candidates.append(base_path.with_name(f"{base_path.name}.json"))

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _resolve_extended_config(from_config: Path, extends_value: str) -> Optional[Path]:
    # Package extends (e.g. "@tsconfig/node18") are not followed
    if not extends_value.startswith("."):
        return None
    return _resolve_config_candidate((from_config.parent / extends_value).resolve())


def _resolve_referenced_config(from_config: Path, reference_path: str) -> Optional[Path]:
    resolved = (from_config.parent / reference_path).resolve()

    if resolved.is_dir():
        for name in PROJECT_CONFIG_FILES:
            if (resolved / name).is_file():
                return resolved / name
        return _resolve_config_candidate(resolved / "tsconfig")

    return _resolve_config_candidate(resolved)


def collect_typescript_aliases(config_path: Path, visited: Set[Path], output: List[str]) -> None:
    """Collect ``compilerOptions.paths`` keys, following extends and references."""
    config_path = Path(config_path).resolve()
    if config_path in visited or not config_path.is_file():
        return
    visited.add(config_path)

    parsed = parse_jsonc_file(config_path)
    if parsed is None:
        return

    compiler_options = parsed.get("compilerOptions")
    paths = compiler_options.get("paths") if isinstance(compiler_options, dict) else None
    if isinstance(paths, dict):
        for alias_key in paths:
            prefix = normalize_alias_prefix(alias_key)
            if prefix:
                output.append(prefix)

    extends = parsed.get("extends")
    if isinstance(extends, str):
        extended = _resolve_extended_config(config_path, extends)
        if extended:
            collect_typescript_aliases(extended, visited, output)

    references = parsed.get("references")
    for reference in references if isinstance(references, list) else []:
        reference_path = reference.get("path") if isinstance(reference, dict) else None
        if not isinstance(reference_path, str):
            continue
        referenced = _resolve_referenced_config(config_path, reference_path)
        if referenced:
            collect_typescript_aliases(referenced, visited, output)


def resolve_typescript_alias_prefixes(project_root: Path) -> List[str]:
    detected: List[str] = []
    visited: Set[Path] = set()
    for name in PROJECT_CONFIG_FILES:
        config_path = project_root / name
        if config_path.is_file():
            collect_typescript_aliases(config_path, visited, detected)
    return detected


def find_property_blocks(source: str, property_name: str, open_char: str, close_char: str) -> List[str]:
    """Bodies of every ``<property>: {...}`` (or ``[...]``) in ``source``."""
    results = []
    pattern = re.compile(rf"{re.escape(property_name)}\s*:\s*{re.escape(open_char)}")
    position = 0

    while True:
        match = pattern.search(source, position)
        if not match:
            break

        open_idx = match.end() - 1
        close_idx = find_matching_close(source, open_idx, open_char, close_char)
        if close_idx == NOT_FOUND:
            position = match.end()
            continue

        results.append(source[open_idx + 1:close_idx])
        position = close_idx + 1

    return results


def extract_bundler_aliases(config_path: Path) -> List[str]:
    """Alias keys from a vite/webpack config file."""
    content = _read_text(config_path)
    if content is None:
        return []

    detected: List[str] = []
    for body in find_property_blocks(content, "alias", "{", "}"):
        for match in _OBJECT_ALIAS_KEY.finditer(body):
            detected.append(match.group(1) or match.group(2))

    for body in find_property_blocks(content, "alias", "[", "]"):
        detected.extend(match.group(2) for match in _ARRAY_ALIAS_FIND.finditer(body))

    return normalize_alias_prefixes(detected)


def resolve_bundler_alias_prefixes(project_root: Path) -> List[str]:
    detected: List[str] = []
    for name in BUNDLER_CONFIG_FILES:
        config_path = project_root / name
        if config_path.is_file():
            detected.extend(extract_bundler_aliases(config_path))
    return detected


def resolve_alias_prefixes(
    file_path: Optional[Path],
    manual_prefixes: Sequence[str],
    detect_from_project_config: bool = True,
    workspace_root: Optional[Path] = None,
) -> List[str]:
    """Manual prefixes, then detected project aliases, then the defaults."""
    manual = normalize_alias_prefixes(manual_prefixes)
    defaults = normalize_alias_prefixes(DEFAULT_ALIAS_PREFIXES)

    if not detect_from_project_config or file_path is None:
        return unique_preserving_order([*manual, *defaults])

    project_root = find_nearest_project_root(file_path, workspace_root)
    if project_root is None:
        return unique_preserving_order([*manual, *defaults])

    detected = normalize_alias_prefixes(
        [*resolve_typescript_alias_prefixes(project_root), *resolve_bundler_alias_prefixes(project_root)]
    )
    debug_log.debug(f"Detected alias prefixes in {project_root}: {detected}")

    return unique_preserving_order([*manual, *detected, *defaults])
