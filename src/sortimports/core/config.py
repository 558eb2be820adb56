# src/sortimports/core/config.py
import os
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, ValidationInfo, field_validator

from .types import (
    DEFAULT_ALIAS_PREFIXES,
    DEFAULT_GROUP_ORDER,
    DEFAULT_GROUP_ORDER_WITH_SEPARATORS,
    DEFAULT_INDENT,
    DEFAULT_MAX_LINE_LENGTH,
    DEFAULT_STYLE_EXTENSIONS,
    SEPARATOR,
    SPACING_TOKEN,
    GroupKey,
    GroupOrderItem,
    SortConfig,
    SortMode,
)

SETTINGS_FILE_NAMES = (".sortimports.yaml", ".sortimports.yml")


def normalize_group_order(
    items: Iterable[Any], keep_omitted_in_place: bool = False
) -> Tuple[GroupOrderItem, ...]:
    """Normalize a user supplied group order.

    ``spacing`` becomes a separator marker, unknown names are dropped,
    duplicates keep their first position and, unless omitted groups stay in
    place, missing groups are appended in the default order.
    """
    valid = {group.value: group for group in GroupKey}
    result: List[GroupOrderItem] = []
    used = set()

    for item in items:
        if isinstance(item, GroupKey):
            group = item
        else:
            token = str(item).strip()
            if token in (SPACING_TOKEN, SEPARATOR):
                if result and result[-1] != SEPARATOR:
                    result.append(SEPARATOR)
                continue
            group = valid.get(token)

        if group is not None and group not in used:
            result.append(group)
            used.add(group)

    if not keep_omitted_in_place:
        for group in DEFAULT_GROUP_ORDER:
            if group not in used:
                result.append(group)

    while result and result[-1] == SEPARATOR:
        result.pop()

    return tuple(result)


def normalize_style_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    """Lower-case extensions with a leading dot, falling back to the defaults."""
    normalized: List[str] = []
    for ext in extensions:
        trimmed = str(ext).strip().lower()
        if not trimmed:
            continue
        trimmed = trimmed if trimmed.startswith(".") else f".{trimmed}"
        if trimmed not in normalized:
            normalized.append(trimmed)

    return tuple(normalized) or DEFAULT_STYLE_EXTENSIONS


def _group_order_tokens(order: Sequence[GroupOrderItem]) -> List[str]:
    return [SPACING_TOKEN if item == SEPARATOR else item.value for item in order]


class Settings(BaseModel):
    """User settings as read from a ``.sortimports.yaml`` file.

    Invalid values never raise: they fall back to the defaults.
    """

    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    indent: str = DEFAULT_INDENT
    alias_prefixes: List[str] = list(DEFAULT_ALIAS_PREFIXES)
    detect_aliases: bool = True
    sort_mode: str = SortMode.LENGTH.value
    style_extensions: List[str] = list(DEFAULT_STYLE_EXTENSIONS)
    groups_order: List[str] = _group_order_tokens(DEFAULT_GROUP_ORDER_WITH_SEPARATORS)
    merge_duplicates: bool = True
    keep_omitted_in_place: bool = False
    log_dir: Optional[str] = None

    @field_validator("max_line_length", mode="before")
    @classmethod
    def validate_max_line_length(cls, value: Any) -> int:
        try:
            length = int(value)
        except (TypeError, ValueError):
            return DEFAULT_MAX_LINE_LENGTH
        return length if length >= 1 else DEFAULT_MAX_LINE_LENGTH

    @field_validator("indent", mode="before")
    @classmethod
    def validate_indent(cls, value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return " " * value
        if isinstance(value, str) and value and not value.strip():
            return value
        return DEFAULT_INDENT

    @field_validator("sort_mode", mode="before")
    @classmethod
    def validate_sort_mode(cls, value: Any) -> str:
        valid = {mode.value for mode in SortMode}
        token = str(value).strip().lower() if value is not None else ""
        return token if token in valid else SortMode.LENGTH.value

    @field_validator("alias_prefixes", "groups_order", mode="before")
    @classmethod
    def validate_string_list(cls, value: Any, info: ValidationInfo) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return [str(item) for item in value if item is not None]

    @field_validator("style_extensions", mode="before")
    @classmethod
    def validate_style_extensions(cls, value: Any) -> List[str]:
        if not isinstance(value, (list, tuple)):
            return list(DEFAULT_STYLE_EXTENSIONS)
        return list(normalize_style_extensions(value))

    @field_validator("detect_aliases", "merge_duplicates", "keep_omitted_in_place", mode="before")
    @classmethod
    def validate_boolean(cls, value: Any, info: ValidationInfo) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "yes", "on", "1"):
            return True
        if isinstance(value, str) and value.strip().lower() in ("false", "no", "off", "0"):
            return False
        return cls.model_fields[info.field_name].default

    def to_sort_config(self, alias_prefixes: Optional[Sequence[str]] = None) -> SortConfig:
        """Build the core configuration value.

        ``alias_prefixes`` replaces the manual prefixes when the caller has
        already resolved project aliases.
        """
        return SortConfig(
            max_line_length=self.max_line_length,
            indent=self.indent,
            alias_prefixes=tuple(self.alias_prefixes if alias_prefixes is None else alias_prefixes),
            sort_mode=SortMode(self.sort_mode),
            style_extensions=normalize_style_extensions(self.style_extensions),
            groups_order=normalize_group_order(self.groups_order, self.keep_omitted_in_place),
            merge_duplicates=self.merge_duplicates,
            keep_omitted_in_place=self.keep_omitted_in_place,
        )


def get_config_dir() -> Path:
    """Get the sortimports configuration directory."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", "~/.config")
    return Path(xdg_config_home).expanduser() / "sortimports"


def get_user_settings_path() -> Path:
    return get_config_dir() / "config.yaml"


def find_settings_file(start: Path) -> Optional[Path]:
    """Find the closest settings file above ``start``, then the user one."""
    current = Path(start).resolve()
    if current.is_file():
        current = current.parent

    for directory in (current, *current.parents):
        for name in SETTINGS_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate

    user_settings = get_user_settings_path()
    return user_settings if user_settings.is_file() else None


def get_default_settings() -> Settings:
    """Get default settings with environment variable overrides."""
    overrides = {}
    if "SORTIMPORTS_SORT_MODE" in os.environ:
        overrides["sort_mode"] = os.environ["SORTIMPORTS_SORT_MODE"]
    if "SORTIMPORTS_MAX_LINE_LENGTH" in os.environ:
        overrides["max_line_length"] = os.environ["SORTIMPORTS_MAX_LINE_LENGTH"]
    if "SORTIMPORTS_LOG_DIR" in os.environ:
        overrides["log_dir"] = os.environ["SORTIMPORTS_LOG_DIR"]

    return Settings(**overrides)


def load_settings(config_path: Path) -> Settings:
    """Load settings from a YAML file."""
    with open(config_path, "r") as f:
        config_data = yaml.safe_load(f)

    if not isinstance(config_data, dict):
        return get_default_settings()

    known = {key: value for key, value in config_data.items() if key in Settings.model_fields}
    return Settings(**known)


def save_settings(settings: Settings, config_path: Path) -> None:
    """Save settings to a YAML file."""
    with open(config_path, "w") as f:
        yaml.safe_dump(settings.model_dump(), f, sort_keys=False)
