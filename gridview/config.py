"""Configuration system for gridview using pydantic-settings.

Supports layered configuration:
1. Built-in defaults (lowest priority)
2. pyproject.toml [tool.gridview] section (project-level)
3. ./gridview.toml (project-level, explicit)
4. ~/.config/gridview/config.toml (user-level, overrides project)
5. File named by GRIDVIEW_CONFIG_FILE
6. Environment variables (override every file)
7. Explicit keyword arguments (highest priority)

Environment variables use GRIDVIEW_ prefix with nested delimiter __.
Example: GRIDVIEW_TABLE__EMPTY_CELL, GRIDVIEW_FORMAT__CURRENCY_CODE
"""

from __future__ import annotations

import os
import sys

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


FilterPosition = Literal["header", "body", "footer"]


def _find_config_files() -> list[Path]:
    """Find all configuration files in order of precedence (lowest first)."""
    files = []

    # Project-level pyproject.toml [tool.gridview] (lowest file priority)
    pyproject = Path("pyproject.toml")
    if pyproject.exists():
        files.append(pyproject)

    # Explicit gridview.toml (project-level)
    gridview_toml = Path("gridview.toml")
    if gridview_toml.exists():
        files.append(gridview_toml)

    # User-level config (overrides project configs)
    if sys.platform == "win32":
        user_config = Path(os.environ.get("APPDATA", "~")) / "gridview" / "config.toml"
    else:
        user_config = Path("~/.config/gridview/config.toml")
    user_config = user_config.expanduser()
    if user_config.exists():
        files.append(user_config)

    # Environment variable override for config file (highest file priority)
    env_config = os.environ.get("GRIDVIEW_CONFIG_FILE")
    if env_config:
        env_path = Path(env_config)
        if env_path.exists():
            files.append(env_path)

    return files


def _load_toml_config() -> dict[str, Any]:
    """Load and merge all TOML configuration files.

    Raises
    ------
    ConfigurationError
        If a configuration file exists but is not valid TOML.
    """
    merged: dict[str, Any] = {}

    for config_file in _find_config_files():
        try:
            data = tomllib.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot read configuration file: {exc}", path=str(config_file)
            ) from exc

        # Handle pyproject.toml [tool.gridview] section
        if config_file.name == "pyproject.toml":
            data = data.get("tool", {}).get("gridview", {})

        merged = _deep_merge(merged, data)

    return merged


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_env_overrides(sections: dict[str, type[BaseSettings]]) -> dict[str, Any]:
    """Collect GRIDVIEW_<SECTION>__<FIELD> variables per section.

    Names are matched case-insensitively; unknown fields are skipped.
    """
    overrides: dict[str, Any] = {}
    for section, settings_class in sections.items():
        prefix = f"GRIDVIEW_{section.upper()}__"
        fields = set(settings_class.model_fields)
        values = {}
        for name, value in os.environ.items():
            if not name.upper().startswith(prefix):
                continue
            field_name = name[len(prefix) :].lower()
            if field_name in fields:
                values[field_name] = value
        if values:
            overrides[section] = values
    return overrides


class TableSettings(BaseSettings):
    """Table layout and behavior defaults.

    Environment prefix: GRIDVIEW_TABLE__
    Example: GRIDVIEW_TABLE__FILTER_POSITION=header
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDVIEW_TABLE__",
        extra="ignore",
    )

    layout: str = Field(
        default="{summary}\n{items}\n{pager}",
        description="Section layout; {summary}, {items}, {pager}, {caption} and {errors} are resolved",
    )
    table_class: str = "table table-striped table-bordered"
    container_class: str = "grid-view"
    empty_cell: str = Field(default="&nbsp;", description="HTML for cells without content")
    filter_position: FilterPosition = "body"
    show_filters: bool = Field(default=False, description="Render the filter row")
    show_header: bool = True
    show_footer: bool = False
    show_on_empty: bool = Field(
        default=True, description="Render the table shell when there is no data"
    )
    sort_param: str = "sort"
    page_param: str = "page"
    guess_sample_size: int = Field(
        default=10, ge=1, description="Rows sampled when inferring columns from data"
    )
    strict_format: bool = Field(
        default=False,
        description="Propagate FormatError instead of rendering an error placeholder cell",
    )


class FormatSettings(BaseSettings):
    """Value formatting settings.

    Environment prefix: GRIDVIEW_FORMAT__
    Example: GRIDVIEW_FORMAT__CURRENCY_CODE=EUR
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDVIEW_FORMAT__",
        extra="ignore",
    )

    date_format: str = "%Y-%m-%d"
    datetime_format: str = "%Y-%m-%d %H:%M:%S"
    time_format: str = "%H:%M:%S"
    timezone: str = Field(default="UTC", description="Timezone used to render UNIX timestamps")
    currency_code: str = "USD"
    currency_decimals: int = Field(default=2, ge=0)
    decimal_separator: str = "."
    thousands_separator: str = ","
    null_display: str = Field(default="", description="HTML rendered for null values")

    @field_validator("currency_code", mode="after")
    @classmethod
    def upper_currency_code(cls, v: str) -> str:
        """Normalize currency codes to upper case."""
        return v.strip().upper()


class MessageSettings(BaseSettings):
    """User-visible strings, overridable for localization.

    Environment prefix: GRIDVIEW_MESSAGES__
    Example: GRIDVIEW_MESSAGES__EMPTY_TEXT="Sin resultados."
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDVIEW_MESSAGES__",
        extra="ignore",
    )

    empty_text: str = "No results found."
    summary: str = "Showing <b>{begin}-{end}</b> of <b>{totalCount}</b>."
    actions: str = "Actions"
    view: str = "View"
    edit: str = "Edit"
    delete: str = "Delete"
    delete_confirm: str = "Are you sure you want to delete this item?"
    yes: str = "Yes"
    no: str = "No"
    previous: str = "&laquo;"
    next: str = "&raquo;"
    invalid_value: str = "(invalid value)"


class LogSettings(BaseSettings):
    """Logging settings.

    Environment prefix: GRIDVIEW_LOG__
    Example: GRIDVIEW_LOG__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDVIEW_LOG__",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: str = "%(name)s - %(levelname)s - %(message)s"


_SECTIONS: dict[str, type[BaseSettings]] = {
    "table": TableSettings,
    "format": FormatSettings,
    "messages": MessageSettings,
    "log": LogSettings,
}


class GridViewSettings(BaseSettings):
    """Main settings aggregating all configuration sections.

    Environment prefix: GRIDVIEW__

    Configuration sources (in order of precedence):
    1. Built-in defaults
    2. pyproject.toml [tool.gridview] section
    3. ./gridview.toml (project-level)
    4. ~/.config/gridview/config.toml (user-level, overrides project)
    5. GRIDVIEW_CONFIG_FILE
    6. Environment variables (override every file)
    7. Explicit keyword arguments (highest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIDVIEW__",
        env_nested_delimiter="__",
        extra="ignore",
    )

    table: TableSettings = Field(default_factory=TableSettings)
    format: FormatSettings = Field(default_factory=FormatSettings)
    messages: MessageSettings = Field(default_factory=MessageSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    def __init__(self, **data: Any) -> None:
        # Load TOML configuration first
        toml_config = _load_toml_config()

        # Section env vars override TOML; explicit data overrides both.
        # Section dicts are validated without their env source, so the
        # overrides have to be applied here.
        env_config = _load_env_overrides(_SECTIONS)
        merged = _deep_merge(_deep_merge(toml_config, env_config), data)

        super().__init__(**merged)

    def to_toml(self) -> str:
        """Export settings as TOML string."""
        lines = ["# gridview configuration", ""]

        for section_name, section_data in self.model_dump().items():
            lines.append(f"[{section_name}]")
            for field_name, field_value in section_data.items():
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                elif isinstance(field_value, str):
                    escaped = field_value.replace("\\", "\\\\").replace('"', '\\"')
                    value_str = '"' + escaped.replace("\n", "\\n") + '"'
                else:
                    value_str = str(field_value)
                lines.append(f"{field_name} = {value_str}")
            lines.append("")

        return "\n".join(lines)

    def to_env(self) -> str:
        """Export settings as shell environment variables."""
        lines = ["# gridview environment variables", ""]

        for section_name, section_data in self.model_dump().items():
            for field_name, field_value in section_data.items():
                env_name = f"GRIDVIEW_{section_name.upper()}__{field_name.upper()}"
                if isinstance(field_value, bool):
                    value_str = "true" if field_value else "false"
                else:
                    value_str = str(field_value).replace("\n", "\\n")
                lines.append(f'export {env_name}="{value_str}"')

        return "\n".join(lines)

    def show(self) -> str:
        """Format settings as a readable table."""
        lines = ["gridview configuration", "=" * 60, ""]

        for section_name, section_data in self.model_dump().items():
            lines.append(f"\n{section_name.capitalize()}")
            lines.append("-" * 40)
            for field_name, field_value in section_data.items():
                # Truncate long values
                value_str = repr(field_value) if isinstance(field_value, str) else str(field_value)
                if len(value_str) > 50:
                    value_str = value_str[:47] + "..."
                lines.append(f"  {field_name:20} = {value_str}")

        return "\n".join(lines)


@lru_cache(maxsize=1)
def get_settings() -> GridViewSettings:
    """Get the global settings instance (cached).

    Call clear_settings() to reload configuration.
    """
    return GridViewSettings()


def clear_settings() -> None:
    """Clear the cached settings to force reload."""
    get_settings.cache_clear()


def reload_settings() -> GridViewSettings:
    """Reload settings from all sources."""
    clear_settings()
    return get_settings()
