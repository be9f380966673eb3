"""Tests for configuration classes and layered loading.

Tests GridViewSettings and its sections, TOML files and environment
variable overrides.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from gridview.config import (
    FormatSettings,
    GridViewSettings,
    LogSettings,
    MessageSettings,
    TableSettings,
    clear_settings,
    get_settings,
    reload_settings,
)
from gridview.exceptions import ConfigurationError


class TestTableSettings:
    """Tests for TableSettings defaults and validation."""

    def test_defaults(self) -> None:
        """Defaults match the Bootstrap table layout."""
        settings = TableSettings()
        assert settings.layout == "{summary}\n{items}\n{pager}"
        assert settings.table_class == "table table-striped table-bordered"
        assert settings.empty_cell == "&nbsp;"
        assert settings.filter_position == "body"
        assert settings.show_on_empty is True
        assert settings.show_filters is False

    def test_invalid_filter_position(self) -> None:
        """Only header, body and footer are accepted."""
        with pytest.raises(ValueError):
            TableSettings(filter_position="middle")

    def test_sample_size_positive(self) -> None:
        """guess_sample_size must be at least 1."""
        with pytest.raises(ValueError):
            TableSettings(guess_sample_size=0)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GRIDVIEW_TABLE__* variables override defaults."""
        monkeypatch.setenv("GRIDVIEW_TABLE__FILTER_POSITION", "header")
        monkeypatch.setenv("GRIDVIEW_TABLE__SHOW_FOOTER", "true")
        settings = TableSettings()
        assert settings.filter_position == "header"
        assert settings.show_footer is True


class TestFormatSettings:
    """Tests for FormatSettings."""

    def test_currency_code_upper(self) -> None:
        """Currency codes are normalized to upper case."""
        assert FormatSettings(currency_code=" eur ").currency_code == "EUR"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """GRIDVIEW_FORMAT__* variables override defaults."""
        monkeypatch.setenv("GRIDVIEW_FORMAT__TIMEZONE", "Europe/Paris")
        assert FormatSettings().timezone == "Europe/Paris"


class TestMessageAndLogSettings:
    """Tests for MessageSettings and LogSettings."""

    def test_message_defaults(self) -> None:
        """English defaults."""
        messages = MessageSettings()
        assert messages.empty_text == "No results found."
        assert messages.summary == "Showing <b>{begin}-{end}</b> of <b>{totalCount}</b>."

    def test_message_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Messages are overridable through the environment."""
        monkeypatch.setenv("GRIDVIEW_MESSAGES__YES", "Sí")
        assert MessageSettings().yes == "Sí"

    def test_log_level_validated(self) -> None:
        """Unknown log levels are rejected."""
        with pytest.raises(ValueError):
            LogSettings(level="LOUD")


class TestGridViewSettings:
    """Tests for the aggregated settings and file layering."""

    def test_sections(self) -> None:
        """All sections are present."""
        settings = GridViewSettings()
        assert isinstance(settings.table, TableSettings)
        assert isinstance(settings.format, FormatSettings)
        assert isinstance(settings.messages, MessageSettings)
        assert isinstance(settings.log, LogSettings)

    def test_gridview_toml(self, tmp_path: Path) -> None:
        """./gridview.toml is loaded."""
        (tmp_path / "gridview.toml").write_text('[table]\nempty_cell = "-"\n', encoding="utf-8")
        assert GridViewSettings().table.empty_cell == "-"

    def test_pyproject_section(self, tmp_path: Path) -> None:
        """[tool.gridview] in pyproject.toml is loaded."""
        (tmp_path / "pyproject.toml").write_text(
            '[tool.gridview.format]\ncurrency_code = "gbp"\n', encoding="utf-8"
        )
        assert GridViewSettings().format.currency_code == "GBP"

    def test_file_precedence(self, tmp_path: Path) -> None:
        """gridview.toml overrides pyproject.toml."""
        (tmp_path / "pyproject.toml").write_text(
            '[tool.gridview.table]\nempty_cell = "a"\nsort_param = "order"\n', encoding="utf-8"
        )
        (tmp_path / "gridview.toml").write_text('[table]\nempty_cell = "b"\n', encoding="utf-8")
        settings = GridViewSettings()
        assert settings.table.empty_cell == "b"
        assert settings.table.sort_param == "order"

    def test_config_file_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """GRIDVIEW_CONFIG_FILE names an extra file."""
        path = tmp_path / "custom.toml"
        path.write_text('[messages]\nempty_text = "Nada"\n', encoding="utf-8")
        monkeypatch.setenv("GRIDVIEW_CONFIG_FILE", str(path))
        assert GridViewSettings().messages.empty_text == "Nada"

    def test_user_config(self, tmp_path: Path) -> None:
        """~/.config/gridview/config.toml is loaded."""
        config_dir = tmp_path / ".config" / "gridview"
        config_dir.mkdir(parents=True)
        (config_dir / "config.toml").write_text("[table]\nshow_header = false\n", encoding="utf-8")
        assert GridViewSettings().table.show_header is False

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """A broken TOML file is a configuration error."""
        (tmp_path / "gridview.toml").write_text("[table\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            GridViewSettings()

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Section env vars beat the same key in a TOML file."""
        (tmp_path / "gridview.toml").write_text(
            '[table]\nlayout = "{items}"\nempty_cell = "-"\n', encoding="utf-8"
        )
        monkeypatch.setenv("GRIDVIEW_TABLE__LAYOUT", "{summary}")
        monkeypatch.setenv("GRIDVIEW_TABLE__SHOW_FOOTER", "true")
        settings = GridViewSettings()
        assert settings.table.layout == "{summary}"
        assert settings.table.empty_cell == "-"
        assert settings.table.show_footer is True

    def test_explicit_kwargs_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Explicit arguments override environment variables."""
        monkeypatch.setenv("GRIDVIEW_FORMAT__CURRENCY_CODE", "EUR")
        monkeypatch.setenv("GRIDVIEW_FORMAT__TIMEZONE", "Europe/Paris")
        settings = GridViewSettings(format={"currency_code": "gbp"})
        assert settings.format.currency_code == "GBP"
        assert settings.format.timezone == "Europe/Paris"

    def test_explicit_kwargs_win(self, tmp_path: Path) -> None:
        """Explicit arguments override file values."""
        (tmp_path / "gridview.toml").write_text('[table]\nempty_cell = "-"\n', encoding="utf-8")
        assert GridViewSettings(table={"empty_cell": "x"}).table.empty_cell == "x"

    def test_to_toml(self) -> None:
        """to_toml() emits every section."""
        text = GridViewSettings().to_toml()
        assert "[table]" in text
        assert 'empty_cell = "&nbsp;"' in text
        assert "show_header = true" in text
        assert 'layout = "{summary}\\n{items}\\n{pager}"' in text

    def test_to_env(self) -> None:
        """to_env() emits prefixed variable names."""
        text = GridViewSettings().to_env()
        assert 'export GRIDVIEW_FORMAT__CURRENCY_CODE="USD"' in text
        assert 'export GRIDVIEW_TABLE__SHOW_HEADER="true"' in text

    def test_show(self) -> None:
        """show() lists sections."""
        text = GridViewSettings().show()
        assert "Table" in text
        assert "currency_code" in text


class TestSettingsCache:
    """Tests for the cached global settings."""

    def test_cached(self) -> None:
        """get_settings() returns the same instance."""
        assert get_settings() is get_settings()

    def test_clear_and_reload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """clear_settings() picks up new environment values."""
        first = get_settings()
        monkeypatch.setenv("GRIDVIEW_TABLE__EMPTY_CELL", "?")
        assert get_settings() is first
        clear_settings()
        assert get_settings().table.empty_cell == "?"
        assert reload_settings() is not first
