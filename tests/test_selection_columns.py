"""Tests for CheckboxColumn, RadioButtonColumn and SerialColumn."""

from __future__ import annotations

from typing import Any

import pytest

from gridview import (
    CheckboxColumn,
    GridView,
    MissingGridError,
    Paginator,
    RadioButtonColumn,
    SerialColumn,
)


def bind(column: Any, data_provider: Any = None) -> Any:
    """Attach a column to a grid and return it."""
    grid = GridView(data_provider=data_provider or [{"id": 1}], columns=[column])
    return grid.columns[0]


class TestCheckboxColumn:
    """Tests for CheckboxColumn."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("selection[]", "selection_all"),
            ("sel", "sel_all"),
            ("sel[x]", "sel[x_all]"),
            ("sel[x][]", "sel[x_all]"),
        ],
    )
    def test_header_checkbox_name(self, name: str, expected: str) -> None:
        """The select-all name is derived from the input name."""
        assert CheckboxColumn(name=name).get_header_checkbox_name() == expected

    def test_header_select_all(self) -> None:
        """The header holds a select-all checkbox."""
        column = bind(CheckboxColumn())
        assert column.render_header_cell() == (
            '<th><input type="checkbox" name="selection_all" class="select-on-check-all"></th>'
        )

    def test_header_single(self) -> None:
        """Without multiple the header is the empty cell."""
        assert bind(CheckboxColumn(multiple=False)).render_header_cell() == "<th>&nbsp;</th>"

    def test_data_cell(self) -> None:
        """Each row checkbox carries its key."""
        column = bind(CheckboxColumn())
        assert column.render_data_cell_content({}, 7, 0) == (
            '<input type="checkbox" value="7" name="selection[]">'
        )

    def test_composite_key_json(self) -> None:
        """Composite keys are JSON-encoded."""
        column = bind(CheckboxColumn())
        html = column.render_data_cell_content({}, {"a": 1, "b": 2}, 0)
        assert 'value="{&quot;a&quot;: 1, &quot;b&quot;: 2}"' in html

    def test_checkbox_options_callable(self) -> None:
        """checkboxOptions may be computed per row; cssClass overrides class."""
        column = bind(
            CheckboxColumn(
                checkboxOptions=lambda model, key, index, col: {"checked": model["on"], "value": "x"},
                cssClass="pick",
            )
        )
        assert column.render_data_cell_content({"on": True}, 1, 0) == (
            '<input type="checkbox" checked value="x" class="pick" name="selection[]">'
        )

    def test_content_callback_wins(self) -> None:
        """content replaces the checkbox."""
        column = bind(CheckboxColumn(content=lambda *a: "custom"))
        assert column.render_data_cell_content({}, 1, 0) == "custom"


class TestRadioButtonColumn:
    """Tests for RadioButtonColumn."""

    def test_data_cell(self) -> None:
        """Each row radio shares the name and carries its key."""
        column = bind(RadioButtonColumn())
        assert column.render_data_cell_content({}, 4, 0) == (
            '<input type="radio" value="4" name="radioButtonSelection">'
        )

    def test_options(self) -> None:
        """radioOptions and cssClass apply."""
        column = bind(RadioButtonColumn(radioOptions={"disabled": True}, css_class="r", name="pick"))
        assert column.render_data_cell_content({}, 4, 0) == (
            '<input type="radio" disabled value="4" class="r" name="pick">'
        )

    def test_header_empty(self) -> None:
        """The header is the empty cell."""
        assert bind(RadioButtonColumn()).render_header_cell() == "<th>&nbsp;</th>"


class TestSerialColumn:
    """Tests for SerialColumn."""

    def test_header(self) -> None:
        """The header is #."""
        assert bind(SerialColumn()).render_header_cell() == "<th>#</th>"

    def test_unpaginated(self) -> None:
        """Unpaginated numbering starts at 1."""
        column = bind(SerialColumn())
        assert column.render_data_cell_content({}, 0, 0) == "1"
        assert column.render_data_cell_content({}, 0, 4) == "5"

    def test_paginated_offset(self) -> None:
        """Numbering continues across pages."""
        pager = Paginator([{}] * 20, total=100, per_page=20, current_page=3)
        column = bind(SerialColumn(), pager)
        assert column.render_data_cell_content({}, 0, 0) == "41"

    def test_zero_page_size(self) -> None:
        """A page size below 1 means no offset."""
        pager = Paginator([{}], total=5, per_page=0, current_page=3)
        column = bind(SerialColumn(), pager)
        assert column.render_data_cell_content({}, 0, 2) == "3"

    def test_requires_grid(self) -> None:
        """Serial numbers need the grid's data provider."""
        with pytest.raises(MissingGridError):
            SerialColumn().render_data_cell_content({}, 0, 0)
