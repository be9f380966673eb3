"""Selection columns: a checkbox or radio button per row."""

from __future__ import annotations

import json

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field

from ..markup import tag
from .base import Column, OptionsSource, resolve_options


def input_value(key: Any) -> Any:
    """Return the value attribute for a row key; composite keys become JSON."""
    if isinstance(key, (Mapping, list, tuple)):
        return json.dumps(key)
    return key


def render_input(input_type: str, options: dict[str, Any]) -> str:
    """Render an ``<input>`` with ``type`` leading its attributes."""
    attrs: dict[str, Any] = {"type": input_type}
    attrs.update(options)
    attrs["type"] = input_type
    return tag("input", attributes=attrs)


class CheckboxColumn(Column):
    """Column of checkboxes for selecting rows.

    The header holds a select-all checkbox when ``multiple`` is set.
    Each row's checkbox carries the row key as its value.

    Attributes
    ----------
        name: Input name of the row checkboxes
        checkbox_options: Attributes of each checkbox, or a callable
            (model, key, index, column) returning them
        multiple: Whether to render the select-all header checkbox
        css_class: Class set on each row checkbox
    """

    type: Literal["checkbox"] = "checkbox"
    name: str = "selection[]"
    checkbox_options: OptionsSource = Field(default_factory=dict, alias="checkboxOptions")
    multiple: bool = True
    css_class: str | None = Field(default=None, alias="cssClass")

    def get_header_checkbox_name(self) -> str:
        """Derive the select-all checkbox name from ``name``.

        Example:
            "selection[]"  -> "selection_all"
            "sel[ids]"     -> "sel[ids_all]"
        """
        name = self.name
        if name.endswith("[]"):
            name = name[:-2]
        if name.endswith("]"):
            return name[:-1] + "_all]"
        return name + "_all"

    def render_header_cell_content(self) -> str:
        if self.header is not None or not self.multiple:
            return super().render_header_cell_content()
        return render_input(
            "checkbox", {"name": self.get_header_checkbox_name(), "class": "select-on-check-all"}
        )

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        if self.content is not None:
            return super().render_data_cell_content(model, key, index)
        options = resolve_options(self.checkbox_options, model, key, index, self)
        options.setdefault("value", input_value(key))
        if self.css_class is not None:
            options["class"] = self.css_class
        options["name"] = self.name
        return render_input("checkbox", options)
