"""RadioButtonColumn: a radio button per row for single selection."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from .base import Column, OptionsSource, resolve_options
from .checkbox import input_value, render_input


class RadioButtonColumn(Column):
    """Column of radio buttons sharing one input name.

    Attributes
    ----------
        name: Input name shared by every radio button
        radio_options: Attributes of each radio button, or a callable
            (model, key, index, column) returning them
        css_class: Class set on each radio button
    """

    type: Literal["radio"] = "radio"
    name: str = "radioButtonSelection"
    radio_options: OptionsSource = Field(default_factory=dict, alias="radioOptions")
    css_class: str | None = Field(default=None, alias="cssClass")

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        if self.content is not None:
            return super().render_data_cell_content(model, key, index)
        options = resolve_options(self.radio_options, model, key, index, self)
        options.setdefault("value", input_value(key))
        if self.css_class is not None:
            options["class"] = self.css_class
        options["name"] = self.name
        return render_input("radio", options)
