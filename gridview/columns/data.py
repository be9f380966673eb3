"""DataColumn: displays one attribute of each row.

The value comes from ``value`` (an attribute path or a callable) or
falls back to ``attribute``, and is rendered through the grid's
Formatter. When sorting is enabled the header becomes a link that
toggles the sort query parameter, and the filter cell renders an input
or drop-down bound to the current query string.
"""

from __future__ import annotations

import re

from collections.abc import Callable
from typing import Any, Literal

from pydantic import Field

from ..data import get_value
from ..formatting import normalize_format
from ..markup import add_css_class, drop_down_list, encode, headline, tag
from .base import Column


# Header glyphs for the active sort direction
SORT_ASC_GLYPH = '<span class="sort-indicator" aria-hidden="true">&#9650;</span>'
SORT_DESC_GLYPH = (
    '<span class="sort-indicator" aria-hidden="true" '
    'style="display: inline-block; transform: rotate(180deg);">&#9650;</span>'
)

_NON_WORD = re.compile(r"\W+")


class DataColumn(Column):
    """Column bound to a row attribute.

    Attributes
    ----------
        attribute: Dotted attribute path read from each row
        label: Header label; defaults to a headline of the attribute
        encode_label: Whether to HTML-escape the label
        value: Attribute path or callable (model, key, index, column)
            overriding ``attribute`` as the value source
        format: Format tag, or (tag, parameter), see Formatter
        filter: None for an automatic control, a dict for a drop-down,
            a string of raw HTML, or False to disable the filter
        filter_attribute: Query parameter of the filter; defaults to
            ``attribute``
        filter_input_options: Attributes of the filter input or select
        enable_sorting: Whether the header links to the sort toggle
        sort_link_options: Attributes of the sort link

    Example:
        DataColumn(attribute="created_at", format=("datetime", "Y-m-d"))
        DataColumn(attribute="status", filter={"active": "Active", "banned": "Banned"})
    """

    type: Literal["data"] = "data"
    attribute: str | None = None
    label: str | None = None
    encode_label: bool = Field(default=True, alias="encodeLabel")
    value: str | Callable[..., Any] | None = None
    format: str | list[Any] | tuple[Any, ...] = "text"
    filter: str | dict[Any, Any] | bool | None = None
    filter_attribute: str | None = Field(default=None, alias="filterAttribute")
    filter_input_options: dict[str, Any] = Field(
        default_factory=lambda: {"class": "form-control"}, alias="filterInputOptions"
    )
    enable_sorting: bool = Field(default=True, alias="enableSorting")
    sort_link_options: dict[str, Any] = Field(default_factory=dict, alias="sortLinkOptions")

    @property
    def column_id(self) -> str:
        return self.attribute or self.type

    # --- header ---

    def get_header_cell_label(self) -> str:
        if self.label is not None:
            label = self.label
        elif self.attribute is not None:
            label = headline(self.attribute)
        else:
            return super().get_header_cell_label()
        return encode(label) if self.encode_label else label

    def render_header_cell_content(self) -> str:
        if self.header is not None or (self.label is None and self.attribute is None):
            return super().render_header_cell_content()
        label = self.get_header_cell_label()
        if self.attribute is not None and self.enable_sorting:
            return self._render_sort_link(label)
        return label

    def _render_sort_link(self, label: str) -> str:
        """Wrap the label in a link toggling ascending/descending order."""
        grid = self._require_grid()
        context = grid.context
        table = context.get_settings().table
        attribute = self.attribute
        current = context.param(table.sort_param)

        direction: str | None = None
        target = attribute
        if current == attribute:
            direction, target = "asc", f"-{attribute}"
        elif current == f"-{attribute}":
            direction, target = "desc", attribute

        options = dict(self.sort_link_options)
        # Changing the order restarts pagination
        options["href"] = context.url_with(**{table.sort_param: target, table.page_param: None})
        options["data-sort"] = target
        if direction is not None:
            add_css_class(options, direction)
            label += SORT_ASC_GLYPH if direction == "asc" else SORT_DESC_GLYPH
        return tag("a", label, options)

    # --- filter ---

    def render_filter_cell_content(self) -> str:
        if isinstance(self.filter, str):
            return self.filter

        attribute = self.filter_attribute or self.attribute
        if self.filter is False or attribute is None:
            return super().render_filter_cell_content()

        context = self._require_grid().context
        current = context.param(attribute)
        options = dict(self.filter_input_options)
        options.setdefault("id", "filter_" + _NON_WORD.sub("_", attribute))

        if isinstance(self.filter, dict):
            return drop_down_list(attribute, current, self.filter, options)

        fmt, _ = normalize_format(self.format)
        if fmt == "boolean":
            messages = context.get_settings().messages
            return drop_down_list(attribute, current, {1: messages.yes, 0: messages.no}, options)

        attrs: dict[str, Any] = {"type": "search", "name": attribute, "value": current}
        attrs.update(options)
        return tag("input", attributes=attrs)

    # --- data ---

    def get_data_cell_value(self, model: Any, key: Any, index: int) -> Any:
        """Return the raw (unformatted) value of this column for a row."""
        if self.value is not None:
            if callable(self.value):
                return self.value(model, key, index, self)
            return get_value(model, self.value)
        if self.attribute is not None:
            return get_value(model, self.attribute)
        return None

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        if self.content is not None:
            return super().render_data_cell_content(model, key, index)
        value = self.get_data_cell_value(model, key, index)
        return self._require_grid().formatter.format(value, self.format, column=self.column_id)
