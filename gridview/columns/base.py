"""Base column model shared by every grid column type.

A column renders four kinds of cells: header, filter, data and footer.
Each ``render_*_cell`` method wraps the matching ``render_*_cell_content``
override point in its ``<th>``/``<td>`` with the configured attributes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import MissingGridError
from ..markup import tag


if TYPE_CHECKING:
    from ..grid import GridView


# Signature: (model, key, index, column) -> str
CellCallback = Callable[..., Any]

# Static attribute map, or (model, key, index, owner) -> attribute map
OptionsSource = dict[str, Any] | Callable[..., Mapping[str, Any] | None]


def resolve_options(source: OptionsSource | None, *args: Any) -> dict[str, Any]:
    """Resolve a static-or-computed attribute source into a fresh dict.

    Callables are invoked with ``args`` (typically model, key, index and
    the owning column or grid). The result is always a copy, so callers
    may modify it.
    """
    if source is None:
        return {}
    if callable(source):
        return dict(source(*args) or {})
    return dict(source)


class Column(BaseModel):
    """Base class of all grid columns.

    Attributes
    ----------
        visible: Columns with visible=False are dropped from the grid
        header: Header cell content (HTML); blank falls back to the label
        footer: Footer cell content (HTML)
        header_options: Attributes of the header ``<th>``
        content_options: Attributes of each data ``<td>``, or a callable
            (model, key, index, column) returning them
        filter_options: Attributes of the filter ``<td>``
        footer_options: Attributes of the footer ``<td>``
        options: Attributes of the column's ``<col>`` in the colgroup
        content: Callable (model, key, index, column) producing cell HTML
        grid: Owning GridView, set when the grid builds its columns

    Example:
        Column(header="Notes", content=lambda model, key, index, col: model["note"])
    """

    model_config = ConfigDict(
        extra="forbid",  # Catch typos in column specs
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    type: str = "column"
    visible: bool = True
    header: str | None = None
    footer: str | None = None
    header_options: dict[str, Any] = Field(default_factory=dict, alias="headerOptions")
    content_options: OptionsSource = Field(default_factory=dict, alias="contentOptions")
    filter_options: dict[str, Any] = Field(default_factory=dict, alias="filterOptions")
    footer_options: dict[str, Any] = Field(default_factory=dict, alias="footerOptions")
    options: dict[str, Any] = Field(default_factory=dict)
    content: CellCallback | None = None
    grid: Any = Field(default=None, exclude=True, repr=False)

    @property
    def column_id(self) -> str:
        """Short identifier used in log messages and errors."""
        return self.type

    def _require_grid(self) -> GridView:
        """Return the owning grid, failing fast when it is missing."""
        if self.grid is None:
            raise MissingGridError(
                f"{type(self).__name__} is not attached to a GridView", column=self.column_id
            )
        return self.grid

    # --- cells ---

    def render_header_cell(self) -> str:
        """Render the header cell."""
        return tag("th", self.render_header_cell_content(), self.header_options)

    def render_filter_cell(self) -> str:
        """Render the filter cell."""
        return tag("td", self.render_filter_cell_content(), self.filter_options)

    def render_data_cell(self, model: Any, key: Any, index: int) -> str:
        """Render a data cell.

        Parameters
        ----------
        model : Any
            The row record.
        key : Any
            The row key from the data provider.
        index : int
            Zero-based row index on the current page.
        """
        options = resolve_options(self.content_options, model, key, index, self)
        return tag("td", self.render_data_cell_content(model, key, index), options)

    def render_footer_cell(self) -> str:
        """Render the footer cell."""
        return tag("td", self.render_footer_cell_content(), self.footer_options)

    # --- override points ---

    def get_header_cell_label(self) -> str:
        """Return the header label used when no header is set."""
        return self._require_grid().empty_cell

    def render_header_cell_content(self) -> str:
        """Render the header content: the header, or the label when blank."""
        if self.header is not None and self.header.strip():
            return self.header
        return self.get_header_cell_label()

    def render_filter_cell_content(self) -> str:
        """Render the filter content. Base columns have no filter."""
        return self._require_grid().empty_cell

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        """Render the data content via ``content``, else the empty cell."""
        if self.content is not None:
            return str(self.content(model, key, index, self))
        return self._require_grid().empty_cell

    def render_footer_cell_content(self) -> str:
        """Render the footer content: the footer, or the empty cell."""
        if self.footer is not None and self.footer.strip():
            return self.footer
        return self._require_grid().empty_cell
