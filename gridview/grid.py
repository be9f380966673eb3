"""GridView: renders rows from a data provider as an HTML table.

The grid owns its columns, asks the data provider for the current page
of rows and delegates every cell to its column. Everything request
specific (current query string, URL builder, settings) comes from the
RenderContext.

Usage:
    from gridview import GridView, RenderContext

    grid = GridView(
        data_provider=[{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bob"}],
        columns=[{"type": "serial"}, "name", {"type": "action", "controller": "users"}],
        context=RenderContext(path="/users", query_params={"sort": "name"}),
    )
    html = grid.render()
"""

from __future__ import annotations

import datetime as dt
import enum
import json
import math
import re
import uuid

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .columns import Column, DataColumn, create_column, resolve_options
from .columns.base import OptionsSource
from .config import FilterPosition, GridViewSettings
from .context import RenderContext
from .data import DataProvider, KeySpec, as_data_provider, row_fields
from .exceptions import FormatError, MissingDataProviderError
from .formatting import Formatter
from .log import debug, log_cell_error
from .markup import encode, tag


# Layout tokens such as {summary} or {items}
_SECTION_TOKEN = re.compile(r"\{(\w+)\}")

_SCALAR_TYPES = (str, int, float, bool, Decimal, dt.date, dt.time, enum.Enum, uuid.UUID)


def _generate_grid_id() -> str:
    """Generate a unique container id."""
    return f"grid-{uuid.uuid4().hex[:8]}"


def _is_displayable(value: Any) -> bool:
    """Check whether an inferred column value can be shown as text."""
    if value is None or isinstance(value, _SCALAR_TYPES):
        return True
    if isinstance(value, (Mapping, list, tuple, set, frozenset, bytes)):
        return False
    return type(value).__str__ is not object.__str__


def _key_attribute(key: Any) -> str:
    """Serialize a row key for the ``data-key`` attribute."""
    if isinstance(key, (Mapping, list, tuple)):
        return json.dumps(key)
    return str(key)


class GridView(BaseModel):
    """A server-rendered data table.

    Attributes
    ----------
        data_provider: DataProvider, or raw rows wrapped in an ArrayDataProvider
        columns: Column instances, dict specs or "attribute:format:label"
            strings; inferred from the rows when empty
        key: Row key field or callable, used when wrapping raw rows
        layout: Section layout; defaults to TableSettings.layout
        caption: Table caption (HTML)
        options: Container ``<div>`` attributes; ``id`` is generated
        table_options: ``<table>`` attributes
        row_options: Attributes of each body row, or a callable
            (model, key, index, grid) returning them
        empty_text: HTML shown without rows; False disables it
        empty_text_options: Attributes of the empty text; ``tag`` selects
            the element (default div)
        summary: Summary template; "" disables the summary
        data_column_type: Column type for specs that name none
        context: Request context (query string, URL builder)
        settings: Settings override; defaults to the context's settings
        formatter: Cell value formatter; built from settings when omitted
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    data_provider: Any = Field(default=None, alias="dataProvider")
    columns: list[Any] = Field(default_factory=list)
    key: KeySpec = None
    layout: str | None = None
    caption: str | None = None
    caption_options: dict[str, Any] = Field(default_factory=dict, alias="captionOptions")
    options: dict[str, Any] = Field(default_factory=dict)
    table_options: dict[str, Any] | None = Field(default=None, alias="tableOptions")
    header_row_options: dict[str, Any] = Field(default_factory=dict, alias="headerRowOptions")
    footer_row_options: dict[str, Any] = Field(default_factory=dict, alias="footerRowOptions")
    filter_row_options: dict[str, Any] = Field(
        default_factory=lambda: {"class": "filters"}, alias="filterRowOptions"
    )
    row_options: OptionsSource = Field(default_factory=dict, alias="rowOptions")
    empty_text: Any = Field(default=None, alias="emptyText")
    empty_text_options: dict[str, Any] = Field(
        default_factory=lambda: {"class": "empty"}, alias="emptyTextOptions"
    )
    empty_cell: str | None = Field(default=None, alias="emptyCell")
    show_header: bool | None = Field(default=None, alias="showHeader")
    show_footer: bool | None = Field(default=None, alias="showFooter")
    show_filters: bool | None = Field(default=None, alias="showFilters")
    show_on_empty: bool | None = Field(default=None, alias="showOnEmpty")
    filter_position: FilterPosition | None = Field(default=None, alias="filterPosition")
    summary: str | None = None
    summary_options: dict[str, Any] = Field(
        default_factory=lambda: {"class": "summary"}, alias="summaryOptions"
    )
    data_column_type: str | type = Field(default="data", alias="dataColumnType")
    context: RenderContext = Field(default_factory=RenderContext)
    settings: GridViewSettings | None = Field(default=None, repr=False)
    formatter: Formatter | None = Field(default=None, exclude=True, repr=False)

    @model_validator(mode="after")
    def init_grid(self) -> GridView:
        """Resolve defaults from settings and build the columns."""
        if self.data_provider is None:
            raise MissingDataProviderError("GridView requires a data_provider")
        self.data_provider = as_data_provider(self.data_provider, key=self.key)

        if self.settings is None:
            self.settings = self.context.get_settings()
        if self.context.settings is not self.settings:
            self.context = self.context.model_copy(update={"settings": self.settings})

        table = self.settings.table
        if self.layout is None:
            self.layout = table.layout
        if self.empty_cell is None:
            self.empty_cell = table.empty_cell
        if self.empty_text is None:
            self.empty_text = self.settings.messages.empty_text
        if self.show_header is None:
            self.show_header = table.show_header
        if self.show_footer is None:
            self.show_footer = table.show_footer
        if self.show_filters is None:
            self.show_filters = table.show_filters
        if self.show_on_empty is None:
            self.show_on_empty = table.show_on_empty
        if self.filter_position is None:
            self.filter_position = table.filter_position
        if self.table_options is None:
            self.table_options = {"class": table.table_class}

        options = {"id": _generate_grid_id()}
        options.update(self.options)
        options.setdefault("class", table.container_class)
        self.options = options

        if self.formatter is None:
            self.formatter = Formatter(self.settings.format, self.settings.messages)
        self.init_columns()
        return self

    # --- columns ---

    def guess_columns(self) -> list[dict[str, Any]]:
        """Infer data columns from the rows.

        Takes the union of displayable fields over the first
        ``guess_sample_size`` rows, in first-seen order.
        """
        sample = self.data_provider.items()[: self.settings.table.guess_sample_size]
        names: dict[str, None] = {}
        for model in sample:
            for name, value in row_fields(model):
                if _is_displayable(value):
                    names.setdefault(name)
        return [{"attribute": name} for name in names]

    def init_columns(self) -> None:
        """Build the column objects, dropping invisible ones."""
        if not self.columns:
            self.columns = self.guess_columns()
            debug(f"Inferred columns: {[c['attribute'] for c in self.columns]}")

        columns: list[Column] = []
        for spec in self.columns:
            column = create_column(spec, grid=self, default_type=self.data_column_type)
            if isinstance(column, DataColumn):
                self.formatter.check_format(column.format, column=column.column_id)
            if column.visible:
                columns.append(column)
        self.columns = columns

    # --- rendering ---

    def render(self) -> str:
        """Render the complete grid."""
        if self.data_provider.count() == 0 and not self.show_on_empty:
            content = self.render_empty()
        else:
            content = _SECTION_TOKEN.sub(self._replace_section, self.layout)
        return tag("div", content, self.options)

    def _replace_section(self, match: re.Match[str]) -> str:
        content = self.render_section(match.group(1))
        return match.group(0) if content is None else content

    def render_section(self, name: str) -> str | None:
        """Render a named layout section.

        Returns None when the section is not supported, so the token is
        kept as-is.
        """
        renderer = {
            "summary": self.render_summary,
            "items": self.render_items,
            "pager": self.render_pager,
            "caption": self.render_caption,
            "errors": self.render_errors,
        }.get(name)
        return renderer() if renderer is not None else None

    def render_summary(self) -> str:
        """Render the "Showing x-y of z." summary."""
        provider = self.data_provider
        count = provider.count()
        if count <= 0 or self.summary == "":
            return ""

        if provider.has_pages():
            total = provider.total()
            page = provider.current_page
            per_page = provider.per_page
            begin = (page - 1) * per_page + 1
            end = begin + count - 1
            begin = min(begin, end)
            page_count = math.ceil(total / per_page) if per_page > 0 else 1
        else:
            begin, end, total = 1, count, count
            page, page_count = 1, 1

        template = self.summary if self.summary is not None else self.settings.messages.summary
        values = {
            "begin": begin,
            "end": end,
            "count": count,
            "totalCount": total,
            "page": page,
            "pageCount": page_count,
        }
        content = _SECTION_TOKEN.sub(
            lambda m: str(values[m.group(1)]) if m.group(1) in values else m.group(0), template
        )
        options = dict(self.summary_options)
        tag_name = options.pop("tag", "div")
        return tag(tag_name, content, options)

    def render_errors(self) -> str:
        """Render filter validation errors. Filters are not validated here."""
        return ""

    def render_pager(self) -> str:
        """Render the pager, or "" when everything fits on one page."""
        if not self.data_provider.has_pages():
            return ""
        return self.data_provider.links(self.context)

    def render_empty(self) -> str:
        """Render the text shown when there are no rows."""
        if self.empty_text is False:
            return ""
        options = dict(self.empty_text_options)
        tag_name = options.pop("tag", "div")
        return tag(tag_name, str(self.empty_text), options)

    def render_caption(self) -> str:
        if self.caption is None:
            return ""
        return tag("caption", self.caption, self.caption_options)

    def render_column_group(self) -> str:
        """Render a ``<colgroup>`` when any column sets ``options``."""
        if not any(column.options for column in self.columns):
            return ""
        cols = "\n".join(tag("col", attributes=column.options) for column in self.columns)
        return f"<colgroup>{cols}</colgroup>"

    def render_items(self) -> str:
        """Render the table."""
        parts = [
            self.render_caption(),
            self.render_column_group(),
            self.render_table_header() if self.show_header else "",
            self.render_table_body(),
            self.render_table_footer() if self.show_footer else "",
        ]
        content = "\n".join(part for part in parts if part)
        return tag("table", f"\n{content}\n", self.table_options)

    def render_filters(self) -> str:
        """Render the filter row."""
        cells = "".join(column.render_filter_cell() for column in self.columns)
        return tag("tr", cells, self.filter_row_options)

    def render_table_header(self) -> str:
        cells = "".join(column.render_header_cell() for column in self.columns)
        content = tag("tr", cells, self.header_row_options)
        if self.show_filters:
            if self.filter_position == "header":
                content = self.render_filters() + content
            elif self.filter_position == "body":
                content = content + self.render_filters()
        return f"<thead>\n{content}\n</thead>"

    def render_table_footer(self) -> str:
        cells = "".join(column.render_footer_cell() for column in self.columns)
        content = tag("tr", cells, self.footer_row_options)
        if self.show_filters and self.filter_position == "footer":
            content += self.render_filters()
        return f"<tfoot>\n{content}\n</tfoot>"

    def render_table_body(self) -> str:
        provider = self.data_provider
        rows = [
            self.render_table_row(model, key, index)
            for index, (model, key) in enumerate(zip(provider.items(), provider.keys()))
        ]
        if not rows and self.empty_text is not False:
            colspan = len(self.columns)
            return f'<tbody>\n<tr><td colspan="{colspan}">{self.render_empty()}</td></tr>\n</tbody>'
        return "<tbody>\n" + "\n".join(rows) + "\n</tbody>"

    def render_table_row(self, model: Any, key: Any, index: int) -> str:
        """Render one body row.

        Parameters
        ----------
        model : Any
            The row record.
        key : Any
            The row key; rendered as ``data-key`` (JSON when composite).
        index : int
            Zero-based row index on the current page.
        """
        cells = "".join(self.render_data_cell(column, model, key, index) for column in self.columns)
        options = resolve_options(self.row_options, model, key, index, self)
        options["data-key"] = _key_attribute(key)
        return tag("tr", cells, options)

    def render_data_cell(self, column: Column, model: Any, key: Any, index: int) -> str:
        """Render one data cell, isolating value formatting failures."""
        try:
            return column.render_data_cell(model, key, index)
        except FormatError as exc:
            if self.settings.table.strict_format:
                raise
            log_cell_error(column.column_id, key, index, exc)
            placeholder = (
                f'<span class="not-set" title="{encode(exc.message)}">'
                f"{encode(self.settings.messages.invalid_value)}</span>"
            )
            options = resolve_options(column.content_options, model, key, index, column)
            return tag("td", placeholder, options)

    def __str__(self) -> str:
        return self.render()

    def __html__(self) -> str:
        return self.render()


def render_grid(data_provider: Any, columns: list[Any] | None = None, **options: Any) -> str:
    """Build a GridView and render it in one call.

    Example:
        html = render_grid(rows, ["id", "name", "email:email"], caption="Users")
    """
    return GridView(data_provider=data_provider, columns=columns or [], **options).render()
