"""Row sources for the grid.

A DataProvider supplies the rows of the current page, a stable key per
row and, when paginated, the page metadata the summary, pager and
SerialColumn need.

- ArrayDataProvider: all rows at once (list of records, dict keyed by
  row key, column-oriented dict of lists, or a DataFrame-like object)
- Paginator: one page of a larger result set, plus pager links

Rows themselves are opaque records. ``get_value`` and ``row_fields``
read them without mutating them.
"""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

import dataclasses
import math

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from .log import debug, warn
from .markup import encode, render_tag_attributes, tag


if TYPE_CHECKING:
    from .context import RenderContext


KeySpec = str | Callable[[Any], Any] | None

_MISSING = object()


def get_value(model: Any, path: str | None, default: Any = None) -> Any:
    """Look up a dotted attribute path in a row record.

    Each segment is resolved against mappings by key, sequences by
    numeric index, and any other object by attribute. A miss anywhere
    along the path returns ``default``; this never raises.

    Example:
        get_value({"author": {"name": "Ann"}}, "author.name")  # 'Ann'
        get_value(user, "profile.email")
    """
    if path is None or model is None:
        return default
    if isinstance(model, Mapping) and path in model:
        return model[path]

    current = model
    for segment in path.split("."):
        if current is None:
            return default
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return default
        else:
            current = getattr(current, segment, _MISSING)
        if current is _MISSING:
            return default
    return current


def row_fields(model: Any) -> list[tuple[str, Any]]:
    """Return the ordered (name, value) pairs of a row record.

    Handles mappings, pydantic models, dataclasses and plain objects
    (public instance attributes). Anything else has no fields.
    """
    if isinstance(model, Mapping):
        return [(str(k), v) for k, v in model.items()]
    if isinstance(model, BaseModel):
        return [(name, getattr(model, name)) for name in type(model).model_fields]
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return [(f.name, getattr(model, f.name)) for f in dataclasses.fields(model)]
    if hasattr(model, "__dict__"):
        return [(k, v) for k, v in vars(model).items() if not k.startswith("_")]
    return []


def _resolve_key(model: Any, key: KeySpec, default: Any) -> Any:
    """Derive a row key from a field name or callable."""
    if key is None:
        return default
    if callable(key):
        return key(model)
    return get_value(model, key, default)


def _normalize_rows(data: Any) -> tuple[list[Any], list[Any] | None]:
    """Convert supported row containers into (rows, keys).

    Keys are None when rows are positional.
    """
    # pandas DataFrame (duck typing)
    if hasattr(data, "to_dict") and hasattr(data, "columns"):
        return list(data.to_dict(orient="records")), None

    if isinstance(data, Mapping):
        first_value = next(iter(data.values()), None)
        # Column-oriented: {"a": [1, 2], "b": [3, 4]}
        if isinstance(first_value, (list, tuple)) and all(
            isinstance(v, (list, tuple)) for v in data.values()
        ):
            columns = list(data.keys())
            num_rows = len(first_value)
            return [{col: data[col][i] for col in columns} for i in range(num_rows)], None
        # Single flat record: {"a": 1, "b": 2}
        if data and not any(isinstance(v, Mapping) or row_fields(v) for v in data.values()):
            return [dict(data)], None
        # Keyed rows: {key: record}
        return list(data.values()), list(data.keys())

    if data is None:
        return [], None
    return list(data), None


class DataProvider(ABC):
    """Abstract row source consumed by GridView.

    Implementations expose the current page of rows with their keys
    and, optionally, page metadata.
    """

    @abstractmethod
    def items(self) -> list[Any]:
        """Return the rows of the current page, in display order."""
        ...

    @abstractmethod
    def keys(self) -> list[Any]:
        """Return one key per row, aligned with ``items()``."""
        ...

    def count(self) -> int:
        """Return the number of rows on the current page."""
        return len(self.items())

    def has_pages(self) -> bool:
        """Return True when the rows are one page of a larger set."""
        return False

    @property
    def current_page(self) -> int:
        """Return the 1-based current page number."""
        return 1

    @property
    def per_page(self) -> int:
        """Return the page size (row count when not paginated)."""
        return self.count()

    def total(self) -> int:
        """Return the total number of rows across all pages."""
        return self.count()

    def links(self, context: RenderContext) -> str:  # noqa: ARG002
        """Render the pager. Providers without pages render nothing."""
        return ""

    def __len__(self) -> int:
        return self.count()


class ArrayDataProvider(DataProvider):
    """All rows held in memory, rendered on a single page.

    Parameters
    ----------
    rows : Any
        A list of records, a dict keyed by row key, a column-oriented
        dict of lists, or a DataFrame-like object.
    key : str or callable, optional
        Field name (dotted path allowed) or callable deriving each row's
        key. Defaults to list positions or dict keys.
    """

    def __init__(self, rows: Any = None, key: KeySpec = None) -> None:
        self._rows, keys = _normalize_rows(rows)
        defaults = keys if keys is not None else list(range(len(self._rows)))
        self._keys = [
            _resolve_key(row, key, default) for row, default in zip(self._rows, defaults)
        ]

    def items(self) -> list[Any]:
        return self._rows

    def keys(self) -> list[Any]:
        return self._keys


class Paginator(DataProvider):
    """One page of rows from a larger, length-aware result set.

    This mirrors a host framework's paginator: the host fetches the page
    and the total count; the grid only reads them.

    Parameters
    ----------
    items : Iterable
        Rows of the current page.
    total : int
        Total rows across all pages.
    per_page : int
        Page size.
    current_page : int
        1-based page number.
    key : str or callable, optional
        Field name or callable deriving each row's key. Defaults to the
        row's absolute position in the full result set.
    page_param : str, optional
        Query parameter carrying the page number in pager links.
        Defaults to ``TableSettings.page_param``.
    on_each_side : int
        Number of page links shown on each side of the current page.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        items: Iterable[Any],
        total: int,
        per_page: int,
        current_page: int = 1,
        key: KeySpec = None,
        page_param: str | None = None,
        on_each_side: int = 3,
    ) -> None:
        self._items = list(items)
        self._total = max(int(total), 0)
        self._per_page = int(per_page)
        self._current_page = max(int(current_page), 1)
        self.page_param = page_param
        self.on_each_side = on_each_side
        offset = (self._current_page - 1) * max(self._per_page, 0)
        self._keys = [
            _resolve_key(row, key, offset + i) for i, row in enumerate(self._items)
        ]

    @classmethod
    def from_rows(
        cls,
        rows: Any,
        page: int | str | None = 1,
        per_page: int = 20,
        key: KeySpec = None,
        page_param: str | None = None,
    ) -> Paginator:
        """Slice an in-memory row collection into one page.

        Out-of-range or malformed page numbers fall back to page 1.
        """
        all_rows, _ = _normalize_rows(rows)
        try:
            page_number = max(int(page or 1), 1)
        except (TypeError, ValueError):
            warn(f"Invalid page number {page!r}, using page 1")
            page_number = 1
        last_page = max(math.ceil(len(all_rows) / per_page), 1) if per_page > 0 else 1
        if page_number > last_page:
            debug(f"Page {page_number} beyond last page {last_page}, using page 1")
            page_number = 1
        start = (page_number - 1) * per_page
        page_rows = all_rows[start : start + per_page] if per_page > 0 else all_rows
        return cls(
            page_rows,
            total=len(all_rows),
            per_page=per_page,
            current_page=page_number,
            key=key,
            page_param=page_param,
        )

    def items(self) -> list[Any]:
        return self._items

    def keys(self) -> list[Any]:
        return self._keys

    def has_pages(self) -> bool:
        return self._per_page > 0 and self._total > self._per_page

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def per_page(self) -> int:
        return self._per_page

    @property
    def last_page(self) -> int:
        """Return the last page number (at least 1)."""
        if self._per_page < 1:
            return 1
        return max(math.ceil(self._total / self._per_page), 1)

    def total(self) -> int:
        return self._total

    def _page_window(self) -> list[int | None]:
        """Page numbers to link, with None marking an elided gap."""
        last = self.last_page
        window = range(
            max(self._current_page - self.on_each_side, 1),
            min(self._current_page + self.on_each_side, last) + 1,
        )
        pages: list[int | None] = []
        if window.start > 1:
            pages.append(1)
            if window.start > 2:
                pages.append(None)
        pages.extend(window)
        if window.stop - 1 < last:
            if window.stop < last:
                pages.append(None)
            pages.append(last)
        return pages

    def links(self, context: RenderContext) -> str:
        """Render Bootstrap-style pagination links.

        Returns an empty string when everything fits on one page.
        """
        if not self.has_pages():
            return ""

        settings = context.get_settings()
        messages = settings.messages
        page_param = self.page_param or settings.table.page_param

        def item(label: str, page: int | None, active: bool = False, disabled: bool = False) -> str:
            classes = ["page-item"]
            if active:
                classes.append("active")
            if disabled or page is None:
                classes.append("disabled")
                return tag("li", f'<span class="page-link">{label}</span>', {"class": classes})
            link_attrs = {"class": "page-link", "href": context.url_with(**{page_param: page})}
            if active:
                link_attrs["aria-current"] = "page"
            return tag("li", f"<a{render_tag_attributes(link_attrs)}>{label}</a>", {"class": classes})

        current = self._current_page
        parts = [item(messages.previous, current - 1, disabled=current <= 1)]
        for page in self._page_window():
            if page is None:
                parts.append(item("&hellip;", None))
            else:
                parts.append(item(encode(page), page, active=page == current))
        parts.append(item(messages.next, current + 1, disabled=current >= self.last_page))

        return tag("nav", tag("ul", "".join(parts), {"class": "pagination"}))


def as_data_provider(source: Any, key: KeySpec = None) -> DataProvider:
    """Wrap raw row containers in an ArrayDataProvider.

    DataProvider instances pass through unchanged.
    """
    if isinstance(source, DataProvider):
        return source
    return ArrayDataProvider(source, key=key)
