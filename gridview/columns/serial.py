"""SerialColumn: 1-based row numbers, continuous across pages."""

from __future__ import annotations

from typing import Any, Literal

from .base import Column


class SerialColumn(Column):
    """Column showing the row's sequence number.

    On paginated providers the number continues from previous pages,
    so row 0 of page 3 with 20 rows per page shows 41.
    """

    type: Literal["serial"] = "serial"
    header: str | None = "#"

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        if self.content is not None:
            return super().render_data_cell_content(model, key, index)
        provider = self._require_grid().data_provider
        if provider.has_pages():
            per_page = provider.per_page
            offset = 0 if per_page < 1 else (provider.current_page - 1) * per_page
            return str(offset + index + 1)
        return str(index + 1)
