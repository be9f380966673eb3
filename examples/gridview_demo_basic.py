"""Demo: A paginated, sortable grid with actions and selection.

Builds the second page of a small book catalog, renders it with serial
numbers, formatted prices, a boolean column with a filter dropdown,
row checkboxes and view/edit/delete buttons, and writes the HTML to
stdout.
"""

from datetime import date
from typing import Any

from gridview import (
    ActionColumn,
    CheckboxColumn,
    GridView,
    Paginator,
    RenderContext,
    SerialColumn,
)


BOOKS = [
    {"id": i, "title": f"Book {i}", "price": 9.5 + i, "in_stock": i % 3 != 0,
     "published": date(2020, 1, i)}
    for i in range(1, 26)
]

PER_PAGE = 10
PAGE = 2


def url_for(route: str, params: dict[str, Any]) -> str:
    """Map action routes to REST-style paths."""
    controller, _, action = route.partition(".")
    return f"/{controller}/{params['id']}/{action}"


start = (PAGE - 1) * PER_PAGE
page = Paginator(
    BOOKS[start : start + PER_PAGE],
    total=len(BOOKS),
    per_page=PER_PAGE,
    current_page=PAGE,
    key="id",
)

context = RenderContext(
    path="/books",
    query_params={"page": str(PAGE), "sort": "-price"},
    url_for=url_for,
)

grid = GridView(
    dataProvider=page,
    context=context,
    show_filters=True,
    columns=[
        SerialColumn(),
        CheckboxColumn(),
        "title:text:Title",
        {"attribute": "price", "format": ["currency", "EUR"]},
        {"attribute": "in_stock", "format": "boolean", "label": "In stock"},
        {"attribute": "published", "format": ["date", "d/m/Y"], "enableSorting": False},
        ActionColumn(controller="books"),
    ],
    caption="Catalog",
)

print(grid.render())
