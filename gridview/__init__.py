"""gridview - Server-rendered HTML data tables.

Renders rows from a data provider as a Bootstrap-styled table with
sortable headers, filter inputs, per-row action buttons, selection
columns, a summary line and a pager.
"""

from .columns import (
    ActionColumn,
    CheckboxColumn,
    Column,
    DataColumn,
    RadioButtonColumn,
    SerialColumn,
    create_column,
    parse_column_shorthand,
    register_column,
)
from .config import (
    FormatSettings,
    GridViewSettings,
    LogSettings,
    MessageSettings,
    TableSettings,
    get_settings,
)
from .context import RenderContext, default_url_for
from .data import ArrayDataProvider, DataProvider, Paginator, as_data_provider, get_value
from .exceptions import (
    ColumnSpecError,
    ConfigurationError,
    FormatError,
    GridViewException,
    MissingDataProviderError,
    MissingGridError,
)
from .formatting import Formatter
from .grid import GridView, render_grid


__version__ = "1.0.0"

__all__ = [
    "ActionColumn",
    "ArrayDataProvider",
    "CheckboxColumn",
    "Column",
    "ColumnSpecError",
    "ConfigurationError",
    "DataColumn",
    "DataProvider",
    "FormatError",
    "FormatSettings",
    "Formatter",
    "GridView",
    "GridViewException",
    "GridViewSettings",
    "LogSettings",
    "MessageSettings",
    "MissingDataProviderError",
    "MissingGridError",
    "Paginator",
    "RadioButtonColumn",
    "RenderContext",
    "SerialColumn",
    "TableSettings",
    "__version__",
    "as_data_provider",
    "create_column",
    "default_url_for",
    "get_settings",
    "get_value",
    "parse_column_shorthand",
    "register_column",
    "render_grid",
]
