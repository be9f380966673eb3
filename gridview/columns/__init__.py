"""Grid column types and the column registry.

Columns are configured as Column instances, dicts or shorthand strings:

    columns=[
        "id",                                   # DataColumn(attribute="id")
        "created_at:datetime:Created",          # attribute:format:label
        {"type": "serial"},
        {"attribute": "email", "format": "email"},
        {"class": ActionColumn, "controller": "users"},
        CheckboxColumn(name="ids[]"),
    ]

Dict specs select their type with ``type`` (a registered tag) or
``class`` (a tag, class name or Column subclass). Specs without either
become the grid's default data column type.
"""

from __future__ import annotations

import re

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from ..exceptions import ColumnSpecError
from .action import DEFAULT_ICONS, ActionColumn
from .base import Column, resolve_options
from .checkbox import CheckboxColumn
from .data import DataColumn
from .radio import RadioButtonColumn
from .serial import SerialColumn


ColumnFactory = Callable[..., Column]

COLUMN_TYPES: dict[str, ColumnFactory] = {
    "data": DataColumn,
    "action": ActionColumn,
    "checkbox": CheckboxColumn,
    "radio": RadioButtonColumn,
    "serial": SerialColumn,
}

_SHORTHAND = re.compile(r"^([^:]+)(:(\w*))?(:(.*))?$")


def register_column(tag: str, factory: ColumnFactory) -> None:
    """Register a custom column type under ``tag``.

    ``factory`` receives the spec's options as keyword arguments and
    returns a Column, typically a Column subclass.
    """
    COLUMN_TYPES[tag] = factory


def get_column_factory(name: str | type) -> ColumnFactory:
    """Look up a column factory by tag, class name or class.

    Raises
    ------
    ColumnSpecError
        If ``name`` is neither a registered tag nor a Column subclass.
    """
    if isinstance(name, type):
        if issubclass(name, Column):
            return name
        raise ColumnSpecError(f"{name.__name__} is not a Column subclass", spec=name)
    if name in COLUMN_TYPES:
        return COLUMN_TYPES[name]
    for factory in COLUMN_TYPES.values():
        if getattr(factory, "__name__", None) == name:
            return factory
    raise ColumnSpecError(
        f"Unknown column type '{name}'. Registered types: {', '.join(COLUMN_TYPES)}", spec=name
    )


def parse_column_shorthand(text: str) -> dict[str, Any]:
    """Parse an ``attribute[:format[:label]]`` string into column options.

    Example:
        parse_column_shorthand("price:currency:Unit price")
        # {'attribute': 'price', 'format': 'currency', 'label': 'Unit price'}

    Raises
    ------
    ColumnSpecError
        If the text does not match the shorthand form.
    """
    match = _SHORTHAND.match(text)
    if match is None:
        raise ColumnSpecError(
            "The column must be specified in the format of "
            "'attribute', 'attribute:format' or 'attribute:format:label'",
            spec=text,
        )
    options: dict[str, Any] = {"attribute": match.group(1)}
    if match.group(3):
        options["format"] = match.group(3)
    if match.group(5) is not None:
        options["label"] = match.group(5)
    return options


def create_column(spec: Any, grid: Any = None, default_type: str | type = "data") -> Column:
    """Build a column from an instance, dict spec or shorthand string.

    Parameters
    ----------
    spec : Column, dict or str
        The column configuration.
    grid : GridView, optional
        Grid the column is bound to.
    default_type : str or type
        Column type for specs that name none.

    Raises
    ------
    ColumnSpecError
        If the spec is malformed or names an unknown type.
    """
    if isinstance(spec, Column):
        column = spec
    else:
        if isinstance(spec, str):
            options = parse_column_shorthand(spec)
        elif isinstance(spec, Mapping):
            options = dict(spec)
        else:
            raise ColumnSpecError(f"Unsupported column spec of type {type(spec).__name__}", spec=spec)

        type_name = options.pop("class", None) or options.pop("type", None) or default_type
        options.pop("type", None)
        factory = get_column_factory(type_name)
        try:
            column = factory(**options)
        except ValidationError as exc:
            raise ColumnSpecError(f"Invalid column configuration: {exc}", spec=spec) from exc

    if grid is not None:
        column.grid = grid
    return column


__all__ = [
    "COLUMN_TYPES",
    "DEFAULT_ICONS",
    "ActionColumn",
    "CheckboxColumn",
    "Column",
    "ColumnFactory",
    "DataColumn",
    "RadioButtonColumn",
    "SerialColumn",
    "create_column",
    "get_column_factory",
    "parse_column_shorthand",
    "register_column",
    "resolve_options",
]
