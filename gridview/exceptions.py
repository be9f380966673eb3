"""gridview exception hierarchy.

All gridview-specific exceptions inherit from GridViewException, enabling
catch-all handling while supporting specific error types.
"""

from __future__ import annotations

from typing import Any


class GridViewException(Exception):
    """Base exception for all gridview errors."""

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize gridview exception.

        Parameters
        ----------
        message : str
            Human-readable error message.
        **context : Any
            Additional context (column, spec, value, etc.).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Format exception with context."""
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ConfigurationError(GridViewException):
    """The grid or one of its columns is misconfigured.

    Raised at setup time. Not recoverable locally; surfaces to the caller.
    """


class ColumnSpecError(ConfigurationError):
    """A column specification could not be turned into a column.

    Raised for malformed shorthand strings ("attribute:format:label")
    and for unknown column types.
    """

    def __init__(self, message: str, spec: Any = None, **context: Any) -> None:
        """Initialize column spec error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        spec : Any, optional
            The offending column specification.
        **context : Any
            Additional context.
        """
        super().__init__(message, spec=spec, **context)
        self.spec = spec


class MissingDataProviderError(ConfigurationError):
    """The grid was constructed without a data provider."""


class MissingGridError(ConfigurationError):
    """A column needed its owning grid but was never bound to one."""

    def __init__(self, message: str, column: str | None = None, **context: Any) -> None:
        """Initialize missing grid error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        column : str, optional
            The column type that required the grid.
        **context : Any
            Additional context.
        """
        super().__init__(message, column=column, **context)
        self.column = column


class FormatError(GridViewException):
    """A cell value could not be formatted.

    Raised by the formatter, e.g. for an unparseable date or a
    non-numeric currency amount.
    """

    def __init__(
        self,
        message: str,
        fmt: str | None = None,
        column: str | None = None,
        value: Any = None,
        **context: Any,
    ) -> None:
        """Initialize format error.

        Parameters
        ----------
        message : str
            Human-readable error message.
        fmt : str, optional
            The format tag that failed (e.g. "datetime").
        column : str, optional
            The column attribute whose value failed.
        value : Any, optional
            The offending value.
        **context : Any
            Additional context.
        """
        super().__init__(message, fmt=fmt, column=column, value=value, **context)
        self.fmt = fmt
        self.column = column
        self.value = value
