"""Cell value formatters.

DataColumn.format selects one of these by tag, optionally with a
parameter: ``"datetime"`` or ``("datetime", "Y-m-d")``. Tags are
case-insensitive.

Every format HTML-escapes the values it interpolates, except ``raw``
and ``html`` where the caller vouches for the markup. Values that
cannot be formatted raise FormatError.
"""

from __future__ import annotations

import datetime as dt

from collections.abc import Callable
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

from .config import FormatSettings, MessageSettings
from .exceptions import ConfigurationError, FormatError
from .markup import encode


DEFAULT_PATTERN = "default"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "BRL": "R$",
    "MXN": "$",
    "COP": "$",
    "ARS": "$",
    "CLP": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "CHF": "CHF ",
    "RUB": "₽",
}


def normalize_format(fmt: str | tuple[str, Any] | list[Any] | None) -> tuple[str, Any]:
    """Split a format spec into a lower-cased tag and its parameter.

    Example:
        normalize_format("DateTime")             # ('datetime', 'default')
        normalize_format(["datetime", "Y-m-d"])  # ('datetime', 'Y-m-d')
    """
    if fmt is None or fmt == "":
        return "text", DEFAULT_PATTERN
    if isinstance(fmt, str):
        return fmt.lower(), DEFAULT_PATTERN
    if isinstance(fmt, (tuple, list)) and fmt:
        param = fmt[1] if len(fmt) > 1 and fmt[1] is not None else DEFAULT_PATTERN
        return str(fmt[0]).lower(), param
    raise ConfigurationError(f"Invalid format specification: {fmt!r}", fmt=fmt)


# --- PHP-style date patterns ("Y-m-d H:i:s") ---


def _twelve_hour(value: dt.datetime) -> int:
    return value.hour % 12 or 12


def _utc_offset(value: dt.datetime, separator: str = "") -> str:
    offset = value.utcoffset()
    if offset is None:
        return ""
    minutes = int(offset.total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}{separator}{minutes:02d}"


_PHP_DATE_TOKENS: dict[str, Callable[[dt.datetime], str]] = {
    "d": lambda v: f"{v.day:02d}",
    "D": lambda v: v.strftime("%a"),
    "j": lambda v: str(v.day),
    "l": lambda v: v.strftime("%A"),
    "N": lambda v: str(v.isoweekday()),
    "w": lambda v: str(v.isoweekday() % 7),
    "z": lambda v: str(v.timetuple().tm_yday - 1),
    "W": lambda v: f"{v.isocalendar()[1]:02d}",
    "F": lambda v: v.strftime("%B"),
    "m": lambda v: f"{v.month:02d}",
    "M": lambda v: v.strftime("%b"),
    "n": lambda v: str(v.month),
    "Y": lambda v: f"{v.year:04d}",
    "y": lambda v: f"{v.year % 100:02d}",
    "a": lambda v: "am" if v.hour < 12 else "pm",
    "A": lambda v: "AM" if v.hour < 12 else "PM",
    "g": lambda v: str(_twelve_hour(v)),
    "G": lambda v: str(v.hour),
    "h": lambda v: f"{_twelve_hour(v):02d}",
    "H": lambda v: f"{v.hour:02d}",
    "i": lambda v: f"{v.minute:02d}",
    "s": lambda v: f"{v.second:02d}",
    "u": lambda v: f"{v.microsecond:06d}",
    "v": lambda v: f"{v.microsecond // 1000:03d}",
    "e": lambda v: str(v.tzinfo or ""),
    "T": lambda v: v.strftime("%Z"),
    "O": _utc_offset,
    "P": lambda v: _utc_offset(v, ":"),
    "U": lambda v: str(int(v.timestamp())),
    "c": lambda v: v.isoformat(timespec="seconds"),
}


def format_php_date(value: dt.datetime, pattern: str) -> str:
    """Format a datetime with PHP ``date()`` pattern characters.

    Unknown characters are copied literally; a backslash escapes the
    next character.
    """
    out: list[str] = []
    escaped = False
    for char in pattern:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _PHP_DATE_TOKENS:
            out.append(_PHP_DATE_TOKENS[char](value))
        else:
            out.append(char)
    return "".join(out)


def format_date_pattern(value: dt.datetime | dt.date | dt.time, pattern: str) -> str:
    """Format with a strftime pattern (contains ``%``) or a PHP pattern."""
    if "%" in pattern:
        return value.strftime(pattern)
    if isinstance(value, dt.datetime):
        return format_php_date(value, pattern)
    if isinstance(value, dt.date):
        return format_php_date(dt.datetime.combine(value, dt.time()), pattern)
    return format_php_date(dt.datetime.combine(dt.date(1970, 1, 1), value), pattern)


class Formatter:
    """Turns raw cell values into display markup.

    Parameters
    ----------
    settings : FormatSettings
        Date, number and null display settings.
    messages : MessageSettings
        Localized strings (boolean labels).
    """

    def __init__(self, settings: FormatSettings, messages: MessageSettings) -> None:
        self.settings = settings
        self.messages = messages
        self._formats: dict[str, Callable[[Any, Any], str]] = {
            "text": self.as_text,
            "raw": self.as_raw,
            "html": self.as_html,
            "ntext": self.as_ntext,
            "date": self.as_date,
            "datetime": self.as_datetime,
            "time": self.as_time,
            "email": self.as_email,
            "url": self.as_url,
            "boolean": self.as_boolean,
            "currency": self.as_currency,
            "integer": self.as_integer,
            "decimal": self.as_decimal,
        }

    @property
    def formats(self) -> list[str]:
        """Names of the supported format tags."""
        return list(self._formats)

    def check_format(self, fmt: Any, column: str | None = None) -> tuple[str, Any]:
        """Validate a format spec and return its (tag, parameter).

        Raises
        ------
        ConfigurationError
            If the tag is unknown or its parameter is unusable.
        """
        name, param = normalize_format(fmt)
        if name not in self._formats:
            raise ConfigurationError(f"Unknown format '{name}'", fmt=name, column=column)
        if name == "decimal":
            self._decimal_places(param)
        return name, param

    def format(self, value: Any, fmt: Any = "text", column: str | None = None) -> str:
        """Format a value with the given format spec.

        Parameters
        ----------
        value : Any
            The raw cell value.
        fmt : str or tuple
            Format tag, or (tag, parameter).
        column : str, optional
            Column attribute, reported in FormatError.

        Raises
        ------
        ConfigurationError
            If the format is unknown.
        FormatError
            If the value cannot be formatted.
        """
        name, param = self.check_format(fmt, column=column)
        formatter = self._formats[name]
        if value is None and name != "raw":
            return self.settings.null_display
        try:
            return formatter(value, param)
        except FormatError as exc:
            if exc.column is None and column is not None:
                raise FormatError(exc.message, fmt=name, column=column, value=value) from exc
            raise

    # --- text ---

    def as_text(self, value: Any, _param: Any = None) -> str:
        """HTML-escaped plain text."""
        return encode(value)

    def as_raw(self, value: Any, _param: Any = None) -> str:
        """Value as-is, unescaped."""
        return "" if value is None else str(value)

    def as_html(self, value: Any, _param: Any = None) -> str:
        """Pre-escaped markup supplied by the caller."""
        return str(value)

    def as_ntext(self, value: Any, _param: Any = None) -> str:
        """Escaped text with newlines rendered as line breaks."""
        return encode(value).replace("\r\n", "\n").replace("\n", "<br>")

    # --- dates ---

    def _timezone(self) -> dt.tzinfo:
        try:
            return ZoneInfo(self.settings.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(
                f"Unknown timezone '{self.settings.timezone}'", timezone=self.settings.timezone
            ) from exc

    def to_datetime(self, value: Any, fmt: str = "datetime") -> dt.datetime:
        """Normalize a date-like value to a datetime.

        Accepts datetime/date objects, UNIX timestamps (numbers or numeric
        strings) and any string python-dateutil can parse.
        """
        if isinstance(value, dt.datetime):
            return value
        if isinstance(value, dt.date):
            return dt.datetime.combine(value, dt.time())
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return self._from_timestamp(float(value), fmt, value)
        if isinstance(value, str):
            text = value.strip()
            try:
                return self._from_timestamp(float(text), fmt, value)
            except ValueError:
                pass
            try:
                return date_parser.parse(text)
            except (ValueError, OverflowError) as exc:
                raise FormatError(f"Cannot parse date value: {exc}", fmt=fmt, value=value) from exc
        raise FormatError(
            f"Unsupported date value type '{type(value).__name__}'", fmt=fmt, value=value
        )

    def _from_timestamp(self, timestamp: float, fmt: str, value: Any) -> dt.datetime:
        try:
            return dt.datetime.fromtimestamp(timestamp, tz=self._timezone())
        except (OverflowError, OSError, ValueError) as exc:
            raise FormatError(f"Timestamp out of range: {exc}", fmt=fmt, value=value) from exc

    def as_date(self, value: Any, pattern: Any = DEFAULT_PATTERN) -> str:
        """Date only, ``date_format`` by default."""
        moment = self.to_datetime(value, "date").date()
        if pattern == DEFAULT_PATTERN:
            pattern = self.settings.date_format
        return encode(format_date_pattern(moment, str(pattern)))

    def as_datetime(self, value: Any, pattern: Any = DEFAULT_PATTERN) -> str:
        """Date and time, ``datetime_format`` by default."""
        moment = self.to_datetime(value, "datetime")
        if pattern == DEFAULT_PATTERN:
            pattern = self.settings.datetime_format
        return encode(format_date_pattern(moment, str(pattern)))

    def as_time(self, value: Any, pattern: Any = DEFAULT_PATTERN) -> str:
        """Time of day, ``time_format`` by default."""
        moment = value if isinstance(value, dt.time) else self.to_datetime(value, "time").time()
        if pattern == DEFAULT_PATTERN:
            pattern = self.settings.time_format
        return encode(format_date_pattern(moment, str(pattern)))

    # --- links ---

    def as_email(self, value: Any, _param: Any = None) -> str:
        """Mailto link; the address is escaped in both href and body."""
        address = encode(value)
        return f'<a href="mailto:{address}">{address}</a>'

    def as_url(self, value: Any, _param: Any = None) -> str:
        """Hyperlink to the value itself."""
        url = str(value)
        href = url if "://" in url or url.startswith(("/", "#", "?")) else f"http://{url}"
        return f'<a href="{encode(href)}">{encode(url)}</a>'

    def as_boolean(self, value: Any, _param: Any = None) -> str:
        """Localized Yes/No."""
        if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off", ""}:
            value = False
        return encode(self.messages.yes if value else self.messages.no)

    # --- numbers ---

    def _to_decimal(self, value: Any, fmt: str) -> Decimal:
        if isinstance(value, bool):
            raise FormatError("Boolean is not a number", fmt=fmt, value=value)
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise FormatError(f"Not a number: {value!r}", fmt=fmt, value=value) from exc
        if not number.is_finite():
            raise FormatError(f"Not a finite number: {value!r}", fmt=fmt, value=value)
        return number

    def _group(self, number: Decimal, decimals: int) -> str:
        """Round and group digits with the configured separators."""
        quantum = Decimal(1).scaleb(-decimals)
        # Enough precision for every integer digit plus the decimals
        context = Context(prec=max(number.adjusted(), 0) + decimals + 2)
        try:
            rounded = number.quantize(quantum, rounding=ROUND_HALF_UP, context=context)
        except InvalidOperation as exc:
            raise FormatError(f"Cannot round {number} to {decimals} places", value=number) from exc
        grouped = f"{rounded.copy_abs():,.{decimals}f}"
        integer, _, fraction = grouped.partition(".")
        integer = integer.replace(",", self.settings.thousands_separator)
        text = f"{integer}{self.settings.decimal_separator}{fraction}" if fraction else integer
        return f"-{text}" if rounded < 0 else text

    def as_currency(self, value: Any, currency: Any = DEFAULT_PATTERN) -> str:
        """Currency amount, ``currency_code`` by default.

        Known codes render with their symbol ("$1,234.50"); others with
        the code as prefix ("SEK 1,234.50").
        """
        code = self.settings.currency_code if currency == DEFAULT_PATTERN else str(currency).upper()
        number = self._to_decimal(value, "currency")
        decimals = 0 if code in {"JPY", "KRW", "CLP"} else self.settings.currency_decimals
        amount = self._group(number, decimals)
        symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
        if amount.startswith("-"):
            return encode(f"-{symbol}{amount[1:]}")
        return encode(f"{symbol}{amount}")

    def as_integer(self, value: Any, _param: Any = None) -> str:
        """Grouped whole number."""
        return encode(self._group(self._to_decimal(value, "integer"), 0))

    def as_decimal(self, value: Any, decimals: Any = DEFAULT_PATTERN) -> str:
        """Grouped number; the parameter sets the decimals (default 2)."""
        places = self._decimal_places(decimals)
        return encode(self._group(self._to_decimal(value, "decimal"), places))

    @staticmethod
    def _decimal_places(decimals: Any) -> int:
        if decimals == DEFAULT_PATTERN:
            return 2
        try:
            places = int(decimals)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Decimal places must be an integer: {decimals!r}", fmt="decimal"
            ) from exc
        if places < 0:
            raise ConfigurationError(f"Decimal places must not be negative: {places}", fmt="decimal")
        return places
