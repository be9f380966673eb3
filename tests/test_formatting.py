"""Tests for the cell value Formatter."""

from __future__ import annotations

import datetime as dt

from decimal import Decimal

import pytest

from gridview.config import FormatSettings, MessageSettings
from gridview.exceptions import ConfigurationError, FormatError
from gridview.formatting import Formatter, format_php_date, normalize_format


@pytest.fixture
def formatter() -> Formatter:
    """Formatter with default settings."""
    return Formatter(FormatSettings(), MessageSettings())


class TestNormalizeFormat:
    """Tests for normalize_format()."""

    def test_string(self) -> None:
        """Tags are lower-cased with the default parameter."""
        assert normalize_format("DateTime") == ("datetime", "default")

    def test_pair(self) -> None:
        """Lists and tuples carry a parameter."""
        assert normalize_format(["date", "Y-m-d"]) == ("date", "Y-m-d")
        assert normalize_format(("currency",)) == ("currency", "default")

    def test_empty_means_text(self) -> None:
        """None and "" mean text."""
        assert normalize_format(None) == ("text", "default")
        assert normalize_format("") == ("text", "default")

    def test_invalid(self) -> None:
        """Other shapes are configuration errors."""
        with pytest.raises(ConfigurationError):
            normalize_format(42)  # type: ignore[arg-type]


class TestTextFormats:
    """Tests for text, raw, html and ntext."""

    def test_text_escapes(self, formatter: Formatter) -> None:
        """text escapes markup."""
        assert formatter.format("<b>x</b>") == "&lt;b&gt;x&lt;/b&gt;"

    def test_raw_and_html_pass_through(self, formatter: Formatter) -> None:
        """raw and html do not escape."""
        assert formatter.format("<b>x</b>", "raw") == "<b>x</b>"
        assert formatter.format("<b>x</b>", "html") == "<b>x</b>"

    def test_ntext(self, formatter: Formatter) -> None:
        """ntext turns newlines into line breaks."""
        assert formatter.format("a\n<b>", "ntext") == "a<br>&lt;b&gt;"

    def test_null_display(self) -> None:
        """None renders the configured null display."""
        formatter = Formatter(FormatSettings(null_display="<i>n/a</i>"), MessageSettings())
        assert formatter.format(None, "currency") == "<i>n/a</i>"

    def test_unknown_format(self, formatter: Formatter) -> None:
        """Unknown tags are configuration errors with context."""
        with pytest.raises(ConfigurationError) as exc_info:
            formatter.format("x", "bogus", column="name")
        assert exc_info.value.fmt == "bogus"
        assert exc_info.value.column == "name"

    def test_formats_listing(self, formatter: Formatter) -> None:
        """All built-in tags are listed."""
        assert {"text", "datetime", "currency", "boolean"} <= set(formatter.formats)


class TestDateFormats:
    """Tests for date, datetime and time."""

    def test_date_default(self, formatter: Formatter) -> None:
        """Dates use date_format by default."""
        assert formatter.format(dt.date(2024, 3, 5), "date") == "2024-03-05"

    def test_datetime_default(self, formatter: Formatter) -> None:
        """Datetimes use datetime_format by default."""
        value = dt.datetime(2024, 3, 5, 14, 7, 9)
        assert formatter.format(value, "datetime") == "2024-03-05 14:07:09"

    def test_php_pattern(self, formatter: Formatter) -> None:
        """PHP date() patterns are supported."""
        value = dt.datetime(2024, 3, 5, 14, 7)
        assert formatter.format(value, ("datetime", "d/m/Y g:i A")) == "05/03/2024 2:07 PM"

    def test_strftime_pattern(self, formatter: Formatter) -> None:
        """Patterns containing % use strftime."""
        assert formatter.format(dt.date(2024, 3, 5), ("date", "%d.%m.%Y")) == "05.03.2024"

    def test_string_values_parsed(self, formatter: Formatter) -> None:
        """Date strings are parsed."""
        assert formatter.format("2024-03-05T10:00:00", "date") == "2024-03-05"

    def test_timestamp(self, formatter: Formatter) -> None:
        """UNIX timestamps render in the configured timezone."""
        assert formatter.format(0, "datetime") == "1970-01-01 00:00:00"
        assert formatter.format("86400", "date") == "1970-01-02"

    def test_timestamp_timezone(self) -> None:
        """The timezone setting shifts timestamps."""
        formatter = Formatter(FormatSettings(timezone="Asia/Tokyo"), MessageSettings())
        assert formatter.format(0, ("datetime", "H:i P")) == "09:00 +09:00"

    def test_time(self, formatter: Formatter) -> None:
        """Times use time_format by default."""
        assert formatter.format(dt.time(8, 30), "time") == "08:30:00"

    def test_unparseable_date(self, formatter: Formatter) -> None:
        """Garbage raises FormatError."""
        with pytest.raises(FormatError):
            formatter.format("not a date", "date")

    def test_unsupported_type(self, formatter: Formatter) -> None:
        """Unsupported value types raise FormatError."""
        with pytest.raises(FormatError):
            formatter.format([1, 2], "datetime")

    def test_invalid_timezone(self) -> None:
        """An unknown timezone is a configuration error."""
        formatter = Formatter(FormatSettings(timezone="Nowhere/Land"), MessageSettings())
        with pytest.raises(ConfigurationError):
            formatter.format(0, "datetime")


class TestPhpDate:
    """Tests for format_php_date()."""

    def test_escape(self) -> None:
        """Backslash escapes pattern characters."""
        value = dt.datetime(2024, 1, 2)
        assert format_php_date(value, r"Y \Y") == "2024 Y"

    def test_literal_characters(self) -> None:
        """Non-token characters are copied."""
        value = dt.datetime(2024, 1, 2, 3, 4, 5)
        assert format_php_date(value, "H:i:s, j-n-y") == "03:04:05, 2-1-24"


class TestLinksAndBoolean:
    """Tests for email, url and boolean."""

    def test_email(self, formatter: Formatter) -> None:
        """Email renders a mailto link."""
        assert formatter.format("a@b.c", "email") == '<a href="mailto:a@b.c">a@b.c</a>'

    def test_email_escaped(self, formatter: Formatter) -> None:
        """Email addresses are escaped in href and text."""
        html = formatter.format('x"><script>@b.c', "email")
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_url(self, formatter: Formatter) -> None:
        """URLs without a scheme get http://."""
        assert formatter.format("example.com", "url") == (
            '<a href="http://example.com">example.com</a>'
        )
        assert formatter.format("https://x.io/?a=1&b=2", "url") == (
            '<a href="https://x.io/?a=1&amp;b=2">https://x.io/?a=1&amp;b=2</a>'
        )

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(True, "Yes"), (False, "No"), (1, "Yes"), (0, "No"), ("0", "No"), ("false", "No"), ("y", "Yes")],
    )
    def test_boolean(self, formatter: Formatter, value: object, expected: str) -> None:
        """Truthiness maps to localized Yes/No."""
        assert formatter.format(value, "boolean") == expected


class TestNumberFormats:
    """Tests for currency, integer and decimal."""

    def test_currency_default(self, formatter: Formatter) -> None:
        """Default currency is USD with two decimals."""
        assert formatter.format(1234.5, "currency") == "$1,234.50"

    def test_currency_negative(self, formatter: Formatter) -> None:
        """The sign precedes the symbol."""
        assert formatter.format(-5, "currency") == "-$5.00"

    def test_currency_code_parameter(self, formatter: Formatter) -> None:
        """A code parameter picks the currency."""
        assert formatter.format(1234.5, ("currency", "eur")) == "€1,234.50"
        assert formatter.format(1234.5, ("currency", "JPY")) == "¥1,235"

    def test_currency_unknown_code(self, formatter: Formatter) -> None:
        """Unknown codes are used as a prefix."""
        assert formatter.format("10", ("currency", "SEK")) == "SEK 10.00"

    def test_currency_separators(self) -> None:
        """Separators come from settings."""
        settings = FormatSettings(
            currency_code="eur", decimal_separator=",", thousands_separator="."
        )
        formatter = Formatter(settings, MessageSettings())
        assert formatter.format(Decimal("1234567.891"), "currency") == "€1.234.567,89"

    def test_currency_not_numeric(self, formatter: Formatter) -> None:
        """Non-numeric amounts raise FormatError with the column filled in."""
        with pytest.raises(FormatError) as exc_info:
            formatter.format("abc", "currency", column="price")
        assert exc_info.value.column == "price"
        assert exc_info.value.value == "abc"

    def test_boolean_is_not_a_number(self, formatter: Formatter) -> None:
        """Booleans are rejected by numeric formats."""
        with pytest.raises(FormatError):
            formatter.format(True, "integer")

    def test_non_finite(self, formatter: Formatter) -> None:
        """NaN and infinity are rejected."""
        with pytest.raises(FormatError):
            formatter.format(float("nan"), "decimal")

    def test_integer(self, formatter: Formatter) -> None:
        """Integers are rounded half up and grouped."""
        assert formatter.format(1234567.5, "integer") == "1,234,568"

    def test_decimal(self, formatter: Formatter) -> None:
        """Decimals default to two places; the parameter overrides."""
        assert formatter.format("3.14159", "decimal") == "3.14"
        assert formatter.format(2.5, ("decimal", 0)) == "3"
        assert formatter.format(1000, ("decimal", 3)) == "1,000.000"

    def test_beyond_default_precision(self, formatter: Formatter) -> None:
        """Numbers wider than 28 digits keep every digit."""
        assert formatter.format(10**30, "currency") == "$1," + ",".join(["000"] * 10) + ".00"
        assert formatter.format(-(10**30) - 1, "integer") == "-1," + ",".join(["000"] * 9) + ",001"
        assert formatter.format("123456789012345678901234567890.125", "decimal") == (
            "123,456,789,012,345,678,901,234,567,890.13"
        )

    def test_out_of_range_is_format_error(self, formatter: Formatter) -> None:
        """A number too large to round is a FormatError, not a decimal error."""
        with pytest.raises(FormatError) as exc_info:
            formatter.format("1e1000000", "currency", column="price")
        assert exc_info.value.column == "price"

    @pytest.mark.parametrize("places", ["two", -1, [1]])
    def test_decimal_bad_places(self, formatter: Formatter, places: object) -> None:
        """Unusable decimal parameters are configuration errors."""
        with pytest.raises(ConfigurationError):
            formatter.check_format(("decimal", places))

    def test_check_format(self, formatter: Formatter) -> None:
        """check_format() returns the normalized tag and parameter."""
        assert formatter.check_format("Currency") == ("currency", "default")
        assert formatter.check_format(("decimal", "3")) == ("decimal", "3")
