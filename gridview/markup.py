"""HTML building helpers.

Attribute serialization, escaping and a few element builders shared by
the grid and its columns:
- encode / html_encode: text and JSON escaping
- render_tag_attributes: attribute mapping -> attribute string
- tag, render_select_options, drop_down_list: element builders
- headline: attribute name -> human label

Usage:
    from gridview.markup import render_tag_attributes, tag

    render_tag_attributes({"class": ["btn", "btn"], "disabled": True})
    # ' class="btn" disabled'
    tag("td", "42", {"data": {"id": 7}})
    # '<td data-id="7">42</td>'
"""

from __future__ import annotations

import html
import json
import re

from collections.abc import Mapping
from typing import Any


# Attributes whose dict values are expanded into prefixed attributes
DATA_ATTRIBUTES = ("data", "aria")

# Elements rendered without a closing tag
VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}
)

_ENTITY_PATTERN = re.compile(r"&(#\d+|#[xX][0-9a-fA-F]+|[a-zA-Z][a-zA-Z0-9]*);")

# Word boundaries for headline(): separators and camelCase humps
_HEADLINE_SPLIT = re.compile(r"[-_\s.]+|(?<=[a-z0-9])(?=[A-Z])")


def encode(content: Any, double_encode: bool = True) -> str:
    """Encode special characters into HTML entities.

    Parameters
    ----------
    content : Any
        The content to encode. Coerced with ``str()``; ``None`` becomes "".
    double_encode : bool
        Whether to encode existing HTML entities again. If False,
        ``&amp;`` stays ``&amp;`` instead of becoming ``&amp;amp;``.

    Returns
    -------
    str
        The encoded content.
    """
    if content is None:
        return ""
    text = str(content)
    if double_encode:
        return html.escape(text, quote=True)

    parts = []
    last = 0
    for match in _ENTITY_PATTERN.finditer(text):
        parts.append(html.escape(text[last : match.start()], quote=True))
        parts.append(match.group(0))
        last = match.end()
    parts.append(html.escape(text[last:], quote=True))
    return "".join(parts)


def html_encode(value: Any) -> str:
    """Encode a value as JSON that is safe to embed in HTML attributes.

    ``<``, ``>``, ``&`` and ``'`` are emitted as ``\\u003C`` style escapes
    so the result can sit inside single-quoted attributes.
    """
    encoded = json.dumps(value, ensure_ascii=False, default=str, separators=(",", ":"))
    return (
        encoded.replace("<", "\\u003C")
        .replace(">", "\\u003E")
        .replace("&", "\\u0026")
        .replace("'", "\\u0027")
    )


def css_style_from_dict(style: Mapping[str, Any]) -> str | None:
    """Convert a CSS property mapping into a style string.

    Example:
        css_style_from_dict({"width": "100px", "height": "200px"})
        # 'width: 100px; height: 200px;'

    Returns None for an empty mapping so the attribute is skipped.
    """
    result = " ".join(f"{name}: {value};" for name, value in style.items())
    return result or None


def _class_tokens(value: Any) -> list[str]:
    """Flatten a class value into unique tokens, keeping first occurrences."""
    if isinstance(value, str):
        raw = value.split()
    else:
        raw = " ".join(str(v) for v in value if v).split()
    return list(dict.fromkeys(raw))


def render_tag_attributes(attributes: Mapping[str, Any] | None) -> str:
    """Render HTML tag attributes.

    Boolean values are treated as boolean attributes, None values are
    skipped, and every other value is HTML-encoded. ``data`` and ``aria``
    dicts expand into ``data-*`` / ``aria-*`` attributes, with nested
    dicts JSON-encoded. ``class`` lists are deduplicated and ``style``
    dicts serialized as CSS.

    Parameters
    ----------
    attributes : Mapping[str, Any] or None
        Attributes to render, in order.

    Returns
    -------
    str
        Attribute string where every attribute carries a leading space,
        so it can be appended straight after the tag name. Empty string
        when there is nothing to render.
    """
    if not attributes:
        return ""

    parts: list[str] = []
    for name, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, bool):
            if value:
                parts.append(f" {name}")
        elif name in DATA_ATTRIBUTES and isinstance(value, Mapping):
            for sub_name, sub_value in value.items():
                if sub_value is None:
                    continue
                if isinstance(sub_value, bool):
                    if sub_value:
                        parts.append(f" {name}-{sub_name}")
                elif isinstance(sub_value, (Mapping, list, tuple)):
                    parts.append(f" {name}-{sub_name}='{html_encode(sub_value)}'")
                else:
                    parts.append(f' {name}-{sub_name}="{encode(sub_value)}"')
        elif name == "class" and isinstance(value, (list, tuple, set)):
            tokens = _class_tokens(value)
            if tokens:
                parts.append(f' class="{encode(" ".join(tokens))}"')
        elif name == "style" and isinstance(value, Mapping):
            style = css_style_from_dict(value)
            if style is not None:
                parts.append(f' style="{encode(style)}"')
        elif isinstance(value, (Mapping, list, tuple)):
            parts.append(f" {name}='{html_encode(value)}'")
        else:
            parts.append(f' {name}="{encode(value)}"')
    return "".join(parts)


def add_css_class(options: dict[str, Any], css_class: str | list[str]) -> dict[str, Any]:
    """Add CSS class tokens to an options dict in place.

    Existing classes are kept; duplicates are dropped.
    """
    current = options.get("class")
    tokens = _class_tokens(current) if current else []
    tokens.extend(_class_tokens(css_class))
    options["class"] = " ".join(dict.fromkeys(tokens))
    return options


def tag(name: str, content: str = "", attributes: Mapping[str, Any] | None = None) -> str:
    """Build a complete HTML element.

    ``content`` is inserted as-is; escape it first if it is plain text.
    Void elements (input, col, ...) are rendered without a closing tag.
    """
    attrs = render_tag_attributes(attributes)
    if name in VOID_ELEMENTS:
        return f"<{name}{attrs}>"
    return f"<{name}{attrs}>{content}</{name}>"


def _is_selected(key: Any, selection: Any) -> bool:
    """Check whether an option key is part of the current selection."""
    if selection is None:
        return False
    if isinstance(selection, (list, tuple, set, frozenset)):
        return str(key) in {str(s) for s in selection}
    if isinstance(selection, bool):
        selection = int(selection)
    if isinstance(key, bool):
        key = int(key)
    return str(key) == str(selection)


def render_select_options(
    selection: Any,
    items: Mapping[Any, Any],
    tag_options: dict[str, Any] | None = None,
) -> str:
    """Render the option tags for a drop-down list.

    Parameters
    ----------
    selection : Any
        Selected value, or a list of values for multiple selection.
    items : Mapping
        Option values to labels. A nested mapping renders an ``<optgroup>``
        labelled with its key.
    tag_options : dict, optional
        The select's options. ``prompt`` (str or {"text", "options"}),
        ``options`` (per-value attributes), ``groups`` (per-group
        attributes) and ``encode`` (default True) are consumed from it.

    Returns
    -------
    str
        Newline-joined option markup.
    """
    tag_options = tag_options if tag_options is not None else {}
    do_encode = tag_options.pop("encode", True)
    prompt = tag_options.pop("prompt", None)
    option_attrs: Mapping[Any, Any] = tag_options.pop("options", None) or {}
    group_attrs: Mapping[Any, Any] = tag_options.pop("groups", None) or {}

    lines: list[str] = []
    if prompt is not None:
        prompt_options: dict[str, Any] = {"value": ""}
        if isinstance(prompt, Mapping):
            prompt_text = prompt.get("text", "")
            prompt_options.update(prompt.get("options", {}))
        else:
            prompt_text = prompt
        lines.append(tag("option", encode(prompt_text) if do_encode else prompt_text, prompt_options))

    for key, label in items.items():
        if isinstance(label, Mapping):
            attrs = dict(group_attrs.get(key, {}))
            attrs.setdefault("label", key)
            nested = render_select_options(selection, label, {"encode": do_encode})
            lines.append(f"<optgroup{render_tag_attributes(attrs)}>\n{nested}</optgroup>")
            continue
        attrs = dict(option_attrs.get(key, {}))
        attrs["value"] = str(int(key) if isinstance(key, bool) else key)
        attrs.setdefault("selected", _is_selected(key, selection))
        lines.append(tag("option", encode(label) if do_encode else str(label), attrs))

    return "\n".join(lines)


def drop_down_list(
    name: str,
    selection: Any = None,
    items: Mapping[Any, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> str:
    """Build a ``<select>`` element.

    ``options`` are the select's attributes plus the option-rendering
    keys understood by ``render_select_options``. ``unselect`` renders a
    hidden input carrying the value submitted when nothing is selected.
    """
    attrs = dict(options or {})
    attrs["name"] = name
    unselect = attrs.pop("unselect", None)
    option_html = render_select_options(selection, items or {}, attrs)
    select_html = tag("select", f"\n{option_html}\n" if option_html else "", attrs)
    if unselect is not None:
        hidden_name = name[:-2] if name.endswith("[]") else name
        hidden = tag("input", attributes={"type": "hidden", "name": hidden_name, "value": unselect})
        return hidden + select_html
    return select_html


def headline(text: str) -> str:
    """Turn an attribute name into a human readable label.

    Example:
        headline("first_name")   # 'First Name'
        headline("created-at")   # 'Created At'
        headline("emailAddress") # 'Email Address'
    """
    words = [w for w in _HEADLINE_SPLIT.split(text) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)
