"""Explicit per-request rendering context.

The grid never reaches for the current request, the routing table or
global configuration on its own. Everything it needs from the host
framework is threaded through a RenderContext:
- path and query_params: the current request URL
- url_for: the host's route builder (used by ActionColumn)
- settings: configuration override (defaults to get_settings())

Usage:
    from gridview.context import RenderContext

    ctx = RenderContext(path="/users", query_params={"sort": "-name", "page": "2"})
    ctx.param("sort")          # '-name'
    ctx.url_with(page=3)       # '/users?sort=-name&page=3'
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import GridViewSettings, get_settings


UrlBuilder = Callable[[str, Mapping[str, Any]], str]


def default_url_for(route: str, params: Mapping[str, Any]) -> str:
    """Build a URL from a dotted route name and query parameters.

    ``"users.view"`` with ``{"id": 5}`` becomes ``"/users/view?id=5"``.
    Hosts with a real routing layer pass their own builder instead.
    """
    path = "/" + route.strip("/").replace(".", "/")
    query = urlencode({k: v for k, v in params.items() if v is not None}, doseq=True)
    return f"{path}?{query}" if query else path


class RenderContext(BaseModel):
    """Request-scoped values the grid reads while rendering."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str = ""
    query_params: dict[str, Any] = Field(default_factory=dict)
    url_for: UrlBuilder = Field(default=default_url_for, exclude=True)
    settings: GridViewSettings | None = Field(default=None, repr=False)

    @field_validator("query_params", mode="before")
    @classmethod
    def normalize_query_params(cls, v: Any) -> dict[str, Any]:
        """Accept any mapping (e.g. a framework's MultiDict) or None."""
        if v is None:
            return {}
        if isinstance(v, Mapping):
            return dict(v.items())
        return dict(v)

    def get_settings(self) -> GridViewSettings:
        """Return the settings override, or the global settings."""
        return self.settings if self.settings is not None else get_settings()

    def param(self, name: str, default: Any = None) -> Any:
        """Return a single query parameter value.

        List values (repeated parameters) yield their last element.
        """
        value = self.query_params.get(name, default)
        if isinstance(value, (list, tuple)):
            return value[-1] if value else default
        return value

    def url_with(self, **overrides: Any) -> str:
        """Return the current URL with some query parameters replaced.

        Parameters set to None are removed from the query string.
        """
        params = dict(self.query_params)
        for name, value in overrides.items():
            if value is None:
                params.pop(name, None)
            else:
                params[name] = value
        query = urlencode(params, doseq=True)
        return f"{self.path}?{query}" if query else self.path or "?"
