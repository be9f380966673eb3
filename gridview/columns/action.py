"""ActionColumn: per-row view/edit/delete (and custom) buttons."""

from __future__ import annotations

import re

from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import Field, model_validator

from ..markup import encode, headline, tag
from .base import Column


_EYE_ICON_SVG = (
    '<svg aria-hidden="true" width="14" height="14" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<path d="M1 12s4-8 11-8 11 8 11 8-4 8-11 8-11-8-11-8z"/>'
    '<circle cx="12" cy="12" r="3"/></svg>'
)
_PENCIL_ICON_SVG = (
    '<svg aria-hidden="true" width="14" height="14" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<path d="M17 3a2.83 2.83 0 1 1 4 4L7.5 20.5 2 22l1.5-5.5L17 3z"/></svg>'
)
_TRASH_ICON_SVG = (
    '<svg aria-hidden="true" width="14" height="14" viewBox="0 0 24 24" fill="none" '
    'stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round">'
    '<polyline points="3 6 5 6 21 6"/>'
    '<path d="M19 6v14a2 2 0 0 1-2 2H7a2 2 0 0 1-2-2V6m3 0V4a2 2 0 0 1 2-2h4a2 2 0 0 1 2 2v2"/>'
    '<line x1="10" y1="11" x2="10" y2="17"/><line x1="14" y1="11" x2="14" y2="17"/></svg>'
)

DEFAULT_ICONS: dict[str, str] = {
    "eye-open": _EYE_ICON_SVG,
    "pencil": _PENCIL_ICON_SVG,
    "trash": _TRASH_ICON_SVG,
}

# Signature: (url, model, key) -> str
ButtonRenderer = Callable[[str, Any, Any], str]

# Signature: (action, model, key, index, column) -> str
UrlCreator = Callable[..., str]

_BUTTON_TOKEN = re.compile(r"\{([\w\-/]+)\}")


class ActionColumn(Column):
    """Column of per-row action buttons.

    ``template`` lays out the buttons: each ``{name}`` token is replaced
    by the output of ``buttons[name]``, or removed when there is no such
    button or it is hidden by ``visible_buttons``. Default view, edit and
    delete buttons are created for the tokens present in the template.

    Attributes
    ----------
        buttons: Button name -> renderer (url, model, key) -> HTML
        template: Button layout, e.g. "{view} {edit} {delete}"
        visible_buttons: Button name -> bool or callable (model, key, index)
        url_creator: Callable (action, model, key, index, column) -> URL;
            defaults to the context's ``url_for``
        controller: Route prefix; routes become "{controller}.{action}"
        button_options: Extra attributes merged into default buttons
        icons: Icon name -> HTML used by default buttons

    Example:
        ActionColumn(controller="users", template="{view} {delete}")
    """

    type: Literal["action"] = "action"
    header_options: dict[str, Any] = Field(
        default_factory=lambda: {"class": "action-column"}, alias="headerOptions"
    )
    buttons: dict[str, ButtonRenderer] = Field(default_factory=dict)
    template: str = "{view} {edit} {delete}"
    visible_buttons: dict[str, bool | Callable[..., Any]] = Field(
        default_factory=dict, alias="visibleButtons"
    )
    url_creator: UrlCreator | None = Field(default=None, alias="urlCreator")
    controller: str | None = None
    button_options: dict[str, Any] = Field(default_factory=dict, alias="buttonOptions")
    icons: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ICONS))

    @model_validator(mode="after")
    def init_default_buttons(self) -> ActionColumn:
        """Create the default buttons referenced by the template."""
        self._init_default_button("view", "eye-open")
        self._init_default_button("edit", "pencil")
        self._init_default_button("delete", "trash", confirm=True)
        return self

    def _init_default_button(self, name: str, icon_name: str, confirm: bool = False) -> None:
        if name in self.buttons or "{" + name + "}" not in self.template:
            return

        def render(url: str, model: Any, key: Any) -> str:  # noqa: ARG001
            messages = self._require_grid().context.get_settings().messages
            title = getattr(messages, name, None) or headline(name)
            options: dict[str, Any] = {"href": url, "title": title, "aria-label": title}
            if confirm:
                options["data-confirm"] = messages.delete_confirm
                options["data-method"] = "post"
            options.update(self.button_options)
            icon = self.icons.get(icon_name)
            if icon is None:
                icon = f'<span class="glyphicon glyphicon-{encode(icon_name)}"></span>'
            return tag("a", icon, options)

        self.buttons[name] = render

    def get_header_cell_label(self) -> str:
        return self._require_grid().context.get_settings().messages.actions

    def create_url(self, action: str, model: Any, key: Any, index: int) -> str:
        """Build the URL of an action button.

        Composite (mapping) keys become the route parameters as-is;
        scalar keys are passed as ``id``.
        """
        if self.url_creator is not None:
            return self.url_creator(action, model, key, index, self)
        params = dict(key) if isinstance(key, Mapping) else {"id": key}
        route_action = action.replace("-", "_")
        route = f"{self.controller}.{route_action}" if self.controller else route_action
        return self._require_grid().context.url_for(route, params)

    def is_button_visible(self, name: str, model: Any, key: Any, index: int) -> bool:
        """Evaluate ``visible_buttons`` for one button and row."""
        rule = self.visible_buttons.get(name, True)
        if callable(rule):
            return bool(rule(model, key, index))
        return bool(rule)

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> str:
        if self.content is not None:
            return super().render_data_cell_content(model, key, index)

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            button = self.buttons.get(name)
            if button is None or not self.is_button_visible(name, model, key, index):
                return ""
            url = self.create_url(name, model, key, index)
            return str(button(url, model, key))

        return _BUTTON_TOKEN.sub(replace, self.template)
