from collections.abc import Mapping
from html.parser import HTMLParser
from typing import Any

from markupsafe import Markup

from quotebook.forms.decorators import BootstrapDecorator, Decorator, hidden_input
from quotebook.forms.schema import FieldDescriptor, ScalarKind, get_value, reflect
from quotebook.forms.validators import ValidatorRegistry

CSRF_FIELD_NAME = "csrf_token"
CHECKBOX_ON = "on"


def format_value(desc: FieldDescriptor, value: Any) -> str:
    """String form of a field value as carried by its input element."""
    if value is None:
        return ""
    if desc.scalar is ScalarKind.BOOLEAN:
        return CHECKBOX_ON if value else ""
    if desc.scalar is ScalarKind.PASSWORD:
        return ""
    return str(value)


def form_values(record: Any, registry: ValidatorRegistry | None = None) -> dict[str, str]:
    """Identifier -> string map of everything ``encode`` would submit for ``record``."""
    values = {}
    for desc in reflect(type(record), registry):
        if not desc.visible:
            continue
        formatted = format_value(desc, get_value(record, desc))
        if desc.scalar is ScalarKind.BOOLEAN and not formatted:
            # unchecked boxes are not posted
            continue
        values[desc.name] = formatted
    return values


def encode(
    record: Any,
    decorator: Decorator | None = None,
    *,
    csrf_token: str | None = None,
    compact: bool = False,
    errors: Mapping[str, str] | None = None,
    registry: ValidatorRegistry | None = None,
    csrf_field: str = CSRF_FIELD_NAME,
) -> Markup:
    """Render ``record`` as the inner markup of an HTML form.

    Fields appear in declaration order. Suppressed fields are left out, hidden carriers
    become hidden inputs, and every other field goes through ``decorator``. ``errors``
    holds messages from a previous decode to show next to their fields.
    """
    decorator = decorator or BootstrapDecorator()
    errors = errors or {}

    fragments: list[Markup] = []
    if csrf_token is not None:
        fragments.append(hidden_input(csrf_field, csrf_token))

    for desc in reflect(type(record), registry):
        if not desc.visible:
            continue
        value = format_value(desc, get_value(record, desc))
        fragments.append(decorator(desc, value, errors.get(desc.name)))

    separator = Markup("") if compact else Markup("\n")
    return separator.join(fragments)


class _FieldValueParser(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.values: dict[str, str] = {}
        self._textarea: str | None = None
        self._text: list[str] = []

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        name = attrs.get("name")
        if not name:
            return
        if tag == "textarea":
            self._textarea = name
            self._text = []
        elif tag == "input":
            if attrs.get("type") == "checkbox":
                if "checked" in attrs:
                    self.values[name] = CHECKBOX_ON
            else:
                self.values[name] = attrs.get("value") or ""

    def handle_data(self, data):
        if self._textarea is not None:
            self._text.append(data)

    def handle_endtag(self, tag):
        if tag == "textarea" and self._textarea is not None:
            text = "".join(self._text)
            # browsers drop one newline right after <textarea>
            if text.startswith("\r\n"):
                text = text[2:]
            elif text.startswith("\n"):
                text = text[1:]
            self.values[self._textarea] = text
            self._textarea = None


def extract_field_values(markup: str) -> dict[str, str]:
    """Read back the name/value pairs a browser would submit for encoded markup."""
    parser = _FieldValueParser()
    parser.feed(str(markup))
    parser.close()
    return parser.values
