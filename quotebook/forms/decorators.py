"""Decorators turn one field descriptor into an HTML fragment.

A decorator is any callable ``(descriptor, value, error) -> Markup``. ``value`` is the
field's current value already formatted as the string the input should carry, and
``error`` is the message of a prior failed decode for this field, or None.
"""

from typing import Protocol

from jinja2 import Environment
from markupsafe import Markup

from quotebook.forms.schema import FieldDescriptor, WidgetKind

_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

BOOTSTRAP_FIELD = _env.from_string(
    """\
{% if desc.widget.value == "hidden" %}
<input type="hidden" name="{{ desc.name }}" value="{{ value }}">
{% elif desc.widget.value == "checkbox" %}
<div class="form-group form-check">
<input type="checkbox" class="form-check-input{{ ' is-invalid' if error }}" id="{{ desc.name }}" name="{{ desc.name }}"{{ ' checked' if value }}>
<label class="form-check-label" for="{{ desc.name }}">{{ desc.label }}</label>
{% if desc.help_text %}
<small class="form-text text-muted">{{ desc.help_text }}</small>
{% endif %}
{% if error %}
<div class="invalid-feedback">{{ error }}</div>
{% endif %}
</div>
{% else %}
<div class="form-group">
<label for="{{ desc.name }}">{{ desc.label }}</label>
{% if desc.widget.value == "textarea" %}
<textarea class="form-control{{ ' is-invalid' if error }}" id="{{ desc.name }}" name="{{ desc.name }}" rows="5">
{{ value }}</textarea>
{% elif desc.widget.value == "password" %}
<input type="password" class="form-control{{ ' is-invalid' if error }}" id="{{ desc.name }}" name="{{ desc.name }}" value="">
{% else %}
<input type="{{ desc.widget.value }}" class="form-control{{ ' is-invalid' if error }}" id="{{ desc.name }}" name="{{ desc.name }}" value="{{ value }}"{{ ' step="any"' if desc.widget.value == "number" }}>
{% endif %}
{% if desc.help_text %}
<small class="form-text text-muted">{{ desc.help_text }}</small>
{% endif %}
{% if error %}
<div class="invalid-feedback">{{ error }}</div>
{% endif %}
</div>
{% endif %}
"""
)


class Decorator(Protocol):
    def __call__(self, desc: FieldDescriptor, value: str, error: str | None) -> Markup: ...


class BootstrapDecorator:
    """Bootstrap 4 form-group markup. Password inputs never echo their value."""

    def __call__(self, desc: FieldDescriptor, value: str, error: str | None) -> Markup:
        return Markup(BOOTSTRAP_FIELD.render(desc=desc, value=value, error=error).strip())


class PlainDecorator:
    """Bare label + input pairs, no CSS framework."""

    def __call__(self, desc: FieldDescriptor, value: str, error: str | None) -> Markup:
        if desc.widget is WidgetKind.HIDDEN:
            return hidden_input(desc.name, value)
        if desc.widget is WidgetKind.TEXTAREA:
            control = Markup('<textarea name="{0}">\n{1}</textarea>').format(desc.name, value)
        elif desc.widget is WidgetKind.CHECKBOX:
            checked = Markup(" checked") if value else ""
            control = Markup('<input type="checkbox" name="{0}"{1}>').format(desc.name, checked)
        elif desc.widget is WidgetKind.PASSWORD:
            control = Markup('<input type="password" name="{0}" value="">').format(desc.name)
        else:
            control = Markup('<input type="{0}" name="{1}" value="{2}">').format(desc.widget.value, desc.name, value)
        html = Markup("<label>{0} {1}</label>").format(desc.label, control)
        if error:
            html += Markup('<span class="error">{0}</span>').format(error)
        return html


def hidden_input(name: str, value: str) -> Markup:
    return Markup('<input type="hidden" name="{0}" value="{1}">').format(name, value)
