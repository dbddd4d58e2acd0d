"""Reflect dataclass records into ordered form field descriptors."""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from quotebook.forms.validators import ValidatorRegistry

FORM_META_KEY = "form"
PATH_SEPARATOR = "."


class SchemaError(ValueError):
    """Raised for structural misconfiguration of a form record type."""


class Password(str):
    """String scalar rendered as a password input and never echoed back."""


class WidgetKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    PASSWORD = "password"
    HIDDEN = "hidden"
    NUMBER = "number"
    CHECKBOX = "checkbox"


class ScalarKind(str, Enum):
    STRING = "string"
    PASSWORD = "password"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


# Order matters: Password before str, bool before int.
_SCALAR_TYPES: list[tuple[type, ScalarKind]] = [
    (Password, ScalarKind.PASSWORD),
    (str, ScalarKind.STRING),
    (bool, ScalarKind.BOOLEAN),
    (int, ScalarKind.INTEGER),
    (float, ScalarKind.FLOAT),
    (datetime, ScalarKind.DATETIME),
]

_DEFAULT_WIDGETS = {
    ScalarKind.STRING: WidgetKind.TEXT,
    ScalarKind.PASSWORD: WidgetKind.PASSWORD,
    ScalarKind.INTEGER: WidgetKind.NUMBER,
    ScalarKind.FLOAT: WidgetKind.NUMBER,
    ScalarKind.BOOLEAN: WidgetKind.CHECKBOX,
}


@dataclass(frozen=True)
class FieldMeta:
    """Form configuration attached to a single dataclass field."""

    name: str | None = None
    label: str | None = None
    widget: WidgetKind | None = None
    help_text: str | None = None
    validators: tuple[str, ...] = ()
    show: bool = True
    embed: bool = False


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    attr_path: tuple[str, ...]
    label: str
    widget: WidgetKind
    scalar: ScalarKind
    help_text: str | None = None
    validators: tuple[str, ...] = ()
    visible: bool = True


def form_field(
    default: Any = dataclasses.MISSING,
    *,
    name: str | None = None,
    label: str | None = None,
    widget: WidgetKind | str | None = None,
    help: str | None = None,
    validators: typing.Iterable[str] = (),
    show: bool = True,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a dataclass field together with its form metadata.

    Usage:
        @dataclass
        class Contact:
            email: str = form_field("", label="Email", validators=["required"])

    On a nested dataclass field only ``name`` and ``show`` apply; ``show=False`` hides
    the whole sub-record. Setting label, widget, help or validators there is a
    SchemaError at reflect time.
    """
    meta = FieldMeta(
        name=name,
        label=label,
        widget=WidgetKind(widget) if widget is not None else None,
        help_text=help,
        validators=tuple(validators),
        show=show,
    )
    kwargs: dict[str, Any] = {"metadata": {FORM_META_KEY: meta}}
    if default is not dataclasses.MISSING:
        kwargs["default"] = default
    if default_factory is not dataclasses.MISSING:
        kwargs["default_factory"] = default_factory
    return dataclasses.field(**kwargs)


def form_embed(record_type: type) -> Any:
    """Embed a sub-record whose fields are promoted into the parent's namespace."""
    return dataclasses.field(
        default_factory=record_type,
        metadata={FORM_META_KEY: FieldMeta(embed=True)},
    )


def scalar_kind(tp: Any) -> ScalarKind | None:
    args = typing.get_args(tp)
    if args and type(None) in args:
        # Optional[X] reflects as X
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1:
            tp = non_none[0]
    if not isinstance(tp, type):
        return None
    for scalar_type, kind in _SCALAR_TYPES:
        if issubclass(tp, scalar_type):
            return kind
    return None


def zero_value(kind: ScalarKind) -> Any:
    if kind is ScalarKind.PASSWORD:
        return Password("")
    if kind is ScalarKind.STRING:
        return ""
    if kind is ScalarKind.BOOLEAN:
        return False
    if kind is ScalarKind.INTEGER:
        return 0
    if kind is ScalarKind.FLOAT:
        return 0.0
    return None


def reflect(record_type: type, registry: ValidatorRegistry | None = None) -> list[FieldDescriptor]:
    """Return the descriptors of ``record_type`` in declaration order.

    Nested dataclasses are flattened in place. Embedded ones (``form_embed``) promote
    their identifiers unchanged; other nested records prefix them with the parent field
    name joined by ``PATH_SEPARATOR``.

    Raises SchemaError when two fields end up with the same identifier, when a field
    has an unsupported type, or when ``registry`` is given and a validator name is not
    registered in it.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise SchemaError(f"{record_type!r} is not a dataclass type")

    descriptors = _walk(record_type, (), (), True)

    seen: set[str] = set()
    for desc in descriptors:
        if desc.name in seen:
            raise SchemaError(f"duplicate form field identifier {desc.name!r} in {record_type.__name__}")
        seen.add(desc.name)

    if registry is not None:
        for desc in descriptors:
            for validator in desc.validators:
                if registry.lookup(validator) is None:
                    raise SchemaError(f"field {desc.name!r} uses unregistered validator {validator!r}")

    return descriptors


def _walk(
    record_type: type, attr_prefix: tuple[str, ...], name_prefix: tuple[str, ...], visible: bool
) -> list[FieldDescriptor]:
    try:
        hints = typing.get_type_hints(record_type)
    except NameError as e:
        raise SchemaError(f"cannot resolve annotations of {record_type.__name__}: {e}") from e

    descriptors: list[FieldDescriptor] = []
    for field in dataclasses.fields(record_type):
        meta: FieldMeta = field.metadata.get(FORM_META_KEY) or FieldMeta()
        tp = hints.get(field.name, field.type)
        attr_path = attr_prefix + (field.name,)
        ident = meta.name or field.name
        shown = visible and meta.show

        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            if meta.label or meta.widget or meta.help_text or meta.validators:
                raise SchemaError(
                    f"field {record_type.__name__}.{field.name} is a nested record; "
                    "label, widget, help and validators belong on its fields"
                )
            child_prefix = name_prefix if meta.embed else name_prefix + (ident,)
            descriptors.extend(_walk(tp, attr_path, child_prefix, shown))
            continue

        kind = scalar_kind(tp)
        if kind is None or (kind is ScalarKind.DATETIME and shown):
            raise SchemaError(f"field {record_type.__name__}.{field.name} has unsupported type {tp!r}")

        name = PATH_SEPARATOR.join(name_prefix + (ident,))
        descriptors.append(
            FieldDescriptor(
                name=name,
                attr_path=attr_path,
                label=meta.label or name,
                widget=meta.widget or _DEFAULT_WIDGETS.get(kind, WidgetKind.TEXT),
                scalar=kind,
                help_text=meta.help_text,
                validators=meta.validators,
                visible=shown,
            )
        )
    return descriptors


def get_value(record: Any, desc: FieldDescriptor) -> Any:
    value = record
    for attr in desc.attr_path:
        value = getattr(value, attr)
    return value
