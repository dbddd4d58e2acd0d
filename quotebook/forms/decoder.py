import dataclasses
import logging
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from quotebook.forms.schema import (
    FORM_META_KEY,
    FieldDescriptor,
    FieldMeta,
    Password,
    ScalarKind,
    SchemaError,
    reflect,
    scalar_kind,
    zero_value,
)
from quotebook.forms.validators import FieldValue, ValidatorRegistry

logger = logging.getLogger(__name__)

INVALID_VALUE = "invalid value"

_TRUE_VALUES = {"on", "true", "1", "yes"}
_FALSE_VALUES = {"", "off", "false", "0", "no"}


@dataclass
class DecodeResult:
    record: Any
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def __iter__(self):
        # allows ``record, errors, ok = decode(...)``
        return iter((self.record, self.errors, self.ok))


def convert(kind: ScalarKind, raw: str) -> Any:
    """Convert a submitted string to ``kind``. Raises ValueError on malformed input."""
    if kind is ScalarKind.STRING:
        return raw
    if kind is ScalarKind.PASSWORD:
        return Password(raw)
    if kind is ScalarKind.INTEGER:
        return int(raw.strip())
    if kind is ScalarKind.FLOAT:
        return float(raw.strip())
    if kind is ScalarKind.BOOLEAN:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"cannot convert {raw!r} to {kind.value}")


def decode(
    record_type: type,
    values: Mapping[str, Any],
    *,
    registry: ValidatorRegistry | None = None,
    value_on_validation_error: bool = False,
) -> DecodeResult:
    """Build a new ``record_type`` instance from submitted form values.

    Bad user input never raises: conversion failures and validator rejections end up in
    ``DecodeResult.errors`` keyed by field identifier. Only structural problems with
    ``record_type`` (see ``reflect``) raise SchemaError.
    """
    if registry is None:
        registry = _empty_registry()
    descriptors = reflect(record_type, registry)

    assigned: dict[tuple[str, ...], Any] = {}
    errors: dict[str, str] = {}

    for desc in descriptors:
        if not desc.visible:
            continue

        raw = values.get(desc.name, "")
        if raw is None:
            raw = ""
        if not isinstance(raw, str):
            errors[desc.name] = INVALID_VALUE
            assigned[desc.attr_path] = zero_value(desc.scalar)
            continue

        try:
            value = convert(desc.scalar, raw)
        except ValueError:
            errors[desc.name] = INVALID_VALUE
            assigned[desc.attr_path] = zero_value(desc.scalar)
            continue

        message = _run_validators(desc, FieldValue(kind=desc.scalar, raw=raw, value=value), registry)
        if message is not None:
            errors[desc.name] = message
            if not value_on_validation_error:
                value = zero_value(desc.scalar)
        assigned[desc.attr_path] = value

    if errors:
        logger.debug(f"Form {record_type.__name__} rejected fields: {sorted(errors)}")

    return DecodeResult(record=_build(record_type, assigned, ()), errors=errors)


def _run_validators(desc: FieldDescriptor, value: FieldValue, registry: ValidatorRegistry) -> str | None:
    for name in desc.validators:
        validator = registry.lookup(name)
        if validator is None:
            raise SchemaError(f"field {desc.name!r} uses unregistered validator {name!r}")
        accepted, message = validator(value)
        if not accepted:
            return message or INVALID_VALUE
    return None


def _build(record_type: type, assigned: dict[tuple[str, ...], Any], prefix: tuple[str, ...]) -> Any:
    hints = typing.get_type_hints(record_type)
    kwargs = {}
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue
        path = prefix + (f.name,)
        tp = hints.get(f.name, f.type)
        has_default = f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            meta: FieldMeta = f.metadata.get(FORM_META_KEY) or FieldMeta()
            if meta.show or not has_default:
                kwargs[f.name] = _build(tp, assigned, path)
            # suppressed sub-records keep their dataclass default
        elif path in assigned:
            kwargs[f.name] = assigned[path]
        elif not has_default:
            kind = scalar_kind(tp)
            kwargs[f.name] = zero_value(kind) if kind is not None else None
    return record_type(**kwargs)


def _empty_registry() -> ValidatorRegistry:
    return ValidatorRegistry().freeze()
