"""Encode dataclass records as HTML forms and decode submitted forms back into records."""

from quotebook.forms.decoder import INVALID_VALUE, DecodeResult, decode
from quotebook.forms.decorators import BootstrapDecorator, Decorator, PlainDecorator
from quotebook.forms.encoder import CSRF_FIELD_NAME, encode, extract_field_values, form_values
from quotebook.forms.schema import (
    FieldDescriptor,
    FieldMeta,
    Password,
    ScalarKind,
    SchemaError,
    WidgetKind,
    form_embed,
    form_field,
    reflect,
)
from quotebook.forms.validators import (
    PASSWORD_INCORRECT,
    FieldValue,
    Validator,
    ValidatorRegistry,
    build_registry,
    password_validator,
)

__all__ = [
    "BootstrapDecorator",
    "CSRF_FIELD_NAME",
    "DecodeResult",
    "Decorator",
    "FieldDescriptor",
    "FieldMeta",
    "FieldValue",
    "INVALID_VALUE",
    "PASSWORD_INCORRECT",
    "Password",
    "PlainDecorator",
    "ScalarKind",
    "SchemaError",
    "Validator",
    "ValidatorRegistry",
    "WidgetKind",
    "build_registry",
    "decode",
    "encode",
    "extract_field_values",
    "form_embed",
    "form_field",
    "form_values",
    "password_validator",
    "reflect",
]
