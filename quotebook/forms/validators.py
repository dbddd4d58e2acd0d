"""Named validators attached to form fields."""

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Callable

from quotebook.forms.schema import ScalarKind, SchemaError

logger = logging.getLogger(__name__)

PASSWORD_INCORRECT = "The password is incorrect."
REQUIRED_MESSAGE = "This field is required."


@dataclass(frozen=True)
class FieldValue:
    """A submitted value as handed to validators.

    ``raw`` is the string from the form body, ``value`` the converted Python value.
    """

    kind: ScalarKind
    raw: str
    value: Any


Validator = Callable[[FieldValue], tuple[bool, str]]


class ValidatorRegistry:
    """Process-wide table of validators, filled at startup and frozen before use."""

    def __init__(self):
        self._validators: dict[str, Validator] = {}
        self._frozen = False

    def register(self, name: str, validator: Validator) -> None:
        if self._frozen:
            raise SchemaError(f"cannot register validator {name!r}: registry is frozen")
        if name in self._validators:
            raise SchemaError(f"validator {name!r} is already registered")
        self._validators[name] = validator
        logger.debug(f"Registered validator {name}")

    def lookup(self, name: str) -> Validator | None:
        return self._validators.get(name)

    def freeze(self) -> "ValidatorRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return list(self._validators)

    def __contains__(self, name: str) -> bool:
        return name in self._validators


def required(value: FieldValue) -> tuple[bool, str]:
    if value.raw.strip():
        return True, ""
    return False, REQUIRED_MESSAGE


def password_validator(secret: str) -> Validator:
    """Build the shared-secret check for a password field."""

    def check(value: FieldValue) -> tuple[bool, str]:
        if secrets.compare_digest(value.raw.encode(), secret.encode()):
            return True, ""
        return False, PASSWORD_INCORRECT

    return check


def build_registry(password: str | None = None) -> ValidatorRegistry:
    """Registry with the built-in validators and, if given, the ``password`` check."""
    registry = ValidatorRegistry()
    registry.register("required", required)
    if password is not None:
        registry.register("password", password_validator(password))
    return registry.freeze()
