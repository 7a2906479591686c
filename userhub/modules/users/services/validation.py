"""
User Validation

Explicit validation functions returning field-level errors keyed by wire
field name. The same functions validate request bodies and patched values.
"""
import unicodedata
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ValidationError
from userhub.modules.users.domain.exceptions import FieldErrors

M = TypeVar("M", bound=BaseModel)

FIRST_NAME = "firstName"
LAST_NAME = "lastName"
LOGIN = "login"

ASCII_DIGITS = frozenset("0123456789")

REQUIRED_MESSAGE = "The {field} field is required."
LOGIN_PATTERN_MESSAGE = "Login should contain only letters or digits"
LOGIN_CHARACTER_MESSAGE = "Login contains a character that is not a letter or digit: {char!r}"


def add_error(errors: FieldErrors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def merge_errors(*error_sets: FieldErrors) -> FieldErrors:
    """Combine several error maps, keeping message order."""
    merged: FieldErrors = {}
    for errors in error_sets:
        for field, messages in errors.items():
            for message in messages:
                add_error(merged, field, message)
    return merged


def errors_from_validation(exc: ValidationError, model_cls: Type[BaseModel]) -> FieldErrors:
    """Translate a pydantic ValidationError into a field-error map."""
    names = {}
    for name, info in model_cls.model_fields.items():
        names[name] = info.alias or name
        names[info.alias or name] = info.alias or name

    errors: FieldErrors = {}
    for error in exc.errors():
        loc = error.get("loc") or ("",)
        field = names.get(str(loc[0]), str(loc[0]))
        add_error(errors, field, error.get("msg", "Invalid value"))
    return errors


def parse_model(model_cls: Type[M], values: Mapping[str, Any]) -> Tuple[Optional[M], FieldErrors]:
    """
    Build `model_cls` from canonical wire values.

    Returns the model (or None) and any type errors pydantic reported.
    """
    try:
        return model_cls.model_validate(dict(values)), {}
    except ValidationError as e:
        return None, errors_from_validation(e, model_cls)


def is_letter(char: str) -> bool:
    return unicodedata.category(char).startswith("L")


def is_letter_or_digit(char: str) -> bool:
    """Letters of any script, or decimal digits of any script."""
    return is_letter(char) or unicodedata.category(char) == "Nd"


def matches_login_pattern(login: str) -> bool:
    """True when every character is a letter or an ASCII digit. Empty matches."""
    return all(is_letter(char) or char in ASCII_DIGITS for char in login)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_required(values: Mapping[str, Any], fields, skip: FieldErrors) -> FieldErrors:
    errors: FieldErrors = {}
    for field in fields:
        if field in skip:
            continue
        if _is_missing(values.get(field)):
            add_error(errors, field, REQUIRED_MESSAGE.format(field=field))
    return errors


def validate_create(values: Mapping[str, Any], skip: Optional[FieldErrors] = None) -> FieldErrors:
    """Structural checks for a create body: login must be present and non-empty."""
    return _check_required(values, (LOGIN,), skip or {})


def validate_login_characters(login: str) -> FieldErrors:
    """Flag every character of `login` that is not a letter or digit."""
    errors: FieldErrors = {}
    for char in login:
        if not is_letter_or_digit(char):
            add_error(errors, LOGIN, LOGIN_CHARACTER_MESSAGE.format(char=char))
    return errors


def validate_replace(values: Mapping[str, Any], skip: Optional[FieldErrors] = None) -> FieldErrors:
    """
    Full validation of a replace body or a patched user.

    First name, last name and login are required; login must also consist
    of letters and ASCII digits only. The two login checks are independent:
    an empty login passes the character check but fails the required check.
    """
    skip = skip or {}
    errors = _check_required(values, (FIRST_NAME, LAST_NAME, LOGIN), skip)
    login = values.get(LOGIN)
    if LOGIN not in skip and isinstance(login, str) and not matches_login_pattern(login):
        add_error(errors, LOGIN, LOGIN_PATTERN_MESSAGE)
    return errors
