"""
User Patch Interpreter

Applies JSON Patch operations to the replace-shape of a user
(`UserPutDto` wire values). Only the known fields are addressable; failures
are collected per operation instead of aborting the document.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence
from pydantic import ValidationError
from userhub.modules.users.domain.exceptions import BadRequestError, FieldErrors
from userhub.modules.users.schemas import PatchOperation
from userhub.modules.users.services.validation import add_error

logger = logging.getLogger("userhub.users.patching")

ID_FIELD = "id"
WRITABLE_FIELDS = ("firstName", "lastName", "login")
READABLE_FIELDS = (ID_FIELD,) + WRITABLE_FIELDS
SUPPORTED_OPS = ("add", "remove", "replace", "move", "copy", "test")


class PatchOperationError(Exception):
    """A single operation could not be applied."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


def parse_patch_document(document: Any) -> List[PatchOperation]:
    """
    Decode a JSON Patch document.

    Anything that is not a list of objects carrying string `op` and `path`
    members is a malformed request rather than a field error.
    """
    if not isinstance(document, list):
        raise BadRequestError("A patch document must be a JSON array of operations")

    operations = []
    for index, entry in enumerate(document):
        if not isinstance(entry, dict):
            raise BadRequestError(f"Patch operation {index} is not an object")
        try:
            operations.append(PatchOperation.model_validate(entry))
        except ValidationError as e:
            raise BadRequestError(f"Patch operation {index} is malformed: {e.errors()[0]['msg']}")
    return operations


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def resolve_path(path: Optional[str]) -> str:
    """Map a JSON pointer such as `/lastName` onto a field name, case-insensitively."""
    if not path or not path.startswith("/"):
        raise PatchOperationError(path or "", f"The path '{path}' is not a valid JSON pointer.")
    segments = path[1:].split("/")
    if len(segments) != 1:
        raise PatchOperationError(path, f"The target location specified by path '{path}' was not found.")
    name = _unescape(segments[0]).lower()
    for field in READABLE_FIELDS:
        if field.lower() == name:
            return field
    raise PatchOperationError(path, f"The target location specified by path '{path}' was not found.")


def _writable(path: Optional[str]) -> str:
    field = resolve_path(path)
    if field == ID_FIELD:
        raise PatchOperationError(field, "The identifier of a user cannot be modified.")
    return field


def _checked_value(field: str, operation: PatchOperation) -> Optional[str]:
    if not operation.has_value:
        raise PatchOperationError(field, f"The '{operation.op}' operation requires a value.")
    value = operation.value
    if value is not None and not isinstance(value, str):
        raise PatchOperationError(field, f"The value '{value}' is invalid for target location.")
    return value


def apply_operation(document: Dict[str, Any], operation: PatchOperation) -> None:
    """Apply one operation to `document` in place or raise PatchOperationError."""
    op = operation.op.lower()

    if op in ("add", "replace"):
        field = _writable(operation.path)
        document[field] = _checked_value(field, operation)
    elif op == "remove":
        document[_writable(operation.path)] = None
    elif op in ("copy", "move"):
        if operation.from_ is None:
            raise PatchOperationError(operation.path, f"The '{op}' operation requires a 'from' location.")
        target = _writable(operation.path)
        source = _writable(operation.from_) if op == "move" else resolve_path(operation.from_)
        value = document.get(source)
        if op == "move":
            document[source] = None
        document[target] = value
    elif op == "test":
        field = resolve_path(operation.path)
        if document.get(field) != operation.value:
            raise PatchOperationError(
                field,
                f"The current value '{document.get(field)}' at path '{operation.path}' "
                f"is not equal to the test value '{operation.value}'.",
            )
    else:
        raise PatchOperationError(
            operation.path,
            f"Invalid JsonPatch operation '{operation.op}'. Supported: {', '.join(SUPPORTED_OPS)}.",
        )


def apply_patch(document: Dict[str, Any], operations: Sequence[PatchOperation]) -> FieldErrors:
    """
    Apply `operations` to `document` in order.

    A failing operation leaves the document as it was before that operation
    and the rest of the sequence still runs. Returns the collected errors.
    """
    errors: FieldErrors = {}
    for operation in operations:
        try:
            apply_operation(document, operation)
        except PatchOperationError as e:
            logger.debug(f"[patching.apply_patch] rejected | op={operation.op}, path={operation.path}, reason={e.message}")
            add_error(errors, e.field, e.message)
    return errors
