"""
Validation entry points for untyped provider payloads.

All functions either return strongly-typed records or raise
RecordValidationError listing every violated field. Sequences are validated
element-wise and all element failures are collected (paths are prefixed
with the element index), never just the first.
"""

from functools import lru_cache
from typing import Any, Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from task_sync.exceptions import RecordValidationError, ValidationIssue

M = TypeVar("M", bound=BaseModel)


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """Flatten a pydantic ValidationError into field-level issues."""
    return [
        ValidationIssue(
            path=".".join(str(part) for part in detail["loc"]),
            message=detail["msg"],
            type=detail["type"],
            value=detail.get("input"),
        )
        for detail in error.errors()
    ]


@lru_cache(maxsize=None)
def list_adapter(model: type[BaseModel]) -> TypeAdapter:
    """TypeAdapter for ``list[model]``, cached per model."""
    return TypeAdapter(list[model])


def validate_record(model: type[M], data: Any) -> M:
    """
    Validate a single payload against a record model.

    Args:
        model: Record model class (e.g. AppleReminder)
        data: Untyped payload, usually a dict from a data provider

    Returns:
        Validated record

    Raises:
        RecordValidationError: If any field is missing, mistyped or out of range
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RecordValidationError(model.__name__, issues_from_error(e), original_error=e) from e


def validate_records(model: type[M], items: Sequence[Any]) -> list[M]:
    """
    Validate a sequence of payloads, collecting failures from every element.

    Raises:
        RecordValidationError: If any element is invalid; issue paths start
            with the element index (e.g. ``"2.priority"``)
    """
    return validate_with(list_adapter(model), items, f"list[{model.__name__}]")


def validate_with(adapter: TypeAdapter, data: Any, record_type: str) -> Any:
    """Validate Python data with an arbitrary TypeAdapter."""
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise RecordValidationError(record_type, issues_from_error(e), original_error=e) from e


def validate_json_with(adapter: TypeAdapter, raw: str | bytes, record_type: str) -> Any:
    """
    Validate serialized JSON with an arbitrary TypeAdapter.

    JSON has no date type, so strict datetime fields accept ISO-8601 strings
    here; this is the path used to reload persisted records.
    """
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        raise RecordValidationError(record_type, issues_from_error(e), original_error=e) from e


def to_payload(record: BaseModel) -> dict[str, Any]:
    """Dump a record back to its wire shape, omitting absent optional fields."""
    return record.model_dump(by_alias=True, exclude_none=True)
