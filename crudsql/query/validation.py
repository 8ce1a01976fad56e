"""Type validation and coercion of submitted field values."""

import json
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from crudsql.dictionary import field_types as ft
from crudsql.dictionary.models import FieldDefinition, FieldType
from crudsql.query.schemas import InvalidField

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")
TRUE_VALUES = ("true", "1", "yes")
FALSE_VALUES = ("false", "0", "no")


class FieldValueError(Exception):
    """Internal signal carrying the failed condition name."""

    def __init__(self, condition: str, message: str):
        super().__init__(message)
        self.condition = condition
        self.message = message


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "") or value == []


def _to_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise FieldValueError("type", "must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    raise FieldValueError("type", "must be an integer")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise FieldValueError("type", "must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise FieldValueError("type", "must be a number")
    if not number.is_finite():
        raise FieldValueError("type", "must be a number")
    return number


def _to_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise FieldValueError("type", "must be a boolean")


def _to_temporal(field_type: FieldType, value: Any):
    parsers = {FieldType.DATE: date, FieldType.DATETIME: datetime, FieldType.TIME: time}
    parser = parsers[field_type]
    if isinstance(value, parser):
        return value
    text = str(value).strip()
    if field_type != FieldType.DATE and text.endswith(("Z", "z")):
        # fromisoformat before 3.11 has no "Z" suffix
        text = text[:-1] + "+00:00"
    try:
        return parser.fromisoformat(text)
    except ValueError:
        raise FieldValueError("type", f"must be a valid {field_type.value}")


def _to_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    raise FieldValueError("type", "must be a list")


def _to_json(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    try:
        json.loads(str(value))
    except ValueError:
        raise FieldValueError("type", "must be valid JSON")
    return str(value)


def coerce(field: FieldDefinition, value: Any) -> Any:
    """Convert a non-empty submitted value to the field's Python type."""
    if ft.is_integer(field):
        return _to_integer(value)
    if ft.is_numeric(field):
        return _to_decimal(value)
    if ft.is_boolean(field):
        return _to_boolean(value)
    if ft.is_date(field):
        return _to_temporal(field.type, value)
    if field.type == FieldType.LIST:
        return _to_list(value)
    if field.type == FieldType.JSON:
        return _to_json(value)
    text = str(value)
    if field.type == FieldType.EMAIL and not EMAIL_PATTERN.match(text):
        raise FieldValueError("type", "must be a valid email address")
    return text


def _check_constraints(field: FieldDefinition, value: Any) -> None:
    if ft.is_numeric(field):
        if field.min is not None and value < Decimal(str(field.min)):
            raise FieldValueError("min", f"must be greater or equal to {field.min:g}")
        if field.max is not None and value > Decimal(str(field.max)):
            raise FieldValueError("max", f"must be smaller or equal to {field.max:g}")
    if isinstance(value, str) and ft.is_textual(field):
        if field.min_length is not None and len(value) < field.min_length:
            raise FieldValueError("minLength", f"must be at least {field.min_length} characters long")
        if field.max_length is not None and len(value) > field.max_length:
            raise FieldValueError("maxLength", f"must be at most {field.max_length} characters long")
        if field.reg_exp and not re.search(field.reg_exp, value):
            raise FieldValueError("regExp", "is not in the expected format")


def validate_value(field: FieldDefinition, value: Any) -> Tuple[Any, Optional[InvalidField]]:
    """Coerced value and the validation failure (if any) for one field."""
    if is_empty(value):
        if field.required:
            return None, InvalidField(field.id, field.display_label, "required", "is required")
        return None, None
    try:
        coerced = coerce(field, value)
        _check_constraints(field, coerced)
    except FieldValueError as e:
        return None, InvalidField(field.id, field.display_label, e.condition, e.message)
    return coerced, None
