"""Field-type classifier.

Pure predicates deciding quoting, casting and which filter operators are
legal for a field.
"""

from typing import FrozenSet, Union

from .models import FieldDefinition, FieldType, SystemField

AnyField = Union[FieldDefinition, SystemField]

TEXTUAL_TYPES: FrozenSet[FieldType] = frozenset(
    {FieldType.TEXT, FieldType.TEXTML, FieldType.HTML, FieldType.EMAIL, FieldType.URL}
)
NUMERIC_TYPES: FrozenSet[FieldType] = frozenset({FieldType.INTEGER, FieldType.DECIMAL, FieldType.MONEY})
INTEGER_TYPES: FrozenSet[FieldType] = frozenset({FieldType.INTEGER, FieldType.LOV})
DATE_TYPES: FrozenSet[FieldType] = frozenset({FieldType.DATE, FieldType.DATETIME, FieldType.TIME})
LIST_OF_VALUES_TYPES: FrozenSet[FieldType] = frozenset({FieldType.LOV, FieldType.LIST})
FILE_TYPES: FrozenSet[FieldType] = frozenset({FieldType.IMAGE, FieldType.DOCUMENT})

# Types without a dedicated family; listed so every FieldType is classified.
PLAIN_TYPES: FrozenSet[FieldType] = frozenset({FieldType.BOOLEAN, FieldType.COLOR, FieldType.JSON})

CLASSIFIED_TYPES: FrozenSet[FieldType] = (
    TEXTUAL_TYPES | NUMERIC_TYPES | INTEGER_TYPES | DATE_TYPES | LIST_OF_VALUES_TYPES | FILE_TYPES | PLAIN_TYPES
)


def is_textual(field: AnyField) -> bool:
    return field.type in TEXTUAL_TYPES


def is_lookup(field: AnyField) -> bool:
    return field.type == FieldType.LOV


def is_list_of_values(field: AnyField) -> bool:
    """Lookup or multi-lookup list: the only fields accepting ``in``."""
    return field.type in LIST_OF_VALUES_TYPES


def is_integer(field: AnyField) -> bool:
    return field.type in INTEGER_TYPES


def is_numeric(field: AnyField) -> bool:
    return field.type in NUMERIC_TYPES


def is_boolean(field: AnyField) -> bool:
    return field.type == FieldType.BOOLEAN


def is_date(field: AnyField) -> bool:
    return field.type in DATE_TYPES


def is_image(field: AnyField) -> bool:
    return field.type in FILE_TYPES


def in_many(field: FieldDefinition) -> bool:
    """Whether the field shows in list views."""
    return field.in_many
