"""Unit tests for the field-type classifier."""

import pytest

from crudsql.dictionary import field_types as ft
from crudsql.dictionary.models import FieldDefinition, FieldType


def make_field(field_type: FieldType) -> FieldDefinition:
    lov_table = "lookup" if field_type in (FieldType.LOV, FieldType.LIST) else None
    return FieldDefinition(id="f", type=field_type, lov_table=lov_table)


class TestClassifier:
    """Predicates over every field type"""

    @pytest.mark.parametrize(
        "field_type", [FieldType.TEXT, FieldType.TEXTML, FieldType.HTML, FieldType.EMAIL, FieldType.URL]
    )
    def test_textual_types(self, field_type):
        assert ft.is_textual(make_field(field_type))

    @pytest.mark.parametrize("field_type", [FieldType.INTEGER, FieldType.LOV, FieldType.BOOLEAN, FieldType.DATE])
    def test_non_textual_types(self, field_type):
        assert not ft.is_textual(make_field(field_type))

    def test_lookup_and_list(self):
        assert ft.is_lookup(make_field(FieldType.LOV))
        assert not ft.is_lookup(make_field(FieldType.LIST))
        assert ft.is_list_of_values(make_field(FieldType.LOV))
        assert ft.is_list_of_values(make_field(FieldType.LIST))
        assert not ft.is_list_of_values(make_field(FieldType.TEXT))

    def test_integer_and_numeric(self):
        assert ft.is_integer(make_field(FieldType.INTEGER))
        assert ft.is_integer(make_field(FieldType.LOV))
        assert not ft.is_integer(make_field(FieldType.DECIMAL))
        assert ft.is_numeric(make_field(FieldType.MONEY))
        assert ft.is_numeric(make_field(FieldType.DECIMAL))

    def test_other_families(self):
        assert ft.is_boolean(make_field(FieldType.BOOLEAN))
        assert ft.is_date(make_field(FieldType.TIME))
        assert ft.is_image(make_field(FieldType.IMAGE))
        assert ft.is_image(make_field(FieldType.DOCUMENT))
        assert not ft.is_image(make_field(FieldType.COLOR))

    def test_every_type_is_classified(self):
        assert ft.CLASSIFIED_TYPES == frozenset(FieldType)
