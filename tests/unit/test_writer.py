"""
Unit tests for INSERT / UPDATE statement construction and value validation.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from crudsql.core.config import Settings
from crudsql.core.exceptions import EmptyRecordError, InvalidIdentifierError, InvalidRecordError
from crudsql.dictionary.models import FieldDefinition, FieldType
from crudsql.query.validation import is_empty, validate_value
from crudsql.query.writer import WriteStatementBuilder

ORDER_RETURNING = (
    ' RETURNING "id" AS id, "reference", "status", "created_on" AS "createdAt", "quantity",'
    ' "amount", "tags", "email", "paid", "notes";'
)


class TestInsert:
    def test_insert_statement(self, writer, orders):
        statement = writer.insert(orders, {"reference": "A-1", "quantity": "3"})
        assert statement.sql == (
            'INSERT INTO "evolutility"."order" ("reference","quantity") values($1,$2)' + ORDER_RETURNING
        )
        assert statement.params == ["A-1", 3]
        assert statement.single_row

    def test_unknown_values_are_ignored(self, writer, orders):
        statement = writer.insert(orders, {"reference": "A-1", "quantity": 2, "bogus": "x"})
        assert statement.params == ["A-1", 2]

    def test_type_failure_rejects_whole_record(self, writer, orders):
        with pytest.raises(InvalidRecordError) as exc_info:
            writer.insert(orders, {"reference": "A", "quantity": "abc"})
        assert exc_info.value.field_ids == ["quantity"]
        assert exc_info.value.invalids[0].condition == "type"

    def test_missing_required_values(self, writer, orders):
        with pytest.raises(InvalidRecordError) as exc_info:
            writer.insert(orders, {"notes": "rush"})
        assert exc_info.value.field_ids == ["reference", "quantity"]
        assert {i.condition for i in exc_info.value.invalids} == {"required"}

    def test_all_failures_are_reported(self, writer, orders):
        with pytest.raises(InvalidRecordError) as exc_info:
            writer.insert(orders, {"reference": "", "quantity": "0", "amount": "-5", "email": "nope"})
        assert exc_info.value.field_ids == ["reference", "quantity", "amount", "email"]
        payload = exc_info.value.to_payload()
        assert payload["error"] == "Invalid record"
        assert payload["invalids"][1]["condition"] == "min"

    def test_timestamps(self, orders):
        writer = WriteStatementBuilder(Settings(timestamps=True))
        statement = writer.insert(orders, {"reference": "A-1", "quantity": 1})
        assert ('("reference","quantity","created_at","updated_at") values($1,$2,NOW(),NOW())') in statement.sql
        assert statement.params == ["A-1", 1]


class TestUpdate:
    def test_update_statement(self, writer, orders):
        statement = writer.update(orders, "7", {"paid": "yes", "notes": "left at door"})
        assert statement.sql == (
            'UPDATE "evolutility"."order" AS t1 SET "paid"=$1,"notes"=$2 WHERE "id"=$3' + ORDER_RETURNING
        )
        assert statement.params == [True, "left at door", 7]

    def test_partial_update_skips_required_check(self, writer, orders):
        statement = writer.update(orders, 1, {"notes": "x"})
        assert statement.params == ["x", 1]

    @pytest.mark.parametrize("values", [{}, {"bogus": 1}])
    def test_empty_update(self, writer, orders, values):
        with pytest.raises(EmptyRecordError):
            writer.update(orders, 1, values)

    def test_identifier_checked_first(self, writer, orders):
        with pytest.raises(InvalidIdentifierError):
            writer.update(orders, "x", {"quantity": "abc"})

    def test_timestamps(self, orders):
        writer = WriteStatementBuilder(Settings(timestamps=True))
        statement = writer.update(orders, 4, {"quantity": 2})
        assert 'SET "quantity"=$1,"updated_at"=NOW() WHERE "id"=$2' in statement.sql


class TestValidation:
    """Per-field coercion and constraints"""

    @pytest.mark.parametrize(
        "field_id, raw, expected",
        [
            ("quantity", " 12 ", 12),
            ("amount", "9.50", Decimal("9.50")),
            ("paid", "no", False),
            ("paid", True, True),
            ("createdAt", "2024-01-02T03:04:05", datetime(2024, 1, 2, 3, 4, 5)),
            ("createdAt", "2024-01-02T03:04:05Z", datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
            ("tags", "a, b,", ["a", "b"]),
            ("status", "3", 3),
            ("email", "ops@example.com", "ops@example.com"),
        ],
    )
    def test_coercion(self, orders, field_id, raw, expected):
        value, invalid = validate_value(orders.field(field_id), raw)
        assert invalid is None
        assert value == expected

    @pytest.mark.parametrize(
        "field_id, raw, condition",
        [
            ("quantity", "1.5", "type"),
            ("quantity", True, "type"),
            ("quantity", "0", "min"),
            ("amount", "NaN", "type"),
            ("amount", "-0.01", "min"),
            ("paid", "maybe", "type"),
            ("createdAt", "yesterday", "type"),
            ("email", "ops@", "type"),
            ("reference", "  ", "required"),
        ],
    )
    def test_failures(self, orders, field_id, raw, condition):
        value, invalid = validate_value(orders.field(field_id), raw)
        assert value is None
        assert invalid.id == field_id
        assert invalid.condition == condition

    def test_text_length(self, todo):
        _, invalid = validate_value(todo.field("title"), "x" * 21)
        assert invalid.condition == "maxLength"
        value, invalid = validate_value(todo.field("title"), "x" * 20)
        assert invalid is None and value == "x" * 20

    def test_time_with_utc_suffix(self):
        field = FieldDefinition(id="opens", type=FieldType.TIME)
        value, invalid = validate_value(field, "08:30:00Z")
        assert invalid is None
        assert value == time(8, 30, tzinfo=timezone.utc)

    def test_date(self, todo):
        value, invalid = validate_value(todo.field("duedate"), "2024-02-29")
        assert invalid is None
        assert value == date(2024, 2, 29)

    def test_optional_empty_value(self, orders):
        assert validate_value(orders.field("notes"), "") == (None, None)

    @pytest.mark.parametrize("value, empty", [(None, True), ("", True), (" ", True), ([], True), (0, False), ("a", False)])
    def test_is_empty(self, value, empty):
        assert is_empty(value) is empty
