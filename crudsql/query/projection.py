"""Projection builder: select-expressions, lookup joins and CSV headers."""

from typing import Dict, List, Optional, Sequence

from crudsql.core.config import Settings
from crudsql.dictionary import field_types as ft
from crudsql.dictionary.models import CollectionDefinition, EntityModel, FieldDefinition
from crudsql.dictionary.registry import system_fields
from crudsql.query.schemas import ViewMode

LIST_FALLBACK_SIZE = 5
DEFAULT_LOV_COLUMN = "name"


def select_fields(model: EntityModel, mode: ViewMode) -> List[FieldDefinition]:
    """Field set projected for a view mode."""
    if mode != ViewMode.LIST:
        return list(model.fields)
    fields = [f for f in model.fields if ft.in_many(f)]
    if not fields:
        # no field flagged for lists: take the first few
        fields = list(model.fields[:LIST_FALLBACK_SIZE])
    return fields


def lookup_alias(index: int) -> str:
    """Join alias of the lookup field at ``index`` in the projected field list."""
    return f"t{index + 2}"


def _column(field: FieldDefinition, alias: Optional[str]) -> str:
    sql = f'{alias}."{field.column}"' if alias else f'"{field.column}"'
    if field.column != field.id:
        sql += f' AS "{field.id}"'
    return sql


def select_columns(
    fields: Sequence[FieldDefinition], alias: Optional[str] = "t1", with_lookups: bool = True
) -> List[str]:
    """Column expressions for ``fields``; lookups also project their joined label."""
    columns = []
    for idx, f in enumerate(fields):
        columns.append(_column(f, alias))
        if with_lookups and ft.is_lookup(f):
            lov_column = f.lov_column or DEFAULT_LOV_COLUMN
            columns.append(f'{lookup_alias(idx)}."{lov_column}" AS "{f.id}_txt"')
    return columns


def lookup_joins(fields: Sequence[FieldDefinition], settings: Settings, alias: str = "t1") -> str:
    """LEFT JOIN clauses for every lookup field, aliased like ``select_columns``."""
    sql = ""
    for idx, f in enumerate(fields):
        if ft.is_lookup(f):
            tlov = lookup_alias(idx)
            sql += f' LEFT JOIN {settings.qualified_table(f.lov_table)} AS {tlov} ON {alias}."{f.column}"={tlov}.id'
    return sql


def from_clause(model: EntityModel, fields: Sequence[FieldDefinition], settings: Settings) -> str:
    return f"{model.schema_table} AS t1" + lookup_joins(fields, settings)


def primary_key_column(model: EntityModel, alias: str = "t1") -> str:
    return f'{alias}."{model.pkey}" AS id'


def system_columns(settings: Settings, cast_integers: bool = False) -> List[str]:
    columns = []
    for f in system_fields(settings):
        sql = f't1."{f.column}"'
        if cast_integers and ft.is_integer(f):
            sql += "::integer"
        columns.append(sql)
    return columns


def collection_order(collection: CollectionDefinition, alias: str = "t1") -> str:
    return f"{alias}.{collection.order_by_sql}"


def collection_columns(model: EntityModel, settings: Settings) -> List[str]:
    """One JSON array per sub-collection, correlated on the parent key."""
    columns = []
    for c in model.collections:
        inner = ", ".join(["c1.id"] + select_columns(c.fields, alias="c1", with_lookups=False))
        columns.append(
            "(SELECT array_to_json(array_agg(row_to_json(c))) FROM "
            f"(SELECT {inner} FROM {settings.qualified_table(c.table)} AS c1"
            f' WHERE c1."{c.column}"=t1."{model.pkey}"'
            f" ORDER BY {collection_order(c, 'c1')}) AS c)"
            f' AS "{c.id}"'
        )
    return columns


def csv_header(fields: Sequence[FieldDefinition], settings: Settings) -> Dict[str, str]:
    """Map result columns to CSV column titles (label or id per configuration)."""

    def title(f: FieldDefinition) -> str:
        return f.display_label if settings.csv_header == "label" else f.id

    header = {"id": "ID"}
    for f in fields:
        if ft.is_lookup(f):
            header[f.id] = title(f) + " ID"
            header[f.id + "_txt"] = title(f)
        else:
            header[f.id] = title(f)
    return header
