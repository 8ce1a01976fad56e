"""
Core QueryBuilder class for compiling read statements from entity models.

This is the single source of truth for select construction: listings, single
records, lookup values and sub-collections all go through this builder, and
the SQL preview uses the exact same code paths as execution.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import sqlparse

from crudsql.core.config import Settings
from crudsql.core.exceptions import CollectionNotFoundError, InvalidFieldError, InvalidIdentifierError
from crudsql.dictionary import field_types as ft
from crudsql.dictionary.models import EntityModel, FieldDefinition
from crudsql.query import projection
from crudsql.query.filters import FilterCompiler, column_ref, compile_search
from crudsql.query.schemas import CompiledQuery, ParameterVector, Statement, ViewMode

logger = logging.getLogger(__name__)

FULL_COUNT = "_full_count"
DEFAULT_ORDER = "2 ASC"


def parse_identifier(value: Any) -> int:
    """Record identifiers must be positive integers."""
    if isinstance(value, bool):
        raise InvalidIdentifierError(value)
    try:
        identifier = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidIdentifierError(value)
    if identifier <= 0:
        raise InvalidIdentifierError(value)
    return identifier


def _parse_int(raw: Optional[str], default: int, name: str, minimum: int) -> int:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.warning("Invalid %s %r, using %d", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Invalid %s %r, using %d", name, raw, default)
        return default
    return value


class QueryBuilder:
    """
    Builds parameterized select statements for the CRUD endpoints.

    The builder holds no request state; everything it produces (parameter
    vector, fragments, compiled query) is created per call.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    # ===== GET MANY =====

    def get_many(
        self,
        model: EntityModel,
        query_params: Mapping[str, str],
        csv: bool = False,
        with_count: Optional[bool] = None,
    ) -> CompiledQuery:
        """Filtered, sorted and paginated listing of a model's records."""
        if with_count is None:
            with_count = not csv
        mode = ViewMode.CSV if csv else ViewMode.LIST
        fields = projection.select_fields(model, mode)
        params = ParameterVector()

        # ---- selection
        select = [projection.primary_key_column(model)]
        select += projection.select_columns(fields)
        select += projection.system_columns(self.settings, cast_integers=True)

        # ---- filtering and searching
        where = FilterCompiler(model, params).compile_all(query_params)
        search = compile_search(model, query_params.get("search"), params)
        if search:
            where.append(search)

        # ---- record count
        if with_count:
            if where:
                select.append(f"(SELECT count(*) FROM {model.schema_table})::integer AS {FULL_COUNT}")
            else:
                select.append(f"count(*) OVER()::integer AS {FULL_COUNT}")

        # ---- ordering
        order = self._order_terms(model, fields, query_params.get("order"))
        if not order and fields:
            order = [DEFAULT_ORDER]

        # ---- limiting and pagination
        limit, offset = self._pagination(query_params, csv)

        query = CompiledQuery(
            select=select,
            from_=projection.from_clause(model, fields, self.settings),
            where=where,
            order=order,
            limit=limit,
            offset=offset,
            params=params.values,
            format="csv" if csv else None,
            csv_header=projection.csv_header(model.fields, self.settings) if csv else None,
        )
        logger.debug("GET MANY %s: %s %s", model.id, query.sql, query.params)
        return query

    def _order_terms(
        self, model: EntityModel, fields: Sequence[FieldDefinition], order_param: Optional[str]
    ) -> List[str]:
        """Resolve ``order`` (``f1,f2.desc`` or ``f1,desc``) to ORDER BY terms."""
        if not order_param:
            return []
        projected = {f.id for f in fields}
        terms: List[Tuple[str, str]] = []
        for token in order_param.split(","):
            token = token.strip()
            if not token:
                continue
            if token.lower() in ("asc", "desc"):
                # bare direction applies to the previous term
                if terms:
                    terms[-1] = (terms[-1][0], token.upper())
                continue
            if "." in token:
                field_id, _, direction = token.partition(".")
            else:
                field_id, _, direction = token.partition(" ")
            expression = self._order_expression(model, projected, field_id.strip())
            if expression is None:
                logger.warning('Invalid order field "%s" for model "%s"', field_id, model.id)
                continue
            terms.append((expression, "DESC" if direction.strip().lower() == "desc" else "ASC"))
        return [f"{expression} {direction}" for expression, direction in terms]

    def _order_expression(self, model: EntityModel, projected: set, field_id: str) -> Optional[str]:
        if field_id == model.pkey and model.field(field_id) is None:
            return column_ref(model.pkey)
        field = model.field(field_id)
        if field is None:
            return None
        if ft.is_lookup(field) and field.id in projected:
            return f'"{field.id}_txt"'
        return column_ref(field.column)

    def _pagination(self, query_params: Mapping[str, str], csv: bool) -> Tuple[int, int]:
        if csv:
            return self.settings.csv_size, 0
        page_size = _parse_int(query_params.get("pageSize"), self.settings.page_size, "pageSize", 1)
        page = _parse_int(query_params.get("page"), 0, "page", 0)
        # pages are zero-based: page 1 skips one full page
        offset = page * page_size if page else 0
        return page_size, offset

    # ===== GET ONE =====

    def get_one(self, model: EntityModel, record_id: Any) -> CompiledQuery:
        """Single record with all fields, lookup labels and sub-collections."""
        identifier = parse_identifier(record_id)
        fields = projection.select_fields(model, ViewMode.DETAIL)
        params = ParameterVector()
        select = [projection.primary_key_column(model)]
        select += projection.select_columns(fields)
        select += projection.collection_columns(model, self.settings)
        select += projection.system_columns(self.settings)
        query = CompiledQuery(
            select=select,
            from_=projection.from_clause(model, fields, self.settings),
            where=[f"{column_ref(model.pkey)}={params.bind(identifier)}"],
            limit=1,
            params=params.values,
            single_row=True,
        )
        logger.debug("GET ONE %s: %s %s", model.id, query.sql, query.params)
        return query

    # ===== DELETE ONE =====

    def delete_one(self, model: EntityModel, record_id: Any) -> Statement:
        identifier = parse_identifier(record_id)
        sql = (
            f'DELETE FROM {model.schema_table} WHERE "{model.pkey}"=$1'
            f' RETURNING "{model.pkey}"::integer AS id;'
        )
        return Statement(sql=sql, params=[identifier], single_row=True)

    # ===== LIST OF VALUES =====

    def lov(self, model: EntityModel, field_id: str) -> Statement:
        """Bounded, alphabetical id/text pairs for a lookup field (dropdowns)."""
        field = model.field(field_id)
        id_column = "id"
        icon = False
        if field is None and field_id == model.id:
            # the entity itself is the list of values
            table = model.table
            column = model.fields[0].column
            if model.pkey != "id":
                id_column = f'"{model.pkey}" AS id'
        elif field is not None and field.lov_table:
            table = field.lov_table
            column = field.lov_column or projection.DEFAULT_LOV_COLUMN
            icon = field.lov_icon
        else:
            raise InvalidFieldError(field_id)

        sql = f'SELECT {id_column}, "{column}" AS text'
        if icon:
            sql += ", icon"
        sql += (
            f" FROM {self.settings.qualified_table(table)}"
            f' ORDER BY UPPER("{column}") ASC LIMIT {int(self.settings.lov_size)};'
        )
        return Statement(sql=sql)

    # ===== SUB-COLLECTIONS =====

    def collection(self, model: EntityModel, collection_id: str, parent_id: Any) -> CompiledQuery:
        """Records of a sub-collection belonging to one parent record."""
        collection = model.collection(collection_id)
        if collection is None:
            raise CollectionNotFoundError(model.id, collection_id)
        identifier = parse_identifier(parent_id)
        params = ParameterVector()
        query = CompiledQuery(
            select=["t1.id"] + projection.select_columns(collection.fields),
            from_=f"{self.settings.qualified_table(collection.table)} AS t1"
            + projection.lookup_joins(collection.fields, self.settings),
            where=[f'{column_ref(collection.column)}={params.bind(identifier)}'],
            order=[projection.collection_order(collection)],
            limit=self.settings.page_size,
            params=params.values,
        )
        logger.debug("GET COLLEC %s.%s: %s %s", model.id, collection_id, query.sql, query.params)
        return query

    # ===== PREVIEW =====

    def preview(self, model: EntityModel, query_params: Mapping[str, str]) -> Dict[str, Any]:
        """SQL preview of a listing, built through the same path as execution."""
        csv = query_params.get("format") == "csv"
        query = self.get_many(model, query_params, csv=csv)
        sql = query.sql
        return {
            "entity": model.id,
            "sql": sql,
            "formatted_sql": sqlparse.format(sql, reindent=True, keyword_case="upper"),
            "parameters": query.params,
            "summary": {
                "columns": len(query.select),
                "where_fragments": len(query.where),
                "limit": query.limit,
                "offset": query.offset,
            },
        }
