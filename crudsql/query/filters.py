"""Filter and search compilation into where-fragments."""

import logging
from typing import List, Mapping, Optional

from crudsql.dictionary import field_types as ft
from crudsql.dictionary.models import EntityModel, FieldDefinition, FieldType
from crudsql.query.schemas import FilterClause, Operator, ParameterVector

logger = logging.getLogger(__name__)

RESERVED_PARAMETERS = frozenset({"select", "filter", "search", "order", "page", "pageSize", "format"})

COMPARISONS = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.LT: "<",
    Operator.GTE: ">=",
    Operator.LTE: "<=",
}

PATTERNS = {
    Operator.CONTAINS: "%{}%",
    Operator.STARTS_WITH: "{}%",
    Operator.ENDS_WITH: "%{}",
    Operator.NOT_CONTAINS: "%{}%",
}


def column_ref(column: str, alias: str = "t1") -> str:
    return f'{alias}."{column}"'


def resolve_filter_field(model: EntityModel, field_id: str) -> Optional[FieldDefinition]:
    """Field targeted by a filter key; the primary key is always filterable."""
    if field_id in RESERVED_PARAMETERS:
        return None
    field = model.field(field_id)
    if field is None and field_id == model.pkey:
        field = FieldDefinition(id=model.pkey, column=model.pkey, type=FieldType.INTEGER)
    return field


class FilterCompiler:
    """Compiles filter clauses for one model into predicates.

    Bound values are appended to the shared ``ParameterVector`` in the order
    fragments are built.
    """

    def __init__(self, model: EntityModel, params: ParameterVector):
        self.model = model
        self.params = params

    def compile_all(self, query_params: Mapping[str, str]) -> List[str]:
        fragments = []
        for key, raw in query_params.items():
            fragment = self.compile_parameter(key, raw)
            if fragment is not None:
                fragments.append(fragment)
        return fragments

    def compile_parameter(self, key: str, raw: Optional[str]) -> Optional[str]:
        """Where-fragment for one query parameter, or None when it is ignored."""
        field = resolve_filter_field(self.model, key)
        if field is None or raw is None:
            return None
        return self.compile(field, FilterClause.parse(key, raw))

    def compile(self, field: FieldDefinition, clause: FilterClause) -> Optional[str]:
        try:
            operator = Operator(clause.operator)
        except ValueError:
            logger.warning('Invalid condition "%s" for field "%s"', clause.operator, clause.field_id)
            return None

        col = column_ref(field.column)
        operand = clause.operand if clause.operand is not None else ""

        if operator in (Operator.EQ, Operator.NE) and ft.is_textual(field):
            if operand == "null":
                return f"{col} IS NULL" if operator == Operator.EQ else f"{col} IS NOT NULL"
            placeholder = self.params.bind(operand)
            return f"LOWER({col}){COMPARISONS[operator]}LOWER({placeholder})"

        if operator == Operator.IN:
            if not ft.is_list_of_values(field):
                logger.warning('Condition "in" is not allowed on field "%s" (%s)', field.id, field.type.value)
                return None
            placeholders = [self.params.bind(item) for item in operand.split(",")]
            return f"{col} IN ({','.join(placeholders)})"

        if operator == Operator.FALSE:
            return f"({col}=false OR {col} IS NULL)"
        if operator == Operator.TRUE:
            return f"{col}=true"
        if operator in (Operator.NULL, Operator.NOT_NULL):
            # both operators share one branch
            return f"NOT {col} IS NULL"

        if operator in PATTERNS:
            placeholder = self.params.bind(PATTERNS[operator].format(operand))
            if operator == Operator.NOT_CONTAINS:
                return f"NOT {col} ILIKE {placeholder}"
            return f"{col} ILIKE {placeholder}"

        placeholder = self.params.bind(operand)
        return f"{col}{COMPARISONS[operator]}{placeholder}"


def escape_like(term: str) -> str:
    return term.replace("%", "\\%")


def compile_search(model: EntityModel, term: Optional[str], params: ParameterVector) -> Optional[str]:
    """OR of case-insensitive contains-predicates over the model's search fields."""
    if not term:
        return None
    if not model.search_fields:
        logger.error('No searchFields are specified in model "%s", search ignored.', model.id)
        return None
    logger.debug("Search fields for %s: %s", model.id, model.search_fields)
    pattern = f"%{escape_like(term)}%"
    predicates = []
    for field_id in model.search_fields:
        field = model.field(field_id)
        if field is None:
            logger.warning('Search field "%s" not found in model "%s"', field_id, model.id)
            continue
        predicates.append(f"{column_ref(field.column)} ILIKE {params.bind(pattern)}")
    if not predicates:
        return None
    return "(" + " OR ".join(predicates) + ")"
