"""
Query module: compiles entity models plus request parameters into statements.

Main Components:
- QueryBuilder: listings, single records, lookup values, sub-collections
- FilterCompiler / compile_search: where-fragments with bound parameters
- projection: select-expressions, lookup joins and CSV headers
- WriteStatementBuilder: validated INSERT / UPDATE statements
- Schemas: compiled query and statement types
"""

from .builder import QueryBuilder, parse_identifier
from .filters import FilterCompiler, compile_search
from .schemas import (
    CompiledQuery,
    FilterClause,
    InvalidField,
    Operator,
    ParameterVector,
    Statement,
    ViewMode,
)
from .writer import WriteStatementBuilder

__all__ = [
    # Main classes
    "QueryBuilder",
    "WriteStatementBuilder",
    "FilterCompiler",
    "compile_search",
    "parse_identifier",
    # Statement types
    "CompiledQuery",
    "Statement",
    "ParameterVector",
    "FilterClause",
    "InvalidField",
    # Enums
    "Operator",
    "ViewMode",
]
