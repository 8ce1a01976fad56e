"""
Query compilation types.

Every statement is kept as structured parts and rendered to text once, at the
end, so placeholder numbering always follows the parameter vector.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Operator(str, Enum):
    """Filter operators accepted in query parameters (``field=op.operand``)."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    CONTAINS = "ct"
    STARTS_WITH = "sw"
    ENDS_WITH = "fw"
    NOT_CONTAINS = "nct"
    IN = "in"
    FALSE = "0"
    TRUE = "1"
    NULL = "null"
    NOT_NULL = "nn"


class ViewMode(str, Enum):
    """Which field set a listing projects."""

    LIST = "list"
    DETAIL = "detail"
    CSV = "csv"


class ParameterVector:
    """Append-only ordered list of bound values."""

    def __init__(self):
        self._values: List[Any] = []

    def bind(self, value: Any) -> str:
        """Append ``value`` and return its ``$n`` placeholder."""
        self._values.append(value)
        return f"${len(self._values)}"

    @property
    def values(self) -> List[Any]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)


@dataclass(frozen=True)
class FilterClause:
    """One parsed filter parameter."""

    field_id: str
    operator: str
    operand: Optional[str] = None

    @classmethod
    def parse(cls, field_id: str, raw: str) -> "FilterClause":
        """Split ``op.operand`` on the first dot; the operand may contain dots."""
        operator, dot, operand = raw.partition(".")
        return cls(field_id=field_id, operator=operator, operand=operand if dot else None)


@dataclass
class CompiledQuery:
    """A listing or single-record select held as parts."""

    select: List[str]
    from_: str
    where: List[str] = field(default_factory=list)
    order: List[str] = field(default_factory=list)
    limit: Optional[int] = None
    offset: int = 0
    params: List[Any] = field(default_factory=list)
    single_row: bool = False
    format: Optional[str] = None
    csv_header: Optional[Dict[str, str]] = None

    @property
    def sql(self) -> str:
        sql = f"SELECT {', '.join(self.select)} FROM {self.from_}"
        if self.where:
            sql += " WHERE " + " AND ".join(self.where)
        if self.order:
            sql += " ORDER BY " + ", ".join(self.order)
        if self.limit is not None:
            sql += f" LIMIT {int(self.limit)}"
            if not self.single_row:
                sql += f" OFFSET {int(self.offset)}"
        return sql + ";"

    def to_statement(self) -> "Statement":
        return Statement(
            sql=self.sql,
            params=list(self.params),
            single_row=self.single_row,
            format=self.format,
            csv_header=self.csv_header,
        )


@dataclass
class Statement:
    """Rendered statement handed to the execution boundary."""

    sql: str
    params: List[Any] = field(default_factory=list)
    single_row: bool = False
    format: Optional[str] = None
    csv_header: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class InvalidField:
    """A submitted value that failed validation."""

    id: str
    label: str
    condition: str
    message: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "label": self.label, "condition": self.condition, "message": self.message}
