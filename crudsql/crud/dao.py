"""Execution boundary: runs compiled statements through a SQLAlchemy session."""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crudsql.query.schemas import CompiledQuery, Statement

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$(\d+)")
WRITE_PREFIXES = ("INSERT", "UPDATE", "DELETE")


def to_named_binds(sql: str, params: Sequence[Any]) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$n`` placeholders as ``:pn`` binds understood by ``text()``."""
    named_sql = PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", sql)
    binds = {f"p{idx}": value for idx, value in enumerate(params, start=1)}
    return named_sql, binds


class QueryRunner:
    """DAO executing statements produced by the query builders."""

    def __init__(self, db: Session):
        self.db = db

    def run(self, statement: Union[Statement, CompiledQuery]) -> Union[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Rows as dicts; a single dict (or None) for single-row statements."""
        if isinstance(statement, CompiledQuery):
            statement = statement.to_statement()
        sql, binds = to_named_binds(statement.sql, statement.params)
        is_write = statement.sql.lstrip().upper().startswith(WRITE_PREFIXES)
        try:
            result = self.db.execute(text(sql), binds)
            rows = [dict(row._mapping) for row in result] if result.returns_rows else []
            if is_write:
                self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Statement failed: %s", statement.sql)
            raise
        logger.debug("%d row(s) for: %s", len(rows), statement.sql)
        if statement.single_row:
            return rows[0] if rows else None
        return rows
