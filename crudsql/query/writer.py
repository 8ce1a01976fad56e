"""INSERT / UPDATE statement construction from submitted values."""

import logging
from typing import Any, List, Mapping, Tuple

from crudsql.core.config import Settings
from crudsql.core.exceptions import EmptyRecordError, InvalidRecordError
from crudsql.dictionary.models import EntityModel, FieldDefinition
from crudsql.query import projection
from crudsql.query.builder import parse_identifier
from crudsql.query.schemas import InvalidField, ParameterVector, Statement
from crudsql.query.validation import validate_value

logger = logging.getLogger(__name__)

INSERT = "insert"
UPDATE = "update"


class WriteStatementBuilder:
    """Validates submitted values and builds write statements returning the row."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def writable_fields(self, model: EntityModel) -> List[FieldDefinition]:
        return [f for f in model.fields if not f.read_only and f.column != model.pkey]

    def named_values(
        self, model: EntityModel, values: Mapping[str, Any], action: str
    ) -> List[Tuple[str, Any]]:
        """(column, coerced value) pairs; every invalid value is collected before failing."""
        pairs: List[Tuple[str, Any]] = []
        invalids: List[InvalidField] = []
        for f in self.writable_fields(model):
            if f.id not in values:
                if action == INSERT and f.required:
                    invalids.append(InvalidField(f.id, f.display_label, "required", "is required"))
                continue
            coerced, invalid = validate_value(f, values[f.id])
            if invalid is not None:
                invalids.append(invalid)
            else:
                pairs.append((f.column, coerced))

        unknown = set(values) - {f.id for f in model.fields}
        if unknown:
            logger.debug("Ignoring unknown fields for %s: %s", model.id, sorted(unknown))
        if invalids:
            logger.info("Invalid record for %s: %s", model.id, [i.id for i in invalids])
            raise InvalidRecordError(invalids)
        if not pairs:
            raise EmptyRecordError(model.id)
        return pairs

    def _returning(self, model: EntityModel) -> str:
        columns = projection.select_columns(model.fields, alias=None, with_lookups=False)
        return f' RETURNING "{model.pkey}" AS id, ' + ", ".join(columns)

    def insert(self, model: EntityModel, values: Mapping[str, Any]) -> Statement:
        pairs = self.named_values(model, values, INSERT)
        params = ParameterVector()
        columns = [f'"{column}"' for column, _ in pairs]
        placeholders = [params.bind(value) for _, value in pairs]
        if self.settings.timestamps:
            columns += ['"created_at"', '"updated_at"']
            placeholders += ["NOW()", "NOW()"]
        sql = (
            f"INSERT INTO {model.schema_table} ({','.join(columns)})"
            f" values({','.join(placeholders)})" + self._returning(model) + ";"
        )
        logger.debug("INSERT ONE %s: %s", model.id, sql)
        return Statement(sql=sql, params=params.values, single_row=True)

    def update(self, model: EntityModel, record_id: Any, values: Mapping[str, Any]) -> Statement:
        identifier = parse_identifier(record_id)
        pairs = self.named_values(model, values, UPDATE)
        params = ParameterVector()
        assignments = [f'"{column}"={params.bind(value)}' for column, value in pairs]
        if self.settings.timestamps:
            assignments.append('"updated_at"=NOW()')
        sql = (
            f"UPDATE {model.schema_table} AS t1 SET {','.join(assignments)}"
            f' WHERE "{model.pkey}"={params.bind(identifier)}' + self._returning(model) + ";"
        )
        logger.debug("UPDATE ONE %s: %s", model.id, sql)
        return Statement(sql=sql, params=params.values, single_row=True)
