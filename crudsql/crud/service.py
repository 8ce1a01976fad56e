"""CRUD service: resolves models, compiles statements and hands them to the runner."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from crudsql.core.config import Settings
from crudsql.core.exceptions import RecordNotFoundError
from crudsql.crud.dao import QueryRunner
from crudsql.crud.export import rows_to_csv
from crudsql.crud.schemas import FieldSummary, ModelSummary
from crudsql.dictionary.registry import ModelRegistry
from crudsql.query.builder import QueryBuilder
from crudsql.query.writer import WriteStatementBuilder

logger = logging.getLogger(__name__)


class CrudService:
    """Service for model-driven CRUD operations on any registered entity."""

    def __init__(self, settings: Settings, registry: ModelRegistry, runner: QueryRunner):
        self.settings = settings
        self.registry = registry
        self.runner = runner
        self.builder = QueryBuilder(settings)
        self.writer = WriteStatementBuilder(settings)

    # ===== READ =====

    def get_many(self, entity_id: str, query_params: Mapping[str, str]) -> Union[List[Dict[str, Any]], str]:
        """Rows of a listing, or CSV text when ``format=csv``."""
        model = self.registry.require(entity_id)
        is_csv = query_params.get("format") == "csv"
        query = self.builder.get_many(model, query_params, csv=is_csv)
        rows = self.runner.run(query)
        if is_csv:
            return rows_to_csv(rows, query.csv_header)
        return rows

    def get_one(self, entity_id: str, record_id: Any) -> Dict[str, Any]:
        model = self.registry.require(entity_id)
        row = self.runner.run(self.builder.get_one(model, record_id))
        if row is None:
            raise RecordNotFoundError(entity_id, record_id)
        return row

    def lov(self, entity_id: str, field_id: str) -> List[Dict[str, Any]]:
        model = self.registry.require(entity_id)
        return self.runner.run(self.builder.lov(model, field_id))

    def collection(self, entity_id: str, collection_id: str, parent_id: Any) -> List[Dict[str, Any]]:
        model = self.registry.require(entity_id)
        return self.runner.run(self.builder.collection(model, collection_id, parent_id))

    def preview(self, entity_id: str, query_params: Mapping[str, str]) -> Dict[str, Any]:
        model = self.registry.require(entity_id)
        return self.builder.preview(model, query_params)

    # ===== WRITE =====

    def insert_one(self, entity_id: str, values: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        model = self.registry.require(entity_id)
        return self.runner.run(self.writer.insert(model, values))

    def update_one(self, entity_id: str, record_id: Any, values: Mapping[str, Any]) -> Dict[str, Any]:
        model = self.registry.require(entity_id)
        row = self.runner.run(self.writer.update(model, record_id, values))
        if row is None:
            raise RecordNotFoundError(entity_id, record_id)
        return row

    def delete_one(self, entity_id: str, record_id: Any) -> Dict[str, Any]:
        model = self.registry.require(entity_id)
        row = self.runner.run(self.builder.delete_one(model, record_id))
        if row is None:
            raise RecordNotFoundError(entity_id, record_id)
        logger.info("Deleted %s %s", entity_id, record_id)
        return row

    # ===== MODELS =====

    def list_models(self) -> List[ModelSummary]:
        summaries = []
        for entity_id in self.registry.entity_ids():
            model = self.registry.get(entity_id)
            summaries.append(
                ModelSummary(
                    id=model.id,
                    label=model.label,
                    table=model.table,
                    fields=[FieldSummary(id=f.id, type=f.type.value, label=f.label) for f in model.fields],
                    collections=[c.id for c in model.collections],
                )
            )
        return summaries
