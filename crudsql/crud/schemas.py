"""Pydantic schemas for the CRUD endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class FieldSummary(BaseModel):
    id: str
    type: str
    label: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ModelSummary(BaseModel):
    """Entity model as listed by ``GET /api/models``."""

    id: str
    label: Optional[str] = None
    table: str
    fields: List[FieldSummary]
    collections: List[str] = []


class SqlPreview(BaseModel):
    entity: str
    sql: str
    formatted_sql: str
    parameters: List[Any]
    summary: Dict[str, Any]


class DeleteResult(BaseModel):
    id: int
