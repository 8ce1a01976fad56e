"""
Test configuration and shared fixtures for the crudsql test suite.
Provides settings, an in-memory model registry, builders and a recording
query runner standing in for the database.
"""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from crudsql.app import create_app
from crudsql.core.config import Settings
from crudsql.core.dependencies import get_registry
from crudsql.crud.router import get_query_runner
from crudsql.dictionary.registry import ModelRegistry
from crudsql.query.builder import QueryBuilder
from crudsql.query.writer import WriteStatementBuilder


# ===== MODEL DEFINITIONS =====

ORDERS_MODEL: Dict[str, Any] = {
    "id": "orders",
    "label": "Orders",
    "table": "order",
    "searchFields": ["reference", "notes"],
    "fields": [
        {"id": "reference", "type": "text", "label": "Reference", "required": True, "inMany": True},
        {"id": "status", "type": "lov", "label": "Status", "lovTable": "order_status", "inMany": True},
        {"id": "createdAt", "column": "created_on", "type": "datetime", "label": "Created", "inMany": True},
        {"id": "quantity", "type": "integer", "label": "Quantity", "required": True, "min": 1, "inMany": True},
        {"id": "amount", "type": "money", "label": "Amount", "min": 0},
        {"id": "tags", "type": "list", "label": "Tags", "lovTable": "order_tag"},
        {"id": "email", "type": "email", "label": "Contact Email"},
        {"id": "paid", "type": "boolean", "label": "Paid"},
        {"id": "notes", "type": "textmultiline", "label": "Notes"},
    ],
    "collections": [
        {
            "id": "lines",
            "label": "Order Lines",
            "table": "order_line",
            "column": "order_id",
            "orderBy": "position",
            "fields": [
                {"id": "position", "type": "integer", "label": "#"},
                {"id": "product", "type": "text", "label": "Product"},
                {"id": "price", "type": "money", "label": "Price"},
            ],
        }
    ],
}

TODO_MODEL: Dict[str, Any] = {
    "id": "todo",
    "label": "To-Do",
    "table": "task",
    "fields": [
        {"id": "title", "type": "text", "label": "Title", "required": True, "maxLength": 20},
        {"id": "duedate", "column": "due_date", "type": "date", "label": "Due Date"},
        {"id": "category", "type": "lov", "label": "Category", "lovTable": "task_category", "lovIcon": True},
        {"id": "priority", "type": "lov", "label": "Priority", "lovTable": "task_priority", "lovColumn": "label"},
        {"id": "complete", "type": "boolean", "label": "Complete"},
        {"id": "description", "type": "textmultiline", "label": "Description"},
        {"id": "url", "type": "url", "label": "Link"},
    ],
}


# ===== RECORDING RUNNER =====


class RecordingRunner:
    """Stands in for QueryRunner: records statements and returns canned rows."""

    def __init__(self):
        self.statements: List[Any] = []
        self.rows: Any = []

    def run(self, statement):
        self.statements.append(statement)
        if getattr(statement, "single_row", False):
            if isinstance(self.rows, list):
                return self.rows[0] if self.rows else None
            return self.rows
        return self.rows

    @property
    def last(self):
        return self.statements[-1] if self.statements else None


# ===== FIXTURES =====


@pytest.fixture
def settings() -> Settings:
    return Settings(schema="evolutility", page_size=50, lov_size=100, csv_size=1000, models_dir="models")


@pytest.fixture
def registry(settings) -> ModelRegistry:
    registry = ModelRegistry(settings)
    registry.register_all([ORDERS_MODEL, TODO_MODEL])
    return registry


@pytest.fixture
def orders(registry):
    return registry.require("orders")


@pytest.fixture
def todo(registry):
    return registry.require("todo")


@pytest.fixture
def builder(settings) -> QueryBuilder:
    return QueryBuilder(settings)


@pytest.fixture
def writer(settings) -> WriteStatementBuilder:
    return WriteStatementBuilder(settings)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def client(settings, registry, runner):
    """FastAPI test client whose database boundary is the recording runner"""
    app = create_app(settings)
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_query_runner] = lambda: runner

    with TestClient(app) as test_client:
        yield test_client

    # Clean up overrides
    app.dependency_overrides.clear()
