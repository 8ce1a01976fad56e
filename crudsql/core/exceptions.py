# crudsql/core/exceptions.py
"""Errors raised while compiling statements.

Every compilation error short-circuits before a statement reaches the
database. Unrecognized filter input is never an error: it is dropped and
logged by the filter compiler.
"""

from typing import Any, Dict, List, Optional


class ConfigurationError(Exception):
    """Invalid startup configuration or model definition."""


class CrudError(Exception):
    """Base class for request-time compilation failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"detail": self.message}


class ModelNotFoundError(CrudError):
    def __init__(self, entity_id: str):
        super().__init__(f'Invalid model: "{entity_id}".')
        self.entity_id = entity_id


class CollectionNotFoundError(CrudError):
    def __init__(self, entity_id: str, collection_id: str):
        super().__init__(f'Invalid collection: "{collection_id}" in model "{entity_id}".')
        self.entity_id = entity_id
        self.collection_id = collection_id


class InvalidIdentifierError(CrudError):
    def __init__(self, record_id: Any):
        super().__init__(f'Invalid id: "{record_id}".')
        self.record_id = record_id


class InvalidFieldError(CrudError):
    def __init__(self, field_id: str):
        super().__init__(f"Invalid field '{field_id}'.")
        self.field_id = field_id


class EmptyRecordError(CrudError):
    def __init__(self, entity_id: str):
        super().__init__(f'No values submitted for model "{entity_id}".')
        self.entity_id = entity_id


class InvalidRecordError(CrudError):
    """One or more submitted values failed validation."""

    status_code = 422

    def __init__(self, invalids: List[Any]):
        super().__init__("Invalid record")
        self.invalids = invalids

    @property
    def field_ids(self) -> List[str]:
        return [invalid.id for invalid in self.invalids]

    def to_payload(self, detail: Optional[str] = None) -> Dict[str, Any]:
        return {
            "error": detail or self.message,
            "invalids": [invalid.to_dict() for invalid in self.invalids],
        }


class RecordNotFoundError(CrudError):
    status_code = 404

    def __init__(self, entity_id: str, record_id: Any):
        super().__init__(f'Record "{record_id}" not found in model "{entity_id}".')
        self.entity_id = entity_id
        self.record_id = record_id
