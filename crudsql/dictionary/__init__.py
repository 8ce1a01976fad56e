"""
Entity dictionary: declarative models describing fields, storage and relations.

Main Components:
- FieldType / FieldDefinition / CollectionDefinition / EntityModel
- ModelRegistry: read-only lookup of entity models by id
- field_types: pure predicates used for quoting, casting and operator legality
"""

from .models import CollectionDefinition, EntityModel, FieldDefinition, FieldType, SystemField
from .registry import ModelRegistry

__all__ = [
    "CollectionDefinition",
    "EntityModel",
    "FieldDefinition",
    "FieldType",
    "ModelRegistry",
    "SystemField",
]
