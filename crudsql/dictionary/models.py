"""
Entity model definitions.

Models are loaded from JSON (camelCase keys) into frozen pydantic models and
shared read-only across requests.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Closed set of field types known to the query compiler."""

    TEXT = "text"
    TEXTML = "textmultiline"
    HTML = "html"
    EMAIL = "email"
    URL = "url"
    INTEGER = "integer"
    DECIMAL = "decimal"
    MONEY = "money"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    LOV = "lov"  # foreign key into a lookup table
    LIST = "list"  # multi-select list of lookup values
    IMAGE = "image"
    DOCUMENT = "document"
    COLOR = "color"
    JSON = "json"


class _DictionaryModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
    )


class FieldDefinition(_DictionaryModel):
    """One field of an entity."""

    id: str
    type: FieldType = FieldType.TEXT
    column: Optional[str] = None
    label: Optional[str] = None
    lov_table: Optional[str] = None
    lov_column: Optional[str] = None
    lov_icon: bool = False
    in_many: bool = False
    in_search: bool = False
    required: bool = False
    read_only: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    reg_exp: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def default_column(cls, data):
        if isinstance(data, dict) and not data.get("column") and data.get("id"):
            data = {**data, "column": data["id"]}
        return data

    @model_validator(mode="after")
    def check_lookup_table(self) -> "FieldDefinition":
        is_lookup = self.type in (FieldType.LOV, FieldType.LIST)
        if is_lookup and not self.lov_table:
            raise ValueError(f"Field '{self.id}' of type {self.type.value} requires lovTable")
        if not is_lookup and self.lov_table:
            raise ValueError(f"Field '{self.id}' of type {self.type.value} cannot have lovTable")
        return self

    @property
    def display_label(self) -> str:
        return self.label or self.id


class CollectionDefinition(_DictionaryModel):
    """A one-to-many relation listed under its parent record."""

    id: str
    table: str
    column: str  # foreign key back to the owning entity
    fields: List[FieldDefinition]
    label: Optional[str] = None
    order_by: Optional[str] = None
    order: str = "asc"

    @model_validator(mode="after")
    def check_fields(self) -> "CollectionDefinition":
        if not self.fields:
            raise ValueError(f"Collection '{self.id}' must define at least one field")
        if self.order.lower() not in ("asc", "desc"):
            raise ValueError(f"Collection '{self.id}' order must be 'asc' or 'desc'")
        return self

    @property
    def order_by_sql(self) -> str:
        column = self.order_by or self.fields[0].column
        direction = "DESC" if self.order.lower() == "desc" else "ASC"
        return f'"{column}" {direction}'


class SystemField(_DictionaryModel):
    """Tracking column maintained by the engine (timestamps, who-is)."""

    id: str
    column: str
    type: FieldType


class EntityModel(_DictionaryModel):
    """Declarative description of one business object."""

    id: str
    table: str
    label: Optional[str] = None
    pkey: str = "id"
    schema_table: str = ""
    fields: List[FieldDefinition]
    search_fields: Optional[List[str]] = None
    collections: List[CollectionDefinition] = Field(default_factory=list)

    fields_by_id: Dict[str, FieldDefinition] = Field(default_factory=dict, exclude=True)
    collections_by_id: Dict[str, CollectionDefinition] = Field(default_factory=dict, exclude=True)

    @model_validator(mode="after")
    def build_indexes(self) -> "EntityModel":
        if not self.fields:
            raise ValueError(f"Model '{self.id}' must define at least one field")
        fields_by_id = {f.id: f for f in self.fields}
        if len(fields_by_id) != len(self.fields):
            raise ValueError(f"Model '{self.id}' has duplicate field ids")
        pkey_field = fields_by_id.get(self.pkey)
        if pkey_field is not None and pkey_field.type not in (FieldType.INTEGER, FieldType.LOV):
            raise ValueError(f"Primary key '{self.pkey}' of model '{self.id}' must be an integer field")
        if self.search_fields is None:
            in_search = [f.id for f in self.fields if f.in_search]
            if in_search:
                object.__setattr__(self, "search_fields", in_search)
        for fid in self.search_fields or []:
            if fid not in fields_by_id:
                raise ValueError(f"Search field '{fid}' is not a field of model '{self.id}'")
        # frozen model: indexes are derived once, here
        object.__setattr__(self, "fields_by_id", fields_by_id)
        object.__setattr__(self, "collections_by_id", {c.id: c for c in self.collections})
        if not self.schema_table:
            object.__setattr__(self, "schema_table", f'"{self.table}"')
        return self

    def field(self, field_id: str) -> Optional[FieldDefinition]:
        return self.fields_by_id.get(field_id)

    def collection(self, collection_id: str) -> Optional[CollectionDefinition]:
        return self.collections_by_id.get(collection_id)

    def with_schema(self, schema: str) -> "EntityModel":
        """Copy of this model whose table is qualified by ``schema``."""
        return self.model_copy(update={"schema_table": f'"{schema}"."{self.table}"'})

