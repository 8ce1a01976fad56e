"""Model registry: entity models keyed by id, read-only once loaded."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from crudsql.core.config import Settings
from crudsql.core.exceptions import ConfigurationError, ModelNotFoundError
from crudsql.dictionary.models import EntityModel, FieldType, SystemField

logger = logging.getLogger(__name__)


def system_fields(settings: Settings) -> List[SystemField]:
    """Tracking columns enabled by configuration."""
    fields: List[SystemField] = []
    if settings.timestamps:
        fields.append(SystemField(id="created_at", column="created_at", type=FieldType.DATETIME))
        fields.append(SystemField(id="updated_at", column="updated_at", type=FieldType.DATETIME))
    if settings.who_is:
        fields.append(SystemField(id="created_by", column="created_by", type=FieldType.INTEGER))
        fields.append(SystemField(id="updated_by", column="updated_by", type=FieldType.INTEGER))
    return fields


class ModelRegistry:
    """Registry of all entity models in the application."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.models: Dict[str, EntityModel] = {}

    def register(self, model: Union[EntityModel, dict]) -> EntityModel:
        """Register a model (or a raw definition), qualified by the configured schema."""
        if not isinstance(model, EntityModel):
            try:
                model = EntityModel.model_validate(model)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid model definition: {e}") from e
        qualified = model.with_schema(self.settings.schema)
        self.models[qualified.id] = qualified
        logger.debug("Registered model %s (%s fields)", qualified.id, len(qualified.fields))
        return qualified

    def register_all(self, models: Iterable[Union[EntityModel, dict]]) -> None:
        for model in models:
            self.register(model)

    def load_directory(self, path: Union[str, Path]) -> int:
        """Load every ``*.json`` model file in ``path``; returns the count loaded."""
        directory = Path(path)
        if not directory.is_dir():
            logger.warning("Models directory %s not found, no models loaded", directory)
            return 0
        count = 0
        for file_path in sorted(directory.glob("*.json")):
            with open(file_path, "r", encoding="utf-8") as f:
                try:
                    definition = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Invalid JSON in {file_path}: {e}") from e
            self.register(definition)
            count += 1
        logger.info("Loaded %d models from %s", count, directory)
        return count

    def get(self, entity_id: str) -> Optional[EntityModel]:
        """Get a model by id, None when unknown."""
        return self.models.get(entity_id)

    def require(self, entity_id: str) -> EntityModel:
        model = self.get(entity_id)
        if model is None:
            raise ModelNotFoundError(entity_id)
        return model

    def entity_ids(self) -> List[str]:
        return list(self.models.keys())

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self.models

    def __len__(self) -> int:
        return len(self.models)
