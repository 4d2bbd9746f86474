"""
Base models for design configuration documents.

Provides shared base models with centralized configuration for all
schema classes, so ``model_config`` is declared in one place.

Architecture Decision:
    Two ``extra`` policies exist on purpose:
    StrictModel (extra="forbid") is for objects we author ourselves
    (GeneratorSettings) where extra fields indicate user typos.
    FlexibleModel (extra="ignore") is for configurator documents
    (DesignConfig, BlockDescriptor) which carry UI-only keys such as
    ``name`` or ``category`` that the generator does not consume.
"""

from typing import Any

from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel

from socgen.utils import filter_none


class DesignBaseModel(BaseModel):
    """Base model with shared configuration for all schema models.

    Provides camelCase aliasing, assignment validation, and allows field
    population by either alias or Python name.
    """

    model_config = {
        "validate_assignment": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def drop_null_values(cls, data: Any) -> Any:
        """Treat explicit ``null`` values as absent so field defaults apply."""
        if isinstance(data, dict):
            return filter_none(data)
        return data


class StrictModel(DesignBaseModel):
    """Base model that forbids unknown fields."""

    model_config = {
        **DesignBaseModel.model_config,
        "extra": "forbid",
    }


class FlexibleModel(DesignBaseModel):
    """Base model that silently ignores unknown fields."""

    model_config = {
        **DesignBaseModel.model_config,
        "extra": "ignore",
    }
