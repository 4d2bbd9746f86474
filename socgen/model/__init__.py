"""
Pydantic-based data models for design configuration documents.

The configurator's JSON document is validated into ``DesignConfig``; its
blocks are resolved to a closed ``BlockKind`` set and grouped for the
generator.
"""

from .base import DesignBaseModel, FlexibleModel, StrictModel
from .block import (
    KIND_KEYWORDS,
    BlockCategory,
    BlockDescriptor,
    BlockKind,
    classify_block_id,
    matching_kinds,
)
from .design import (
    BlockGroups,
    DesignConfig,
    PeripheralInstance,
    expand_io_instances,
    group_blocks,
)
from .settings import GeneratorSettings

__all__ = [
    # Base
    "DesignBaseModel",
    "StrictModel",
    "FlexibleModel",
    # Blocks
    "BlockCategory",
    "BlockDescriptor",
    "BlockKind",
    "KIND_KEYWORDS",
    "classify_block_id",
    "matching_kinds",
    # Document
    "DesignConfig",
    "BlockGroups",
    "PeripheralInstance",
    "group_blocks",
    "expand_io_instances",
    # Settings
    "GeneratorSettings",
]
