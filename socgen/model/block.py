"""
Block descriptors and their classification.

A block descriptor is one selectable hardware unit from the configurator.
Its ``id`` is the only classification key: the kind is resolved once by
scanning ``KIND_KEYWORDS`` in priority order and taking the first keyword
contained in the id.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import Field, ValidationInfo, field_validator

from .base import FlexibleModel


DEFAULT_GPIO_PIN_COUNT = 8


class BlockCategory(str, Enum):
    """Coarse grouping used to lay out the generated design."""

    PROCESSOR = "processor"
    MEMORY = "memory"
    IO = "io"
    OTHER = "other"


class BlockKind(str, Enum):
    """Closed set of block kinds the generator knows how to instantiate."""

    CV32E40P = "cv32e40p"
    MINERVA = "minerva"
    QSPI = "qspi"
    HYPERRAM = "hyperram"
    SRAM = "sram"
    GPIO = "gpio"
    UART = "uart"
    SPI = "spi"
    I2C = "i2c"
    OTHER = "other"

    @property
    def category(self) -> BlockCategory:
        return _KIND_CATEGORIES[self]


_KIND_CATEGORIES = {
    BlockKind.CV32E40P: BlockCategory.PROCESSOR,
    BlockKind.MINERVA: BlockCategory.PROCESSOR,
    BlockKind.QSPI: BlockCategory.MEMORY,
    BlockKind.HYPERRAM: BlockCategory.MEMORY,
    BlockKind.SRAM: BlockCategory.MEMORY,
    BlockKind.GPIO: BlockCategory.IO,
    BlockKind.UART: BlockCategory.IO,
    BlockKind.SPI: BlockCategory.IO,
    BlockKind.I2C: BlockCategory.IO,
    BlockKind.OTHER: BlockCategory.OTHER,
}

# Priority order: first match wins. "qspi" must precede "spi".
KIND_KEYWORDS: Tuple[Tuple[str, BlockKind], ...] = (
    ("cv32e40p", BlockKind.CV32E40P),
    ("minerva", BlockKind.MINERVA),
    ("qspi", BlockKind.QSPI),
    ("hyperram", BlockKind.HYPERRAM),
    ("sram", BlockKind.SRAM),
    ("gpio", BlockKind.GPIO),
    ("uart", BlockKind.UART),
    ("spi", BlockKind.SPI),
    ("i2c", BlockKind.I2C),
)


def matching_kinds(block_id: str) -> List[BlockKind]:
    """Return every kind whose keyword occurs in ``block_id``, in priority order.

    A QSPI id also contains ``spi``; that overlap is expected and is not
    reported as a separate match.
    """
    kinds = [kind for keyword, kind in KIND_KEYWORDS if keyword in block_id]
    if BlockKind.QSPI in kinds and block_id.count("spi") == block_id.count("qspi"):
        kinds.remove(BlockKind.SPI)
    return kinds


def classify_block_id(block_id: str) -> BlockKind:
    """Resolve a block id to its kind.

    Examples:
        >>> classify_block_id("gpio_block")
        <BlockKind.GPIO: 'gpio'>
        >>> classify_block_id("qspi_flash")
        <BlockKind.QSPI: 'qspi'>
        >>> classify_block_id("timer")
        <BlockKind.OTHER: 'other'>
    """
    for keyword, kind in KIND_KEYWORDS:
        if keyword in block_id:
            return kind
    return BlockKind.OTHER


class BlockDescriptor(FlexibleModel):
    """
    One configurable hardware unit entry in the configuration document.

    Entries are kept loose so that blocks dropped by selection never fail
    the document: ``id`` is only required once a block is selected.
    ``type`` and ``enabled`` drive selection, ``count`` and ``bit_size``
    (``bitSize``) size IO peripherals.
    """

    id: Optional[str] = Field(
        default=None, description="Block identifier, matched against kind keywords"
    )
    type: Optional[str] = Field(default=None, description="Category tag, e.g. 'digital'")
    enabled: Optional[bool] = Field(default=None, description="Selection flag")
    count: int = Field(default=1, ge=1, description="Number of instances")
    bit_size: Optional[int] = Field(default=None, ge=1, description="GPIO pin count")

    @field_validator("id")
    @classmethod
    def normalize_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("count", "bit_size", mode="before")
    @classmethod
    def default_non_positive(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat zero, negative or empty sizes as unset, like ``count || 1``."""
        if not v or (isinstance(v, (int, float)) and v < 1):
            return 1 if info.field_name == "count" else None
        return v

    @property
    def kind(self) -> BlockKind:
        return classify_block_id(self.id or "")

    @property
    def category(self) -> BlockCategory:
        return self.kind.category

    @property
    def is_ambiguous(self) -> bool:
        """Check if the id matches keywords of more than one kind."""
        return len(matching_kinds(self.id or "")) > 1

    @property
    def pin_count(self) -> int:
        """Effective GPIO pin count."""
        return self.bit_size or DEFAULT_GPIO_PIN_COUNT
