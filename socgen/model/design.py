"""Design configuration document and block grouping."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import Field, model_validator

from .base import FlexibleModel
from .block import BlockCategory, BlockDescriptor, BlockKind

logger = logging.getLogger(__name__)

DIGITAL_BLOCK_TYPE = "digital"

# Emission order of IO kinds in the generated design.
IO_KIND_ORDER: Tuple[BlockKind, ...] = (
    BlockKind.GPIO,
    BlockKind.UART,
    BlockKind.SPI,
    BlockKind.I2C,
)


class DesignConfig(FlexibleModel):
    """
    Top-level configuration document.

    Two shapes are accepted:
    - ``enabledBlocks`` (configurator export): blocks with ``type == "digital"``
    - ``digitalBlocks`` (hand-written files): blocks with ``enabled == true``

    When both are present ``enabledBlocks`` wins.
    """

    enabled_blocks: Optional[List[BlockDescriptor]] = Field(
        default=None, description="Configurator export, filtered by type"
    )
    digital_blocks: Optional[List[BlockDescriptor]] = Field(
        default=None, description="Direct block list, filtered by enabled flag"
    )
    config: Optional[Dict[str, Any]] = Field(
        default=None, description="Configurator settings, carried through unused"
    )

    @property
    def has_both_shapes(self) -> bool:
        return self.enabled_blocks is not None and self.digital_blocks is not None

    def _selection(self) -> Tuple[str, List[Tuple[int, BlockDescriptor]]]:
        """Return the source list name and its selected (position, block) pairs."""
        if self.enabled_blocks is not None:
            return "enabledBlocks", [
                (i, b) for i, b in enumerate(self.enabled_blocks) if b.type == DIGITAL_BLOCK_TYPE
            ]
        if self.digital_blocks is not None:
            return "digitalBlocks", [
                (i, b) for i, b in enumerate(self.digital_blocks) if b.enabled is True
            ]
        return "", []

    @model_validator(mode="after")
    def check_selected_ids(self) -> "DesignConfig":
        source, selected = self._selection()
        missing = [f"{source}[{i}]" for i, block in selected if block.id is None]
        if missing:
            raise ValueError(f"Selected blocks need an id: {', '.join(missing)}")
        return self

    @property
    def selected_blocks(self) -> List[BlockDescriptor]:
        """Resolve which list is populated and apply its filter."""
        if self.has_both_shapes:
            logger.warning("Both enabledBlocks and digitalBlocks present; using enabledBlocks")
        return [block for _, block in self._selection()[1]]


@dataclass(frozen=True)
class PeripheralInstance:
    """One expanded IO peripheral instance."""

    kind: BlockKind
    index: int
    block: BlockDescriptor

    @property
    def name(self) -> str:
        return f"{self.kind.value}_{self.index}"

    @property
    def pin_count(self) -> int:
        return self.block.pin_count


@dataclass(frozen=True)
class BlockGroups:
    """Selected blocks partitioned by category, in document order."""

    processors: Tuple[BlockDescriptor, ...] = ()
    memory: Tuple[BlockDescriptor, ...] = ()
    io: Tuple[BlockDescriptor, ...] = ()
    other: Tuple[BlockDescriptor, ...] = ()

    @property
    def cpu(self) -> Optional[BlockDescriptor]:
        """The single active CPU: the first processor block, if any."""
        return self.processors[0] if self.processors else None

    @property
    def cpu_kind(self) -> Optional[BlockKind]:
        return self.cpu.kind if self.cpu else None

    def of_kind(self, kind: BlockKind) -> List[BlockDescriptor]:
        pool = {
            BlockCategory.PROCESSOR: self.processors,
            BlockCategory.MEMORY: self.memory,
            BlockCategory.IO: self.io,
            BlockCategory.OTHER: self.other,
        }[kind.category]
        return [b for b in pool if b.kind == kind]

    def has(self, kind: BlockKind) -> bool:
        return bool(self.of_kind(kind))

    @property
    def io_instances(self) -> List[PeripheralInstance]:
        return expand_io_instances(self.io)


def group_blocks(blocks: Sequence[BlockDescriptor]) -> BlockGroups:
    """Partition blocks into processor, memory, io and other groups.

    Each block lands in exactly one group, chosen by its resolved kind.
    """
    buckets: Dict[BlockCategory, List[BlockDescriptor]] = {c: [] for c in BlockCategory}
    for block in blocks:
        if block.is_ambiguous:
            logger.warning(
                "Block id '%s' matches several kinds; classified as '%s'",
                block.id,
                block.kind.value,
            )
        buckets[block.category].append(block)

    groups = BlockGroups(
        processors=tuple(buckets[BlockCategory.PROCESSOR]),
        memory=tuple(buckets[BlockCategory.MEMORY]),
        io=tuple(buckets[BlockCategory.IO]),
        other=tuple(buckets[BlockCategory.OTHER]),
    )
    if len(groups.processors) > 1:
        logger.warning(
            "%d processor blocks selected; only '%s' is instantiated",
            len(groups.processors),
            groups.processors[0].id,
        )
    logger.debug(
        "Grouped %d blocks: %d processor, %d memory, %d io, %d other",
        len(blocks),
        len(groups.processors),
        len(groups.memory),
        len(groups.io),
        len(groups.other),
    )
    return groups


def expand_io_instances(io_blocks: Sequence[BlockDescriptor]) -> List[PeripheralInstance]:
    """Expand IO blocks by ``count`` into indexed instances.

    Indices run per kind across all blocks of that kind, so two ``spi``
    blocks with ``count: 1`` become ``spi_0`` and ``spi_1``. Instances are
    ordered by ``IO_KIND_ORDER``, then by document order.
    """
    instances: List[PeripheralInstance] = []
    for kind in IO_KIND_ORDER:
        next_index = 0
        for block in io_blocks:
            if block.kind != kind:
                continue
            instances.extend(
                PeripheralInstance(kind=kind, index=next_index + i, block=block)
                for i in range(block.count)
            )
            next_index += block.count
    return instances
