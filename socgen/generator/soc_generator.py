"""
ChipFlow SoC ``design.py`` generator.

Turns a configuration document into an Amaranth ``wiring.Component``
source file:
- imports matching the instantiated modules
- top-level interfaces for flash, HyperRAM, CPU JTAG and each IO instance
- memory map constants
- CPU, memory and IO instantiation sections wired into the Wishbone
  arbiter/decoder and the CSR decoder
- SoC ID, Wishbone-CSR bridge, software build and Verilog entry point
"""

import logging
from typing import Any, Dict, List, Optional

from socgen.generator.base_generator import BaseGenerator
from socgen.generator.sections import (
    PERIPHERALS,
    build_imports,
    build_interfaces,
    build_memory_map,
)
from socgen.model import (
    BlockGroups,
    BlockKind,
    DesignConfig,
    GeneratorSettings,
    PeripheralInstance,
    group_blocks,
)
from socgen.model.validators import MAX_INSTANCES_PER_CSR_WINDOW

logger = logging.getLogger(__name__)


class SoCDesignGenerator(BaseGenerator):
    """Generator for a single-file ChipFlow SoC design.

    Rendering is deterministic: the same document and settings always give
    byte-identical output.
    """

    CPU_TEMPLATES = {
        BlockKind.CV32E40P: "cpu_cv32e40p.j2",
        BlockKind.MINERVA: "cpu_minerva.j2",
    }

    def __init__(
        self, settings: Optional[GeneratorSettings] = None, template_dir: Optional[str] = None
    ):
        super().__init__(template_dir)
        self.settings = settings or GeneratorSettings()

    def render_cpu_section(self, groups: BlockGroups) -> str:
        """Render the CPU block, or an empty string when there is no CPU."""
        cpu_kind = groups.cpu_kind
        if cpu_kind is None:
            return ""
        return self.env.get_template(self.CPU_TEMPLATES[cpu_kind]).render()

    def render_memory_section(self, groups: BlockGroups) -> str:
        """Render memory blocks. The baseline SRAM is always present."""
        fragments = []
        if groups.has(BlockKind.QSPI):
            fragments.append(self.env.get_template("memory_qspi.j2").render())
        if groups.has(BlockKind.HYPERRAM):
            fragments.append(self.env.get_template("memory_hyperram.j2").render())
        fragments.append(self.env.get_template("memory_sram.j2").render())
        return "\n\n".join(fragments)

    def render_io_section(self, instances: List[PeripheralInstance]) -> str:
        """Render one fragment per IO instance."""
        template = self.env.get_template("io_peripheral.j2")
        fragments = []
        for instance in instances:
            spec = PERIPHERALS[instance.kind]
            fragments.append(
                template.render(
                    label=spec.label,
                    name=instance.name,
                    index=instance.index,
                    constructor=spec.constructor_expr(instance, self.settings),
                    csr_base=spec.csr_base,
                    pins_attr=spec.pins_attr,
                )
            )
        return "\n\n".join(fragments)

    def _get_template_context(self, design: DesignConfig) -> Dict[str, Any]:
        """Build the context for the top-level template."""
        groups = group_blocks(design.selected_blocks)
        instances = groups.io_instances
        memory_map = build_memory_map(groups, self.settings)

        duplicates = memory_map.duplicate_addresses()
        if duplicates:
            logger.warning("Memory map regions share addresses: %s", duplicates)

        totals: Dict[BlockKind, int] = {}
        for instance in instances:
            totals[instance.kind] = totals.get(instance.kind, 0) + 1
        for kind, total in totals.items():
            if total > MAX_INSTANCES_PER_CSR_WINDOW:
                logger.warning(
                    "%d %s instances overflow the CSR window (max %d)",
                    total,
                    kind.value,
                    MAX_INSTANCES_PER_CSR_WINDOW,
                )

        sections = [
            self.render_cpu_section(groups),
            self.render_memory_section(groups),
            self.render_io_section(instances),
        ]
        logger.debug(
            "Rendering design: cpu=%s, %d io instances",
            groups.cpu.id if groups.cpu else None,
            len(instances),
        )

        return {
            "class_name": self.settings.class_name,
            "imports": build_imports(groups, self.settings).render(),
            "interfaces": build_interfaces(groups, instances),
            "memory_map": memory_map,
            "name_width": memory_map.name_width,
            "sections": [s for s in sections if s],
            "has_flash": groups.has(BlockKind.QSPI),
            "soc_type_id": f"0x{self.settings.soc_type_id:08X}",
            "software_dir": self.settings.software_dir,
            "verilog_output": self.settings.verilog_output,
        }

    def generate(self, design: DesignConfig) -> str:
        """Generate ``design.py`` source text."""
        template = self.env.get_template("design.py.j2")
        rendered = template.render(**self._get_template_context(design))
        return rendered.rstrip("\n") + "\n"


def generate_design(design: DesignConfig, settings: Optional[GeneratorSettings] = None) -> str:
    """
    Generate ``design.py`` source for a configuration document.

    Args:
        design: Validated configuration document
        settings: Optional generator settings (defaults when omitted)

    Returns:
        Generated source text
    """
    return SoCDesignGenerator(settings).generate(design)
