"""
Pure section builders for the generated design.

Each builder takes grouped blocks (and settings) and returns a structured
section: an ``ImportSet``, a list of ``InterfaceDecl`` or a ``MemoryMap``.
The generator renders them; nothing here produces the final text.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from socgen.model import BlockGroups, BlockKind, GeneratorSettings, PeripheralInstance
from socgen.model.design import IO_KIND_ORDER
from socgen.utils import format_address

CSR_BASE = 0xB0000000
PERIPH_OFFSET = 0x00100000


@dataclass(frozen=True)
class PeripheralSpec:
    """How one IO kind is imported, declared and instantiated."""

    kind: BlockKind
    class_name: str
    signature_name: str
    constructor: str  # format string, fields: pin_count, uart_divisor
    pins_attr: str
    csr_base: str

    @property
    def label(self) -> str:
        return self.kind.value.upper()

    def signature_expr(self, instance: PeripheralInstance) -> str:
        if self.kind == BlockKind.GPIO:
            return f"{self.signature_name}(pin_count={instance.pin_count})"
        return f"{self.signature_name}()"

    def constructor_expr(self, instance: PeripheralInstance, settings: GeneratorSettings) -> str:
        return self.constructor.format(
            pin_count=instance.pin_count, uart_divisor=settings.uart_divisor_expr
        )


PERIPHERALS: Dict[BlockKind, PeripheralSpec] = {
    BlockKind.GPIO: PeripheralSpec(
        kind=BlockKind.GPIO,
        class_name="GPIOPeripheral",
        signature_name="GPIOSignature",
        constructor="GPIOPeripheral(pin_count={pin_count}, addr_width=5)",
        pins_attr="pins",
        csr_base="csr_gpio_base",
    ),
    BlockKind.UART: PeripheralSpec(
        kind=BlockKind.UART,
        class_name="UARTPeripheral",
        signature_name="UARTSignature",
        constructor="UARTPeripheral(init_divisor={uart_divisor}, addr_width=5)",
        pins_attr="pins",
        csr_base="csr_uart_base",
    ),
    BlockKind.SPI: PeripheralSpec(
        kind=BlockKind.SPI,
        class_name="SPIPeripheral",
        signature_name="SPISignature",
        constructor="SPIPeripheral()",
        pins_attr="spi_pins",
        csr_base="csr_spi_base",
    ),
    BlockKind.I2C: PeripheralSpec(
        kind=BlockKind.I2C,
        class_name="I2CPeripheral",
        signature_name="I2CSignature",
        constructor="I2CPeripheral()",
        pins_attr="i2c_pins",
        csr_base="csr_i2c_base",
    ),
}

# (module, names) imported when a memory or CPU kind is present.
KIND_IMPORTS: Dict[BlockKind, Tuple[str, Tuple[str, ...]]] = {
    BlockKind.QSPI: ("chipflow_digital_ip.memory", ("QSPIFlash",)),
    BlockKind.HYPERRAM: ("chipflow_digital_ip.memory", ("HyperRAM",)),
    BlockKind.CV32E40P: ("chipflow_digital_ip.processors", ("CV32E40P", "OBIDebugModule")),
    BlockKind.MINERVA: ("minerva.core", ("Minerva",)),
}


# --- Imports ---


class ImportSet:
    """Insertion-ordered, deduplicated ``from X import a, b`` statements.

    Names for the same module are aggregated into one statement. Statements
    are grouped by top-level package, groups separated by a blank line.
    """

    def __init__(self):
        self._modules: Dict[str, List[str]] = {}

    def add(self, module: str, *names: str) -> "ImportSet":
        bucket = self._modules.setdefault(module, [])
        for name in names:
            if name not in bucket:
                bucket.append(name)
        return self

    def __contains__(self, name: str) -> bool:
        return name in self.names

    @property
    def names(self) -> List[str]:
        """All imported identifiers in order."""
        return [name for names in self._modules.values() for name in names]

    def statements(self) -> List[str]:
        return [
            f"from {module} import {', '.join(names)}"
            for module, names in self._modules.items()
            if names
        ]

    def groups(self) -> List[List[str]]:
        grouped: Dict[str, List[str]] = {}
        for module, names in self._modules.items():
            if names:
                package = module.split(".")[0]
                grouped.setdefault(package, []).append(
                    f"from {module} import {', '.join(names)}"
                )
        return list(grouped.values())

    def render(self) -> str:
        return "\n\n".join("\n".join(group) for group in self.groups())


def build_imports(groups: BlockGroups, settings: GeneratorSettings) -> ImportSet:
    """Build the import section for the present block kinds."""
    imports = ImportSet()
    imports.add("pathlib", "Path")
    imports.add("amaranth", "Module")
    imports.add("amaranth.lib", "wiring")
    imports.add("amaranth.lib.wiring", "Out", "flipped", "connect")
    imports.add("amaranth_soc", "csr", "wishbone")
    imports.add("amaranth_soc.csr.wishbone", "WishboneCSRBridge")
    imports.add("amaranth_soc.wishbone.sram", "WishboneSRAM")
    imports.add("chipflow_digital_ip.base", "SoCID")

    for kind in (BlockKind.QSPI, BlockKind.HYPERRAM):
        if groups.has(kind):
            imports.add(KIND_IMPORTS[kind][0], *KIND_IMPORTS[kind][1])

    io_kinds = [kind for kind in IO_KIND_ORDER if groups.has(kind)]
    if io_kinds:
        imports.add("chipflow_digital_ip.io", *(PERIPHERALS[k].class_name for k in io_kinds))

    cpu_kind = groups.cpu_kind
    if cpu_kind is not None:
        imports.add(KIND_IMPORTS[cpu_kind][0], *KIND_IMPORTS[cpu_kind][1])

    platform = ["attach_data", "SoftwareBuild"]
    platform.extend(PERIPHERALS[k].signature_name for k in io_kinds)
    if groups.has(BlockKind.QSPI):
        platform.append("QSPIFlashSignature")
    if cpu_kind == BlockKind.CV32E40P:
        platform.append("JTAGSignature")
    imports.add(settings.platform_module, *platform)

    return imports


# --- Interfaces ---


@dataclass(frozen=True)
class InterfaceDecl:
    """One top-level ``"name": Out(signature)`` interface."""

    name: str
    signature: str

    def render(self) -> str:
        return f'"{self.name}": Out({self.signature})'


def build_interfaces(
    groups: BlockGroups, instances: Sequence[PeripheralInstance]
) -> List[InterfaceDecl]:
    """Build the external interface list: pin groups first, then IO instances."""
    interfaces = []
    if groups.has(BlockKind.QSPI):
        interfaces.append(InterfaceDecl("flash", "QSPIFlashSignature()"))
    if groups.has(BlockKind.HYPERRAM):
        interfaces.append(InterfaceDecl("hyperram", "HyperRAM.Signature(cs_count=1)"))
    if groups.cpu_kind == BlockKind.CV32E40P:
        interfaces.append(InterfaceDecl("cpu_jtag", "JTAGSignature()"))
    for instance in instances:
        spec = PERIPHERALS[instance.kind]
        interfaces.append(InterfaceDecl(instance.name, spec.signature_expr(instance)))
    return interfaces


# --- Memory map ---


@dataclass(frozen=True)
class MemoryRegion:
    """A named base address in the generated memory map."""

    name: str
    address: int
    section: str

    @property
    def hex(self) -> str:
        return format_address(self.address)


@dataclass(frozen=True)
class MapConstant:
    """A non-address constant rendered alongside the memory map."""

    name: str
    value: int
    width: int = 0
    comment: str = ""

    @property
    def literal(self) -> str:
        text = format_address(self.value, self.width)
        return f"{text}  # {self.comment}" if self.comment else text


SECTION_TITLES = (
    ("memory", "Memory regions:"),
    ("debug", "Debug region"),
    ("csr", "CSR regions:"),
)


@dataclass
class MemoryMap:
    """Base addresses and stride constants of the generated SoC."""

    regions: List[MemoryRegion] = field(default_factory=list)
    constants: List[MapConstant] = field(default_factory=list)

    def sections(self) -> List[Tuple[str, List[MemoryRegion]]]:
        """Regions grouped by section, each sorted by address."""
        result = []
        for key, title in SECTION_TITLES:
            regions = sorted(
                (r for r in self.regions if r.section == key), key=lambda r: r.address
            )
            if regions:
                result.append((title, regions))
        return result

    def address_of(self, name: str) -> Optional[int]:
        return next((r.address for r in self.regions if r.name == name), None)

    def duplicate_addresses(self) -> List[Tuple[str, str]]:
        """Return pairs of region names sharing an address."""
        seen: Dict[int, str] = {}
        duplicates = []
        for region in self.regions:
            if region.address in seen:
                duplicates.append((seen[region.address], region.name))
            else:
                seen[region.address] = region.name
        return duplicates

    @property
    def name_width(self) -> int:
        names = [r.name for r in self.regions] + [c.name for c in self.constants]
        return max(len(n) for n in names) if names else 0


def _size_comment(size: int) -> str:
    for unit, scale in (("MiB", 1 << 20), ("KiB", 1 << 10)):
        if size % scale == 0:
            return f"{size // scale}{unit}"
    return f"{size} bytes"


def build_memory_map(groups: BlockGroups, settings: GeneratorSettings) -> MemoryMap:
    """Build the memory map: fixed regions plus one per present optional kind."""
    regions = [
        MemoryRegion("mem_spiflash_base", 0x00000000, "memory"),
        MemoryRegion("mem_sram_base", 0x10000000, "memory"),
        MemoryRegion("debug_base", 0xA0000000, "debug"),
        MemoryRegion("csr_base", CSR_BASE, "csr"),
        MemoryRegion("csr_gpio_base", 0xB1000000, "csr"),
        MemoryRegion("csr_uart_base", 0xB2000000, "csr"),
        MemoryRegion("csr_soc_id_base", 0xB4000000, "csr"),
    ]
    if groups.has(BlockKind.QSPI):
        regions.append(MemoryRegion("csr_spiflash_base", 0xB3000000, "csr"))
    if groups.has(BlockKind.SPI):
        regions.append(MemoryRegion("csr_spi_base", 0xB5000000, "csr"))
    if groups.has(BlockKind.I2C):
        regions.append(MemoryRegion("csr_i2c_base", 0xB6000000, "csr"))
    if groups.has(BlockKind.HYPERRAM):
        regions.append(MemoryRegion("mem_hyperram_base", 0x20000000, "memory"))
        regions.append(MemoryRegion("csr_hyperram_base", 0xB7000000, "csr"))

    constants = [
        MapConstant("periph_offset", PERIPH_OFFSET, width=8),
        MapConstant("sram_size", settings.sram_size, comment=_size_comment(settings.sram_size)),
        MapConstant(
            "bios_start",
            settings.bios_start,
            comment="offset into spiflash, leaves room for a bitstream",
        ),
    ]
    return MemoryMap(regions=regions, constants=constants)
