"""
Cross-section consistency of generated designs.

Every generated file must parse as Python, import each name it uses
exactly once, declare each interface it connects, and assign each base
address it references, with no two regions sharing an address.
"""

import ast
import builtins
import re

import pytest

from socgen.generator import generate_design
from socgen.model import DesignConfig

DOCUMENTS = {
    "empty": {},
    "empty_list": {"enabledBlocks": []},
    "cv32e40p_gpio": {
        "enabledBlocks": [
            {"id": "cv32e40p_core", "type": "digital"},
            {"id": "gpio_block", "type": "digital", "count": 2, "bitSize": 4},
        ]
    },
    "minerva_flash_uart": {
        "digitalBlocks": [
            {"id": "minerva", "enabled": True},
            {"id": "qspi_flash", "enabled": True},
            {"id": "uart0", "enabled": True, "count": 2},
        ]
    },
    "everything": {
        "enabledBlocks": [
            {"id": "cv32e40p_core", "type": "digital"},
            {"id": "minerva", "type": "digital"},
            {"id": "qspi_flash", "type": "digital"},
            {"id": "hyperram0", "type": "digital"},
            {"id": "sram0", "type": "digital"},
            {"id": "gpio_a", "type": "digital", "count": 3},
            {"id": "gpio_b", "type": "digital", "bitSize": 16},
            {"id": "uart0", "type": "digital"},
            {"id": "spi_a", "type": "digital", "count": 2},
            {"id": "spi_b", "type": "digital"},
            {"id": "i2c0", "type": "digital", "count": 2},
            {"id": "pwm0", "type": "digital"},
        ]
    },
    "ambiguous": {
        "digitalBlocks": [
            {"id": "uart_sram", "enabled": True},
            {"id": "qspi_spi", "enabled": True},
        ]
    },
}

IO_SIGNATURES = {
    "gpio": "GPIOSignature",
    "uart": "UARTSignature",
    "spi": "SPISignature",
    "i2c": "I2CSignature",
}


def _generate(name):
    return generate_design(DesignConfig.model_validate(DOCUMENTS[name]))


def _imported_names(tree):
    names = []
    for node in ast.walk(tree):
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            names.extend((alias.asname or alias.name).split(".")[0] for alias in node.names)
    return names


def _undefined_names(tree):
    defined = set(dir(builtins)) | set(_imported_names(tree))
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and isinstance(node.ctx, (ast.Store, ast.Del)):
            defined.add(node.id)
        elif isinstance(node, (ast.FunctionDef, ast.ClassDef)):
            defined.add(node.name)
        elif isinstance(node, ast.arg):
            defined.add(node.arg)
    used = {
        node.id
        for node in ast.walk(tree)
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Load)
    }
    return used - defined


def _declared_interfaces(source):
    return re.findall(r'^ {12}"(\w+)": Out\(', source, re.MULTILINE)


def _base_assignments(source):
    return dict(re.findall(r"^ {8}self\.(\w+_base)\s+= (0x[0-9a-f]+)$", source, re.MULTILINE))


@pytest.mark.parametrize("name", sorted(DOCUMENTS))
class TestArtifactConsistency:
    def test_parses_as_python(self, name):
        ast.parse(_generate(name))

    def test_every_used_name_is_imported(self, name):
        tree = ast.parse(_generate(name))
        assert _undefined_names(tree) == set()

    def test_imports_are_unique(self, name):
        names = _imported_names(ast.parse(_generate(name)))
        assert len(names) == len(set(names))

    def test_interfaces_match_connections(self, name):
        source = _generate(name)
        declared = _declared_interfaces(source)
        connected = set(re.findall(r"flipped\(self\.(\w+)\)", source))
        if "self.cpu_jtag." in source:
            connected.add("cpu_jtag")
        assert len(declared) == len(set(declared))
        assert set(declared) == connected

    def test_referenced_bases_are_assigned(self, name):
        source = _generate(name)
        assigned = _base_assignments(source)
        referenced = set(re.findall(r"self\.(\w+_base)\b", source))
        assert referenced <= set(assigned)

    def test_base_addresses_unique(self, name):
        addresses = list(_base_assignments(_generate(name)).values())
        assert len(addresses) == len(set(addresses))

    def test_io_instances_match_interfaces(self, name):
        source = _generate(name)
        for kind, signature in IO_SIGNATURES.items():
            declared = [n for n in _declared_interfaces(source) if n.startswith(f"{kind}_")]
            fragments = re.findall(rf"m\.submodules\.({kind}_\d+) = ", source)
            assert declared == fragments
            assert declared == [f"{kind}_{i}" for i in range(len(declared))]
            assert source.count(f"Out({signature}(") == len(declared)


@pytest.mark.parametrize(
    "blocks, kind, expected",
    [
        ([{"id": "gpio0", "count": 3}], "gpio", 3),
        ([{"id": "uart0", "count": 2}, {"id": "uart1"}], "uart", 3),
        ([{"id": "spi_a"}, {"id": "spi_b"}], "spi", 2),
        ([{"id": "i2c0", "count": 4}], "i2c", 4),
    ],
)
def test_count_expands_instances(blocks, kind, expected):
    design = DesignConfig.model_validate(
        {"digitalBlocks": [{"enabled": True, **block} for block in blocks]}
    )
    source = generate_design(design)
    names = re.findall(rf"m\.submodules\.({kind}_\d+) = ", source)
    assert names == [f"{kind}_{i}" for i in range(expected)]
    for i in range(expected):
        assert f'"{kind}_{i}": Out(' in source


@pytest.mark.parametrize("name", ["empty", "empty_list"])
def test_degenerate_documents_produce_minimal_design(name):
    source = _generate(name)
    assert _declared_interfaces(source) == []
    assert "cpu = " not in source
    assert len(re.findall(r"^ {8}# (SRAM|QSPI Flash|HyperRAM)$", source, re.MULTILINE)) == 1
    assert "        # SRAM\n" in source


def test_ambiguous_ids_counted_once():
    source = _generate("ambiguous")
    # uart_sram -> SRAM only, qspi_spi -> QSPI only
    assert "UARTPeripheral" not in source
    assert "SPIPeripheral" not in source
    assert '"flash": Out(QSPIFlashSignature())' in source
