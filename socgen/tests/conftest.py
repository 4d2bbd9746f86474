import os
import sys

import pytest

# Add the project root to sys.path so that socgen is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from socgen.model import DesignConfig  # noqa: E402


@pytest.fixture
def make_design():
    """Build a DesignConfig from ``enabledBlocks`` entries (type defaults to digital)."""

    def _make(*blocks):
        entries = [{"type": "digital", **block} for block in blocks]
        return DesignConfig.model_validate({"enabledBlocks": entries})

    return _make


@pytest.fixture
def full_design(make_design):
    """A design touching every block kind."""
    return make_design(
        {"id": "cv32e40p_core"},
        {"id": "qspi_flash"},
        {"id": "hyperram_ctrl"},
        {"id": "sram_main"},
        {"id": "gpio_block", "count": 2, "bitSize": 4},
        {"id": "uart0"},
        {"id": "spi_a"},
        {"id": "spi_b", "count": 2},
        {"id": "i2c0"},
        {"id": "timer0"},
    )
