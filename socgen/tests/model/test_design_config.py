"""Tests for DesignConfig block selection and grouping."""

import logging

import pytest
from pydantic import ValidationError

from socgen.model import (
    BlockDescriptor,
    BlockKind,
    DesignConfig,
    expand_io_instances,
    group_blocks,
)


class TestSelectedBlocks:
    def test_enabled_blocks_filtered_by_type(self):
        design = DesignConfig.model_validate(
            {
                "enabledBlocks": [
                    {"id": "uart0", "type": "digital"},
                    {"id": "adc0", "type": "analog"},
                    {"id": "gpio0"},
                ]
            }
        )
        assert [b.id for b in design.selected_blocks] == ["uart0"]

    def test_digital_blocks_filtered_by_enabled(self):
        design = DesignConfig.model_validate(
            {
                "digitalBlocks": [
                    {"id": "uart0", "enabled": True},
                    {"id": "gpio0", "enabled": False},
                    {"id": "spi0"},
                ]
            }
        )
        assert [b.id for b in design.selected_blocks] == ["uart0"]

    def test_neither_shape_selects_nothing(self):
        assert DesignConfig.model_validate({}).selected_blocks == []

    def test_null_list_treated_as_absent(self):
        design = DesignConfig.model_validate(
            {"enabledBlocks": None, "digitalBlocks": [{"id": "uart0", "enabled": True}]}
        )
        assert [b.id for b in design.selected_blocks] == ["uart0"]

    def test_empty_enabled_blocks_still_wins(self):
        design = DesignConfig.model_validate(
            {"enabledBlocks": [], "digitalBlocks": [{"id": "uart0", "enabled": True}]}
        )
        assert design.selected_blocks == []

    def test_both_shapes_prefers_enabled_blocks(self, caplog):
        design = DesignConfig.model_validate(
            {
                "enabledBlocks": [{"id": "gpio0", "type": "digital"}],
                "digitalBlocks": [{"id": "uart0", "enabled": True}],
            }
        )
        assert design.has_both_shapes
        with caplog.at_level(logging.WARNING):
            assert [b.id for b in design.selected_blocks] == ["gpio0"]
        assert "Both enabledBlocks and digitalBlocks" in caplog.text

    def test_snake_case_names_accepted(self):
        design = DesignConfig(enabled_blocks=[BlockDescriptor(id="uart0", type="digital")])
        assert len(design.selected_blocks) == 1

    def test_config_carried_through(self):
        design = DesignConfig.model_validate(
            {"digitalBlocks": [], "config": {"projectName": "demo"}}
        )
        assert design.config == {"projectName": "demo"}

    def test_dropped_block_with_zero_count_does_not_fail(self):
        design = DesignConfig.model_validate(
            {
                "enabledBlocks": [
                    {"id": "adc0", "type": "analog", "count": 0},
                    {"id": "uart0", "type": "digital"},
                ]
            }
        )
        assert [i.name for i in group_blocks(design.selected_blocks).io_instances] == ["uart_0"]

    def test_disabled_block_without_id_does_not_fail(self):
        design = DesignConfig.model_validate(
            {
                "digitalBlocks": [
                    {"name": "pad ring", "enabled": False},
                    {"id": "uart0", "enabled": True},
                ]
            }
        )
        assert [i.name for i in group_blocks(design.selected_blocks).io_instances] == ["uart_0"]

    def test_selected_block_without_id_rejected(self):
        with pytest.raises(ValidationError, match=r"digitalBlocks\[1\]"):
            DesignConfig.model_validate(
                {"digitalBlocks": [{"id": "uart0", "enabled": True}, {"enabled": True}]}
            )

    def test_selected_zero_count_means_one_instance(self):
        design = DesignConfig.model_validate(
            {"enabledBlocks": [{"id": "gpio0", "type": "digital", "count": 0, "bitSize": 0}]}
        )
        instances = group_blocks(design.selected_blocks).io_instances
        assert [(i.name, i.pin_count) for i in instances] == [("gpio_0", 8)]


class TestGroupBlocks:
    def test_partition(self):
        blocks = [
            BlockDescriptor(id="minerva_cpu"),
            BlockDescriptor(id="qspi_flash"),
            BlockDescriptor(id="uart0"),
            BlockDescriptor(id="timer"),
        ]
        groups = group_blocks(blocks)
        assert [b.id for b in groups.processors] == ["minerva_cpu"]
        assert [b.id for b in groups.memory] == ["qspi_flash"]
        assert [b.id for b in groups.io] == ["uart0"]
        assert [b.id for b in groups.other] == ["timer"]

    def test_each_block_in_exactly_one_group(self):
        blocks = [BlockDescriptor(id="uart_sram"), BlockDescriptor(id="qspi_flash")]
        groups = group_blocks(blocks)
        total = len(groups.processors) + len(groups.memory) + len(groups.io) + len(groups.other)
        assert total == 2
        assert not groups.has(BlockKind.SPI)
        assert not groups.has(BlockKind.UART)

    def test_ambiguous_block_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            group_blocks([BlockDescriptor(id="uart_sram")])
        assert "uart_sram" in caplog.text

    def test_first_processor_is_cpu(self, caplog):
        blocks = [BlockDescriptor(id="minerva"), BlockDescriptor(id="cv32e40p")]
        with caplog.at_level(logging.WARNING):
            groups = group_blocks(blocks)
        assert groups.cpu.id == "minerva"
        assert groups.cpu_kind == BlockKind.MINERVA
        assert "only 'minerva' is instantiated" in caplog.text

    def test_no_cpu(self):
        groups = group_blocks([BlockDescriptor(id="uart0")])
        assert groups.cpu is None
        assert groups.cpu_kind is None

    def test_empty(self):
        groups = group_blocks([])
        assert groups.processors == ()
        assert groups.io_instances == []


class TestExpandIoInstances:
    def test_count_expands(self):
        instances = expand_io_instances([BlockDescriptor(id="gpio0", count=3)])
        assert [i.name for i in instances] == ["gpio_0", "gpio_1", "gpio_2"]

    def test_running_index_across_blocks(self):
        instances = expand_io_instances(
            [BlockDescriptor(id="spi_a"), BlockDescriptor(id="spi_b", count=2)]
        )
        assert [i.name for i in instances] == ["spi_0", "spi_1", "spi_2"]
        assert [i.block.id for i in instances] == ["spi_a", "spi_b", "spi_b"]

    def test_indices_are_per_kind(self):
        instances = expand_io_instances(
            [
                BlockDescriptor(id="uart0"),
                BlockDescriptor(id="gpio0", count=2),
                BlockDescriptor(id="uart1"),
            ]
        )
        assert [i.name for i in instances] == ["gpio_0", "gpio_1", "uart_0", "uart_1"]

    def test_kind_order(self):
        instances = expand_io_instances(
            [
                BlockDescriptor(id="i2c0"),
                BlockDescriptor(id="spi0"),
                BlockDescriptor(id="uart0"),
                BlockDescriptor(id="gpio0"),
            ]
        )
        assert [i.kind for i in instances] == [
            BlockKind.GPIO,
            BlockKind.UART,
            BlockKind.SPI,
            BlockKind.I2C,
        ]

    def test_pin_count_follows_block(self):
        instances = expand_io_instances(
            [BlockDescriptor(id="gpio_a", bit_size=4), BlockDescriptor(id="gpio_b")]
        )
        assert [i.pin_count for i in instances] == [4, 8]

    def test_non_io_blocks_skipped(self):
        assert expand_io_instances([BlockDescriptor(id="timer")]) == []
