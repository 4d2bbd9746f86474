"""Generator settings: knobs of the emitted design that are not block-driven."""

from pydantic import Field, field_validator

from .base import StrictModel


class GeneratorSettings(StrictModel):
    """
    Constants rendered into the generated design.

    Defaults reproduce the stock ChipFlow SoC template. Override them with
    a YAML file (see ``socgen.parser.load_settings``).
    """

    class_name: str = Field(default="MySoC", description="Generated component class name")
    sram_size: int = Field(default=0x800, gt=0, description="Baseline SRAM size in bytes")
    bios_start: int = Field(
        default=0x100000,
        ge=0,
        description="Reset vector offset into SPI flash, leaving room for a bitstream",
    )
    soc_type_id: int = Field(default=0xCA7F100F, ge=0, description="SoCID type identifier")
    clock_frequency: int = Field(default=25_000_000, gt=0, description="System clock in Hz")
    uart_baud_rate: int = Field(default=115200, gt=0, description="UART baud rate")
    software_dir: str = Field(default="design/software", description="C sources for SoftwareBuild")
    verilog_output: str = Field(default="build/soc_top.v", description="Verilog output path")
    platform_module: str = Field(
        default="chipflow_lib.platforms",
        description="Module providing signatures, attach_data and SoftwareBuild",
    )

    @field_validator("class_name")
    @classmethod
    def validate_class_name(cls, v: str) -> str:
        v = v.strip()
        if not v.isidentifier():
            raise ValueError(f"class_name must be a Python identifier, got '{v}'")
        return v

    @field_validator("platform_module")
    @classmethod
    def validate_platform_module(cls, v: str) -> str:
        v = v.strip()
        if not all(part.isidentifier() for part in v.split(".")):
            raise ValueError(f"platform_module must be a dotted module path, got '{v}'")
        return v

    @property
    def uart_divisor_expr(self) -> str:
        return f"int({self.clock_frequency}//{self.uart_baud_rate})"
