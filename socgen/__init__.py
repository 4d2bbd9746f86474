"""socgen: generate ChipFlow SoC ``design.py`` files from configurator JSON."""

from socgen.generator import SoCDesignGenerator, generate_design
from socgen.model import DesignConfig, GeneratorSettings
from socgen.parser import DesignConfigParser, ParseError

__version__ = "0.1.0"

__all__ = [
    "DesignConfig",
    "DesignConfigParser",
    "GeneratorSettings",
    "ParseError",
    "SoCDesignGenerator",
    "generate_design",
]
