"""
Design source generators.
"""

from .soc_generator import SoCDesignGenerator, generate_design

__all__ = ["SoCDesignGenerator", "generate_design"]
