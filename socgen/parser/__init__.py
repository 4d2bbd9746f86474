"""
Parsers for design configuration documents and generator settings.
"""

from .design_parser import DesignConfigParser, load_settings
from .errors import ParseError

__all__ = ["DesignConfigParser", "ParseError", "load_settings"]
