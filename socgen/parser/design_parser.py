"""
Parser for design configuration documents.

Loads JSON (or YAML, selected by file suffix) and converts it to the
``DesignConfig`` model. Every failure at this boundary surfaces as a
``ParseError`` carrying the file and, where known, the line.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ValidationError

from socgen.model import DesignConfig, GeneratorSettings

from .errors import ParseError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yml", ".yaml")


def _format_validation_error(e: ValidationError) -> str:
    errors = []
    for error in e.errors():
        loc = " -> ".join(str(x) for x in error["loc"]) or "document"
        errors.append(f"{loc}: {error['msg']}")
    return "Validation failed:\n  " + "\n  ".join(errors)


def _load_text(text: str, fmt: str, file_path: Optional[Path]) -> Any:
    """Decode JSON or YAML text into Python data."""
    if fmt == "yaml":
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line_num = mark.line + 1 if mark else None
            col_num = mark.column + 1 if mark else None
            raise ParseError(f"YAML syntax error: {e}", file_path, line_num, col_num)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"JSON syntax error: {e.msg}", file_path, e.lineno, e.colno)


def _read_file(file_path: Union[str, Path]) -> Path:
    file_path = Path(file_path).resolve()
    if not file_path.exists():
        raise ParseError(f"File not found: {file_path}")
    return file_path


def _validate(model: type, data: Any, file_path: Optional[Path]) -> BaseModel:
    if not isinstance(data, dict):
        raise ParseError("Root element must be an object/dictionary", file_path)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ParseError(_format_validation_error(e), file_path)


class DesignConfigParser:
    """
    Parser for configurator design documents.

    Handles:
    - JSON files (configurator export) and YAML files
    - Both block list shapes (``enabledBlocks`` / ``digitalBlocks``)
    - Validation and error reporting with line numbers
    """

    def parse_file(self, file_path: Union[str, Path]) -> DesignConfig:
        """
        Parse a design configuration file.

        Args:
            file_path: Path to the JSON or YAML document

        Returns:
            DesignConfig: Validated document

        Raises:
            ParseError: If reading, decoding or validation fails
        """
        file_path = _read_file(file_path)
        fmt = "yaml" if file_path.suffix.lower() in YAML_SUFFIXES else "json"
        text = file_path.read_text(encoding="utf-8")
        logger.debug("Parsing %s as %s", file_path, fmt)
        return self.parse_string(text, fmt=fmt, file_path=file_path)

    def parse_string(
        self, text: str, fmt: str = "json", file_path: Optional[Path] = None
    ) -> DesignConfig:
        """Parse a design document from text (``fmt`` is 'json' or 'yaml')."""
        if fmt not in ("json", "yaml"):
            raise ValueError(f"Unsupported format: {fmt}. Supported: ['json', 'yaml']")
        return self.parse_data(_load_text(text, fmt, file_path), file_path)

    def parse_data(self, data: Any, file_path: Optional[Path] = None) -> DesignConfig:
        """Validate already-decoded data into a ``DesignConfig``."""
        design = _validate(DesignConfig, data, file_path)
        logger.debug("Loaded design with %d selected blocks", len(design.selected_blocks))
        return design


def load_settings(file_path: Union[str, Path]) -> GeneratorSettings:
    """
    Load generator settings from a YAML file.

    An empty file yields the default settings.

    Raises:
        ParseError: If reading, decoding or validation fails
    """
    file_path = _read_file(file_path)
    data = _load_text(file_path.read_text(encoding="utf-8"), "yaml", file_path)
    if data is None:
        return GeneratorSettings()
    return _validate(GeneratorSettings, data, file_path)

