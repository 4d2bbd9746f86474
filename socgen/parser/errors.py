"""Shared parser exceptions."""

from pathlib import Path
from typing import Optional


class ParseError(Exception):
    """Error while loading a configuration or settings document.

    ``line`` and ``column`` are 1-based, as reported by the JSON and YAML
    decoders.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            location = f"Line: {self.line}"
            if self.column is not None:
                location += f", Column: {self.column}"
            parts.append(location)
        parts.append(message)
        return " | ".join(parts)
