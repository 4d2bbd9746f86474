"""
Base generator interface for design source generation.

Holds the Jinja2 environment and the file-writing helper shared by
concrete generators. Templates are loaded from a 'templates' subdirectory.
"""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from socgen.model import DesignConfig


class BaseGenerator(ABC):
    """
    Abstract base class for design source generators.

    Subclasses implement ``generate``; rendering is pure and the only
    I/O happens in ``write_file``.
    """

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the generator with Jinja2 environment.

        Args:
            template_dir: Optional custom template directory.
                Defaults to the 'templates' directory next to this module.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    @abstractmethod
    def generate(self, design: DesignConfig) -> str:
        """
        Generate the design source for a configuration document.

        Args:
            design: Validated configuration document

        Returns:
            Generated source text
        """
        pass

    def write_file(self, design: DesignConfig, output_path: Union[str, Path]) -> Path:
        """
        Generate and write the design source to ``output_path``.

        Parent directories are created as needed.

        Returns:
            The written file path
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate(design))
        return output_path
