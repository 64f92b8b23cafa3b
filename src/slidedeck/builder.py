"""Build orchestration: static files, rendering and the output file.

Build flow:
    1. Mirror the static directory into the output directory
    2. Create the output directory if needed
    3. Render the document into the template
    4. Overwrite ``<output_dir>/index.html`` with the result
"""

import logging
from pathlib import Path

from .config import Config
from .errors import OutputFileError, OutputWriteError
from .renderer import render
from .static_files import copy_single_static, copy_static

logger = logging.getLogger(__name__)


class SlideshowBuilder:
    """Produces a complete output tree from the configured inputs."""

    def __init__(self, config: Config):
        """Initialize the builder with configuration.

        Args:
            config: Configuration object with paths and settings.
        """
        self.config = config
        self.input_path = config.input_path
        self.template_path = config.template_path
        self.static_dir = config.static_dir
        self.output_dir = config.output_dir

    @property
    def output_file(self) -> Path:
        return self.config.output_file

    def copy_static(self) -> int:
        """Copy the whole static directory into the output directory."""
        return copy_static(self.static_dir, self.output_dir)

    def copy_single_static(self, path: Path) -> Path:
        """Copy one changed file or directory from the static directory."""
        return copy_single_static(Path(path), self.static_dir, self.output_dir)

    def make_output_dir(self) -> None:
        if self.output_dir.exists():
            return
        logger.info(f"Creating output directory: {self.output_dir}")
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputFileError(self.output_dir, e) from e

    def render_string(self) -> str:
        """Render the slideshow page without writing it."""
        return render(self.input_path, self.template_path)

    def write_output(self) -> Path:
        """Render the slideshow and overwrite the output file with it.

        Returns:
            Path of the written file.

        Raises:
            RenderError: If rendering fails; the output file is untouched.
            OutputFileError: If the output file cannot be created.
            OutputWriteError: If writing the output file fails.
        """
        html = self.render_string()
        output = self.output_file
        try:
            f = open(output, 'w', encoding='utf-8', newline='')
        except OSError as e:
            raise OutputFileError(output, e) from e
        # Buffered data reaches the disk on close, so closing counts as writing
        try:
            with f:
                f.write(html)
        except (OSError, UnicodeError) as e:
            raise OutputWriteError(output, e) from e
        logger.info(f"Wrote {output}")
        return output

    def build(self) -> Path:
        """Run a full build.

        Raises:
            SlidedeckError: The first copy, render or write failure; partial
                static copies are left in place.
        """
        self.copy_static()
        self.make_output_dir()
        return self.write_output()
