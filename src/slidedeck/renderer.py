"""Render a Markdown document into a slideshow template.

Pipeline flow:
    1. Read the document and the template (UTF-8)
    2. Parse the document into block tokens (footnotes and tables enabled)
    3. Split the tokens into slides
    4. Serialize the slides to an HTML fragment
    5. Substitute the fragment into the template as ``content``
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Union

from jinja2 import BaseLoader, Environment, TemplateError

from .errors import EncodingError, ReadError, TemplateRenderError
from .markdown_parser import parse_markdown, render_tokens
from .slideshow import Slideshow

logger = logging.getLogger(__name__)


@dataclass
class TemplateContext:
    """Variables available to the slideshow template."""
    content: str


def create_environment(newline_sequence: str = "\n") -> Environment:
    """Create the template environment.

    Rendered slides are HTML already, so autoescaping stays off, and the
    template's trailing newline is kept so output matches the template byte
    for byte outside the substitution. Jinja normalizes line endings to
    ``newline_sequence``, so callers pass the template's own.
    """
    return Environment(
        loader=BaseLoader(),
        autoescape=False,
        keep_trailing_newline=True,
        newline_sequence=newline_sequence,
    )


def read_text(path: Union[str, Path]) -> str:
    """Read a UTF-8 text file.

    Raises:
        ReadError: If the file cannot be opened or read.
        EncodingError: If the file is not valid UTF-8.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ReadError(path, e) from e
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise EncodingError(path, e) from e


def render_slides(markdown_text: str) -> str:
    """Render Markdown text to slide-delimited HTML."""
    tokens, state = parse_markdown(markdown_text)
    slideshow = Slideshow(tokens)
    html = render_tokens(slideshow, state)
    logger.info(f"Rendered {slideshow.slide_count} slides")
    return html


def render_template(template_source: str, context: TemplateContext) -> str:
    """Substitute the context into template text.

    Raises:
        TemplateRenderError: On template syntax or evaluation errors.
    """
    try:
        newline = "\r\n" if "\r\n" in template_source else "\n"
        template = create_environment(newline).from_string(template_source)
        return template.render(**asdict(context))
    except TemplateError as e:
        raise TemplateRenderError(e) from e


def render(input_file: Union[str, Path], template: Union[str, Path]) -> str:
    """Render a Markdown document into a slideshow page.

    Args:
        input_file: Path to the Markdown document.
        template: Path to the template containing ``{{content}}``.

    Returns:
        The complete page. Nothing is written to disk.

    Raises:
        RenderError: If a file cannot be read or decoded, or the template
            fails to render.
    """
    logger.info(f"Rendering {input_file} with template {template}")
    markdown_text = read_text(input_file)
    template_source = read_text(template)

    context = TemplateContext(content=render_slides(markdown_text))
    return render_template(template_source, context)
