"""Markdown parsing and HTML serialization.

The document is parsed by mistune in AST mode into a flat list of block
tokens (dicts keyed by ``type``), which the slide segmenter rewrites before
they are handed to mistune's HTML renderer. Footnotes and tables are enabled
on both sides so that plugin tokens produced by the parser have a matching
renderer method.
"""

import logging
from typing import Any, Dict, Iterable, List, Tuple

import mistune
from mistune.core import BlockState

logger = logging.getLogger(__name__)

# mistune plugins enabled for slideshow documents
MARKDOWN_PLUGINS = ['footnotes', 'table']


def create_parser() -> mistune.Markdown:
    """Create a Markdown parser producing block tokens instead of HTML."""
    return mistune.create_markdown(renderer='ast', plugins=MARKDOWN_PLUGINS)


def create_serializer() -> mistune.Markdown:
    """Create a Markdown instance whose renderer turns tokens into HTML.

    Raw HTML in the document (and the slide markers) passes through
    unescaped.
    """
    return mistune.create_markdown(escape=False, plugins=MARKDOWN_PLUGINS)


def parse_markdown(text: str) -> Tuple[List[Dict[str, Any]], BlockState]:
    """Parse Markdown text into block tokens.

    Args:
        text: Markdown document.

    Returns:
        Tuple of (tokens, parser_state). The state must be passed back to
        :func:`render_tokens` along with the tokens.
    """
    tokens, state = create_parser().parse(text)
    logger.debug(f"Parsed {len(tokens)} block tokens")
    return tokens, state


def render_tokens(tokens: Iterable[Dict[str, Any]], state: BlockState) -> str:
    """Serialize block tokens to an HTML fragment."""
    return create_serializer().renderer(tokens, state)


def markdown_to_html(text: str) -> str:
    """Render a Markdown document to HTML without slide segmentation."""
    tokens, state = parse_markdown(text)
    return render_tokens(tokens, state)
