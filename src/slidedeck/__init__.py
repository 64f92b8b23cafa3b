"""Markdown slideshow renderer package."""

from .builder import SlideshowBuilder
from .config import Config, parse_log_level, setup_logging
from .errors import (
    SlidedeckError,
    RenderError,
    ReadError,
    TemplateRenderError,
    EncodingError,
    CopyStaticError,
    BuildError,
    WatchError,
    ChannelClosedError,
)
from .markdown_parser import parse_markdown, render_tokens, markdown_to_html
from .renderer import render, render_slides, TemplateContext
from .slideshow import Slideshow, segment_slides, SLIDE_OPEN, SLIDE_CLOSE
from .static_files import copy_static, copy_single_static

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "Config",
    "parse_log_level",
    "setup_logging",
    # Errors
    "SlidedeckError",
    "RenderError",
    "ReadError",
    "TemplateRenderError",
    "EncodingError",
    "CopyStaticError",
    "BuildError",
    "WatchError",
    "ChannelClosedError",
    # Markdown
    "parse_markdown",
    "render_tokens",
    "markdown_to_html",
    # Slides
    "Slideshow",
    "segment_slides",
    "SLIDE_OPEN",
    "SLIDE_CLOSE",
    # Rendering
    "render",
    "render_slides",
    "TemplateContext",
    # Building
    "SlideshowBuilder",
    "copy_static",
    "copy_single_static",
]
