"""Exception hierarchy for slideshow rendering.

Every error keeps the underlying exception both as an attribute and as
``__cause__`` (callers raise with ``from``), and names the offending path
wherever one exists.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class SlidedeckError(Exception):
    """Base class for all slideshow errors."""


# === Rendering ===

class RenderError(SlidedeckError):
    """Rendering the document into the template failed."""


class ReadError(RenderError):
    """The document or the template could not be read."""

    def __init__(self, path: Path, err: OSError):
        self.path = path
        self.err = err
        super().__init__(f"Error reading {path}: {err}")


class TemplateRenderError(RenderError):
    """The template engine rejected or failed to evaluate the template."""

    def __init__(self, err: Exception):
        self.err = err
        super().__init__(f"Error rendering template: {err}")


class EncodingError(RenderError):
    """Bytes that are not valid UTF-8 where text was expected."""

    def __init__(self, path: Path, err: UnicodeError):
        self.path = path
        self.err = err
        super().__init__(f"{path} is not valid UTF-8: {err}")


# === Static files ===

class CopyStaticError(SlidedeckError):
    """Copying the static files directory failed."""


class StaticWalkError(CopyStaticError):
    """The static files directory could not be traversed."""

    def __init__(self, path: Path, err: OSError):
        self.path = path
        self.err = err
        super().__init__(f"Error traversing static files directory {path}: {err}")


class StaticPrefixError(CopyStaticError):
    """A path passed for copying is not inside the static files directory."""

    def __init__(self, path: Path, static_dir: Path):
        self.path = path
        self.static_dir = static_dir
        super().__init__(
            f"Error traversing static files directory: {path} is not under {static_dir}"
        )


class StaticCopyError(CopyStaticError):
    """A static file could not be copied."""

    def __init__(self, src: Path, dest: Path, err: OSError):
        self.src = src
        self.dest = dest
        self.err = err
        super().__init__(
            f"Error traversing static files directory, while copying {src} to {dest}: {err}"
        )


class StaticCreateDirError(CopyStaticError):
    """A directory in the output tree could not be created."""

    def __init__(self, dir: Path, err: OSError):
        self.dir = dir
        self.err = err
        super().__init__(
            f"Error traversing static files directory, while creating {dir}: {err}"
        )


# === Build ===

class BuildError(SlidedeckError):
    """Writing the rendered slideshow failed."""


class OutputFileError(BuildError):
    """The output directory or file could not be created."""

    def __init__(self, path: Path, err: OSError):
        self.path = path
        self.err = err
        super().__init__(f"Error creating output file {path}: {err}")


class OutputWriteError(BuildError):
    """The output file could not be written."""

    def __init__(self, path: Path, err: Exception):
        self.path = path
        self.err = err
        super().__init__(f"Error writing output file {path}: {err}")


# === Watching ===

class WatchError(SlidedeckError):
    """The filesystem watcher reported a fault."""

    def __init__(self, err: BaseException, path: Optional[Path] = None):
        self.err = err
        self.path = path
        if path is not None:
            super().__init__(f"Filesystem watcher error at {path}: {err}")
        else:
            super().__init__(f"Filesystem watcher error: {err}")


class ChannelClosedError(SlidedeckError):
    """The change notification queue was closed."""

    def __init__(self):
        super().__init__("Filesystem event channel closed")
