"""Static file mirroring - copies the static directory into the output tree."""

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, FrozenSet, Tuple

from .errors import StaticCopyError, StaticCreateDirError, StaticPrefixError, StaticWalkError

logger = logging.getLogger(__name__)


def _create_dir(dest: Path) -> None:
    if dest.is_dir():
        return
    logger.info(f"Creating directory: {dest}")
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StaticCreateDirError(dest, e) from e


def copy_single_static(path: Path, static_dir: Path, output_dir: Path) -> Path:
    """Copy one file or directory from the static directory to the output.

    Directories are created (with parents) if missing; files are copied
    byte-for-byte, following symbolic links and overwriting the destination.

    Args:
        path: File or directory inside ``static_dir``.
        static_dir: Root of the static files tree.
        output_dir: Root of the output tree.

    Returns:
        The destination path.

    Raises:
        StaticPrefixError: If ``path`` is not inside ``static_dir``.
        StaticCreateDirError: If a destination directory cannot be created.
        StaticCopyError: If the file cannot be copied.
    """
    path = Path(path)
    try:
        rel = path.relative_to(static_dir)
    except ValueError as e:
        raise StaticPrefixError(path, static_dir) from e
    dest = output_dir / rel

    if path.is_dir():
        _create_dir(dest)
    else:
        _create_dir(dest.parent)
        logger.info(f"Copying {path} -> {dest}")
        try:
            shutil.copy(path, dest)
        except OSError as e:
            raise StaticCopyError(path, dest, e) from e
    return dest


def _dir_identity(path: str) -> Tuple[int, int]:
    try:
        st = os.stat(path)
    except OSError as e:
        raise StaticWalkError(Path(path), e) from e
    return st.st_dev, st.st_ino


def copy_static(static_dir: Path, output_dir: Path) -> int:
    """Mirror the whole static directory into the output directory.

    The walk is top-down and follows symbolic links. A link back to one of
    its own ancestor directories is reported as a walk error. A failure
    aborts the copy; entries already copied are left in place.

    Returns:
        Number of files copied.

    Raises:
        CopyStaticError: On any traversal, directory or copy failure,
            including a missing static directory.
    """
    def on_error(err: OSError) -> None:
        raise StaticWalkError(Path(err.filename or static_dir), err) from err

    # dirpath -> identities of the directories on its path from the root
    ancestors: Dict[str, FrozenSet[Tuple[int, int]]] = {}
    copied = 0
    for dirpath, dirnames, filenames in os.walk(static_dir, onerror=on_error, followlinks=True):
        dirnames.sort()
        chain = ancestors.pop(dirpath, None) or frozenset([_dir_identity(dirpath)])
        for name in dirnames:
            child = os.path.join(dirpath, name)
            identity = _dir_identity(child)
            if identity in chain:
                loop = OSError(errno.ELOOP, "Symbolic link loop", child)
                raise StaticWalkError(Path(child), loop)
            ancestors[child] = chain | {identity}

        copy_single_static(Path(dirpath), static_dir, output_dir)
        for filename in sorted(filenames):
            copy_single_static(Path(dirpath) / filename, static_dir, output_dir)
            copied += 1

    logger.info(f"Copied {copied} static files from {static_dir}")
    return copied
