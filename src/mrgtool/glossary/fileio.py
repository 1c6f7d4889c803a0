"""Filesystem primitives used when publishing merged glossaries.

Failures are reported through logging (with their diagnostic code) and
the boolean return value instead of being raised, so a failed write only
aborts the step that depends on it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .exceptions import DirectoryCreateFailure, FileOperationError, FileWriteFailure

logger = logging.getLogger(__name__)

ALIAS_LINK_CODE = "E009"


def _ensure_parent(path: Path) -> None:
    parent = path.parent
    if parent.is_dir():
        return
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateFailure(parent, exc) from exc


def _write(path: Path, data: str, force: bool) -> bool:
    _ensure_parent(path)
    if not force and path.exists():
        return False
    try:
        path.write_text(data, encoding="utf-8")
    except OSError as exc:
        raise FileWriteFailure(path, exc) from exc
    return True


def write_file(path: Path, data: str, force: bool = True) -> bool:
    """Create the directory tree for ``path`` and write ``data`` to it.

    Args:
        path: Target file path
        data: Text to write (UTF-8)
        force: Overwrite an existing file. When False an existing file
            is left untouched.

    Returns:
        True if the file was written, False if it was skipped or a
        directory-creation (E007) / file-write (E008) failure was reported.
    """
    path = Path(path)
    try:
        return _write(path, data, force)
    except FileOperationError as exc:
        logger.error("%s", exc)
        return False


def ensure_link(link_path: Path, target: str) -> bool:
    """Point ``link_path`` at ``target`` with a relative symlink.

    Whatever currently sits at ``link_path`` (file, symlink, or dangling
    symlink) is removed first. A failure at either step, including a
    removed link that could not be recreated, is reported as E009.

    Args:
        link_path: Alias path to (re)create
        target: Link target, relative to the alias' directory

    Returns:
        True if the link now points at ``target``.
    """
    link_path = Path(link_path)
    try:
        if link_path.is_symlink() or link_path.exists():
            link_path.unlink()
        os.symlink(target, link_path)
    except OSError as exc:
        failure = FileWriteFailure(link_path, exc, code=ALIAS_LINK_CODE)
        logger.error("%s", failure)
        return False
    return True
