# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# pcie_netfix/core/file_ops.py
"""
Atomic file operation utilities.

Provides utilities for safe file operations: atomic writes through a
temporary file in the target directory, mode preservation, and
collision-free backup copies.

Config text is read and written with `surrogateescape` and no newline
translation, so bytes that are not UTF-8 and CRLF line endings survive a
read/modify/write cycle unchanged.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def read_text_verbatim(path: Path) -> str:
    """Read `path` so that write_text_atomic() can restore it byte for byte."""
    with open(path, "r", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="") as f:
        return f.read()


def printable(text: str) -> str:
    """`text` with undecodable bytes shown as U+FFFD (safe for terminal output)."""
    return text.encode(TEXT_ENCODING, TEXT_ERRORS).decode(TEXT_ENCODING, "replace")


@contextmanager
def atomic_write(target_path: Path) -> Generator[Path, None, None]:
    """
    Yield a temporary path next to `target_path`; on clean exit it is renamed
    over the target, on any exception it is removed and the target is left
    as it was.

    Example:
        with atomic_write(Path("/etc/network/interfaces")) as temp_path:
            temp_path.write_text(data, encoding="utf-8")
    """
    target_path = Path(target_path)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory as target so os.replace() stays on one filesystem
    fd, temp_name = tempfile.mkstemp(prefix=f".{target_path.name}.", suffix=".part", dir=str(target_path.parent))
    os.close(fd)
    temp_path = Path(temp_name)

    try:
        yield temp_path
        os.replace(temp_path, target_path)
    except BaseException:
        safe_unlink(temp_path)
        raise


def write_text_atomic(path: Path, content: str, *, prefer_mode: Optional[int] = None) -> None:
    """
    Replace `path` with `content` atomically, keeping the original file mode.

    The data is fsync'ed before the rename and the parent directory is
    fsync'ed after it (best effort), so a crash leaves either the old or
    the new file in place.
    """
    path = Path(path)
    try:
        mode: Optional[int] = path.stat().st_mode & 0o7777
    except FileNotFoundError:
        mode = prefer_mode

    with atomic_write(path) as tmp:
        with open(tmp, "w", encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(tmp, mode)

    fsync_dir(path.parent)


def fsync_dir(directory: Path) -> None:
    try:
        dfd = os.open(str(directory), os.O_DIRECTORY)
    except OSError:
        return
    try:
        os.fsync(dfd)
    except OSError:
        pass
    finally:
        os.close(dfd)


def unique_path(path: Path) -> Path:
    """
    Return `path` if it does not exist, else the first free `path.N` (N = 1, 2, ...).
    """
    path = Path(path)
    if not path.exists():
        return path
    n = 1
    while True:
        candidate = path.with_name(f"{path.name}.{n}")
        if not candidate.exists():
            return candidate
        n += 1


def copy_verbatim(src: Path, dst: Path) -> Path:
    """
    Copy `src` byte-for-byte to a free name derived from `dst`. Returns the path written.
    """
    target = unique_path(dst)
    shutil.copy2(str(src), str(target))
    return target


def safe_unlink(path: Path, missing_ok: bool = True) -> None:
    """
    Delete a file, optionally ignoring if it doesn't exist.
    """
    try:
        Path(path).unlink()
    except FileNotFoundError:
        if not missing_ok:
            raise
    except OSError:
        pass
