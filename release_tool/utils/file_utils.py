"""File operation utilities"""

import json
import os
import re
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Union

import aiofiles

from ..constants import ENV_TEMP_DIR, TEMP_DIR_NAMESPACE


def resolve_path(prefix: Path, path: Union[str, Path]) -> Path:
    """
    Resolve a path against a prefix

    Args:
        prefix: Directory relative paths are resolved against
        path: Path to resolve (can be relative or absolute)

    Returns:
        Absolute path
    """
    candidate = Path(path).expanduser()

    if candidate.is_absolute():
        return candidate

    return prefix / candidate


async def read_json(file_path: Path) -> Any:
    """
    Read and parse a JSON file asynchronously

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed content
    """
    async with aiofiles.open(file_path, 'r', encoding='utf-8') as f:
        content = await f.read()

    return json.loads(content)


def find_files_matching(directory: Path, pattern: str) -> List[Path]:
    """
    Find files directly inside a directory whose name matches a regex

    Args:
        directory: Directory to scan
        pattern: Regular expression searched in each file name

    Returns:
        Sorted list of matching files
    """
    if not directory.is_dir():
        return []

    regex = re.compile(pattern)
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and regex.search(p.name)
    )


def overlay_directory(src: Path, dst: Path) -> int:
    """
    Copy a directory tree over another, replacing files that already exist

    Args:
        src: Source directory
        dst: Destination directory

    Returns:
        Number of files copied
    """
    count = 0

    for source_file in src.rglob('*'):
        if not source_file.is_file():
            continue

        target = dst / source_file.relative_to(src)
        ensure_parent_dir(target)
        shutil.copy2(source_file, target)
        count += 1

    return count


def ensure_parent_dir(file_path: Path) -> Path:
    """
    Ensure parent directory exists

    Args:
        file_path: File path

    Returns:
        Parent directory path
    """
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent)

    try:
        with os.fdopen(temp_fd, mode) as f:
            f.write(content)

        # Atomic rename
        os.replace(temp_path, file_path)

    except Exception:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


@contextmanager
def temporary_build_dir(label: str) -> Iterator[Path]:
    """
    Create a unique scratch directory that is removed on exit

    The directory lives under ``$RELEASE_TOOL_TEMP_DIR`` (or the system
    temp directory) in a ``release-tool`` namespace.

    Args:
        label: Prefix of the directory name, e.g. the platform

    Yields:
        Path of the created directory
    """
    base = Path(os.environ.get(ENV_TEMP_DIR) or tempfile.gettempdir()) / TEMP_DIR_NAMESPACE
    path = base / f"{label}.{uuid.uuid4().hex}"
    path.mkdir(parents=True, exist_ok=True)

    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
