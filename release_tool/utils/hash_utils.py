"""Artifact checksum utilities"""

import hashlib
from pathlib import Path
from typing import Tuple

import aiofiles

CHUNK_SIZE = 64 * 1024


async def digest_file(file_path: Path, algorithm: str = "sha256") -> Tuple[str, int]:
    """
    Hash a file without blocking the event loop

    Args:
        file_path: Path to file
        algorithm: Any algorithm known to :mod:`hashlib`

    Returns:
        Hex digest and the number of bytes read
    """
    digest = hashlib.new(algorithm)
    size = 0

    async with aiofiles.open(file_path, 'rb') as f:
        while chunk := await f.read(CHUNK_SIZE):
            digest.update(chunk)
            size += len(chunk)

    return digest.hexdigest(), size
