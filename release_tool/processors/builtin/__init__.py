"""Built-in artifact processors"""

from .copy import CopyArtifactProcessor
from .command import CommandProcessor

__all__ = [
    "CopyArtifactProcessor",
    "CommandProcessor",
]
