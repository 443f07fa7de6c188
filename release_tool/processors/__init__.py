"""Artifact processors"""

from .base import ArtifactProcessor
from .factory import ProcessorFactory

__all__ = [
    "ArtifactProcessor",
    "ProcessorFactory",
]
