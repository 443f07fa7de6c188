# release_tool/processors/base.py
"""Artifact processor base class"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..constants import TASK_PROCESS_ARTIFACT
from ..models.result import ArtifactInfo, ProcessResult


class ArtifactProcessor(ABC):
    """Base class for steps that run on every produced artifact

    Processors run in registration order after a successful build. A
    processor reporting ``success=False`` fails the pair.
    """

    # Schema of the processor's own options, evaluated by the factory
    OPTIONS_SCHEMA: Dict[str, Any] = {}

    # Registry key in ``.release-tool.yaml``
    type_name: str = ""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize processor

        Args:
            config: Processor-specific configuration. Common keys:
                - name: Display name (defaults to the class name)
                - platforms: Platform ids to run on (defaults to all)
        """
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def name(self) -> str:
        return self.config.get("name") or self.type_name or self.__class__.__name__

    @property
    def platforms(self) -> List[str]:
        return [p.lower() for p in self.config.get("platforms") or []]

    @property
    def stage_name(self) -> str:
        """Task name recorded on the pair result"""
        return TASK_PROCESS_ARTIFACT.format(name=self.name)

    def supports(self, platform: str) -> bool:
        """Check if the processor runs for a platform"""
        return not self.platforms or platform.lower() in self.platforms

    @abstractmethod
    async def process(self, artifact_info: ArtifactInfo) -> ProcessResult:
        """
        Process a produced artifact

        Args:
            artifact_info: Artifact and the config it was built from

        Returns:
            ProcessResult
        """
        pass
