"""Result models for builder and processor operations"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass
class InstallResult:
    """Result of installing a config into a native project"""

    installed_config_name: str
    config_settings: Dict[str, Any] = field(default_factory=dict)
    config: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "installed_config_name": self.installed_config_name,
            "config_settings": dict(self.config_settings),
        }


@dataclass
class BuildResult:
    """Result of a native build

    An unsuccessful build is a normal result, not an exception.
    """

    success: bool
    output_artifact_path: Optional[Path] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    message: Optional[str] = None
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "success": self.success,
            "duration": self.duration,
        }

        if self.output_artifact_path:
            data["output_artifact_path"] = str(self.output_artifact_path)
        if self.message:
            data["message"] = self.message

        return data


@dataclass(frozen=True)
class ArtifactInfo:
    """Everything a processor needs to know about a produced artifact"""

    artifact_path: Path
    config_name: str
    platform: str
    config: Dict[str, Any] = field(default_factory=dict)
    config_settings: Dict[str, Any] = field(default_factory=dict)
    store_release: bool = False


@dataclass
class ProcessResult:
    """Result of an artifact processor"""

    success: bool
    message: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"success": self.success, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data
