"""Project settings and per-pair path models"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..api.exceptions import SetupError
from ..constants import (
    ENV_CONFIG_FILE,
    ENV_RESOURCES_DIR,
    DEFAULT_CONFIGS_DIR,
    DEFAULT_OUTPUT_DIR,
)
from ..core.config_evaluator import NormalizedValue, Property, evaluate
from ..utils.file_utils import resolve_path


PROJECT_OPTIONS_SCHEMA = {
    "project": {
        "solutionPath": Property("string"),
        "configsPath": Property("string").default(DEFAULT_CONFIGS_DIR),
        "outputPath": Property("string").default(DEFAULT_OUTPUT_DIR),
    }
}


def _value(node: Any) -> Any:
    return node.value if isinstance(node, NormalizedValue) else node


@dataclass(frozen=True)
class ProjectSettings:
    """Project-level settings shared by every pair of a job"""

    solution_path: Path
    configs_path: str
    output_path: str

    @property
    def solution_root(self) -> Path:
        """Parent directory of the solution file"""
        return self.solution_path.parent

    @property
    def configs_root(self) -> Path:
        """Absolute configs directory"""
        return resolve_path(self.solution_root, self.configs_path)

    @property
    def output_root(self) -> Path:
        """Absolute output directory"""
        return resolve_path(self.solution_root, self.output_path)

    @classmethod
    def from_options(cls, options: Dict[str, Any]) -> 'ProjectSettings':
        """
        Create from the evaluated ``project`` options section

        Args:
            options: Normalized ``project`` section

        Returns:
            ProjectSettings
        """
        return cls(
            solution_path=Path(_value(options["solutionPath"])).expanduser().resolve(),
            configs_path=_value(options["configsPath"]),
            output_path=_value(options["outputPath"]),
        )

    @classmethod
    def evaluate(cls, options: Dict[str, Any]) -> 'ProjectSettings':
        """
        Validate raw options and build the project settings

        Args:
            options: Raw options containing a ``project`` section

        Returns:
            ProjectSettings

        Raises:
            SetupError: If the ``project`` section is not valid
        """
        result = evaluate(PROJECT_OPTIONS_SCHEMA, options)
        if not result.is_valid:
            raise SetupError("Project options are not valid.", result.errors)
        return cls.from_options(result.config["project"])

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary"""
        return {
            "solution_path": str(self.solution_path),
            "configs_path": str(self.configs_root),
            "output_path": str(self.output_root),
        }


@dataclass(frozen=True)
class ConfigInfo:
    """Resolved paths for one (config, platform) pair"""

    config_name: str
    platform: str
    solution_path: Path
    project_path: Path
    template_path: Path
    config_path: Path
    escaped: bool = False

    @property
    def config_file(self) -> Path:
        """The environment's config.json"""
        return self.config_path / ENV_CONFIG_FILE

    @property
    def resources_path(self) -> Path:
        """The environment's optional resource bundle"""
        return self.config_path / ENV_RESOURCES_DIR

    @property
    def label(self) -> str:
        """Friendly ``config (platform)`` label"""
        return f"{self.config_name} ({self.platform})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "config_name": self.config_name,
            "platform": self.platform,
            "solution_path": str(self.solution_path),
            "project_path": str(self.project_path),
            "template_path": str(self.template_path),
            "config_path": str(self.config_path),
            "escaped": self.escaped,
        }

