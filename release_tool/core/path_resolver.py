"""Path resolution module for release-tool"""

from pathlib import Path
from typing import Dict, List

from ..constants import CONFIG_TEMPLATE_FILE
from ..models.config import ConfigInfo, ProjectSettings
from ..utils.file_utils import resolve_path


class PathResolver:
    """Resolves the paths a (config, platform) pair works with"""

    def __init__(self, settings: ProjectSettings):
        """Initialize path resolver

        Args:
            settings: Project settings of the current job
        """
        self.settings = settings

    @property
    def solution_root(self) -> Path:
        return self.settings.solution_root

    def resolve(self, path) -> Path:
        """Resolve a path relative to the solution root

        Args:
            path: Path to resolve (can be relative or absolute)

        Returns:
            Resolved absolute path
        """
        return resolve_path(self.solution_root, path)

    def get_environment_dir(self, config_name: str) -> Path:
        """Get the directory holding every platform of an environment"""
        return self.settings.configs_root / config_name

    def get_config_info(self, config_name: str, platform: str, project_name: str) -> ConfigInfo:
        """Resolve the paths of a pair

        A pair is escaped when the environment directory exists but has no
        sub-directory for the platform: the environment deliberately does
        not target it.

        Args:
            config_name: Environment name
            platform: Platform id
            project_name: Native project directory (relative to the solution root)

        Returns:
            ConfigInfo
        """
        environment_dir = self.get_environment_dir(config_name)
        config_path = environment_dir / platform.lower()
        project_path = self.resolve(project_name)

        return ConfigInfo(
            config_name=config_name,
            platform=platform,
            solution_path=self.settings.solution_path,
            project_path=project_path,
            template_path=project_path / CONFIG_TEMPLATE_FILE,
            config_path=config_path,
            escaped=environment_dir.is_dir() and not config_path.is_dir(),
        )

    def get_output_path(self, config_name: str, platform: str) -> Path:
        """Get the directory a pair's artifact is staged into

        Returns:
            ``<outputRoot>/<config>/<platform-lowercased>``
        """
        return self.settings.output_root / config_name / platform.lower()

    def list_environments(self) -> Dict[str, List[str]]:
        """List environments and the platforms each one targets

        Returns:
            Mapping of environment name to sorted platform directory names
        """
        configs_root = self.settings.configs_root
        if not configs_root.is_dir():
            return {}

        return {
            env_dir.name: sorted(p.name for p in env_dir.iterdir() if p.is_dir())
            for env_dir in sorted(configs_root.iterdir())
            if env_dir.is_dir()
        }
