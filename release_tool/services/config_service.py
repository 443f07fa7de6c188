"""Configuration file service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import ENV_CONFIG_PATH, PROJECT_CONFIG_FILE


class ConfigService:
    """Service for locating and loading ``.release-tool.yaml``"""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config service

        Args:
            config_path: Explicit configuration file. When omitted,
                ``$RELEASE_TOOL_CONFIG`` and then the current directory
                are tried.
        """
        self.config_path = self.locate(config_path)
        self.logger = logging.getLogger(self.__class__.__name__)
        self._config: Optional[Dict[str, Any]] = None

    @staticmethod
    def locate(config_path: Optional[Path] = None) -> Path:
        """Resolve which configuration file to use"""
        if config_path:
            return Path(config_path).expanduser().resolve()

        env_path = os.environ.get(ENV_CONFIG_PATH)
        if env_path:
            return Path(env_path).expanduser().resolve()

        return Path.cwd() / PROJECT_CONFIG_FILE

    @property
    def config(self) -> Dict[str, Any]:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    @property
    def options(self) -> Dict[str, Any]:
        """Project and platform sections, as consumed by builders"""
        return {key: value for key, value in self.config.items() if key != "processors"}

    @property
    def processor_configs(self) -> List[Dict[str, Any]]:
        """Artifact processor entries, in execution order"""
        processors = self.config.get("processors") or []
        if not isinstance(processors, list):
            raise ConfigError("'processors' must be a list")
        return processors

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file

        Returns:
            Raw configuration mapping

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        if not self.config_path.is_file():
            raise ConfigError(f"Configuration file not found: {self.config_path}")

        # Expand environment variables in the file
        with open(self.config_path, 'r', encoding='utf-8') as f:
            content = os.path.expandvars(f.read())

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping")

        self._resolve_solution_path(data)
        self.logger.debug(f"Loaded configuration from {self.config_path}")

        self._config = data
        return self._config

    def _resolve_solution_path(self, data: Dict[str, Any]) -> None:
        project = data.get("project")
        if not isinstance(project, dict):
            return

        solution_path = project.get("solutionPath")
        if isinstance(solution_path, str) and solution_path:
            path = Path(solution_path).expanduser()
            if not path.is_absolute():
                project["solutionPath"] = str(self.config_path.parent / path)
