# release_tool/builders/base.py
"""Platform builder abstract base class"""

import asyncio
import functools
import logging
import time
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..api.exceptions import InstallError, SchemaError
from ..constants import ReleaseChannel
from ..core.config_evaluator import evaluate, iter_values
from ..models.config import ConfigInfo, ProjectSettings
from ..models.result import BuildResult, InstallResult
from ..utils.file_utils import (
    find_files_matching,
    overlay_directory,
    read_json,
    resolve_path,
    temporary_build_dir,
)
from ..utils.process_utils import CommandResult, run_command
from ..utils.version_utils import derive_version


class PlatformBuilder(ABC):
    """Abstract base class for all platform builders"""

    # Schema of the builder's own options section
    OPTIONS_SCHEMA: Dict[str, Any] = {}

    platform: str = ""

    def __init__(self, options: Dict[str, Any] = None):
        """
        Initialize builder

        Args:
            options: Evaluated options, keyed by section
                (``project`` and the platform id)
        """
        self.options = options or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def platform_options(self) -> Dict[str, Any]:
        return self.options.get(self.platform, {})

    @abstractmethod
    async def install_config(self, config_info: ConfigInfo,
                             overrides: Optional[Dict[str, Any]] = None) -> InstallResult:
        """
        Install an environment's configuration into the native project

        Args:
            config_info: Paths of the pair
            overrides: App fields overriding the environment's values

        Returns:
            InstallResult

        Raises:
            InstallError: If the configuration cannot be installed
        """
        pass

    @abstractmethod
    async def build(self, release_channel: ReleaseChannel, output_path: Path) -> BuildResult:
        """
        Build the native project and stage the artifact

        An unsuccessful build is reported through the result, not raised.

        Args:
            release_channel: Store or internal distribution
            output_path: Directory the artifact is copied into

        Returns:
            BuildResult
        """
        pass


class NativeProjectBuilder(PlatformBuilder):
    """Shared install and build flow of MSBuild-driven native projects

    Subclasses describe where the native settings live and how the
    toolchain is invoked.
    """

    # Default app fields, merged into the project's config template
    DEFAULT_APP_TEMPLATE: Dict[str, str] = {}

    # Regex matching the packaged artifact's file name
    ARTIFACT_PATTERN = ""

    # File name of the staged artifact
    ARTIFACT_NAME = ""

    def __init__(self, options: Dict[str, Any] = None):
        super().__init__(options)

        self.settings = ProjectSettings.from_options(self.options["project"])
        self.project_name = self.platform_options["projectName"]
        self.project_root = resolve_path(self.settings.solution_root, self.project_name)
        self.resources_path = resolve_path(self.project_root, self.platform_options["resourcesPath"])
        self.toolchain = self.platform_options["toolchain"]

    @property
    def project_file(self) -> Path:
        """The ``.csproj`` file of the native project"""
        return self.project_root / f"{Path(self.project_name).name}.csproj"

    # Installation

    async def install_config(self, config_info: ConfigInfo,
                             overrides: Optional[Dict[str, Any]] = None) -> InstallResult:
        config_file = config_info.config_file

        try:
            raw_config = await read_json(config_file)
        except (OSError, ValueError) as e:
            raise InstallError(f"Could not read {config_info.label} configuration",
                               path=config_file, cause=e)

        if not isinstance(raw_config, dict):
            raise InstallError(f"{config_info.label} configuration must be a JSON object",
                               path=config_file)

        app = raw_config.setdefault("app", {})
        if not isinstance(app, dict):
            raise InstallError("'app' section must be a JSON object", path=config_file)

        self._apply_overrides(app, overrides or {})

        template = await self._load_template(config_info.template_path)

        try:
            evaluation = evaluate(template, raw_config)
        except SchemaError as e:
            raise InstallError("Config template is malformed",
                               path=config_info.template_path, cause=e)

        if not evaluation.is_valid:
            for error in evaluation.errors:
                self.logger.error(f"{config_info.label}: {error}")
            raise InstallError(
                f"{config_info.label} configuration does not match the config template",
                path=config_file, errors=evaluation.errors
            )

        config = evaluation.config

        await self._run_step(self.apply_app_settings, config.get("app", {}))
        await self._run_step(self.apply_config_settings, config.get("config", {}))

        resources_source = config_info.resources_path
        if resources_source.is_dir() and self.resources_path.is_dir():
            copied = await self._run_step(overlay_directory, resources_source, self.resources_path)
            self.logger.info(f"Copied {copied} resource file(s) into {self.resources_path}")

        settings = {}
        for key_path, value in iter_values(config):
            if value.value is not None:
                settings[value.name or key_path] = value.value

        self.logger.info(f"Installed {config_info.label}")

        return InstallResult(
            installed_config_name=config_info.config_name,
            config_settings=settings,
            config=config,
        )

    def _apply_overrides(self, app: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if value is not None:
                app[key] = value

        if not app.get("version"):
            derived = derive_version(app.get("versionName"))
            if derived:
                self.logger.debug(f"Derived version {derived} from {app['versionName']!r}")
                app["version"] = derived

    async def _load_template(self, template_path: Path) -> Dict[str, Any]:
        """Load the project's config template and merge the default app fields"""
        template: Dict[str, Any] = {}

        if template_path.is_file():
            try:
                template = await read_json(template_path)
            except (OSError, ValueError) as e:
                raise InstallError("Could not read config template", path=template_path, cause=e)

            if not isinstance(template, dict) or not isinstance(template.get("app", {}), dict):
                raise InstallError("Config template must be a JSON object", path=template_path)

        app_template = dict(self.DEFAULT_APP_TEMPLATE)
        app_template.update(template.get("app", {}))
        template["app"] = app_template

        return template

    async def _run_step(self, func: Callable, *args) -> Any:
        """Run a blocking installation step in the default executor"""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(func, *args))
        except InstallError:
            raise
        except Exception as e:
            raise InstallError(f"Could not update the {self.platform} project: {e}",
                               path=self.project_root, cause=e)

    @abstractmethod
    def apply_app_settings(self, app: Dict[str, Any]) -> None:
        """Write the normalized ``app`` section into the native manifest"""
        pass

    @abstractmethod
    def apply_config_settings(self, config: Dict[str, Any]) -> None:
        """Write the normalized ``config`` section into the platform resources"""
        pass

    # Build

    @abstractmethod
    def get_build_configuration(self, release_channel: ReleaseChannel) -> str:
        pass

    @abstractmethod
    def clean_command(self, configuration: str) -> List[str]:
        pass

    @abstractmethod
    def package_command(self, configuration: str, output_dir: Path) -> List[str]:
        pass

    async def run_toolchain(self, args: List[str]) -> CommandResult:
        """Invoke the toolchain from the project directory"""
        result = await run_command(args, cwd=self.project_root)

        if result.stdout:
            self.logger.debug(result.stdout)
        if result.stderr:
            self.logger.warning(result.stderr)

        return result

    async def build(self, release_channel: ReleaseChannel, output_path: Path) -> BuildResult:
        configuration = self.get_build_configuration(release_channel)
        start_time = time.time()
        result = BuildResult(success=False)

        self.logger.info(f"Building {self.project_file.name} ({configuration})")

        try:
            with temporary_build_dir(self.platform) as temp_dir:
                clean = await self.run_toolchain(self.clean_command(configuration))
                if not clean.success:
                    result.stdout, result.stderr = clean.stdout, clean.stderr
                    result.message = f"Clean step failed with exit code {clean.returncode}"
                    return result

                package = await self.run_toolchain(self.package_command(configuration, temp_dir))
                result.stdout, result.stderr = package.stdout, package.stderr

                if not package.success:
                    result.message = f"Build failed with exit code {package.returncode}"
                    return result

                artifacts = find_files_matching(temp_dir, self.ARTIFACT_PATTERN)
                if not artifacts:
                    result.message = "Toolchain reported success but produced no artifact"
                    return result
                if len(artifacts) > 1:
                    names = ", ".join(a.name for a in artifacts)
                    result.message = f"Ambiguous build output, several artifacts found: {names}"
                    return result

                output_path.mkdir(parents=True, exist_ok=True)
                artifact_path = output_path / self.ARTIFACT_NAME
                shutil.copy2(artifacts[0], artifact_path)

                result.success = True
                result.output_artifact_path = artifact_path
                result.message = f"Built {artifact_path}"

        except OSError as e:
            result.success = False
            result.message = f"Build failed: {e}"

        finally:
            result.duration = time.time() - start_time

        return result
