"""Releaser API for release operations"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..builders.factory import BuilderFactory
from ..constants import ReleaseChannel
from ..core.event_bus import EventBus, Observer
from ..core.job_engine import DeploymentJobEngine
from ..core.path_resolver import PathResolver
from ..models.job import DeploymentJob
from ..models.request import DeploymentRequest
from ..models.result import BuildResult, InstallResult
from ..processors.base import ArtifactProcessor
from ..processors.factory import ProcessorFactory
from ..services.config_service import ConfigService
from ..utils.async_utils import run_async


class Releaser:
    """Releaser class for release operations"""

    def __init__(self,
                 options: Dict[str, Any],
                 builder_factory: Optional[BuilderFactory] = None,
                 event_bus: Optional[EventBus] = None):
        """
        Initialize releaser

        Args:
            options: Project and platform options (``project``, ``android``, ``ios``)
            builder_factory: Factory creating platform builders
            event_bus: Bus lifecycle events are published on
        """
        self.engine = DeploymentJobEngine(
            options,
            builder_factory=builder_factory,
            event_bus=event_bus,
        )

    @classmethod
    def from_config_file(cls, config_path: Optional[Path] = None, **kwargs) -> 'Releaser':
        """
        Create a releaser from ``.release-tool.yaml``

        Configured artifact processors are registered in file order.

        Args:
            config_path: Configuration file, located automatically when omitted

        Returns:
            Releaser

        Raises:
            ConfigError: If the file cannot be loaded
            SetupError: If a processor's options are not valid
        """
        config_service = ConfigService(config_path)
        releaser = cls(config_service.options, **kwargs)

        for processor in ProcessorFactory.create_all(config_service.processor_configs):
            releaser.use_artifact_processor(processor)

        return releaser

    @property
    def options(self) -> Dict[str, Any]:
        return self.engine.options

    @property
    def processors(self) -> List[ArtifactProcessor]:
        return list(self.engine.processors)

    def use_event_handler(self, handler: Observer) -> 'Releaser':
        """Register an event observer; observers are notified in registration order"""
        self.engine.use_event_handler(handler)
        return self

    def use_artifact_processor(self, processor: ArtifactProcessor) -> 'Releaser':
        """Append an artifact processor; processors run in registration order"""
        self.engine.use_artifact_processor(processor)
        return self

    def get_path_resolver(self) -> PathResolver:
        """
        Get a path resolver for the configured project

        Raises:
            SetupError: If the project options are not valid
        """
        return self.engine.get_path_resolver()

    def validate(self, platforms: Optional[List[str]] = None) -> Dict[str, Dict[str, Any]]:
        """
        Evaluate project options and the options of each platform

        Args:
            platforms: Platforms to check, defaults to every supported platform

        Returns:
            Evaluated options per platform

        Raises:
            SetupError: If options are not valid
        """
        self.engine.get_path_resolver()
        return self.engine.setup(platforms or self.engine.builder_factory.get_supported_platforms())

    def deploy(self, request: Union[DeploymentRequest, Dict[str, Any]]) -> DeploymentJob:
        """
        Deploy configs to platforms

        Args:
            request: Deployment request (or its dictionary form)

        Returns:
            DeploymentJob: Finished job, per-pair outcomes in ``results``

        Raises:
            RequestError: If the request is malformed
            SetupError: If options are not valid
        """
        return run_async(self.deploy_async(request))

    async def deploy_async(self, request: Union[DeploymentRequest, Dict[str, Any]]) -> DeploymentJob:
        """Async version of :meth:`deploy`"""
        if isinstance(request, dict):
            request = DeploymentRequest.from_dict(request)
        return await self.engine.deploy(request)

    def install_config(self, config_name: str, platform: str,
                       overrides: Optional[Dict[str, Any]] = None) -> InstallResult:
        """
        Install one environment's configuration into a native project

        Args:
            config_name: Environment name
            platform: Platform id
            overrides: App fields overriding the environment's values

        Returns:
            InstallResult

        Raises:
            InstallError: If installation fails
        """
        return run_async(self.install_config_async(config_name, platform, overrides))

    async def install_config_async(self, config_name: str, platform: str,
                                   overrides: Optional[Dict[str, Any]] = None) -> InstallResult:
        """Async version of :meth:`install_config`"""
        return await self.engine.install_config(config_name, platform, overrides)

    def build(self, release_channel: ReleaseChannel, platform: str,
              output_path: Optional[Path] = None) -> BuildResult:
        """
        Build a native project with the currently installed configuration

        Args:
            release_channel: Store or internal distribution
            platform: Platform id
            output_path: Artifact directory

        Returns:
            BuildResult
        """
        return run_async(self.build_async(release_channel, platform, output_path))

    async def build_async(self, release_channel: ReleaseChannel, platform: str,
                          output_path: Optional[Path] = None) -> BuildResult:
        """Async version of :meth:`build`"""
        return await self.engine.build(release_channel, platform, output_path)


def deploy(configs: List[str],
           platforms: List[str],
           store_release: bool = False,
           version: Optional[str] = None,
           config_path: Optional[Path] = None) -> DeploymentJob:
    """
    Deploy configs to platforms

    This is a convenience function that creates a Releaser from the
    configuration file and runs the deployment.

    Args:
        configs: Environment names
        platforms: Platform ids
        store_release: Build for store distribution
        version: Version overriding every environment's app version
        config_path: Configuration file, located automatically when omitted

    Returns:
        DeploymentJob
    """
    releaser = Releaser.from_config_file(config_path)
    request = DeploymentRequest(
        configs=list(configs),
        platforms=list(platforms),
        store_release=store_release,
        version=version,
    )
    return releaser.deploy(request)
