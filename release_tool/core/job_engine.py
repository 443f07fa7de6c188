# release_tool/core/job_engine.py
"""Deployment job engine"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .event_bus import EventBus, Observer
from .path_resolver import PathResolver
from ..api.exceptions import (
    ArtifactProcessingError,
    BuildError,
    InstallError,
    RequestError,
)
from ..builders.factory import BuilderFactory
from ..constants import (
    ReleaseChannel,
    TASK_BUILD_PROJECT,
    TASK_INSTALL_CONFIG,
)
from ..models.config import ConfigInfo, ProjectSettings
from ..models.events import (
    ArtifactPayload,
    BuildPayload,
    EventType,
    FailurePayload,
    InstallPayload,
    JobPayload,
    PairPayload,
)
from ..models.job import DeploymentJob, PairResult, PairStatus
from ..models.request import DeploymentRequest
from ..models.result import ArtifactInfo, BuildResult, InstallResult
from ..processors.base import ArtifactProcessor


class DeploymentJobEngine:
    """Runs every (config, platform) pair of a request through
    install, build and artifact processing

    Pairs are processed strictly one after another. A failing pair never
    stops the job; only setup faults are raised.
    """

    def __init__(self,
                 options: Dict[str, Any],
                 builder_factory: Optional[BuilderFactory] = None,
                 event_bus: Optional[EventBus] = None,
                 processors: Optional[List[ArtifactProcessor]] = None):
        """
        Initialize engine

        Args:
            options: Raw options with ``project`` and per-platform sections
            builder_factory: Factory creating platform builders
            event_bus: Bus lifecycle events are published on
            processors: Artifact processors, in execution order
        """
        self.options = options or {}
        self.builder_factory = builder_factory or BuilderFactory()
        self.event_bus = event_bus or EventBus()
        self.processors: List[ArtifactProcessor] = []
        self.logger = logging.getLogger(self.__class__.__name__)

        for processor in processors or []:
            self.use_artifact_processor(processor)

    def use_event_handler(self, handler: Observer) -> None:
        """Register an event observer"""
        self.event_bus.register(handler)

    def use_artifact_processor(self, processor: ArtifactProcessor) -> None:
        """Append an artifact processor"""
        if not isinstance(processor, ArtifactProcessor):
            raise TypeError(f"Expected an ArtifactProcessor, got {type(processor).__name__}")
        self.processors.append(processor)

    # Setup

    def setup(self, platforms: List[str]) -> Dict[str, Dict[str, Any]]:
        """
        Validate project options and the options of every platform

        Args:
            platforms: Platform ids of the request

        Returns:
            Evaluated options per platform

        Raises:
            SetupError: If project or platform options are not valid
            UnsupportedPlatformError: If a platform has no builder
        """
        evaluated = {}
        for platform in platforms:
            if platform not in evaluated:
                evaluated[platform] = self.builder_factory.evaluate_options(platform, self.options)
        return evaluated

    def get_path_resolver(self) -> PathResolver:
        return PathResolver(ProjectSettings.evaluate(self.options))

    def _get_config_info(self, resolver: PathResolver, platform_options: Dict[str, Any],
                         config_name: str, platform: str) -> ConfigInfo:
        section = platform_options.get(platform.lower(), {})
        project_name = section.get("projectName") or ""
        return resolver.get_config_info(config_name, platform, project_name)

    # Deployment

    async def deploy(self, request: DeploymentRequest) -> DeploymentJob:
        """
        Deploy every pair of a request

        Args:
            request: Deployment request

        Returns:
            The finished job

        Raises:
            RequestError: If the request is malformed
            SetupError: If options are not valid
        """
        if not isinstance(request, DeploymentRequest):
            raise RequestError("Expected a DeploymentRequest")
        request.validate()

        resolver = self.get_path_resolver()
        platform_options = self.setup(request.platforms)

        job = DeploymentJob(configs=list(request.configs), platforms=list(request.platforms))
        job.last_update = f"Starting deployment of {job.status.total} pair(s)"
        self.logger.info(job.last_update)

        await self.event_bus.emit(EventType.WILL_START_JOB, JobPayload(job))

        for config_name in request.configs:
            for platform in request.platforms:
                config_info = self._get_config_info(
                    resolver, platform_options.get(platform, {}), config_name, platform
                )
                await self._process_pair(job, request, resolver, config_info)

        job.complete()
        self.logger.info(job.last_update)

        await self.event_bus.emit(EventType.DID_FINISH_JOB, JobPayload(job))
        return job

    async def _process_pair(self, job: DeploymentJob, request: DeploymentRequest,
                            resolver: PathResolver, config_info: ConfigInfo) -> None:
        config_name, platform = config_info.config_name, config_info.platform
        pair = dict(job=job, config_name=config_name, platform=platform)
        label = config_info.label

        result = job.start_pair(config_name, platform)
        job.last_update = f"Processing {label}"

        await self.event_bus.emit(EventType.WILL_START_CONFIG, PairPayload(**pair))

        if config_info.escaped:
            result.status = PairStatus.ESCAPED
            job.status.record(PairStatus.ESCAPED, label)
            job.last_update = f"Escaped {label}: no {platform} configuration"
            self.logger.info(job.last_update)
            await self.event_bus.emit(EventType.DID_ESCAPE_CONFIG, PairPayload(**pair))
            return

        result.status = PairStatus.RUNNING
        stage = TASK_INSTALL_CONFIG

        try:
            # Install
            result.status = PairStatus.INSTALLING
            await self.event_bus.emit(EventType.WILL_INSTALL_CONFIG, PairPayload(**pair))

            builder = self.builder_factory.create(platform, self.options)
            install_result = await builder.install_config(config_info, request.overrides)

            result.completed_tasks.append(TASK_INSTALL_CONFIG)
            await self.event_bus.emit(EventType.DID_INSTALL_CONFIG,
                                      InstallPayload(**pair, result=install_result))

            # Build
            stage = TASK_BUILD_PROJECT
            result.status = PairStatus.BUILDING
            output_path = resolver.get_output_path(config_name, platform)
            job.last_update = f"Building {label}"
            await self.event_bus.emit(EventType.WILL_BUILD,
                                      BuildPayload(**pair, output_path=str(output_path)))

            build_result = await builder.build(request.release_channel, output_path)

            await self.event_bus.emit(EventType.DID_BUILD,
                                      BuildPayload(**pair, output_path=str(output_path),
                                                   result=build_result))
            if not build_result.success:
                raise BuildError(build_result.message or f"Build of {label} failed",
                                 result=build_result)
            result.completed_tasks.append(TASK_BUILD_PROJECT)

            # Artifact processing
            result.status = PairStatus.PROCESSING_ARTIFACT
            artifact_info = ArtifactInfo(
                artifact_path=build_result.output_artifact_path,
                config_name=config_name,
                platform=platform,
                config=install_result.config,
                config_settings=install_result.config_settings,
                store_release=request.store_release,
            )

            for processor in self.processors:
                if not processor.supports(platform):
                    continue

                stage = processor.stage_name
                await self.event_bus.emit(EventType.WILL_PROCESS_ARTIFACT,
                                          ArtifactPayload(**pair, processor=processor.name))

                process_result = await processor.process(artifact_info)

                await self.event_bus.emit(EventType.DID_PROCESS_ARTIFACT,
                                          ArtifactPayload(**pair, processor=processor.name,
                                                          result=process_result))
                if not process_result.success:
                    raise ArtifactProcessingError(processor.name, process_result.message,
                                                  result=process_result)
                result.completed_tasks.append(stage)

        except Exception as e:
            await self._fail_pair(job, result, config_info, stage, e)
            return

        result.status = PairStatus.SUCCESSFUL
        job.status.record(PairStatus.SUCCESSFUL, label)
        job.last_update = f"Finished {label}"
        self.logger.info(job.last_update)
        await self.event_bus.emit(EventType.DID_FINISH_CONFIG, PairPayload(**pair))

    async def _fail_pair(self, job: DeploymentJob, result: PairResult,
                         config_info: ConfigInfo, stage: str, error: Exception) -> None:
        label = config_info.label

        result.status = PairStatus.FAILED
        result.error = error
        result.failed_on = stage
        job.status.record(PairStatus.FAILED, label)
        job.last_update = f"Failed {label} on {stage}: {error}"

        if isinstance(error, (InstallError, BuildError, ArtifactProcessingError)):
            self.logger.error(job.last_update)
        else:
            self.logger.exception(job.last_update)

        await self.event_bus.emit(EventType.DID_FAIL_CONFIG, FailurePayload(
            job=job,
            config_name=config_info.config_name,
            platform=config_info.platform,
            error=error,
            failed_on=stage,
        ))

    # Single-pair operations

    async def install_config(self, config_name: str, platform: str,
                             overrides: Optional[Dict[str, Any]] = None) -> InstallResult:
        """
        Install one environment's configuration into a native project

        Raises:
            SetupError: If options are not valid
            InstallError: If the environment does not target the platform
                or installation fails
        """
        resolver = self.get_path_resolver()
        platform_options = self.setup([platform])[platform]
        config_info = self._get_config_info(resolver, platform_options, config_name, platform)

        if config_info.escaped:
            raise InstallError(f"Config '{config_name}' does not target platform '{platform}'",
                               path=config_info.config_path)

        builder = self.builder_factory.create(platform, self.options)
        return await builder.install_config(config_info, overrides)

    async def build(self, release_channel: ReleaseChannel, platform: str,
                    output_path: Optional[Path] = None) -> BuildResult:
        """
        Build a platform's native project with whatever config is installed

        Args:
            release_channel: Store or internal distribution
            platform: Platform id
            output_path: Artifact directory, defaults to ``<outputRoot>/<platform>``

        Returns:
            BuildResult
        """
        resolver = self.get_path_resolver()
        self.setup([platform])

        if output_path is None:
            output_path = resolver.settings.output_root / platform.lower()

        builder = self.builder_factory.create(platform, self.options)
        return await builder.build(release_channel, Path(output_path))
