"""Lifecycle event models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .job import DeploymentJob
from .result import InstallResult, BuildResult, ProcessResult


class EventType(Enum):
    """Events emitted by the job engine, in lifecycle order"""
    WILL_START_JOB = "will_start_job"
    WILL_START_CONFIG = "will_start_config"
    DID_ESCAPE_CONFIG = "did_escape_config"
    WILL_INSTALL_CONFIG = "will_install_config"
    DID_INSTALL_CONFIG = "did_install_config"
    WILL_BUILD = "will_build"
    DID_BUILD = "did_build"
    WILL_PROCESS_ARTIFACT = "will_process_artifact"
    DID_PROCESS_ARTIFACT = "did_process_artifact"
    DID_FINISH_CONFIG = "did_finish_config"
    DID_FAIL_CONFIG = "did_fail_config"
    DID_FINISH_JOB = "did_finish_job"


@dataclass(frozen=True)
class JobPayload:
    job: DeploymentJob


@dataclass(frozen=True)
class PairPayload:
    job: DeploymentJob
    config_name: str
    platform: str

    @property
    def label(self) -> str:
        return f"{self.config_name} ({self.platform})"


@dataclass(frozen=True)
class InstallPayload(PairPayload):
    result: Optional[InstallResult] = None


@dataclass(frozen=True)
class BuildPayload(PairPayload):
    output_path: Optional[str] = None
    result: Optional[BuildResult] = None


@dataclass(frozen=True)
class ArtifactPayload(PairPayload):
    processor: str = ""
    result: Optional[ProcessResult] = None


@dataclass(frozen=True)
class FailurePayload(PairPayload):
    error: Optional[Exception] = None
    failed_on: Optional[str] = None


EventPayload = Union[JobPayload, PairPayload, InstallPayload, BuildPayload,
                     ArtifactPayload, FailurePayload]


@dataclass(frozen=True)
class Event:
    """A lifecycle event and its payload"""
    type: EventType
    payload: EventPayload
    timestamp: datetime = field(default_factory=datetime.utcnow)

    @property
    def job(self) -> DeploymentJob:
        return self.payload.job
