# release_tool/models/__init__.py
"""Data models for release-tool"""

from .config import ProjectSettings, ConfigInfo
from .request import DeploymentRequest
from .result import InstallResult, BuildResult, ArtifactInfo, ProcessResult
from .job import DeploymentJob, JobStatus, PairResult, PairStatus
from .events import (
    Event,
    EventType,
    JobPayload,
    PairPayload,
    InstallPayload,
    BuildPayload,
    ArtifactPayload,
    FailurePayload,
)

__all__ = [
    # Config models
    "ProjectSettings",
    "ConfigInfo",

    # Request
    "DeploymentRequest",

    # Result models
    "InstallResult",
    "BuildResult",
    "ArtifactInfo",
    "ProcessResult",

    # Job models
    "DeploymentJob",
    "JobStatus",
    "PairResult",
    "PairStatus",

    # Events
    "Event",
    "EventType",
    "JobPayload",
    "PairPayload",
    "InstallPayload",
    "BuildPayload",
    "ArtifactPayload",
    "FailurePayload",
]
