"""Release Tool - Per-environment builds and releases of mobile apps.

This tool installs each environment's configuration into native Android
and iOS projects, builds them and hands the produced packages to artifact
processors.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.releaser import Releaser, deploy

# Data models
from .models.request import DeploymentRequest
from .models.job import DeploymentJob, PairStatus
from .models.events import Event, EventType
from .models.result import InstallResult, BuildResult, ArtifactInfo, ProcessResult

# Extension points
from .core.event_bus import EventHandler
from .builders.base import PlatformBuilder
from .processors.base import ArtifactProcessor
from .constants import Platform, ReleaseChannel

# Exceptions
from .api.exceptions import (
    ReleaseToolError,
    ConfigError,
    SetupError,
    RequestError,
    UnsupportedPlatformError,
    SchemaError,
    InstallError,
    BuildError,
    ArtifactProcessingError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Releaser",

    # Core API functions
    "deploy",

    # Data models
    "DeploymentRequest",
    "DeploymentJob",
    "PairStatus",
    "Event",
    "EventType",
    "InstallResult",
    "BuildResult",
    "ArtifactInfo",
    "ProcessResult",

    # Extension points
    "EventHandler",
    "PlatformBuilder",
    "ArtifactProcessor",
    "Platform",
    "ReleaseChannel",

    # Exceptions
    "ReleaseToolError",
    "ConfigError",
    "SetupError",
    "RequestError",
    "UnsupportedPlatformError",
    "SchemaError",
    "InstallError",
    "BuildError",
    "ArtifactProcessingError",
]
