# release_tool/api/__init__.py
"""API layer for release-tool"""

from .exceptions import (
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
from .releaser import Releaser, deploy

__all__ = [
    # Main classes
    "Releaser",

    # Convenience functions
    "deploy",

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
