"""Business logic services for release-tool"""

from .config_service import ConfigService

__all__ = [
    "ConfigService",
]
