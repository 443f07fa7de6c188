"""Platform builder factory"""

from typing import Any, Dict, List, Optional, Type

from .base import PlatformBuilder
from .android import AndroidBuilder
from .ios import IosBuilder
from ..api.exceptions import SetupError, UnsupportedPlatformError
from ..constants import Platform
from ..core.config_evaluator import evaluate, to_plain
from ..models.config import PROJECT_OPTIONS_SCHEMA


class BuilderFactory:
    """Factory for creating platform builder instances"""

    # Registry of builders shipped with release-tool
    _default_builders: Dict[str, Type[PlatformBuilder]] = {
        Platform.ANDROID.value: AndroidBuilder,
        Platform.IOS.value: IosBuilder,
    }

    def __init__(self, builders: Optional[Dict[str, Type[PlatformBuilder]]] = None):
        """
        Initialize factory

        Args:
            builders: Platform id to builder class mapping, defaults to
                the built-in Android and iOS builders
        """
        source = self._default_builders if builders is None else builders
        self._builders = {platform.lower(): cls for platform, cls in source.items()}

    def register_builder(self, platform: str, builder_class: Type[PlatformBuilder]) -> None:
        """Register a builder for a platform

        Args:
            platform: Platform id (case-insensitive)
            builder_class: Builder class
        """
        self._builders[platform.lower()] = builder_class

    def get_supported_platforms(self) -> List[str]:
        """Get list of supported platform ids"""
        return list(self._builders.keys())

    def is_supported(self, platform: str) -> bool:
        return isinstance(platform, str) and platform.lower() in self._builders

    def get_builder_class(self, platform: str) -> Type[PlatformBuilder]:
        """
        Get the builder class of a platform

        Raises:
            UnsupportedPlatformError: If no builder is registered
        """
        if not self.is_supported(platform):
            raise UnsupportedPlatformError(platform)
        return self._builders[platform.lower()]

    def evaluate_options(self, platform: str, options: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the options a platform's builder needs

        Args:
            platform: Platform id
            options: Raw options with ``project`` and per-platform sections

        Returns:
            Plain options restricted to the evaluated sections

        Raises:
            UnsupportedPlatformError: If the platform has no builder
            SetupError: If the options fail evaluation
        """
        builder_class = self.get_builder_class(platform)
        section = platform.lower()

        schema = dict(PROJECT_OPTIONS_SCHEMA)
        schema[section] = builder_class.OPTIONS_SCHEMA

        result = evaluate(schema, options)
        if not result.is_valid:
            raise SetupError(f"Options for platform '{platform}' are not valid.", result.errors)

        return to_plain(result.config)

    def create(self, platform: str, options: Dict[str, Any]) -> PlatformBuilder:
        """Create a builder with evaluated options

        Args:
            platform: Platform id
            options: Raw options

        Returns:
            Builder instance
        """
        builder_class = self.get_builder_class(platform)
        return builder_class(self.evaluate_options(platform, options))
