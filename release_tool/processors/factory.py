"""Artifact processor factory"""

import importlib
import logging
from typing import Any, Dict, List, Type

from .base import ArtifactProcessor
from .builtin.command import CommandProcessor
from .builtin.copy import CopyArtifactProcessor
from ..api.exceptions import ConfigError, SetupError
from ..core.config_evaluator import Property, evaluate, to_plain

logger = logging.getLogger(__name__)

# Options every processor accepts
COMMON_OPTIONS_SCHEMA = {
    "name": Property("string").optional(),
    "platforms": Property("array").optional(),
}


class ProcessorFactory:
    """Factory for creating artifact processors from configuration"""

    # Registry of processor types
    _processors: Dict[str, Type[ArtifactProcessor]] = {
        CopyArtifactProcessor.type_name: CopyArtifactProcessor,
        CommandProcessor.type_name: CommandProcessor,
    }

    @classmethod
    def get_processor_class(cls, processor_type: str) -> Type[ArtifactProcessor]:
        """Resolve a processor type

        Args:
            processor_type: Registered type name or ``"package.module:ClassName"``

        Returns:
            Processor class

        Raises:
            ConfigError: If the type cannot be resolved
        """
        if processor_type in cls._processors:
            return cls._processors[processor_type]

        if ":" not in processor_type:
            raise ConfigError(f"Unknown processor type: {processor_type}")

        module_name, _, class_name = processor_type.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ConfigError(f"Failed to import processor module {module_name}: {e}")

        processor_class = getattr(module, class_name, None)
        if not isinstance(processor_class, type) or not issubclass(processor_class, ArtifactProcessor):
            raise ConfigError(f"{processor_type} is not an ArtifactProcessor")

        return processor_class

    @classmethod
    def create_from_config(cls, config: Dict[str, Any]) -> ArtifactProcessor:
        """Create a processor from its configuration entry

        Args:
            config: Entry with a ``type`` key plus processor options

        Returns:
            Processor instance

        Raises:
            ConfigError: If the type is missing or unknown
            SetupError: If the options fail evaluation
        """
        if not isinstance(config, dict) or not config.get("type"):
            raise ConfigError("Processor entries need a 'type'")

        processor_class = cls.get_processor_class(config["type"])

        schema = dict(COMMON_OPTIONS_SCHEMA)
        schema.update(processor_class.OPTIONS_SCHEMA)

        result = evaluate(schema, config)
        if not result.is_valid:
            raise SetupError(f"Options of processor '{config['type']}' are not valid.", result.errors)

        options = to_plain(result.config)
        logger.debug(f"Created processor {processor_class.__name__}")
        return processor_class(options)

    @classmethod
    def create_all(cls, configs: List[Dict[str, Any]]) -> List[ArtifactProcessor]:
        """Create processors for every entry, preserving order"""
        return [cls.create_from_config(config) for config in configs or []]

    @classmethod
    def register_processor(cls, processor_type: str, processor_class: Type[ArtifactProcessor]):
        """Register a new processor type

        Args:
            processor_type: Type name used in configuration
            processor_class: Processor class
        """
        cls._processors[processor_type] = processor_class

    @classmethod
    def get_supported_types(cls) -> List[str]:
        return list(cls._processors.keys())
