"""Global constants for release-tool"""

from enum import Enum
import re

APP_NAME = "release-tool"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".release-tool.yaml"

# Default option values
DEFAULT_CONFIGS_DIR = "oem"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_RESOURCES_DIR = "Resources"
DEFAULT_TOOLCHAIN = "msbuild"
DEFAULT_IOS_BUILD_PLATFORM = "iPhone"
DEFAULT_COMMAND_TIMEOUT = 600  # seconds

# Per-environment layout
ENV_CONFIG_FILE = "config.json"
ENV_RESOURCES_DIR = "resources"
CONFIG_TEMPLATE_FILE = "config_template.json"

# Temporary build directories
TEMP_DIR_NAMESPACE = "release-tool"


class Platform(Enum):
    """Supported native platforms"""
    ANDROID = "android"
    IOS = "ios"


class ReleaseChannel(Enum):
    """Release channel passed to builders"""
    STORE = "store"
    INTERNAL = "internal"

    @classmethod
    def from_flag(cls, store_release: bool) -> 'ReleaseChannel':
        return cls.STORE if store_release else cls.INTERNAL


# Task names recorded on pair results
TASK_INSTALL_CONFIG = "Install Config"
TASK_BUILD_PROJECT = "Build Project"
TASK_PROCESS_ARTIFACT = "Process Artifact ({name})"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "RT001"
    SETUP_INVALID = "RT002"
    REQUEST_INVALID = "RT003"
    PLATFORM_UNSUPPORTED = "RT004"
    SCHEMA_INVALID = "RT005"
    INSTALL_FAILED = "RT006"
    BUILD_FAILED = "RT007"
    ARTIFACT_PROCESSING_FAILED = "RT008"


# Environment variables
ENV_CONFIG_PATH = "RELEASE_TOOL_CONFIG"
ENV_LOG_LEVEL = "RELEASE_TOOL_LOG_LEVEL"
ENV_TEMP_DIR = "RELEASE_TOOL_TEMP_DIR"
ENV_PREFIX = "RELEASE_TOOL_"

# Validation patterns
DOTTED_VERSION_PATTERN = re.compile(r"(\d+)[.](\d+)[.](\d+)")
CONFIG_NAME_PATTERN = re.compile(r"^[^/\\]+$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_SKIP = "↷"
EMOJI_ARROW = "→"
