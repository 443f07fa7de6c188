"""Exception definitions for release-tool API"""

from ..constants import ErrorCode


class ReleaseToolError(Exception):
    """Base exception for release-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "type": self.__class__.__name__,
            "code": self.error_code,
            "message": str(self),
        }


class ConfigError(ReleaseToolError):
    """Configuration file error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class SetupError(ReleaseToolError):
    """Project or platform options failed schema evaluation"""

    def __init__(self, message: str, errors: list = None):
        super().__init__(message, ErrorCode.SETUP_INVALID)
        self.errors = errors or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data


class RequestError(ReleaseToolError):
    """Malformed deployment request"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.REQUEST_INVALID)


class UnsupportedPlatformError(SetupError):
    """No builder registered for a platform"""

    def __init__(self, platform: str):
        super().__init__(f"Unsupported platform: {platform}")
        self.error_code = ErrorCode.PLATFORM_UNSUPPORTED
        self.platform = platform


class SchemaError(ReleaseToolError):
    """Property expression could not be parsed"""

    def __init__(self, message: str, expression: str = None):
        super().__init__(message, ErrorCode.SCHEMA_INVALID)
        self.expression = expression


class InstallError(ReleaseToolError):
    """Installing a configuration into the native project failed"""

    def __init__(self, message: str, path=None, errors: list = None, cause: Exception = None):
        super().__init__(message, ErrorCode.INSTALL_FAILED)
        self.path = path
        self.errors = errors or []
        self.cause = cause

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.path:
            data["path"] = str(self.path)
        if self.errors:
            data["errors"] = [e.to_dict() for e in self.errors]
        if self.cause is not None:
            data["cause"] = f"{self.cause.__class__.__name__}: {self.cause}"
        return data


class BuildError(ReleaseToolError):
    """Native build reported an unsuccessful result"""

    def __init__(self, message: str, result=None):
        super().__init__(message, ErrorCode.BUILD_FAILED)
        self.result = result


class ArtifactProcessingError(ReleaseToolError):
    """Artifact processor reported failure"""

    def __init__(self, processor: str, message: str, result=None):
        super().__init__(f"Processor '{processor}' failed: {message}",
                         ErrorCode.ARTIFACT_PROCESSING_FAILED)
        self.processor = processor
        self.result = result
