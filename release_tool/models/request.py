"""Deployment request model"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..api.exceptions import RequestError
from ..constants import CONFIG_NAME_PATTERN, ReleaseChannel


@dataclass(frozen=True)
class DeploymentRequest:
    """Which configs to release, on which platforms, through which channel"""

    configs: List[str] = field(default_factory=list)
    platforms: List[str] = field(default_factory=list)
    store_release: bool = False
    version: Optional[str] = None

    @property
    def release_channel(self) -> ReleaseChannel:
        """Release channel selected by ``store_release``"""
        return ReleaseChannel.from_flag(self.store_release)

    @property
    def overrides(self) -> Dict[str, Any]:
        """App field overrides applied to every installed config"""
        return {"version": self.version} if self.version else {}

    def validate(self) -> None:
        """
        Check the request shape

        Raises:
            RequestError: If configs/platforms are missing or malformed
        """
        for field_name in ("configs", "platforms"):
            values = getattr(self, field_name)
            if not isinstance(values, (list, tuple)) or not values:
                raise RequestError(f"'{field_name}' must be a non-empty list")
            for value in values:
                if not isinstance(value, str) or not value.strip():
                    raise RequestError(f"'{field_name}' entries must be non-empty strings, got {value!r}")

        for config_name in self.configs:
            if config_name in (".", "..") or not CONFIG_NAME_PATTERN.match(config_name):
                raise RequestError(f"Invalid config name: {config_name!r}")

        if not isinstance(self.store_release, bool):
            raise RequestError("'store_release' must be a boolean")

        if self.version is not None and not isinstance(self.version, str):
            raise RequestError("'version' must be a string")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "configs": list(self.configs),
            "platforms": list(self.platforms),
            "store_release": self.store_release,
        }
        if self.version:
            data["version"] = self.version
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploymentRequest':
        """Create from dictionary"""
        if not isinstance(data, dict):
            raise RequestError("Deployment request must be a mapping")

        for field_name in ("configs", "platforms"):
            if not isinstance(data.get(field_name), (list, tuple)):
                raise RequestError(f"'{field_name}' must be a list")

        return cls(
            configs=data["configs"],
            platforms=data["platforms"],
            store_release=data.get("store_release", False),
            version=data.get("version"),
        )
