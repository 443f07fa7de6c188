"""iOS (Xamarin.iOS) platform builder"""

import plistlib
from pathlib import Path
from typing import Any, Dict, List

from .base import NativeProjectBuilder
from ..constants import (
    DEFAULT_IOS_BUILD_PLATFORM,
    DEFAULT_RESOURCES_DIR,
    DEFAULT_TOOLCHAIN,
    Platform,
    ReleaseChannel,
)
from ..core.config_evaluator import Property, iter_values


def _load_plist(path: Path) -> Dict[str, Any]:
    with open(path, 'rb') as f:
        return plistlib.load(f)


def _dump_plist(path: Path, data: Dict[str, Any]) -> None:
    with open(path, 'wb') as f:
        plistlib.dump(data, f)


class IosBuilder(NativeProjectBuilder):
    """Installs configs into an iOS project and packages an IPA"""

    platform = Platform.IOS.value

    OPTIONS_SCHEMA = {
        "projectName": Property("string").named("iOS project name"),
        "resourcesPath": Property("string").default(DEFAULT_RESOURCES_DIR),
        "toolchain": Property("string").default(DEFAULT_TOOLCHAIN),
        "buildPlatform": Property("string").default(DEFAULT_IOS_BUILD_PLATFORM),
    }

    # Keys are the Info.plist entries each field is written to
    DEFAULT_APP_TEMPLATE = {
        "name": "string.optional().keyed('CFBundleDisplayName').named('Application Name')",
        "version": "string.regex(/(\\d+)/).optional().keyed('CFBundleVersion').named('Application Version')",
        "versionName": "string.optional().keyed('CFBundleShortVersionString').named('Application Version Name')",
        "bundleId": "string.optional().keyed('CFBundleIdentifier').named('Application Bundle Identifier')",
    }

    ARTIFACT_PATTERN = r"\.ipa$"
    ARTIFACT_NAME = "app.ipa"

    BUILD_CONFIGURATIONS = {
        ReleaseChannel.STORE: "AppStore",
        ReleaseChannel.INTERNAL: "Ad-Hoc",
    }

    @property
    def info_plist_path(self) -> Path:
        return self.project_root / "Info.plist"

    @property
    def settings_path(self) -> Path:
        return self.resources_path / "Config.plist"

    @property
    def build_platform(self) -> str:
        return self.platform_options["buildPlatform"]

    def apply_app_settings(self, app: Dict[str, Any]) -> None:
        entries = [nv for _, nv in iter_values(app) if nv.value is not None]
        if not entries:
            return

        info = _load_plist(self.info_plist_path)
        for entry in entries:
            info[entry.key] = str(entry.value)

        _dump_plist(self.info_plist_path, info)
        self.logger.debug(f"Updated {self.info_plist_path}")

    def apply_config_settings(self, config: Dict[str, Any]) -> None:
        entries = [nv for _, nv in iter_values(config) if nv.value is not None]
        if not entries:
            return

        path = self.settings_path
        if path.is_file():
            settings = _load_plist(path)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            settings = {}

        for entry in entries:
            settings[entry.key] = entry.value

        _dump_plist(path, settings)
        self.logger.debug(f"Wrote {len(entries)} setting(s) to {path}")

    def get_build_configuration(self, release_channel: ReleaseChannel) -> str:
        return self.BUILD_CONFIGURATIONS[release_channel]

    def clean_command(self, configuration: str) -> List[str]:
        return [
            self.toolchain,
            str(self.project_file),
            f"/p:Configuration={configuration}",
            f"/p:Platform={self.build_platform}",
            "/t:Clean",
        ]

    def package_command(self, configuration: str, output_dir: Path) -> List[str]:
        return [
            self.toolchain,
            str(self.project_file),
            f"/p:Configuration={configuration}",
            f"/p:Platform={self.build_platform}",
            "/p:BuildIpa=true",
            f"/p:IpaPackageDir={output_dir}/",
            "/t:Build",
        ]
