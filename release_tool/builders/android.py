"""Android (Xamarin.Android) platform builder"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, List

from .base import NativeProjectBuilder
from ..constants import DEFAULT_RESOURCES_DIR, DEFAULT_TOOLCHAIN, Platform, ReleaseChannel
from ..core.config_evaluator import Property, iter_values

ANDROID_NS = "http://schemas.android.com/apk/res/android"
TOOLS_NS = "http://schemas.android.com/tools"
APP_NS = "http://schemas.android.com/apk/res-auto"

# Prefixes kept when manifests are written back
ET.register_namespace("android", ANDROID_NS)
ET.register_namespace("tools", TOOLS_NS)
ET.register_namespace("app", APP_NS)


def _android_attr(name: str) -> str:
    return f"{{{ANDROID_NS}}}{name}"


def _parse_xml(path: Path) -> ET.ElementTree:
    parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
    return ET.parse(path, parser=parser)


class AndroidBuilder(NativeProjectBuilder):
    """Installs configs into an Android project and packages a signed APK"""

    platform = Platform.ANDROID.value

    OPTIONS_SCHEMA = {
        "projectName": Property("string").named("Android project name"),
        "resourcesPath": Property("string").default(DEFAULT_RESOURCES_DIR),
        "toolchain": Property("string").default(DEFAULT_TOOLCHAIN),
    }

    DEFAULT_APP_TEMPLATE = {
        "name": "string.optional().named('Application Name')",
        "version": "string.regex(/(\\d+)/).optional().named('Application Version')",
        "versionName": "string.optional().named('Application Version Name')",
        "bundleId": "string.optional().named('Application Bundle Identifier')",
    }

    ARTIFACT_PATTERN = r"-Signed\.apk$"
    ARTIFACT_NAME = "app.apk"

    BUILD_CONFIGURATION = "Release"

    @property
    def manifest_path(self) -> Path:
        return self.project_root / "Properties" / "AndroidManifest.xml"

    @property
    def settings_path(self) -> Path:
        return self.resources_path / "values" / "settings.xml"

    def apply_app_settings(self, app: Dict[str, Any]) -> None:
        values = {key: nv.value for key, nv in iter_values(app) if nv.value is not None}
        if not values:
            return

        tree = _parse_xml(self.manifest_path)
        manifest = tree.getroot()

        if "name" in values:
            application = manifest.find("application")
            if application is None:
                application = ET.SubElement(manifest, "application")
            application.set(_android_attr("label"), str(values["name"]))

        if "bundleId" in values:
            manifest.set("package", str(values["bundleId"]))
        if "version" in values:
            manifest.set(_android_attr("versionCode"), str(values["version"]))
        if "versionName" in values:
            manifest.set(_android_attr("versionName"), str(values["versionName"]))

        tree.write(self.manifest_path, encoding="utf-8", xml_declaration=True)
        self.logger.debug(f"Updated {self.manifest_path}")

    def apply_config_settings(self, config: Dict[str, Any]) -> None:
        entries = [nv for _, nv in iter_values(config) if nv.value is not None]
        if not entries:
            return

        path = self.settings_path
        if path.is_file():
            tree = _parse_xml(path)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            tree = ET.ElementTree(ET.Element("resources"))
        resources = tree.getroot()

        for entry in entries:
            if isinstance(entry.value, bool):
                tag, text = "bool", "true" if entry.value else "false"
            else:
                tag, text = "string", str(entry.value)

            element = next(
                (e for e in resources.findall(tag) if e.get("name") == entry.key),
                None
            )
            if element is None:
                element = ET.SubElement(resources, tag, name=entry.key)
            element.text = text

        ET.indent(tree)
        tree.write(path, encoding="utf-8", xml_declaration=True)
        self.logger.debug(f"Wrote {len(entries)} setting(s) to {path}")

    def get_build_configuration(self, release_channel: ReleaseChannel) -> str:
        return self.BUILD_CONFIGURATION

    def clean_command(self, configuration: str) -> List[str]:
        return [
            self.toolchain,
            str(self.project_file),
            f"/p:Configuration={configuration}",
            "/t:Clean",
        ]

    def package_command(self, configuration: str, output_dir: Path) -> List[str]:
        return [
            self.toolchain,
            str(self.project_file),
            f"/p:Configuration={configuration}",
            "/t:SignAndroidPackage",
            f"/p:OutputPath={output_dir}/",
        ]
