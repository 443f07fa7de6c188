# tests/conftest.py
"""Shared fixtures: a throwaway solution tree, fake builders and processors"""

import json
import plistlib
from pathlib import Path

import pytest

from release_tool.api.exceptions import InstallError
from release_tool.builders.base import PlatformBuilder
from release_tool.builders.factory import BuilderFactory
from release_tool.core.config_evaluator import Property
from release_tool.models.result import BuildResult, InstallResult, ProcessResult
from release_tool.processors.base import ArtifactProcessor

ANDROID_MANIFEST = """<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="com.example.app" android:versionCode="1" android:versionName="0.1">
  <!-- keep me -->
  <application android:label="Example" />
</manifest>
"""


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def solution(tmp_path):
    """Solution with an Android and an iOS project and two environments

    ``staging`` targets only iOS; ``acme`` targets both platforms.
    """
    root = tmp_path / "solution"
    root.mkdir()
    (root / "App.sln").write_text("")

    droid = root / "App.Droid"
    (droid / "Properties").mkdir(parents=True)
    (droid / "Properties" / "AndroidManifest.xml").write_text(ANDROID_MANIFEST, encoding="utf-8")
    (droid / "Resources" / "values").mkdir(parents=True)

    ios = root / "App.iOS"
    (ios / "Resources").mkdir(parents=True)
    with open(ios / "Info.plist", "wb") as f:
        plistlib.dump({"CFBundleDisplayName": "Example", "CFBundleIdentifier": "com.example.app"}, f)

    for project in (droid, ios):
        write_json(project / "config_template.json", {
            "config": {
                "apiUrl": "string.named('API URL')",
                "analytics": "boolean.optional()",
            },
        })

    write_json(root / "oem" / "staging" / "ios" / "config.json", {
        "app": {"name": "Staging", "bundleId": "com.example.staging", "versionName": "1.2.3"},
        "config": {"apiUrl": "https://staging.example.com"},
    })

    for platform in ("android", "ios"):
        write_json(root / "oem" / "acme" / platform / "config.json", {
            "app": {"name": "Acme", "bundleId": "com.acme.app", "version": "7", "versionName": "2.0.1"},
            "config": {"apiUrl": "https://acme.example.com", "analytics": True},
        })

    icon = root / "oem" / "acme" / "android" / "resources" / "drawable" / "icon.png"
    icon.parent.mkdir(parents=True)
    icon.write_bytes(b"acme-icon")

    return root


@pytest.fixture
def options(solution):
    return {
        "project": {"solutionPath": str(solution / "App.sln")},
        "android": {"projectName": "App.Droid"},
        "ios": {"projectName": "App.iOS"},
    }


class FakeBuilder(PlatformBuilder):
    """Records calls instead of touching a toolchain"""

    OPTIONS_SCHEMA = {"projectName": Property("string")}

    calls = []
    build_success = True
    failing_configs = set()
    crashing_configs = set()

    async def install_config(self, config_info, overrides=None):
        FakeBuilder.calls.append(("install", config_info.config_name, config_info.platform, overrides))
        if config_info.config_name in FakeBuilder.crashing_configs:
            raise RuntimeError("unexpected builder crash")
        if config_info.config_name in FakeBuilder.failing_configs:
            raise InstallError("broken config", path=config_info.config_file)
        return InstallResult(
            installed_config_name=config_info.config_name,
            config_settings={"Application Name": config_info.config_name.title()},
        )

    async def build(self, release_channel, output_path):
        FakeBuilder.calls.append(("build", release_channel, output_path))
        if not FakeBuilder.build_success:
            return BuildResult(success=False, message="toolchain exploded")

        output_path.mkdir(parents=True, exist_ok=True)
        artifact = output_path / "app.bin"
        artifact.write_bytes(b"artifact")
        return BuildResult(success=True, output_artifact_path=artifact)


class FakeProcessor(ArtifactProcessor):
    """Records processed artifacts and answers with a fixed outcome"""

    def __init__(self, config=None, success=True):
        super().__init__(config)
        self.success = success
        self.processed = []

    async def process(self, artifact_info):
        self.processed.append(artifact_info)
        return ProcessResult(success=self.success, message="done" if self.success else "rejected")


@pytest.fixture
def fake_builders():
    FakeBuilder.calls = []
    FakeBuilder.build_success = True
    FakeBuilder.failing_configs = set()
    FakeBuilder.crashing_configs = set()
    return FakeBuilder


@pytest.fixture
def fake_factory(fake_builders):
    return BuilderFactory({"android": fake_builders, "ios": fake_builders})


@pytest.fixture
def recorded_events():
    """Callable observer plus the list it appends to"""
    events = []

    def observer(event):
        events.append(event)

    observer.events = events
    return observer


class CrashingProcessor(ArtifactProcessor):
    """Raises instead of returning a result"""

    async def process(self, artifact_info):
        raise RuntimeError("upload service unreachable")
