import asyncio
import json
import plistlib
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from release_tool.api.exceptions import InstallError, SetupError, UnsupportedPlatformError
from release_tool.builders.android import ANDROID_NS, AndroidBuilder
from release_tool.builders.factory import BuilderFactory
from release_tool.builders.ios import IosBuilder
from release_tool.constants import ReleaseChannel
from release_tool.core.path_resolver import PathResolver
from release_tool.models.config import ProjectSettings
from release_tool.utils.process_utils import CommandResult


def _install(options, config_name, platform, overrides=None):
    builder = BuilderFactory().create(platform, options)
    resolver = PathResolver(ProjectSettings.evaluate(options))
    info = resolver.get_config_info(config_name, platform, options[platform]["projectName"])
    return builder, asyncio.run(builder.install_config(info, overrides))


def _read_plist(path: Path):
    with open(path, "rb") as f:
        return plistlib.load(f)


class FakeToolchain:
    """Stands in for msbuild; drops the given files into the package directory"""

    def __init__(self, artifacts=("com.acme.app-Signed.apk",), returncode=0, clean_returncode=0):
        self.artifacts = artifacts
        self.returncode = returncode
        self.clean_returncode = clean_returncode
        self.commands = []
        self.package_dirs = []

    async def __call__(self, args):
        self.commands.append(args)
        if "/t:Clean" in args:
            return CommandResult(returncode=self.clean_returncode)

        option = next(a for a in args if a.startswith(("/p:OutputPath=", "/p:IpaPackageDir=")))
        package_dir = Path(option.split("=", 1)[1])
        self.package_dirs.append(package_dir)
        for name in self.artifacts:
            (package_dir / name).write_bytes(b"package")

        return CommandResult(returncode=self.returncode, stdout="build log", stderr="")


@pytest.fixture
def temp_root(tmp_path, monkeypatch):
    root = tmp_path / "scratch"
    monkeypatch.setenv("RELEASE_TOOL_TEMP_DIR", str(root))
    return root


def test_android_install_updates_manifest_settings_and_resources(options, solution):
    builder, result = _install(options, "acme", "android")

    manifest = ET.parse(solution / "App.Droid" / "Properties" / "AndroidManifest.xml").getroot()
    assert manifest.get("package") == "com.acme.app"
    assert manifest.get(f"{{{ANDROID_NS}}}versionCode") == "7"
    assert manifest.get(f"{{{ANDROID_NS}}}versionName") == "2.0.1"
    assert manifest.find("application").get(f"{{{ANDROID_NS}}}label") == "Acme"

    manifest_text = (solution / "App.Droid" / "Properties" / "AndroidManifest.xml").read_text(encoding="utf-8")
    assert "keep me" in manifest_text

    settings = ET.parse(solution / "App.Droid" / "Resources" / "values" / "settings.xml").getroot()
    assert {(e.tag, e.get("name"), e.text) for e in settings} == {
        ("string", "apiUrl", "https://acme.example.com"),
        ("bool", "analytics", "true"),
    }

    assert (solution / "App.Droid" / "Resources" / "drawable" / "icon.png").read_bytes() == b"acme-icon"

    assert result.installed_config_name == "acme"
    assert result.config_settings["Application Name"] == "Acme"
    assert result.config_settings["Application Bundle Identifier"] == "com.acme.app"
    assert result.config_settings["API URL"] == "https://acme.example.com"
    assert result.config_settings["config.analytics"] is True


def test_android_settings_update_existing_entries(options, solution):
    settings_path = solution / "App.Droid" / "Resources" / "values" / "settings.xml"
    settings_path.write_text(
        '<resources><string name="apiUrl">old</string><string name="other">kept</string></resources>',
        encoding="utf-8",
    )

    _install(options, "acme", "android")

    entries = {e.get("name"): e.text for e in ET.parse(settings_path).getroot()}
    assert entries == {"apiUrl": "https://acme.example.com", "other": "kept", "analytics": "true"}


def test_ios_install_derives_version_from_version_name(options, solution):
    _, result = _install(options, "staging", "ios")

    info = _read_plist(solution / "App.iOS" / "Info.plist")
    assert info["CFBundleDisplayName"] == "Staging"
    assert info["CFBundleIdentifier"] == "com.example.staging"
    assert info["CFBundleShortVersionString"] == "1.2.3"
    assert info["CFBundleVersion"] == "1.2.3"

    config = _read_plist(solution / "App.iOS" / "Resources" / "Config.plist")
    assert config == {"apiUrl": "https://staging.example.com"}
    assert result.config_settings["Application Version"] == "1.2.3"


def test_version_override_wins(options, solution):
    _install(options, "acme", "ios", overrides={"version": "42"})

    assert _read_plist(solution / "App.iOS" / "Info.plist")["CFBundleVersion"] == "42"


def test_template_can_rekey_app_fields(options, solution):
    template = solution / "App.iOS" / "config_template.json"
    data = json.loads(template.read_text())
    data["app"] = {"name": "string.optional().keyed('CFBundleName').named('Application Name')"}
    template.write_text(json.dumps(data))

    _install(options, "acme", "ios")

    info = _read_plist(solution / "App.iOS" / "Info.plist")
    assert info["CFBundleName"] == "Acme"
    assert info["CFBundleDisplayName"] == "Example"


def test_invalid_config_raises_install_error_with_field_errors(options, solution):
    config_file = solution / "oem" / "acme" / "android" / "config.json"
    config_file.write_text(json.dumps({"app": {"version": "beta"}, "config": {}}))

    with pytest.raises(InstallError) as exc_info:
        _install(options, "acme", "android")

    assert sorted(e.key_path for e in exc_info.value.errors) == ["app.version", "config.apiUrl"]


def test_unreadable_config_raises_install_error(options, solution):
    (solution / "oem" / "acme" / "ios" / "config.json").write_text("{not json")

    with pytest.raises(InstallError) as exc_info:
        _install(options, "acme", "ios")

    assert exc_info.value.cause is not None


def test_malformed_template_raises_install_error(options, solution):
    (solution / "App.iOS" / "config_template.json").write_text(
        json.dumps({"config": {"apiUrl": "string.bogus()"}})
    )

    with pytest.raises(InstallError):
        _install(options, "acme", "ios")


def test_missing_template_installs_app_fields_only(options, solution):
    (solution / "App.iOS" / "config_template.json").unlink()

    _, result = _install(options, "acme", "ios")

    assert "API URL" not in result.config_settings
    assert _read_plist(solution / "App.iOS" / "Info.plist")["CFBundleDisplayName"] == "Acme"


def test_android_build_stages_signed_apk(options, solution, temp_root, monkeypatch):
    builder = BuilderFactory().create("android", options)
    toolchain = FakeToolchain(artifacts=("com.acme.app.apk", "com.acme.app-Signed.apk"))
    monkeypatch.setattr(builder, "run_toolchain", toolchain)

    output = solution / "output" / "acme" / "android"
    result = asyncio.run(builder.build(ReleaseChannel.INTERNAL, output))

    assert result.success, result.message
    assert result.output_artifact_path == output / "app.apk"
    assert result.output_artifact_path.read_bytes() == b"package"
    assert result.stdout == "build log"

    clean, package = toolchain.commands
    assert clean[0] == "msbuild"
    assert "/t:Clean" in clean
    assert "/t:SignAndroidPackage" in package
    assert "/p:Configuration=Release" in package

    # Scratch directory is gone after the build
    assert toolchain.package_dirs[0].parent == temp_root / "release-tool"
    assert not toolchain.package_dirs[0].exists()


@pytest.mark.parametrize("channel, configuration", [
    (ReleaseChannel.STORE, "AppStore"),
    (ReleaseChannel.INTERNAL, "Ad-Hoc"),
])
def test_ios_build_configuration_follows_channel(options, solution, temp_root, monkeypatch,
                                                 channel, configuration):
    builder = BuilderFactory().create("ios", options)
    toolchain = FakeToolchain(artifacts=("App.iOS.ipa",))
    monkeypatch.setattr(builder, "run_toolchain", toolchain)

    result = asyncio.run(builder.build(channel, solution / "output"))

    assert result.success
    assert result.output_artifact_path.name == "app.ipa"
    assert f"/p:Configuration={configuration}" in toolchain.commands[1]
    assert "/p:Platform=iPhone" in toolchain.commands[1]


@pytest.mark.parametrize("toolchain, message", [
    (FakeToolchain(returncode=1), "exit code 1"),
    (FakeToolchain(clean_returncode=2), "Clean step failed"),
    (FakeToolchain(artifacts=()), "no artifact"),
    (FakeToolchain(artifacts=("a-Signed.apk", "b-Signed.apk")), "Ambiguous"),
])
def test_android_build_failures_are_results(options, solution, temp_root, monkeypatch, toolchain, message):
    builder = BuilderFactory().create("android", options)
    monkeypatch.setattr(builder, "run_toolchain", toolchain)

    result = asyncio.run(builder.build(ReleaseChannel.INTERNAL, solution / "output"))

    assert not result.success
    assert message in result.message
    assert not (solution / "output" / "app.apk").exists()
    assert list((temp_root / "release-tool").iterdir()) == []


def test_missing_toolchain_is_a_failed_build(options, solution, temp_root, monkeypatch):
    builder = BuilderFactory().create("android", options)

    async def missing(args):
        raise FileNotFoundError("msbuild")

    monkeypatch.setattr(builder, "run_toolchain", missing)

    result = asyncio.run(builder.build(ReleaseChannel.INTERNAL, solution / "output"))

    assert not result.success
    assert "msbuild" in result.message


def test_factory_registry():
    factory = BuilderFactory()

    assert sorted(factory.get_supported_platforms()) == ["android", "ios"]
    assert factory.get_builder_class("Android") is AndroidBuilder
    assert factory.get_builder_class("IOS") is IosBuilder

    with pytest.raises(UnsupportedPlatformError):
        factory.get_builder_class("windows")


def test_factory_applies_option_defaults(options):
    evaluated = BuilderFactory().evaluate_options("ios", options)

    assert evaluated["ios"] == {
        "projectName": "App.iOS",
        "resourcesPath": "Resources",
        "toolchain": "msbuild",
        "buildPlatform": "iPhone",
    }
    assert evaluated["project"]["configsPath"] == "oem"


def test_factory_rejects_invalid_options(options):
    options["android"] = {"projectName": 12}

    with pytest.raises(SetupError) as exc_info:
        BuilderFactory().create("android", options)

    assert [e.key_path for e in exc_info.value.errors] == ["android.projectName"]


def test_manifest_keeps_tools_namespace_prefix(options, solution):
    manifest_path = solution / "App.Droid" / "Properties" / "AndroidManifest.xml"
    manifest_path.write_text(
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
        'xmlns:tools="http://schemas.android.com/tools" package="com.example.app">\n'
        '  <application android:label="Example" tools:replace="android:label" />\n'
        '</manifest>\n',
        encoding="utf-8",
    )

    _install(options, "acme", "android")

    text = manifest_path.read_text(encoding="utf-8")
    assert 'xmlns:tools="http://schemas.android.com/tools"' in text
    assert 'tools:replace="android:label"' in text
    assert "ns0" not in text
