from pathlib import Path

from release_tool.core.path_resolver import PathResolver
from release_tool.models.config import ProjectSettings


def _resolver(options):
    return PathResolver(ProjectSettings.evaluate(options))


def test_pair_paths(options, solution):
    info = _resolver(options).get_config_info("acme", "iOS", "App.iOS")

    assert info.solution_path == solution / "App.sln"
    assert info.project_path == solution / "App.iOS"
    assert info.template_path == solution / "App.iOS" / "config_template.json"
    assert info.config_path == solution / "oem" / "acme" / "ios"
    assert info.config_file == solution / "oem" / "acme" / "ios" / "config.json"
    assert info.label == "acme (iOS)"
    assert not info.escaped


def test_escape_only_when_environment_exists(options):
    resolver = _resolver(options)

    assert resolver.get_config_info("staging", "android", "App.Droid").escaped
    # An unknown environment is not an escape; installing it fails instead
    assert not resolver.get_config_info("unknown", "android", "App.Droid").escaped


def test_relative_and_absolute_directories(options, solution, tmp_path):
    options["project"]["configsPath"] = "envs"
    options["project"]["outputPath"] = str(tmp_path / "artifacts")
    resolver = _resolver(options)

    assert resolver.get_environment_dir("acme") == solution / "envs" / "acme"
    assert resolver.get_output_path("acme", "Android") == tmp_path / "artifacts" / "acme" / "android"


def test_default_output_path(options, solution):
    assert _resolver(options).get_output_path("acme", "ios") == solution / "output" / "acme" / "ios"


def test_list_environments(options):
    environments = _resolver(options).list_environments()

    assert environments == {"acme": ["android", "ios"], "staging": ["ios"]}


def test_resolve_keeps_absolute_paths(options):
    resolver = _resolver(options)

    assert resolver.resolve("/opt/App") == Path("/opt/App")
    assert resolver.resolve("App.Droid") == resolver.solution_root / "App.Droid"
