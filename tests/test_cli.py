import importlib
import json

import pytest
import yaml
from click.testing import CliRunner

from release_tool.api.releaser import Releaser
from release_tool.constants import ReleaseChannel

cli_main = importlib.import_module("release_tool.cli.main")


@pytest.fixture
def config_file(solution):
    path = solution / ".release-tool.yaml"
    path.write_text(yaml.safe_dump({
        "project": {"solutionPath": "App.sln"},
        "android": {"projectName": "App.Droid"},
        "ios": {"projectName": "App.iOS"},
    }), encoding="utf-8")
    return path


@pytest.fixture
def runner(monkeypatch, fake_factory):
    """CLI runner whose releaser builds with fake builders"""

    class FakeBuildReleaser(Releaser):
        @classmethod
        def from_config_file(cls, config_path=None, **kwargs):
            return Releaser.from_config_file(config_path, builder_factory=fake_factory)

    monkeypatch.setattr(cli_main, "Releaser", FakeBuildReleaser)
    return CliRunner()


def _json_output(output):
    return json.loads(output[output.index("{"):])


def test_validate_lists_environments(runner, config_file):
    result = runner.invoke(cli_main.cli, ["--config", str(config_file), "validate"])

    assert result.exit_code == 0, result.output
    assert "Options are valid for android, ios" in result.output
    assert "acme" in result.output
    assert "staging" in result.output


def test_validate_reports_invalid_options(runner, config_file):
    config_file.write_text(yaml.safe_dump({"project": {"solutionPath": "App.sln"}}), encoding="utf-8")

    result = runner.invoke(cli_main.cli, ["--config", str(config_file), "validate", "-p", "ios"])

    assert result.exit_code == 1
    assert "ios.projectName" in result.output


def test_deploy_json_output(runner, config_file, fake_builders):
    result = runner.invoke(cli_main.cli, [
        "--config", str(config_file), "deploy", "-c", "staging", "-p", "android", "-p", "ios", "--json",
    ])

    assert result.exit_code == 0, result.output
    data = _json_output(result.output)
    assert data["status"]["successful"] == 1
    assert data["status"]["escaped"] == 1
    assert data["results"]["staging"]["ios"]["status"] == "Successful"


def test_deploy_exits_non_zero_when_a_pair_fails(runner, config_file, fake_builders):
    fake_builders.build_success = False

    result = runner.invoke(cli_main.cli, [
        "--config", str(config_file), "deploy", "-c", "acme", "-p", "ios",
    ])

    assert result.exit_code == 1
    assert "acme" in result.output


def test_deploy_with_console_progress(runner, config_file, fake_builders):
    result = runner.invoke(cli_main.cli, [
        "--config", str(config_file), "deploy", "-c", "acme", "-p", "android", "--store-release",
    ])

    assert result.exit_code == 0, result.output
    assert fake_builders.calls[-1][0] == "build"


def test_missing_configuration_file(runner, tmp_path):
    result = runner.invoke(cli_main.cli, [
        "--config", str(tmp_path / "absent.yaml"), "deploy", "-c", "acme", "-p", "ios",
    ])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_install_command(runner, config_file, fake_builders):
    result = runner.invoke(cli_main.cli, [
        "--config", str(config_file), "install", "acme", "ios", "--version", "12", "--json",
    ])

    assert result.exit_code == 0, result.output
    assert _json_output(result.output)["installed_config_name"] == "acme"
    assert fake_builders.calls == [("install", "acme", "ios", {"version": "12"})]


def test_build_command_defaults_output_to_platform_dir(runner, config_file, solution, fake_builders):
    result = runner.invoke(cli_main.cli, ["--config", str(config_file), "build", "android", "--json"])

    assert result.exit_code == 0, result.output
    assert fake_builders.calls == [("build", ReleaseChannel.INTERNAL, solution / "output" / "android")]
