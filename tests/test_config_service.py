import pytest
import yaml

from release_tool.api.exceptions import ConfigError
from release_tool.services.config_service import ConfigService


def _write(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_relative_solution_path_resolves_against_config_file(tmp_path):
    config_file = _write(tmp_path / ".release-tool.yaml", {
        "project": {"solutionPath": "src/App.sln"},
        "ios": {"projectName": "App.iOS"},
        "processors": [{"type": "copy", "destination": "/drop"}],
    })

    service = ConfigService(config_file)

    assert service.options["project"]["solutionPath"] == str(tmp_path / "src" / "App.sln")
    assert "processors" not in service.options
    assert service.processor_configs == [{"type": "copy", "destination": "/drop"}]


def test_environment_variables_are_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_SOLUTION", "/builds/App.sln")
    config_file = tmp_path / "release.yaml"
    config_file.write_text("project:\n  solutionPath: ${APP_SOLUTION}\n", encoding="utf-8")

    assert ConfigService(config_file).options["project"]["solutionPath"] == "/builds/App.sln"


def test_location_order(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RELEASE_TOOL_CONFIG", raising=False)
    assert ConfigService().config_path == tmp_path / ".release-tool.yaml"

    monkeypatch.setenv("RELEASE_TOOL_CONFIG", str(tmp_path / "from-env.yaml"))
    assert ConfigService().config_path == tmp_path / "from-env.yaml"

    assert ConfigService(tmp_path / "explicit.yaml").config_path == tmp_path / "explicit.yaml"


@pytest.mark.parametrize("content", [
    None,
    "project: [unclosed",
    "- just\n- a list\n",
    "processors: {type: copy}\n",
])
def test_bad_files_raise_config_error(tmp_path, content):
    config_file = tmp_path / ".release-tool.yaml"
    if content is not None:
        config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        service = ConfigService(config_file)
        service.processor_configs
