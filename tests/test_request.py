import pytest

from release_tool.api.exceptions import RequestError
from release_tool.constants import ReleaseChannel
from release_tool.models.request import DeploymentRequest


def test_channel_and_overrides():
    request = DeploymentRequest(configs=["acme"], platforms=["ios"], store_release=True, version="2.0.0")

    assert request.release_channel == ReleaseChannel.STORE
    assert request.overrides == {"version": "2.0.0"}
    assert DeploymentRequest(configs=["acme"], platforms=["ios"]).overrides == {}


def test_from_dict_round_trip():
    data = {"configs": ["acme", "globex"], "platforms": ["android"], "store_release": False}

    request = DeploymentRequest.from_dict(data)
    request.validate()

    assert request.to_dict() == data


@pytest.mark.parametrize("data", [
    {"configs": "acme", "platforms": ["ios"]},
    {"configs": ["acme"], "platforms": [""]},
    {"configs": ["acme"], "platforms": ["ios"], "store_release": "yes"},
    {"configs": ["acme"], "platforms": ["ios"], "version": 2},
])
def test_validate_rejects_malformed_requests(data):
    with pytest.raises(RequestError):
        DeploymentRequest(**data).validate()


@pytest.mark.parametrize("data", [
    {"configs": "staging", "platforms": ["ios"]},
    {"configs": ["staging"], "platforms": "ios"},
    {"platforms": ["ios"]},
])
def test_from_dict_requires_lists(data):
    with pytest.raises(RequestError):
        DeploymentRequest.from_dict(data)


@pytest.mark.parametrize("config_name", [".", ".."])
def test_relative_directory_names_are_not_configs(config_name):
    with pytest.raises(RequestError):
        DeploymentRequest(configs=[config_name], platforms=["ios"]).validate()
