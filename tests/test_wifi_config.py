import json

import pytest

from inkreader.wifi_config import SavedNetwork, WiFiConfig

PASSWORD = "password"
NEW_PASSWORD = "secret"


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "wifi_networks.json"


def write_config(path, document):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")


def test_missing_file_gives_no_networks(config_path):
    config = WiFiConfig(config_path)
    config.load()
    assert config.networks == []
    assert not config.is_configured
    assert config.active_index == -1


def test_to_json_format(config_path):
    config = WiFiConfig(config_path)
    config.networks = [SavedNetwork(ssid="home", password=PASSWORD)]
    assert config.to_json() == (
        '{"networks":[{"ssid":"home","password":"password","autoConnect":true,"priority":0}]}'
    )


def test_remember_round_trip(config_path):
    config = WiFiConfig(config_path)
    config.remember("home", PASSWORD)
    assert config_path.is_file()
    reloaded = WiFiConfig(config_path)
    reloaded.load()
    assert reloaded.networks == config.networks
    assert reloaded.is_configured


def test_remember_updates_existing(config_path):
    config = WiFiConfig(config_path)
    config.remember("home", PASSWORD)
    config.remember("home", NEW_PASSWORD)
    assert len(config.networks) == 1
    assert config.networks[0].password == NEW_PASSWORD


def test_new_network_priority_is_count_of_saved(config_path):
    config = WiFiConfig(config_path)
    config.remember("home", PASSWORD)
    office = config.remember("office", PASSWORD)
    assert office.priority == len(config.networks) - 1
    assert office.auto_connect is True


def test_load_sorts_by_priority(config_path):
    write_config(
        config_path,
        {
            "networks": [
                {"ssid": "low", "password": PASSWORD, "priority": 1},
                {"ssid": "high", "password": PASSWORD, "priority": 5},
                {"ssid": "mid", "password": PASSWORD, "priority": 3},
            ]
        },
    )
    config = WiFiConfig(config_path)
    config.load()
    assert [network.ssid for network in config.networks] == ["high", "mid", "low"]


def test_load_defaults_and_skips_empty_ssid(config_path):
    write_config(config_path, {"networks": [{"ssid": "cafe"}, {"ssid": "", "priority": 9}]})
    config = WiFiConfig(config_path)
    config.load()
    assert config.networks == [SavedNetwork(ssid="cafe", password="", auto_connect=True, priority=0)]


def test_load_invalid_json_raises(config_path):
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        WiFiConfig(config_path).load()


def test_load_without_networks_key(config_path):
    write_config(config_path, {"other": []})
    config = WiFiConfig(config_path)
    config.load()
    assert config.networks == []


def test_remove_adjusts_active_index(config_path):
    config = WiFiConfig(config_path)
    for ssid in ("a", "b", "c"):
        config.remember(ssid, PASSWORD)
    config.active_index = 2
    removed = config.remove(0)
    assert removed.ssid == "a"
    assert config.active_index == 1
    config.remove(1)
    assert config.active_index == -1
    reloaded = WiFiConfig(config_path)
    reloaded.load()
    assert [network.ssid for network in reloaded.networks] == ["b"]


def test_remove_out_of_range(config_path):
    config = WiFiConfig(config_path)
    with pytest.raises(IndexError):
        config.remove(0)
    config.remember("home", PASSWORD)
    with pytest.raises(IndexError):
        config.remove(-1)


def test_toggle_auto_connect_persists(config_path):
    config = WiFiConfig(config_path)
    config.remember("home", PASSWORD)
    assert config.toggle_auto_connect(0) is False
    reloaded = WiFiConfig(config_path)
    reloaded.load()
    assert reloaded.networks[0].auto_connect is False
    assert config.toggle_auto_connect(0) is True


def test_change_priority_floor_and_resort(config_path):
    config = WiFiConfig(config_path)
    config.remember("first", PASSWORD)
    config.remember("second", PASSWORD)
    config.change_priority(0, False)
    assert all(network.priority >= 0 for network in config.networks)
    config.change_priority(1, True)
    config.change_priority(0, True)
    assert config.networks[0].ssid == "second"
    priorities = [network.priority for network in config.networks]
    assert priorities == sorted(priorities, reverse=True)


def test_change_priority_out_of_range(config_path):
    with pytest.raises(IndexError):
        WiFiConfig(config_path).change_priority(3, True)


def test_first_auto_connect(config_path):
    config = WiFiConfig(config_path)
    assert config.first_auto_connect() is None
    config.remember("a", PASSWORD)
    config.remember("b", PASSWORD)
    config.toggle_auto_connect(0)
    assert config.first_auto_connect().ssid == "b"
    config.toggle_auto_connect(1)
    assert config.first_auto_connect() is None