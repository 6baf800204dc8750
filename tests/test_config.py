import json

import pytest

from cowbot.config import Config, load_config, parse_config


def _sample(**overrides):
    data = {
        "token": "token",
        "sql_server_ip": "localhost",
        "sql_server_port": 1433,
        "sql_server_username": "user",
        "sql_server_password": "password",
        "cmd_prefix": "~",
        "lavalink_ip": "localhost",
        "lavalink_password": "password",
    }
    data.update(overrides)
    return data


def test_parse_reads_all_fields():
    config = parse_config(json.dumps(_sample()))
    assert config.token == "token"
    assert config.sql_server_port == 1433
    assert config.cmd_prefix == "~"
    assert config.sql_server_username == "user"


def test_unknown_fields_are_ignored():
    config = parse_config(json.dumps(_sample(extra="value")))
    assert config.sql_server_ip == "localhost"


def test_missing_field_raises():
    data = _sample()
    del data["token"]
    with pytest.raises(ValueError):
        parse_config(json.dumps(data))


@pytest.mark.parametrize("port", [70000, -1, "1433", True])
def test_bad_port_raises(port):
    with pytest.raises(ValueError):
        parse_config(json.dumps(_sample(sql_server_port=port)))


def test_malformed_json_raises():
    with pytest.raises(ValueError):
        parse_config("{not json")


def test_non_object_raises():
    with pytest.raises(ValueError):
        parse_config("[1, 2]")


def test_lavalink_enabled_needs_both():
    assert parse_config(json.dumps(_sample())).lavalink_enabled() is True
    assert parse_config(json.dumps(_sample(lavalink_ip=""))).lavalink_enabled() is False
    assert parse_config(json.dumps(_sample(lavalink_password=""))).lavalink_enabled() is False


def test_load_config_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(_sample(cmd_prefix="!")), encoding="utf-8")
    config = load_config(path)
    assert isinstance(config, Config)
    assert config.cmd_prefix == "!"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.json")