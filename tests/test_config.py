import json
import logging

import pytest

from vts_set_param.clients.vtube_studio.models import Credentials
from vts_set_param.configs.config import (
    TokenStore,
    VTSSetParamConfig,
    default_config_path,
    merge_config,
)


def test_missing_file_loads_defaults(tmp_path):
    config = VTSSetParamConfig.load_config(tmp_path / "missing.json")

    assert config.host == "localhost"
    assert config.port == 8001
    assert config.token is None
    assert config.endpoint == "ws://localhost:8001"


def test_json_and_yaml_are_loaded(tmp_path):
    json_path = tmp_path / "config.json"
    json_path.write_text(json.dumps({"host": "10.0.0.2", "port": 9000, "token": "abc"}), encoding="utf-8")
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text("host: 10.0.0.3\nplugin_name: custom\n", encoding="utf-8")

    assert VTSSetParamConfig.load_config(json_path).endpoint == "ws://10.0.0.2:9000"
    yaml_config = VTSSetParamConfig.load_config(yaml_path)
    assert yaml_config.host == "10.0.0.3"
    assert yaml_config.plugin_name == "custom"


def test_unsupported_suffix_is_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("host = 'x'", encoding="utf-8")

    with pytest.raises(ValueError):
        VTSSetParamConfig.load_config(path)


def test_cli_values_override_file_except_token():
    file_config = VTSSetParamConfig(host="file-host", port=9000, token="file-token")

    merged = merge_config(file_config, {"host": "cli-host", "port": None, "token": "cli-token"})

    assert merged.host == "cli-host"
    assert merged.port == 9000
    assert merged.token == "file-token"


def test_cli_token_used_when_file_has_none():
    merged = merge_config(VTSSetParamConfig(), {"token": "cli-token", "plugin_name": "custom"})

    assert merged.token == "cli-token"
    assert merged.to_credentials() == Credentials("custom", "Walfie", "cli-token")


def test_invalid_port_is_rejected():
    with pytest.raises(ValueError):
        merge_config(VTSSetParamConfig(), {"port": 0})


def test_default_config_path_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_path() == tmp_path / "vts-set-param.json"


def test_token_store_writes_new_token(tmp_path):
    path = tmp_path / "nested" / "vts-set-param.json"
    store = TokenStore(path, VTSSetParamConfig(host="h"))

    assert store.save("fresh")
    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved == {
        "host": "h",
        "port": 8001,
        "token": "fresh",
        "plugin_name": "vts-set-param",
        "plugin_developer": "Walfie",
    }
    assert store.config.token == "fresh"
    assert [p.name for p in path.parent.iterdir()] == ["vts-set-param.json"]


def test_token_store_write_failure_is_not_fatal(tmp_path, caplog):
    directory = tmp_path / "vts-set-param.json"
    directory.mkdir()
    store = TokenStore(directory, VTSSetParamConfig())

    with caplog.at_level(logging.ERROR):
        assert not store.save("fresh")

    assert "写入配置文件失败" in caplog.text
    assert store.config.token is None
    assert [p.name for p in tmp_path.iterdir()] == ["vts-set-param.json"]


def test_malformed_yaml_is_value_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("host: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError):
        VTSSetParamConfig.load_config(path)


def test_dump_config_replaces_existing_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("host: old\n", encoding="utf-8")

    VTSSetParamConfig(host="new", token="abc").dump_config(path)

    assert VTSSetParamConfig.load_config(path).token == "abc"
    assert [p.name for p in tmp_path.iterdir()] == ["config.yaml"]


def test_dump_config_rejects_unsupported_suffix(tmp_path):
    with pytest.raises(ValueError):
        VTSSetParamConfig().dump_config(tmp_path / "config.toml")
    assert list(tmp_path.iterdir()) == []
