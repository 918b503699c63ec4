import json
from pathlib import Path

import pytest

from pubdatahub.config import (
    CONFIG_PATH_ENV,
    ConfigError,
    default_config_dir,
    init_config,
    set_storage_path,
)


def test_init_config_creates_default(tmp_path):
    config_dir = tmp_path / ".pubdatahub_test"
    config = init_config(config_dir)

    assert str(config.storage_path) != ""
    assert (config_dir / "config.json").is_file()
    assert config.storage_path.is_dir()
    assert config.storage_path == config_dir / "data"


def test_init_config_reads_existing_file(tmp_path):
    config_dir = tmp_path / ".pubdatahub_test"
    init_config(config_dir)

    custom = config_dir / "custom_data"
    (config_dir / "config.json").write_text(json.dumps({"storage_path": str(custom)}))

    config = init_config(config_dir)
    assert config.storage_path == custom
    assert custom.is_dir()


def test_init_config_uses_environment(tmp_path, monkeypatch):
    config_dir = tmp_path / "from_env"
    monkeypatch.setenv(CONFIG_PATH_ENV, str(config_dir))
    config = init_config()
    assert config.config_dir == config_dir
    assert (config_dir / "config.json").is_file()


def test_default_config_dir_falls_back_to_home(monkeypatch):
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    assert default_config_dir() == Path.home() / ".pubdatahub"


def test_set_storage_path(tmp_path):
    config_dir = tmp_path / ".pubdatahub_test_set"
    init_config(config_dir)

    new_path = config_dir / "new_storage"
    set_storage_path(new_path, config_dir)

    config = init_config(config_dir)
    assert config.storage_path == new_path
    assert new_path.is_dir()


def test_set_storage_path_keeps_other_settings(tmp_path):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({"storage_path": "x", "theme": "dark"}))
    set_storage_path(tmp_path / "elsewhere", config_dir)
    data = json.loads((config_dir / "config.json").read_text())
    assert data["theme"] == "dark"
    assert data["storage_path"] == str(tmp_path / "elsewhere")


def test_set_storage_path_without_config_file(tmp_path):
    with pytest.raises(ConfigError):
        set_storage_path(tmp_path / "data", tmp_path / "missing")


def test_init_config_rejects_invalid_json(tmp_path):
    (tmp_path / "config.json").write_text("{not json")
    with pytest.raises(ConfigError):
        init_config(tmp_path)


def test_init_config_rejects_non_string_storage_path(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"storage_path": 12}))
    with pytest.raises(ConfigError):
        init_config(tmp_path)