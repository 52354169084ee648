import json
import logging
from pathlib import Path

import pytest
import yaml

from policystatus.foundation.config import (
    DEFAULT_CONTROLLER_NAME,
    StatusConfig,
    UnifiedConfig,
    find_config_file,
    load_config,
)


def test_load_config_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "cfg.yml"
    config_file.write_text(
        yaml.safe_dump(
            {
                "status": {
                    "controller_name": "example.com/gateway-controller",
                    "max_policy_ancestors": 8,
                    "aggregate_on_overflow": False,
                }
            }
        )
    )

    config = load_config(str(config_file))

    assert config.status.controller_name == "example.com/gateway-controller"
    assert config.status.max_policy_ancestors == 8
    assert config.status.aggregate_on_overflow is False
    assert config.present_sections == frozenset({"status"})


def test_load_config_json(tmp_path: Path) -> None:
    config_file = tmp_path / "cfg.json"
    config_file.write_text(json.dumps({"status": {"controller_name": "ctrl", "max_policy_ancestors": 4}}))

    config = load_config(str(config_file))

    assert config.status.controller_name == "ctrl"
    assert config.status.max_policy_ancestors == 4
    assert config.present_sections == frozenset({"status"})


def test_load_config_other_sections_are_not_present(tmp_path: Path) -> None:
    config_file = tmp_path / "cfg.yml"
    config_file.write_text("gateway:\n  host: 0.0.0.0\nstatus: null\n")

    config = load_config(str(config_file))

    assert config.present_sections == frozenset()
    assert config.status == StatusConfig()


def test_load_config_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "empty.yml"
    config_file.write_text("{}")

    config = load_config(str(config_file))

    assert isinstance(config, UnifiedConfig)
    assert config.status.controller_name == DEFAULT_CONTROLLER_NAME
    assert config.status.max_policy_ancestors == 16
    assert config.present_sections == frozenset()


def test_load_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_config("missing.yml")


def test_load_config_malformed(tmp_path: Path) -> None:
    config_file = tmp_path / "bad.yml"
    config_file.write_text("- 1")
    with pytest.raises(TypeError):
        load_config(str(config_file))


def test_load_config_section_not_mapping(tmp_path: Path) -> None:
    config_file = tmp_path / "bad.yml"
    config_file.write_text("status: 3")
    with pytest.raises(TypeError, match="status section must be a mapping"):
        load_config(str(config_file))


def test_load_config_unknown_key(tmp_path: Path) -> None:
    config_file = tmp_path / "bad.yml"
    config_file.write_text("status:\n  eviction: oldest\n")
    with pytest.raises(TypeError):
        load_config(str(config_file))


def test_load_config_yaml_error(tmp_path: Path, caplog) -> None:
    config_file = tmp_path / "bad.yml"
    config_file.write_text(":\n  -")
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError, match="Failed to parse configuration file"):
            load_config(str(config_file))


@pytest.mark.parametrize(
    "kwargs",
    [{"controller_name": ""}, {"max_policy_ancestors": 0}],
)
def test_status_config_rejects_invalid_values(kwargs) -> None:
    with pytest.raises(ValueError):
        StatusConfig(**kwargs)


def test_find_config_file(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None
    target = tmp_path / "policystatus.yaml"
    target.write_text("{}")
    assert find_config_file(tmp_path) == str(target)
