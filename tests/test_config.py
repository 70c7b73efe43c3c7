import json

import pytest

from Sort_Stream.config import Config, load_config
from Sort_Stream.engine.pacing import Pause


def test_load_from_json_merges_pacing(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps({"length": 5, "pacing_ms": {"compare": 10}}))
    Config.load_from_file(str(cfg))
    assert Config.length == 5
    assert Config.pacing_ms["compare"] == 10
    assert Config.pacing_ms["divide"] == 100.0
    assert Config.config_file == str(cfg)


def test_load_from_yaml(tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("seed: 42\nalgorithm: merge\nspeed: 4\n")
    data = load_config(str(cfg))
    assert Config.seed == 42
    assert data["speed"] == 4


def test_relative_paths_resolve_against_config_dir(tmp_path):
    cfg = tmp_path / "c.json"
    cfg.write_text(json.dumps({"trace_file": "out/trace.msgpack"}))
    Config.load_from_file(str(cfg))
    assert Config.trace_file == str(tmp_path / "out" / "trace.msgpack")


def test_unknown_keys_ignored(tmp_path):
    cfg = tmp_path / "c.json"
    cfg.write_text(json.dumps({"colour": "red", "_DEFAULTS": {}}))
    Config.load_from_file(str(cfg))
    assert not hasattr(Config, "colour")
    assert Config._DEFAULTS


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load_from_file(str(tmp_path / "nope.json"))


def test_non_mapping_root_rejected(tmp_path):
    cfg = tmp_path / "c.yaml"
    cfg.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        Config.load_from_file(str(cfg))


def test_pacing_policy_from_config():
    Config.speed = 2.0
    policy = Config.pacing_policy()
    assert policy.delay_for(Pause.DIVIDE) == pytest.approx(0.05)
    assert Config.pacing_policy(no_delay=True).delay_for(Pause.DIVIDE) == 0.0


def test_reset_restores_defaults():
    Config.length = 999
    Config.pacing_ms["divide"] = 1
    Config.reset()
    assert Config.length == 16
    assert Config.pacing_ms["divide"] == 100.0
