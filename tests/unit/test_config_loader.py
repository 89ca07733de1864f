"""Config hierarchy: YAML defaults, environment file, overrides, env vars."""

import pytest

from hrdash.core.config.loader import ConfigLoader, get_setting, load_config


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_shipped_defaults():
    config = load_config()
    assert config["storage"]["object_store_dir"]
    assert config["llm"]["model"] == "llama-3.1-8b-instant"
    assert config["llm"]["base_url"].startswith("https://")


def test_hierarchy(tmp_path, monkeypatch):
    write(
        tmp_path / "default.yaml",
        "storage:\n  object_store_dir: data/store\nllm:\n  model: base\n  temperature: 0.7\n",
    )
    write(tmp_path / "environments" / "staging.yaml", "llm:\n  model: staging-model\n")
    monkeypatch.setenv("HRDASH_ENV", "staging")
    monkeypatch.setenv("HRDASH_LLM__MAX_TOKENS", "512")
    monkeypatch.setenv("HRDASH_LOGGING__FORMAT", "json")
    monkeypatch.setenv("HRDASH_TEST_MODE", "1")

    config = ConfigLoader(tmp_path).load(overrides={"storage": {"object_store_dir": "/tmp/x"}})

    assert config["llm"]["model"] == "staging-model"
    assert config["llm"]["temperature"] == 0.7
    assert config["llm"]["max_tokens"] == 512
    assert config["logging"]["format"] == "json"
    assert config["storage"]["object_store_dir"] == "/tmp/x"
    # Variables without a section separator are not config keys
    assert "test_mode" not in config


def test_missing_directory_gives_empty_config(tmp_path):
    assert ConfigLoader(tmp_path / "nope").load() == {}


def test_value_conversion():
    loader = ConfigLoader()
    assert loader._convert_value("true") is True
    assert loader._convert_value("No") is False
    assert loader._convert_value("3") == 3
    assert loader._convert_value("0.25") == 0.25
    assert loader._convert_value("llama") == "llama"


def test_sources_record_applied_layers(tmp_path, monkeypatch):
    write(tmp_path / "default.yaml", "llm:\n  model: base\n")
    monkeypatch.delenv("HRDASH_ENV", raising=False)
    loader = ConfigLoader(tmp_path)

    loader.load(overrides={"llm": {"model": "x"}})

    assert loader.sources[0].endswith("default.yaml")
    assert "overrides" in loader.sources


def test_nested_env_key_replaces_scalar(tmp_path, monkeypatch):
    monkeypatch.setenv("HRDASH_ROADMAP__LIMIT", "2")
    monkeypatch.setenv("HRDASH_ROADMAP__LIMIT__SOFT", "1")
    config = ConfigLoader(tmp_path).load()
    assert config["roadmap"]["limit"] == {"soft": 1}


def test_non_mapping_yaml_rejected(tmp_path):
    write(tmp_path / "default.yaml", "- just\n- a list\n")
    with pytest.raises(ValueError):
        ConfigLoader(tmp_path).load()


def test_get_setting():
    config = {"storage": {"object_store_dir": "data/store"}, "logging": {"file": None}}
    assert get_setting(config, "storage.object_store_dir") == "data/store"
    assert get_setting(config, "logging.file", "fallback") == "fallback"
    assert get_setting(config, "llm.model") is None
    assert get_setting(config, "storage.object_store_dir.deeper", 5) == 5


def test_config_dir_from_environment(tmp_path, monkeypatch):
    write(tmp_path / "default.yaml", "dashboard:\n  default_filter: top5\n")
    monkeypatch.setenv("HRDASH_CONFIG_DIR", str(tmp_path))

    loader = ConfigLoader()

    assert loader.config_dir == tmp_path
    assert loader.load()["dashboard"]["default_filter"] == "top5"
    # an explicit directory still wins
    assert ConfigLoader(tmp_path / "other").load() == {}
