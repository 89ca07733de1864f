"""Layered configuration: YAML files, programmatic overrides, environment.

Later layers win:

1. ``config/default.yaml``
2. ``config/environments/{HRDASH_ENV}.yaml`` (``development`` when unset)
3. overrides passed to ``load()``
4. ``HRDASH_<SECTION>__<KEY>`` environment variables, ``.env`` included

``HRDASH_CONFIG_DIR`` points at another config directory (installed packages
have no repo-level ``config/``). The double underscore separates nesting
levels so keys such as ``object_store_dir`` keep their single underscores.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ...observability.logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "HRDASH_"
ENV_SEPARATOR = "__"
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into dicts."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def get_setting(config: dict[str, Any], dotted_key: str, default: Any = None) -> Any:
    """Look up ``"section.key"`` in a loaded config."""
    node: Any = config
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return default if node is None else node


class ConfigLoader:
    """Reads and merges the configuration layers."""

    def __init__(self, config_dir: Path | str | None = None):
        if config_dir is None:
            # Installed wheels have no repo-level config/ directory
            config_dir = os.getenv(f"{ENV_PREFIX}CONFIG_DIR") or DEFAULT_CONFIG_DIR
        self.config_dir = Path(config_dir)
        # Layers that contributed to the last load(), for debugging
        self.sources: list[str] = []

    def load(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        load_dotenv(override=False)
        self.sources = []
        if not self.config_dir.is_dir():
            logger.warning("config_dir_missing", config_dir=str(self.config_dir))

        config = self._read_yaml(self.config_dir / "default.yaml")

        env_name = os.getenv(f"{ENV_PREFIX}ENV", "development")
        config = deep_merge(config, self._read_yaml(self.config_dir / "environments" / f"{env_name}.yaml"))

        if overrides:
            config = deep_merge(config, overrides)
            self.sources.append("overrides")

        env_layer = self._env_layer()
        if env_layer:
            config = deep_merge(config, env_layer)
            self.sources.append("environment")

        return config

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        with path.open(encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
        if not isinstance(content, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        self.sources.append(str(path))
        return content

    def _env_layer(self) -> dict[str, Any]:
        """Nested dict built from HRDASH_<SECTION>__<KEY> variables.

        Variables without a separator (HRDASH_ENV, HRDASH_TEST_MODE) are
        switches, not config keys.
        """
        layer: dict[str, Any] = {}
        for name, raw in sorted(os.environ.items()):
            if not name.startswith(ENV_PREFIX) or ENV_SEPARATOR not in name:
                continue
            *parents, leaf = name[len(ENV_PREFIX):].lower().split(ENV_SEPARATOR)
            node = layer
            for part in parents:
                if not isinstance(node.get(part), dict):
                    node[part] = {}
                node = node[part]
            node[leaf] = self._convert_value(raw)
        return layer

    def _convert_value(self, value: str) -> Any:
        """Interpret an env string as a YAML scalar (bools, ints, floats)."""
        try:
            parsed = yaml.safe_load(value)
        except yaml.YAMLError:
            return value
        if parsed is None or isinstance(parsed, (dict, list)):
            return value
        return parsed


_config_loader: ConfigLoader | None = None


def get_config_loader() -> ConfigLoader:
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def load_config(overrides: dict[str, Any] | None = None) -> dict[str, Any]:
    """Load the merged configuration with the shared loader."""
    return get_config_loader().load(overrides=overrides)
