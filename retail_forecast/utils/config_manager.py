"""
Evaluation configuration: YAML/JSON files checked against a JSON schema,
with dot-path overrides (e.g. ``evaluation.horizon=13``) applied on top.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)

# Resolved against the working directory, like the outputs/ and logs/ defaults
DEFAULT_CONFIG_DIR = Path("config")
DEFAULT_CONFIG = "evaluation_config.yaml"
DEFAULT_SCHEMA = "evaluation_config_schema.json"


def parse_override(text: str) -> Dict[str, Any]:
    """
    Parse one ``dotted.path=value`` override. The value is read as YAML, so
    ``8`` is an int, ``null`` is None and ``[1, 2]`` a list.
    """
    path, sep, raw = text.partition("=")
    if not sep or not path.strip():
        raise ValueError(f"Override must look like 'section.key=value', got {text!r}")
    return {path.strip(): yaml.safe_load(raw)}


class ConfigManager:
    """
    Loads evaluation configs from `config_dir` and validates them against
    schemas in `schema_dir` (defaults to `config_dir/schemas`).
    """

    def __init__(self, config_dir: Optional[str] = None, schema_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.schema_dir = Path(schema_dir) if schema_dir else self.config_dir / "schemas"

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path, "r") as f:
            if path.suffix in (".yaml", ".yml"):
                return yaml.safe_load(f) or {}
            if path.suffix == ".json":
                return json.load(f)
        raise ValueError(f"Unsupported configuration format: {path.suffix}")

    def load_config(self, config_name: str, schema_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Read a YAML or JSON file from the config directory.

        Args:
            config_name: File name, e.g. 'evaluation_config.yaml'
            schema_name: Schema file to validate against, if any

        Returns:
            Configuration dictionary
        """
        config_path = self.config_dir / config_name
        config = self._read(config_path)
        if schema_name:
            self.validate_config(config, schema_name)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    def load_evaluation_config(
        self,
        config_name: str = DEFAULT_CONFIG,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Load an evaluation config, apply dot-path overrides, then validate the
        result so overrides are held to the same schema as the file.
        """
        config = self.load_config(config_name)
        if overrides:
            config = self.apply_overrides(config, overrides)
            logger.info(
                f"Applied {len(overrides)} configuration override(s)",
                extra={"props": {"overrides": dict(overrides)}},
            )
        self.validate_config(config, DEFAULT_SCHEMA)
        return config

    def validate_config(self, config: Dict[str, Any], schema_name: str) -> None:
        """
        Raises:
            FileNotFoundError: If the schema file is missing
            ValueError: Naming the first failing path, e.g. 'evaluation -> horizon'
        """
        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r") as f:
            schema = json.load(f)

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.exceptions.ValidationError as e:
            location = " -> ".join(str(p) for p in e.path) or "root"
            message = f"Configuration validation failed at '{location}': {e.message}"
            logger.error(message)
            raise ValueError(message) from e

        logger.info(f"Configuration successfully validated against {schema_name}")

    def merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge `override` into a copy of `base`; nested dicts merge, other values replace."""
        merged = dict(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(current, value)
            else:
                merged[key] = value
        return merged

    def apply_overrides(
        self,
        config: Dict[str, Any],
        overrides: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Return a deep copy of `config` with each dotted path set to its value."""
        updated = copy.deepcopy(config)
        for path, value in overrides.items():
            self.set_value(updated, path, value)
        return updated

    @staticmethod
    def _walk(path: str) -> Iterable[str]:
        keys = path.split(".")
        if not all(keys):
            raise ValueError(f"Invalid configuration path: {path!r}")
        return keys

    def get_value(self, config: Dict[str, Any], path: str, default: Any = None) -> Any:
        """Value at a dotted path such as 'evaluation.horizon', or `default`."""
        node: Any = config
        for key in self._walk(path):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def set_value(self, config: Dict[str, Any], path: str, value: Any) -> None:
        """Set a dotted path in place, creating (or replacing non-dict) parents."""
        *parents, leaf = self._walk(path)
        node = config
        for key in parents:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        node[leaf] = value
