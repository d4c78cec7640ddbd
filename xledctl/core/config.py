"""Stream configuration loading and validation from an optional YAML file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from xledctl.core.errors import ConfigLoadError, ConfigValidationError
from xledctl.core.model import StreamConfig

CONFIG_FILENAMES = ("config.yaml", "config.yml")
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    config: StreamConfig
    source: Path | None


def _load_schema_validator() -> Any:
    schema_text = resources.files("xledctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "xledctl"


def default_config_path() -> Path | None:
    directory = _config_dir()
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> StreamConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    known = {f.name for f in fields(StreamConfig)}
    return StreamConfig(**{key: value for key, value in doc.items() if key in known})


def load_config(path: Path | None = None) -> LoadedConfig:
    """Load the stream config from `path`, or from the XDG config dir when omitted.

    An explicit path must exist; a missing default file means built-in defaults.
    """
    if path is None:
        path = default_config_path()
        if path is None:
            LOGGER.debug("No config file in %s, using defaults", _config_dir())
            return LoadedConfig(config=StreamConfig(), source=None)

    doc = _read_yaml(path)
    config = _build_config(doc, path)
    LOGGER.debug("Loaded config from %s", path)
    return LoadedConfig(config=config, source=path)
