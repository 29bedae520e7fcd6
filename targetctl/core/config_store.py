"""Layered YAML config store for target settings and device records."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from targetctl.core.errors import ConfigLoadError, ConfigValidationError

LOGGER = logging.getLogger(__name__)

Section = dict[str, Any]


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and only knows true/false booleans."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]

UniqueKeyLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


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


@dataclass
class ConfigLayer:
    """One file's worth of sections. A layer with a ``path`` can be flushed."""

    source: str
    sections: dict[str, Section] = field(default_factory=dict)
    path: Path | None = None


def _load_schema_validator() -> Any:
    schema_text = resources.files("targetctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _user_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "targetctl" / "Engine.yaml"


def _read_yaml(path: Path | Traversable) -> dict[str, Section]:
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

    try:
        _load_schema_validator().validate(loaded)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise ConfigValidationError(f"Schema validation failed for {path}{where}: {exc.message}") from exc
    return loaded


def _load_layer(path: Path | Traversable, *, writable: bool) -> ConfigLayer:
    sections: dict[str, Section] = {}
    if path.is_file():
        sections = _read_yaml(path)
        LOGGER.debug("Loaded config layer %s (%d sections)", path, len(sections))
    return ConfigLayer(
        source=str(path),
        sections=sections,
        path=Path(str(path)) if writable else None,
    )


def _normalize_bool(value: Any, *, context: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ConfigValidationError(f"{context} must be boolean true/false")


class ConfigStore:
    """Resolves ``(section, key)`` lookups across layers; the last layer receives writes."""

    def __init__(self, layers: list[ConfigLayer]) -> None:
        if not layers:
            layers = [ConfigLayer(source="<memory>")]
        self.layers = layers

    @classmethod
    def in_memory(cls, sections: dict[str, Section] | None = None) -> ConfigStore:
        return cls([ConfigLayer(source="<memory>", sections=sections or {})])

    @property
    def writable(self) -> ConfigLayer:
        return self.layers[-1]

    def _lookup(self, section: str, key: str) -> Any | None:
        for layer in reversed(self.layers):
            values = layer.sections.get(section)
            if values is not None and key in values:
                return values[key]
        return None

    def has_key(self, section: str, key: str) -> bool:
        return self._lookup(section, key) is not None

    def keys(self, section: str) -> list[str]:
        seen: dict[str, None] = {}
        for layer in self.layers:
            for key in layer.sections.get(section, {}):
                seen[key] = None
        return list(seen)

    def get_string(self, section: str, key: str) -> str | None:
        value = self._lookup(section, key)
        if value is None:
            return None
        if isinstance(value, list):
            raise ConfigValidationError(f"{section}.{key} must be a scalar, not a list")
        if isinstance(value, bool):
            return "True" if value else "False"
        return str(value)

    def get_bool(self, section: str, key: str) -> bool | None:
        value = self._lookup(section, key)
        if value is None:
            return None
        return _normalize_bool(value, context=f"{section}.{key}")

    def get_array(self, section: str, key: str) -> list[str]:
        value = self._lookup(section, key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigValidationError(f"{section}.{key} must be a list of strings")
        return [str(item) for item in value]

    def _set(self, section: str, key: str, value: Any) -> None:
        self.writable.sections.setdefault(section, {})[key] = value

    def set_string(self, section: str, key: str, value: str) -> None:
        self._set(section, key, value)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self._set(section, key, bool(value))

    def set_array(self, section: str, key: str, values: list[str]) -> None:
        self._set(section, key, list(values))

    def remove_key(self, section: str, key: str) -> bool:
        values = self.writable.sections.get(section)
        if values is None or key not in values:
            return False
        del values[key]
        if not values:
            del self.writable.sections[section]
        return True

    def flush(self) -> None:
        layer = self.writable
        if layer.path is None:
            return
        try:
            layer.path.parent.mkdir(parents=True, exist_ok=True)
            layer.path.write_text(
                yaml.safe_dump(layer.sections, sort_keys=False, default_flow_style=False),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigLoadError(f"Could not write config file {layer.path}: {exc}") from exc
        LOGGER.debug("Flushed config layer %s", layer.path)


def load_config_store(project_dir: Path | None = None, platform_name: str = "Linux") -> ConfigStore:
    layers = [_load_layer(resources.files("targetctl.defaults").joinpath("Engine.yaml"), writable=False)]

    if project_dir is None:
        layers.append(_load_layer(_user_config_path(), writable=True))
        return ConfigStore(layers)

    config_dir = Path(project_dir) / "Config"
    layers.append(_load_layer(config_dir / "DefaultEngine.yaml", writable=False))
    layers.append(
        _load_layer(config_dir / platform_name / f"{platform_name}Engine.yaml", writable=True)
    )
    return ConfigStore(layers)
