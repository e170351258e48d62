"""Loading of the optional user config file and environment defaults."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from fastbootctl.core.builder import parse_vendor_id
from fastbootctl.core.errors import ArgumentError, ConfigError
from fastbootctl.core.model import MatchFilter

SERIAL_ENV = "ANDROID_SERIAL"
CONFIG_ENV = "FASTBOOTCTL_CONFIG"
DEFAULT_POLL_INTERVAL_S = 1.0
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class Settings:
    serial: str | None = None
    vendor_id: int | None = None
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S
    source: Path | None = None

    def base_filter(self) -> MatchFilter:
        return MatchFilter(vendor_id=self.vendor_id, serial=self.serial)


def _load_schema_validator() -> Any:
    schema_text = resources.files("fastbootctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV)
    if explicit:
        return Path(explicit)
    xdg_config = Path(env.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return xdg_config / "fastbootctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_settings(doc: dict[str, Any], source: Path) -> Settings:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    vendor_id = doc.get("vendor_id")
    if isinstance(vendor_id, str):
        try:
            vendor_id = parse_vendor_id(vendor_id.strip())
        except ArgumentError as exc:
            raise ConfigError(f"{source} (vendor_id): {exc}") from exc

    return Settings(
        serial=doc.get("serial"),
        vendor_id=vendor_id,
        poll_interval_s=float(doc.get("poll_interval_s", DEFAULT_POLL_INTERVAL_S)),
        source=source,
    )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Resolve defaults from the config file, then the ANDROID_SERIAL override."""
    env = os.environ if environ is None else environ
    path = config_path(env)

    settings = Settings()
    if path.is_file():
        settings = _build_settings(_read_yaml(path), path)
        LOGGER.debug("Loaded config from %s", path)
    elif env.get(CONFIG_ENV):
        raise ConfigError(f"Config file {path} does not exist")

    serial = env.get(SERIAL_ENV)
    if serial:
        if settings.serial and settings.serial != serial:
            LOGGER.warning("%s overrides serial from %s", SERIAL_ENV, path)
        settings = replace(settings, serial=serial)
    return settings
