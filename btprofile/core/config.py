"""Configuration loading and validation for btprofile."""

from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from btprofile.core.errors import ConfigLoadError, ConfigValidationError

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
class CommandConfig:
    pw_dump: str = "pw-dump"
    wpctl: str = "wpctl"
    pactl: str = "pactl"


@dataclass(frozen=True)
class Config:
    commands: CommandConfig = field(default_factory=CommandConfig)
    timeout_s: float | None = None
    source: Path | None = None


def _load_schema_validator() -> Any:
    schema_text = resources.files("btprofile.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def config_path() -> Path:
    explicit = os.environ.get("BTPROFILE_CONFIG")
    if explicit:
        return Path(explicit)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "btprofile/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    # An empty file is a valid, default configuration.
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> Config:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    commands = CommandConfig(**doc.get("commands", {}))
    timeout = doc.get("timeout_s")
    return Config(
        commands=commands,
        timeout_s=float(timeout) if timeout is not None else None,
        source=source,
    )


def load_config(path: Path | None = None) -> Config:
    """Load the user configuration, falling back to defaults when absent.

    An explicitly requested file (argument or ``BTPROFILE_CONFIG``) must exist.
    """
    explicit = path is not None or bool(os.environ.get("BTPROFILE_CONFIG"))
    path = path or config_path()
    if not path.exists() and not explicit:
        return Config()

    config = _build_config(_read_yaml(path), path)
    LOGGER.info("Loaded configuration from %s", path)
    return config


def runtime_warnings(config: Config) -> tuple[str, ...]:
    warnings: list[str] = []
    if shutil.which(config.commands.pw_dump) is None and shutil.which(config.commands.pactl) is None:
        warnings.append(
            f"Neither '{config.commands.pw_dump}' nor '{config.commands.pactl}' found on PATH; "
            "no audio backend can be queried."
        )
    return tuple(warnings)
