"""Load EnclaveConfig from enclave.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from enclave._errors import ConfigError
from enclave.config import EnclaveConfig

_CONFIG_KEYS = frozenset(f.name for f in fields(EnclaveConfig)) - {"root"}


def load_config(root: Path, **overrides: object) -> EnclaveConfig:
    """Load EnclaveConfig from root, optionally merging enclave.yaml.

    Looks for enclave.yaml, enclave.yml, or enclave.toml in root. If found,
    loads and merges with overrides. Overrides set to None are ignored so CLI
    defaults never mask file values.

    Raises:
        ConfigError: If the config file is malformed or names unknown keys.
        PathDoesNotExist: If root does not exist.

    """
    file_config = _read_enclave_config(Path(root))
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    unknown = sorted(set(merged) - _CONFIG_KEYS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    return EnclaveConfig(root=Path(root), **merged)  # type: ignore[arg-type]


def _read_enclave_config(root: Path) -> dict[str, object]:
    """Read enclave config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("enclave.yaml", "enclave.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "enclave.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_enclave_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_enclave_section(data, path)


def _flatten_enclave_section(data: object, path: Path) -> dict[str, object]:
    """Accept keys at the top level or under an ``enclave:`` section."""
    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {path}"
        raise ConfigError(msg)

    result: dict[str, object] = {k: v for k, v in data.items() if k != "enclave"}
    section = data.get("enclave")
    if isinstance(section, dict):
        result.update(section)
    return result
