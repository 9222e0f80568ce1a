from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # PyYAML
from dotenv import dotenv_values

from ..errors import InvalidConfigurationError

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}


def _is_env_file(path: Path) -> bool:
    return path.suffix == ".env" or path.name == ".env" or path.name.startswith(".env.")


def _read_structured(path: Path) -> Any:
    """Parses a JSON or YAML document; unknown suffixes are read as YAML (a JSON superset)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidConfigurationError(f"Cannot read '{path}': {e}", data={"path": str(path)}) from e

    try:
        if path.suffix.lower() in _JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidConfigurationError(f"Cannot parse '{path}': {e}", data={"path": str(path)}) from e


def load_bundle(path: str | Path) -> Any:
    """Loads an interaction bundle: {"actions": [...]} or a bare action list.

    Structural validation is left to the Questioner; this only checks that the
    document has one of the two accepted shapes.
    """
    p = Path(path)
    data = _read_structured(p)
    if isinstance(data, Mapping):
        if "actions" not in data:
            raise InvalidConfigurationError(f"Bundle '{p}' does not define 'actions'.", data={"path": str(p)})
        return dict(data)
    if isinstance(data, list):
        return data
    raise InvalidConfigurationError(
        f"Bundle '{p}' must be a mapping with 'actions' or a list of actions.",
        data={"path": str(p), "type": type(data).__name__},
    )


def load_initial_parameters(path: str | Path) -> dict[str, Any]:
    """Loads initial parameter values from JSON, YAML or a .env file.

    Values from .env files arrive as raw strings; they are coerced to each
    parameter's declared type when a defined-skip picks them up.
    """
    p = Path(path)
    if _is_env_file(p):
        if not p.is_file():
            raise InvalidConfigurationError(f"Cannot read '{p}': no such file.", data={"path": str(p)})
        return dict(dotenv_values(p))

    data = _read_structured(p)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise InvalidConfigurationError(
            f"Initial parameters in '{p}' must be a mapping; got {type(data).__name__}.",
            data={"path": str(p)},
        )
    return {str(k): v for k, v in data.items()}
