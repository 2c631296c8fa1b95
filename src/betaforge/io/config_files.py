"""
Configuration file readers

Run configurations are read from

- INI files with [Transition], [Mother], [Daughter], [Spectrum] and
  [Constants] sections; run level keys (output, exchangedata, profile,
  domain_policy) go in a [General] section
- JSON or YAML files holding the same nested mapping
"""

from __future__ import annotations

import configparser
import importlib.util
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from betaforge.core.config import GeneratorConfig
from betaforge.exceptions import ConfigurationError

GENERAL_SECTION = "general"


def _load_yaml_module():
    if importlib.util.find_spec("yaml") is None:
        return None
    import yaml

    return yaml


def _read_ini(path: Path) -> Dict[str, Any]:
    parser = configparser.ConfigParser(inline_comment_prefixes=("#", ";"))
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e
    options: Dict[str, Any] = {}
    for section in parser.sections():
        values = dict(parser.items(section))
        if section.lower() == GENERAL_SECTION:
            options.update(values)
        else:
            options[section] = values
    return options


def read_config_mapping(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a configuration file into a nested mapping."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file {path} does not exist")
    suffix = path.suffix.lower()
    if suffix in {".yml", ".yaml"}:
        yaml = _load_yaml_module()
        if yaml is None:
            raise ImportError("PyYAML is required to read YAML configurations.")
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    elif suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    else:
        data = _read_ini(path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} does not hold a mapping")
    return data


def load_config_file(path: Union[str, Path],
                     overrides: Optional[Dict[str, Any]] = None) -> GeneratorConfig:
    """
    Read and build a run configuration.

    Parameters
    ----------
    path : str or Path
        INI, JSON or YAML file
    overrides : dict, optional
        Dotted or top-level keys replacing file values (e.g. from the CLI)
    """
    options = read_config_mapping(path)
    if overrides:
        options = dict(options)
        options.update(overrides)
    return GeneratorConfig.from_dict(options)
