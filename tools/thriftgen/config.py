"""
YAML configuration for thriftgen.

A config file is optional; every key has a default and the CLI can override
any of them.

    lang: rust          # namespace language to select, null to skip
    templates: ./tmpl   # directory of template overrides
    strict: true        # reject trailing input the generator cannot dispatch
"""

import os
import yaml
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

KNOWN_KEYS = {"lang", "templates", "strict"}


@dataclass
class GeneratorConfig:
    """Settings for one generator run."""
    lang: Optional[str] = "rust"
    template_dir: Optional[str] = None
    strict: bool = False


def _typed(data: dict, key: str, kind: type, allow_none: bool = False):
    """Return ``data[key]`` if it has the right type, raising ConfigError otherwise."""
    value = data[key]
    if value is None and allow_none:
        return None
    if not isinstance(value, kind):
        raise ConfigError(
            f"Field '{key}' must be a {kind.__name__}, got {type(value).__name__}"
        )
    return value


def parse_config_yaml(yaml_str: str, base_dir: str = ".") -> GeneratorConfig:
    """Parse a YAML config string into a GeneratorConfig.

    Args:
        yaml_str: YAML document; empty means all defaults.
        base_dir: Directory relative ``templates`` paths are resolved against.

    Returns:
        GeneratorConfig with defaults for absent keys.

    Raises:
        ConfigError: On invalid YAML, unknown keys or wrongly typed values.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}")

    if data is None:
        return GeneratorConfig()
    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping")

    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    config = GeneratorConfig()
    if "lang" in data:
        config.lang = _typed(data, "lang", str, allow_none=True)
    if "templates" in data:
        templates = _typed(data, "templates", str, allow_none=True)
        if templates is not None:
            config.template_dir = os.path.join(base_dir, templates)
    if "strict" in data:
        config.strict = _typed(data, "strict", bool)

    return config


def load_config(path: str) -> GeneratorConfig:
    """Read and parse a config file; relative paths in it are taken from its directory."""
    with open(path) as f:
        return parse_config_yaml(f.read(), base_dir=os.path.dirname(os.path.abspath(path)))
