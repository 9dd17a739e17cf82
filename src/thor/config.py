"""
Run options, configuration files and global environment bootstrap.

A configuration file is YAML:

    options:
      log_tokens: false
      log_ast: false
      propagate_returns: true
      max_call_depth: 64
    constants:
      E: 2.718281828459045
    builtins: [print, sqrt]

Every section is optional. ``builtins`` defaults to all registered
built-in functions.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging
import math

import yaml

from .errors import error_configuration
from .runtime.builtins import builtin_function, get_builtin_registry
from .runtime.interpreter import DEFAULT_MAX_CALL_DEPTH
from .runtime.scope import Scope
from .runtime.values import Number

logger = logging.getLogger("thor.config")

DEFAULT_CONSTANTS: Dict[str, float] = {
    "PI": math.pi,
    "TAU": math.tau,
}


@dataclass
class RunOptions:
    """Options accepted by :func:`thor.run`."""
    log_tokens: bool = False
    log_ast: bool = False
    propagate_returns: bool = True
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "RunOptions":
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(raw) - set(known))
        if unknown:
            raise error_configuration(f"unknown option(s): {', '.join(unknown)}")
        for key, value in raw.items():
            expected = int if key == "max_call_depth" else bool
            if type(value) is not expected:
                raise error_configuration(
                    f"option '{key}' must be {expected.__name__}, got {type(value).__name__}"
                )
        if raw.get("max_call_depth", 1) < 1:
            raise error_configuration("option 'max_call_depth' must be at least 1")
        return cls(**raw)


@dataclass
class ThorConfig:
    """Run options plus the contents of the global environment."""
    options: RunOptions = field(default_factory=RunOptions)
    constants: Dict[str, float] = field(default_factory=dict)
    builtins: Optional[List[str]] = None    # None means every registered builtin

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ThorConfig":
        if not isinstance(data, dict):
            raise error_configuration(f"configuration must be a mapping, got {type(data).__name__}")

        unknown = sorted(set(data) - {"options", "constants", "builtins"})
        if unknown:
            raise error_configuration(f"unknown configuration section(s): {', '.join(unknown)}")

        options_raw = data.get("options") or {}
        if not isinstance(options_raw, dict):
            raise error_configuration("'options' must be a mapping")

        constants_raw = data.get("constants") or {}
        if not isinstance(constants_raw, dict):
            raise error_configuration("'constants' must be a mapping")
        constants = {}
        for name, value in constants_raw.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise error_configuration(f"constant '{name}' must be a number")
            constants[str(name)] = float(value)

        builtins = data.get("builtins")
        if builtins is not None:
            if not isinstance(builtins, list) or not all(isinstance(b, str) for b in builtins):
                raise error_configuration("'builtins' must be a list of names")

        return cls(
            options=RunOptions.from_dict(options_raw),
            constants=constants,
            builtins=builtins,
        )


def load_config(path: Path | str) -> ThorConfig:
    """Load a YAML configuration file and return the normalised ``ThorConfig``."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as e:
            raise error_configuration(f"invalid YAML in {config_path}: {e}") from e

    config = ThorConfig.from_dict(data)
    logger.debug("Loaded configuration from %s", config_path)
    return config


def create_global_scope(config: Optional[ThorConfig] = None) -> Scope:
    """
    Create the global environment: PI, TAU, configured constants, builtins.

    Raises ConfigurationError for an unknown builtin name.
    """
    if config is None:
        config = ThorConfig()

    scope = Scope(name="<program>")
    for name, value in {**DEFAULT_CONSTANTS, **config.constants}.items():
        scope.set(name, Number(value))

    names = config.builtins if config.builtins is not None else get_builtin_registry().names
    for name in names:
        scope.set(name, builtin_function(name))

    return scope
