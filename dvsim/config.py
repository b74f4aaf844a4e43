"""
Simulator settings, optionally loaded from a YAML file.

    split_horizon: true
    workers: 4
    max_rounds: 2000
    log_level: info
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class SimulatorConfig:
    split_horizon: bool = False
    workers: int = 1
    max_rounds: Optional[int] = None  # None: derive from node count
    log_level: str = "warning"

    def __post_init__(self) -> None:
        if not isinstance(self.split_horizon, bool):
            raise ConfigError("split_horizon must be true or false")
        if isinstance(self.workers, bool) or not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigError("workers must be a positive integer")
        if self.max_rounds is not None and (
            isinstance(self.max_rounds, bool) or not isinstance(self.max_rounds, int) or self.max_rounds < 1
        ):
            raise ConfigError("max_rounds must be a positive integer")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    def override(self, **changes: Any) -> "SimulatorConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})


def load_config(path: Union[str, Path]) -> SimulatorConfig:
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML: {exc}") from exc
    if data is None:
        return SimulatorConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config file must contain a mapping at the root")
    return config_from_mapping(data)


def config_from_mapping(data: Dict[str, Any]) -> SimulatorConfig:
    known = {f.name for f in fields(SimulatorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(map(str, unknown))}")
    data = dict(data)
    if isinstance(data.get("log_level"), str):
        data["log_level"] = data["log_level"].lower()
    return SimulatorConfig(**data)
