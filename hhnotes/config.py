"""
Configuration loader with validation and caching
"""
import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CFG = Path(__file__).parent / "config.yml"
CONFIG_ENV = "HHNOTES_CONFIG"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used."""


class PositionsConfig(BaseModel):
    labels_by_count: Dict[int, List[str]] = {
        2: ["BTN", "BB"],
        3: ["BTN", "SB", "BB"],
        4: ["BTN", "SB", "BB", "CO"],
        5: ["BTN", "SB", "BB", "UTG", "CO"],
        6: ["BTN", "SB", "BB", "UTG", "HJ", "CO"],
        7: ["BTN", "SB", "BB", "UTG", "UTG1", "HJ", "CO"],
        8: ["BTN", "SB", "BB", "UTG", "UTG1", "LJ", "HJ", "CO"],
        9: ["BTN", "SB", "BB", "UTG", "UTG1", "LJ", "HJ", "CO", "MP"],
    }
    fallback_count: int = 6

    @field_validator("labels_by_count")
    @classmethod
    def _labels_fit_table(cls, value: Dict[int, List[str]]) -> Dict[int, List[str]]:
        for count, labels in value.items():
            if len(labels) > count:
                raise ValueError(f"{len(labels)} labels for a {count}-handed table")
        return value


class CanonicalizeConfig(BaseModel):
    action_prefixes: List[str] = ["tpb", "tp", "cb", "bbb", "bb", "bxb", "xr", "r", "d", "b", "c"]


class NotesSection(BaseModel):
    showdown_token: str = "sd"
    omit_preflop_folds: bool = True


class NotesConfig(BaseModel):
    """Validated configuration tree."""
    positions: PositionsConfig = Field(default_factory=PositionsConfig)
    canonicalize: CanonicalizeConfig = Field(default_factory=CanonicalizeConfig)
    notes: NotesSection = Field(default_factory=NotesSection)


def load_config(path: Optional[Union[str, Path]] = None) -> NotesConfig:
    """
    Load and validate configuration from a YAML file

    Args:
        path: Path to configuration file, defaults to $HHNOTES_CONFIG or the
            packaged config.yml

    Returns:
        Validated NotesConfig

    Raises:
        ConfigError: when the file is not a mapping or fails validation
    """
    path = Path(path or os.environ.get(CONFIG_ENV) or DEFAULT_CFG)
    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    try:
        cfg = NotesConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    logger.info(f"Loaded config from {path}")
    return cfg


@lru_cache(maxsize=1)
def get_config() -> NotesConfig:
    """Process-wide configuration, loaded once."""
    return load_config()


def save_config(cfg: NotesConfig, path: Union[str, Path] = DEFAULT_CFG) -> None:
    """
    Save configuration to YAML file

    Args:
        cfg: Configuration to write
        path: Path to save file
    """
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(cfg.model_dump(), f, sort_keys=False, allow_unicode=True)
    logger.info(f"Saved config to {path}")
