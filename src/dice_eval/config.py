"""Settings loaded from an optional dice.toml."""
from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field

from dice_eval.context import DEFAULT_MAX_REROLLS, DEFAULT_MAX_ROLLS, EvaluationContext

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DICE_EVAL_CONFIG"
DEFAULT_CONFIG_PATH = "dice.toml"

OutputFormat = Literal["text", "json", "yaml", "table"]


class LimitSettings(BaseModel):
    max_rolls: int = Field(default=DEFAULT_MAX_ROLLS, ge=0)
    max_rerolls: int = Field(default=DEFAULT_MAX_REROLLS, ge=0)
    timeout: float = Field(default=0.0, ge=0)  # seconds; 0 disables the deadline


class OutputSettings(BaseModel):
    format: OutputFormat = "text"


class Settings(BaseModel):
    limits: LimitSettings = Field(default_factory=LimitSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    def new_context(self, params: Mapping[str, Any] | None = None) -> EvaluationContext:
        return EvaluationContext(
            max_rolls=self.limits.max_rolls,
            max_rerolls=self.limits.max_rerolls,
            params=params,
            timeout=self.limits.timeout or None,
        )


def load_config(path: str | Path | None = None) -> Settings:
    """Load settings from `path`, $DICE_EVAL_CONFIG, or ./dice.toml.

    A missing file gives the defaults; a malformed one raises.
    """
    config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        logger.debug("No config at %s, using defaults.", config_path)
        return Settings()
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Settings.model_validate(data)
