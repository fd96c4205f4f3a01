"""Inference configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

MAX_DEPTH_LIMIT = 150


class InferenceConfig(BaseSettings):
    """Heuristic thresholds for structure inference and schema synthesis."""

    model_config = {"env_prefix": "TYPEPREDICTOR_INFERENCE_"}

    # Deeper nodes degrade to "any". Bounded by the default recursion limit.
    max_depth: int = Field(default=100, ge=1, le=MAX_DEPTH_LIMIT)
    enum_min_values: int = Field(default=2, ge=2)
    enum_max_length_spread: int = Field(default=5, ge=0)
    record_min_keys: int = Field(default=2, ge=1)
    strict_objects: bool = True  # fixed shapes reject undeclared keys


class AppSettings(BaseSettings):
    """Root settings for the CLI and HTTP entry points."""

    model_config = {"env_prefix": "TYPEPREDICTOR_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    inference: InferenceConfig = InferenceConfig()
