"""Configuration management using Pydantic and YAML."""

from __future__ import annotations

import math
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from cratematch.core.constants import CRATE_PATH_SEPARATOR


class SimilarityConfig(BaseModel):
    """String similarity weights and embedded-artist thresholds."""

    containment_base: float = Field(ge=0, le=1, default=0.85)
    word_weight: float = Field(ge=0, le=1, default=0.6)
    edit_weight: float = Field(ge=0, le=1, default=0.4)
    artist_token_threshold: float = Field(ge=0, le=1, default=0.8)
    embedded_artist_threshold: float = Field(ge=0, le=1, default=0.7)
    embedded_title_threshold: float = Field(ge=0, le=1, default=0.6)
    embedded_fallback_score: float = Field(ge=0, le=1, default=0.7)

    @model_validator(mode="after")
    def _check_weights(self) -> SimilarityConfig:
        if not math.isclose(self.word_weight + self.edit_weight, 1.0):
            raise ValueError("word_weight and edit_weight must sum to 1")
        return self


class PrefilterConfig(BaseModel):
    """Candidate prefilter limits."""

    max_candidates: int = Field(ge=1, default=100)
    min_word_length: int = Field(ge=0, default=2)  # words must be longer than this
    word_majority_ratio: float = Field(gt=0, le=1, default=0.5)


class ClassifierConfig(BaseModel):
    """Score weights and confidence tier thresholds."""

    title_weight: float = Field(ge=0, le=1, default=0.6)
    artist_weight: float = Field(ge=0, le=1, default=0.4)
    high_title: float = Field(ge=0, le=1, default=0.75)
    high_artist: float = Field(ge=0, le=1, default=0.6)
    medium_title: float = Field(ge=0, le=1, default=0.6)
    medium_artist: float = Field(ge=0, le=1, default=0.4)
    low_title: float = Field(ge=0, le=1, default=0.5)
    low_artist: float = Field(ge=0, le=1, default=0.3)
    # Values above 1.0 disable the early exit
    early_exit_score: float = Field(ge=0, default=0.9)
    chunk_size: int = Field(ge=1, default=500)

    @model_validator(mode="after")
    def _check_weights(self) -> ClassifierConfig:
        if not math.isclose(self.title_weight + self.artist_weight, 1.0):
            raise ValueError("title_weight and artist_weight must sum to 1")
        return self


class VariationConfig(BaseModel):
    """Variation finder limits and inclusion thresholds."""

    max_candidates: int = Field(ge=1, default=200)
    max_results: int = Field(ge=1, default=5)
    min_word_length: int = Field(ge=0, default=2)
    title_threshold: float = Field(ge=0, le=1, default=0.55)
    keyword_title_threshold: float = Field(ge=0, le=1, default=0.7)
    weak_title_threshold: float = Field(ge=0, le=1, default=0.45)
    strong_artist_threshold: float = Field(ge=0, le=1, default=0.6)
    artist_threshold: float = Field(ge=0, le=1, default=0.5)
    word_match_ratio: float = Field(gt=0, le=1, default=0.7)


class CrateConfig(BaseModel):
    """Crate tree traversal configuration."""

    path_separator: str = CRATE_PATH_SEPARATOR
    max_concurrent_loads: int = Field(ge=1, default=1)
    load_timeout_seconds: float | None = Field(gt=0, default=None)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None


class MatchingConfig(BaseModel):
    """Main configuration."""

    similarity: SimilarityConfig = Field(default_factory=SimilarityConfig)
    prefilter: PrefilterConfig = Field(default_factory=PrefilterConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    variations: VariationConfig = Field(default_factory=VariationConfig)
    crates: CrateConfig = Field(default_factory=CrateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Path | None = None) -> MatchingConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, searches the default
            locations and falls back to built-in defaults.

    Returns:
        MatchingConfig instance

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValueError: If config file is invalid
    """
    if config_path is None:
        possible_paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.home() / ".config" / "cratematch" / "config.yaml",
            Path.home() / ".cratematch" / "config.yaml",
        ]

        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            return MatchingConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return MatchingConfig(**data)
