"""Configuration loader for the document chunking pipeline."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "docchunk"
    version: str = "1.0.0"


class ChunkingConfig(BaseModel):
    """Token budgets and heuristics for chunk construction.

    ``max_tokens`` is the soft target the splitter aims for,
    ``hard_max_tokens`` is the ceiling no emitted chunk may exceed,
    and chunks under ``min_tokens`` are candidates for merging.
    """

    max_tokens: int = 512
    hard_max_tokens: int = 600
    min_tokens: int = 80
    chars_per_token: int = Field(default=4, ge=1)
    overlap_sentences: int = Field(default=2, ge=0)
    caption_snippet_length: int = Field(default=100, ge=4)
    token_cache_size: int = Field(default=10_000, ge=1)

    @model_validator(mode="after")
    def _check_budgets(self) -> "ChunkingConfig":
        if not 0 <= self.min_tokens < self.max_tokens <= self.hard_max_tokens:
            raise ValueError(
                "Token budgets must satisfy 0 <= min_tokens < max_tokens <= hard_max_tokens "
                f"(got {self.min_tokens}, {self.max_tokens}, {self.hard_max_tokens})"
            )
        return self


class ValidationConfig(BaseModel):
    """Quality gate thresholds."""

    min_coverage_percent: float = 100.0
    max_small_chunk_percent: float = 1.0
    max_processing_seconds: float = 30.0


class StorageConfig(BaseModel):
    """Input and output paths."""

    document_path: str = "./processed/01_normalized/document.json"
    figure_map_path: str = "./processed/01_normalized/figure_map.json"
    output_dir: str = "./processed/02_chunks"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    log_level: str = "INFO"


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override log level from environment
    env_level = os.getenv("LOG_LEVEL")
    if env_level:
        config.log_level = env_level.upper()

    return config
