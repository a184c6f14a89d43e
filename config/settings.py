#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Segment Store ==========
    store_backend: str = "elasticsearch"  # elasticsearch | sqlite

    # Elasticsearch
    es_node: str = ""
    es_api_key: str = ""
    es_timeout: float = 30.0

    # SQLite / SQLAlchemy backend
    database_url: Optional[str] = None
    database_dir: Path = BASE_DIR / "data"

    # ========== Fallback Translation ==========
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"
    openai_timeout: float = 120.0
    openai_temperature: float = 1.0
    openai_max_completion_tokens: int = 15000

    # ========== Translation Memory ==========
    # Serialize add-translation writes per language pair inside this process.
    # Off by default: cross-request duplicates are an accepted gap.
    tm_serialize_writes: bool = False

    # ========== Server ==========
    host: str = "0.0.0.0"
    port: int = 3050
    log_level: str = "INFO"

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def get_database_url(self) -> str:
        """SQLAlchemy URL for the sqlite backend."""
        if self.database_url:
            return self.database_url
        self.database_dir.mkdir(exist_ok=True, parents=True)
        return f"sqlite:///{self.database_dir / 'tm.db'}"

    def missing_variables(self) -> list:
        """Names of required env variables that are not set for the selected backend."""
        missing = []
        if self.store_backend == "elasticsearch":
            if not self.es_node:
                missing.append("ES_NODE")
            if not self.es_api_key:
                missing.append("ES_API_KEY")
        elif self.store_backend != "sqlite":
            raise ValueError(f"Unsupported store backend: {self.store_backend}")
        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        return missing

    def validate_runtime(self):
        """Fail fast when the service cannot reach its collaborators."""
        missing = self.missing_variables()
        if missing:
            raise ValueError(
                "Missing required env variable(s): " + ", ".join(missing)
            )


# Global settings instance
settings = Settings()
