"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # --- OCR ---
    ocr_backend: Literal["http", "paddle"] = "http"
    ocr_service_url: str = "http://localhost:8001"
    ocr_timeout_seconds: float = 60.0
    ocr_connect_timeout: float = 10.0
    ocr_retry_attempts: int = 3
    ocr_retry_delay: float = 1.0
    ocr_retry_backoff: float = 2.0
    ocr_lang: str = "pt"
    ocr_use_gpu: bool = False

    # --- Classificador ---
    insurance_min_matches: int = 2
    identity_min_matches: int = 2
    license_min_matches: int = 2

    # --- Orquestrador ---
    min_usable_confidence: float = 0.75
    legacy_fallback_enabled: bool = True

    # --- Operadoras ---
    issuer_table_path: str = ""         # JSON opcional com operadoras extras
    issuer_fuzzy_threshold: float = 80.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
