"""
Cognitive Insight Configuration

Central settings loaded from environment variables.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings."""

    # --- Versioning ---
    ENGINE_VERSION: str = "3.0.0"

    # --- Pipeline defaults (overridable per call via AnalysisOptions) ---
    CONTEXT_WINDOW: int = int(os.getenv("COGNITIVE_INSIGHT_CONTEXT_WINDOW", "5"))
    TEMPORAL_SEGMENTS: int = int(os.getenv("COGNITIVE_INSIGHT_TEMPORAL_SEGMENTS", "3"))
    MIN_CONFIDENCE: float = float(os.getenv("COGNITIVE_INSIGHT_MIN_CONFIDENCE", "0.3"))

    # --- Input validation ---
    MIN_TEXT_LENGTH: int = int(os.getenv("COGNITIVE_INSIGHT_MIN_LENGTH", "10"))
    MAX_TEXT_LENGTH: int = int(os.getenv("COGNITIVE_INSIGHT_MAX_LENGTH", "10000"))
    BATCH_MAX_ITEMS: int = int(os.getenv("COGNITIVE_INSIGHT_BATCH_MAX", "10"))

    # --- Result cache ---
    CACHE_ENABLED: bool = _env_bool("COGNITIVE_INSIGHT_CACHE_ENABLED", "true")
    CACHE_MAX_ENTRIES: int = int(os.getenv("COGNITIVE_INSIGHT_CACHE_MAX", "100"))

    # --- Knowledge base (empty = built-in tables) ---
    KNOWLEDGE_BASE_PATH: str = os.getenv("COGNITIVE_INSIGHT_KB_PATH", "")


settings = Settings()
