"""
config.py — Application Configuration
======================================
Everything tunable lives in one frozen AppConfig, read from the
environment once at startup by load_config().

    VISUALIZER_GEMINI_API_KEY       (falls back to GEMINI_API_KEY)
    VISUALIZER_TEXT_MODEL           narration model
    VISUALIZER_VISION_MODEL         grid-recognition model
    VISUALIZER_NARRATION_TIMEOUT    seconds before narration degrades
    VISUALIZER_RECOGNITION_TIMEOUT  seconds before image recognition fails
    VISUALIZER_LOG_LEVEL            DEBUG / INFO / WARNING …
    VISUALIZER_SECRET_KEY           Flask session signing key (random per process when unset)

A missing API key is not an error: the AI features report themselves
unavailable and everything else works.
"""

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class AppConfig:
    # generative AI
    api_key:             str   = ""
    text_model:          str   = DEFAULT_MODEL
    vision_model:        str   = DEFAULT_MODEL
    narration_timeout:   float = 20.0
    recognition_timeout: float = 30.0
    max_output_tokens:   int   = 500
    temperature:         float = 0.9
    top_p:               float = 0.1
    top_k:               int   = 16

    # web
    secret_key:          str   = ""
    log_level:           str   = "INFO"

    # UI defaults
    grid_rows:           int   = 20
    grid_cols:           int   = 50
    array_size:          int   = 50
    sort_speed:          int   = 50
    path_delay_ms:       float = 10.0
    sudoku_delay_ms:     float = 50.0

    @property
    def ai_enabled(self) -> bool:
        return bool(self.api_key)


def _positive_float(raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) and value > 0 else default


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build an AppConfig from `env` (os.environ by default)."""
    env = os.environ if env is None else env
    api_key = env.get("VISUALIZER_GEMINI_API_KEY") or env.get("GEMINI_API_KEY") or ""
    return AppConfig(
        api_key=api_key.strip(),
        text_model=env.get("VISUALIZER_TEXT_MODEL", DEFAULT_MODEL),
        vision_model=env.get("VISUALIZER_VISION_MODEL", DEFAULT_MODEL),
        narration_timeout=_positive_float(env.get("VISUALIZER_NARRATION_TIMEOUT"), 20.0),
        recognition_timeout=_positive_float(env.get("VISUALIZER_RECOGNITION_TIMEOUT"), 30.0),
        secret_key=env.get("VISUALIZER_SECRET_KEY", ""),
        log_level=env.get("VISUALIZER_LOG_LEVEL", "INFO").upper(),
    )
