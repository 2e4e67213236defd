from __future__ import annotations
from typing import Dict, List, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Order matters: earlier categories win when a title hits several.
DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "Studies": ["nm", "ods", "vorlesung", "übung", "tutorium", "seminar", "klausur", "lecture", "exam"],
    "Private": ["running", "geburtstag", "birthday", "arzt", "day off"],
    "Sport": ["laufen", "training", "fitness", "schwimmen", "fußball", "gym"],
}

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AUTOCAT_", case_sensitive=False)

    # Storage
    db_path: str = Field(default="~/.autocat/calendar.db")

    # Classification
    categories: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_CATEGORIES.items()})
    match_mode: Literal["word", "substring"] = "word"

    # Calendar items
    item_types: List[str] = ["vevent", "vtodo"]
    item_format: str = "jcal"

    # Startup sweep
    startup_sweep: bool = True
    sweep_window_days: int = 7

    log_level: str = "INFO"

    @field_validator("item_types")
    @classmethod
    def _item_types_not_empty(cls, v: List[str]) -> List[str]:
        v = [t.strip().lower() for t in v if t.strip()]
        if not v:
            raise ValueError("item_types must name at least one component type")
        return v

    @field_validator("sweep_window_days")
    @classmethod
    def _window_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("sweep_window_days must be positive")
        return v

settings = Settings()
