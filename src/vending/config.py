"""
Configuration - basée sur Pydantic Settings.

Chaque réglage se lit dans une variable d'environnement préfixée
VENDING_ (ex. VENDING_INITIAL_STOCK) et a une valeur par défaut adaptée
à une exécution locale : base SQLite en mémoire, trois machines à 10 unités.

Une valeur invalide lève pydantic.ValidationError à la construction.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_ALERT_DESTINATION = "maintenance@example.com"


class Settings(BaseSettings):
    """Configuration de l'application."""

    model_config = SettingsConfigDict(
        env_prefix="VENDING_",
        extra="ignore",
    )

    database_uri: str = Field(default="sqlite://", description="URI SQLAlchemy du repository")
    # Liste séparée par des virgules : "001,002,003"
    machine_ids: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["001", "002", "003"],
        min_length=1,
    )
    initial_stock: int = Field(default=10, description="Stock initial des machines créées")
    isolate_failures: bool = Field(
        default=False,
        description="Isoler les erreurs des subscribers au lieu de les propager",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    alert_destination: str = Field(default=DEFAULT_ALERT_DESTINATION)

    @field_validator("machine_ids", mode="before")
    @classmethod
    def _split_machine_ids(cls, value):
        if isinstance(value, str):
            return [m.strip() for m in value.split(",") if m.strip()]
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


def get_settings() -> Settings:
    """Lit la configuration depuis l'environnement (à chaque appel)."""
    return Settings()
