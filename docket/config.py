from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "docket.db"


class Settings(BaseSettings):
    """Runtime settings from ``DOCKET_*`` environment variables (and ``WORKFLOW_MODE``)."""

    model_config = SettingsConfigDict(
        env_prefix="DOCKET_",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    db_path: Path = DEFAULT_DB_PATH
    webhook_url: Optional[str] = None
    workflow_mode: str = Field(
        default="mock",
        pattern="^(mock|live)$",
        validation_alias=AliasChoices("WORKFLOW_MODE", "workflow_mode"),
    )
    request_timeout: float = Field(default=60.0, gt=0)
    log_level: str = "INFO"

    @field_validator("workflow_mode", "request_timeout", mode="wrap")
    @classmethod
    def fall_back_to_default(cls, value: Any, handler: Any, info: ValidationInfo) -> Any:
        """An invalid value keeps the field's default instead of failing startup."""
        try:
            return handler(value)
        except ValidationError:
            default = cls.model_fields[info.field_name].default
            logger.warning("Invalid %s %r, using %r", info.field_name, value, default)
            return default


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
