"""Configuration settings for workout-notion-sync."""
import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from workout_notion_sync.errors import ConfigurationMissingError

logger = logging.getLogger(__name__)


class Settings:
    """Application settings."""

    # Logging
    LOG_LEVEL: str = "INFO"

    # File locations
    SYNC_CONFIG_PATH: str = "config.json"
    GOOGLE_CREDENTIALS_PATH: str = "credentials.json"
    GOOGLE_TOKEN_PATH: str = "token.json"

    # Comma separated API keys for the HTTP surface
    API_KEYS: str = ""

    def __init__(self):
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # File locations
        self.SYNC_CONFIG_PATH = os.getenv("SYNC_CONFIG_PATH", "config.json")
        self.GOOGLE_CREDENTIALS_PATH = os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json")
        self.GOOGLE_TOKEN_PATH = os.getenv("GOOGLE_TOKEN_PATH", "token.json")

        self.API_KEYS = os.getenv("API_KEYS", "")


settings = Settings()


# ---------------------------------------------------------------------------
# config.json
# ---------------------------------------------------------------------------


class NotionConfig(BaseModel):
    """Notion integration credentials."""
    token: str = Field(..., min_length=1)
    parent_page_id: str = Field(..., min_length=1, alias="parentPageId")

    class Config:
        populate_by_name = True


class SheetDefaults(BaseModel):
    """Fallback values for CLI arguments."""
    sheet_owner: Optional[str] = Field(default=None, alias="sheetOwner")
    sheet_title: Optional[str] = Field(default=None, alias="sheetTitle")
    cell_range: Optional[str] = Field(default=None, alias="cellRange")

    class Config:
        populate_by_name = True


class SyncConfig(BaseModel):
    """Contents of config.json."""
    notion: NotionConfig
    defaults: SheetDefaults = Field(default_factory=SheetDefaults)
    week: int = Field(default=0, ge=0)

    class Config:
        extra = "ignore"


def load_sync_config(path: Optional[str] = None) -> SyncConfig:
    """
    Load and validate config.json.

    Raises:
        ConfigurationMissingError: If the file is missing, unreadable or lacks
            the Notion token / parent page id.
    """
    config_path = Path(path or settings.SYNC_CONFIG_PATH)
    if not config_path.exists():
        raise ConfigurationMissingError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationMissingError(f"Config file {config_path} is not valid JSON: {e}") from e

    try:
        return SyncConfig.model_validate(raw)
    except ValidationError as e:
        missing = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationMissingError(
            f"Config file {config_path} is missing required fields: {missing}"
        ) from e


def bump_week(path: Optional[str] = None) -> int:
    """Increment the week counter in config.json and return the new value."""
    config_path = Path(path or settings.SYNC_CONFIG_PATH)
    # Validate first so a broken config is never rewritten
    load_sync_config(str(config_path))

    with open(config_path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    week = int(raw.get("week", 0)) + 1
    raw["week"] = week

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(raw, f, indent=2)

    logger.info(f"Week counter advanced to {week}")
    return week
