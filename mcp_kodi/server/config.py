from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    kodi_host: str = Field(
        default="localhost", validation_alias=AliasChoices("KODI_HOST", "KODI_IP")
    )
    kodi_port: int = Field(default=8080, validation_alias="KODI_PORT")
    kodi_scheme: Literal["http", "https"] = Field(
        default="http", validation_alias="KODI_SCHEME"
    )
    kodi_user: str | None = Field(default=None, validation_alias="KODI_USER")
    kodi_password: str | None = Field(default=None, validation_alias="KODI_PASSWORD")
    kodi_timeout: float = Field(default=10.0, gt=0, validation_alias="KODI_TIMEOUT")
    activate_tv: bool = Field(default=False, validation_alias="ACTIVATE_TV")
    cec_addon_id: str = Field(
        default="script.json-cec", validation_alias="CEC_ADDON_ID"
    )
    video_playlist_id: int = Field(default=1, ge=0, validation_alias="VIDEO_PLAYLIST_ID")
    video_player_id: int = Field(default=1, ge=0, validation_alias="VIDEO_PLAYER_ID")
    pvr_channel_type: Literal["tv", "radio"] = Field(
        default="tv", validation_alias="PVR_CHANNEL_TYPE"
    )
    fuzzy_threshold: float = Field(
        default=0.4, ge=0.0, le=1.0, validation_alias="FUZZY_THRESHOLD"
    )

    @field_validator("kodi_host", mode="before")
    @classmethod
    def _strip_host(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("KODI_HOST must not be empty")
            return stripped
        return value

    @property
    def kodi_url(self) -> str:
        """Base URL of the Kodi web server (without the ``/jsonrpc`` suffix)."""

        return f"{self.kodi_scheme}://{self.kodi_host}:{self.kodi_port}"

    model_config = SettingsConfigDict(case_sensitive=False, populate_by_name=True)
