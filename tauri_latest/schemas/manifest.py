"""Pydantic models describing the ``latest.json`` update manifest."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..bundle.platforms import PLATFORM_KEYS

PUB_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class PlatformEntry(BaseModel):
    signature: str = Field(..., description="Detached signature contents for the installer.")
    url: str = Field(..., description="Download URL of the installer.")

    model_config = ConfigDict(extra="forbid")


class UpdateManifest(BaseModel):
    version: str
    notes: str = ""
    pub_date: datetime
    platforms: Dict[str, PlatformEntry] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("pub_date")
    @classmethod
    def _normalize_pub_date(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0)

    @field_validator("platforms")
    @classmethod
    def _check_platform_keys(cls, value: Dict[str, PlatformEntry]) -> Dict[str, PlatformEntry]:
        unknown = sorted(set(value) - PLATFORM_KEYS)
        if unknown:
            raise ValueError(f"Unsupported platform keys: {', '.join(unknown)}")
        return value

    @field_serializer("pub_date")
    def _serialize_pub_date(self, value: datetime) -> str:
        return value.strftime(PUB_DATE_FORMAT)
