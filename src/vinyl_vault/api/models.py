"""Pydantic models for the JSON API."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from vinyl_vault.domain.metadata import RecordMetadata
from vinyl_vault.domain.models import UserRecord, VinylRecord

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class ApiModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(ApiModel):
    """Registration payload."""

    username: str
    password: str
    name: str

    @field_validator("username")
    @classmethod
    def _email_shaped(cls, value: str) -> str:
        value = value.strip()
        if not _EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return value

    @field_validator("name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class LoginRequest(ApiModel):
    """Login payload."""

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _trimmed(cls, value: str) -> str:
        return value.strip()


class RecordPayload(ApiModel):
    """Fields accepted when creating or updating a record."""

    title: str | None = None
    artist: str | None = None
    year: str | None = None
    genre: str | None = None
    cover_image: str | None = None
    custom_fields: dict[str, str] | None = None

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_text(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class MetadataLookupRequest(ApiModel):
    """Metadata lookup payload."""

    artist: str | None = None
    title: str | None = None


class UserResponse(ApiModel):
    """User as returned to clients; never includes the password hash."""

    id: int
    username: str
    name: str
    created_at: datetime

    @classmethod
    def from_domain(cls, user: UserRecord) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            name=user.name,
            created_at=user.created_at,
        )


class RecordResponse(ApiModel):
    """Catalog record as returned to clients."""

    id: int
    user_id: int
    title: str
    artist: str
    year: str | None
    genre: str | None
    cover_image: str | None
    custom_fields: dict[str, str]
    created_at: datetime

    @classmethod
    def from_domain(cls, record: VinylRecord) -> "RecordResponse":
        return cls(
            id=record.id,
            user_id=record.owner_id,
            title=record.title,
            artist=record.artist,
            year=record.year,
            genre=record.genre,
            cover_image=record.cover_image,
            custom_fields=record.custom_fields,
            created_at=record.created_at,
        )


class MetadataResponse(ApiModel):
    """Best-effort metadata; missing keys are omitted."""

    year: str | None = None
    genre: str | None = None
    cover_image: str | None = None

    @classmethod
    def from_domain(cls, metadata: RecordMetadata) -> "MetadataResponse":
        return cls(
            year=metadata.year,
            genre=metadata.genre,
            cover_image=metadata.cover_image,
        )
