"""Record catalog rules applied on top of storage."""

from collections.abc import Mapping
from dataclasses import dataclass

from vinyl_vault.domain.models import RECORD_FIELDS, RecordDraft, VinylRecord
from vinyl_vault.errors import AuthorizationError, NotFoundError, ValidationError
from vinyl_vault.services.storage import CatalogStorage

_REQUIRED_FIELDS = ("title", "artist")


@dataclass
class RecordService:
    """Owner-scoped access to catalog records."""

    storage: CatalogStorage

    def list_records(self, user_id: int) -> list[VinylRecord]:
        """Return every record owned by the user."""
        return self.storage.get_records(user_id)

    def get_record(self, user_id: int, record_id: int) -> VinylRecord:
        """Return a record, checking that the user owns it."""
        record = self.storage.get_record(record_id)
        if record is None:
            raise NotFoundError("Record not found")
        if record.owner_id != user_id:
            raise AuthorizationError("Access denied")
        return record

    def create_record(self, user_id: int, fields: Mapping[str, object]) -> VinylRecord:
        """Validate and store a new record for the user."""
        values = _clean_fields(fields)
        missing = [
            {"field": name, "message": "Required"}
            for name in _REQUIRED_FIELDS
            if not values.get(name)
        ]
        if missing:
            raise ValidationError("Title and artist are required", missing)
        return self.storage.create_record(RecordDraft(owner_id=user_id, **values))

    def update_record(
        self, user_id: int, record_id: int, fields: Mapping[str, object]
    ) -> VinylRecord:
        """Merge the provided fields into a record the user owns."""
        self.get_record(user_id, record_id)
        values = _clean_fields(fields)
        blank = [
            {"field": name, "message": "Must not be empty"}
            for name in _REQUIRED_FIELDS
            if name in values and not values[name]
        ]
        if blank:
            raise ValidationError("Title and artist must not be empty", blank)
        updated = self.storage.update_record(record_id, values)
        if updated is None:
            raise NotFoundError("Record not found")
        return updated

    def delete_record(self, user_id: int, record_id: int) -> None:
        """Delete a record the user owns."""
        self.get_record(user_id, record_id)
        if not self.storage.delete_record(record_id):
            raise NotFoundError("Record not found")

    def search_records(self, user_id: int, query: str) -> list[VinylRecord]:
        """Search the user's records by title, artist, genre or year."""
        return self.storage.search_records(user_id, query)


def _clean_fields(fields: Mapping[str, object]) -> dict[str, object]:
    """Keep known record fields, trimming strings and custom field names."""
    values: dict[str, object] = {}
    for name in RECORD_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == "custom_fields":
            value = _clean_custom_fields(value)
        elif isinstance(value, str):
            value = value.strip()
            if name not in _REQUIRED_FIELDS and not value:
                value = None
        values[name] = value
    return values


def _clean_custom_fields(raw: object) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "Custom fields must be an object",
            [{"field": "custom_fields", "message": "Expected an object"}],
        )
    cleaned: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValidationError(
                "Custom field names and values must be strings",
                [{"field": "custom_fields", "message": f"Invalid entry {key!r}"}],
            )
        name = key.strip()
        if not name:
            raise ValidationError(
                "Custom field names must not be empty",
                [{"field": "custom_fields", "message": "Empty field name"}],
            )
        cleaned[name] = value
    return cleaned
