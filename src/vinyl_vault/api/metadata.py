"""Metadata lookup endpoint."""

from fastapi import APIRouter, Depends

from vinyl_vault.api.dependencies import get_container, require_user
from vinyl_vault.api.models import MetadataLookupRequest, MetadataResponse
from vinyl_vault.containers import AppContainer
from vinyl_vault.errors import ValidationError

router = APIRouter(
    prefix="/api/metadata", tags=["metadata"], dependencies=[Depends(require_user)]
)


@router.post(
    "/lookup", response_model=MetadataResponse, response_model_exclude_none=True
)
async def lookup_metadata(
    payload: MetadataLookupRequest,
    container: AppContainer = Depends(get_container),
) -> MetadataResponse:
    """Return best-effort year, genre and cover art for a record."""
    artist = (payload.artist or "").strip()
    title = (payload.title or "").strip()
    if not artist or not title:
        missing = [
            {"field": name, "message": "Required"}
            for name, value in (("artist", artist), ("title", title))
            if not value
        ]
        raise ValidationError("Artist and title are required", missing)
    metadata = await container.metadata_service.lookup(artist, title)
    return MetadataResponse.from_domain(metadata)
