"""Catalog routes served through the provider abstraction."""

from fastapi import APIRouter, Depends, Query

from music_bridge.dependencies import get_provider_registry
from music_bridge.models import CatalogItem, ErrorResponse, ProviderInfo, ProviderSearchResults
from music_bridge.providers.base import ProviderCapability
from music_bridge.providers.registry import ProviderRegistry

router = APIRouter()

PROVIDER_ERRORS = {
    401: {"model": ErrorResponse, "description": "Not signed in to the provider"},
    404: {"model": ErrorResponse, "description": "Unknown provider or item"},
    502: {"model": ErrorResponse, "description": "Provider unreachable or returned an error"},
}


@router.get("/providers", response_model=list[ProviderInfo], summary="List providers")
async def list_providers(registry: ProviderRegistry = Depends(get_provider_registry)):
    return [provider.info() for provider in registry.providers]


@router.get(
    "/providers/{provider_id}/artists",
    response_model=list[CatalogItem],
    summary="Artists in the user's library",
    responses=PROVIDER_ERRORS,
)
async def get_artists(
    provider_id: str,
    limit: int | None = Query(default=None, ge=1, le=500),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_artists(limit=limit)


@router.get(
    "/providers/{provider_id}/artists/{artist_id}",
    response_model=CatalogItem,
    summary="Artist details",
    responses=PROVIDER_ERRORS,
)
async def get_artist_details(
    provider_id: str,
    artist_id: str,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_artist_details(artist_id)


@router.get(
    "/providers/{provider_id}/albums",
    response_model=list[CatalogItem],
    summary="Albums in the user's library, or one artist's albums",
    responses=PROVIDER_ERRORS,
)
async def get_albums(
    provider_id: str,
    artist_id: str | None = Query(default=None, min_length=1),
    limit: int | None = Query(default=None, ge=1, le=500),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_albums(artist_id=artist_id, limit=limit)


@router.get(
    "/providers/{provider_id}/albums/{album_id}",
    response_model=CatalogItem,
    summary="Album details",
    responses=PROVIDER_ERRORS,
)
async def get_album_details(
    provider_id: str,
    album_id: str,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_album_details(album_id)


@router.get(
    "/providers/{provider_id}/albums/{album_id}/tracks",
    response_model=list[CatalogItem],
    summary="Tracks of an album",
    responses=PROVIDER_ERRORS,
)
async def get_tracks(
    provider_id: str,
    album_id: str,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_tracks(album_id)


@router.get(
    "/providers/{provider_id}/recent",
    response_model=list[CatalogItem],
    summary="Recently played tracks",
    responses=PROVIDER_ERRORS,
)
async def get_recently_played(
    provider_id: str,
    limit: int = Query(default=20, ge=1, le=200),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return await registry.get(provider_id).get_recently_played(limit=limit)


@router.get(
    "/providers/{provider_id}/playlists",
    response_model=list[CatalogItem],
    summary="Playlists in the user's library",
    responses={**PROVIDER_ERRORS, 501: {"model": ErrorResponse, "description": "Provider has no playlists"}},
)
async def get_playlists(
    provider_id: str,
    limit: int | None = Query(default=None, ge=1, le=500),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    provider = registry.require(provider_id, ProviderCapability.PLAYLISTS)
    return await provider.get_playlists(limit=limit)


@router.get("/search", response_model=ProviderSearchResults, summary="Search every provider")
async def search(
    q: str = Query(..., min_length=1, description="Search query"),
    limit: int | None = Query(default=None, ge=1, le=100),
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    """Runs the query on every signed-in provider that supports search.

    Providers that fail are listed under `errors`; the others still answer.
    """
    return await registry.search_all(q, limit=limit)
