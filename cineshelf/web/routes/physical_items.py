"""
Routes des articles physiques : listing, detail et operations manuelles.

La lecture est publique ; toute ecriture (suppression, liens media) exige le
mot de passe administrateur.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...container import Container
from ...core.entities.collection import Media, PhysicalItem
from ...core.value_objects.formats import Format
from ...services.physical_items import PhysicalItemDetails
from ..deps import get_container, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/physical-items", tags=["physical-items"])


class MediaLinkPayload(BaseModel):
    """Ajout d'un media a un article : media existant (media_id) ou nouveau media."""

    formats: list[str] = Field(default_factory=list)
    disc_number: int = Field(default=1, ge=1)
    media_id: Optional[int] = None
    title: Optional[str] = None
    external_id: Optional[int] = None
    synopsis: Optional[str] = None
    cover_art_url: Optional[str] = None
    release_date: Optional[str] = None
    director: Optional[str] = None
    cast: Optional[list[str]] = None

    def to_media(self) -> Media:
        return Media(
            title=(self.title or "").strip(),
            external_id=self.external_id,
            synopsis=self.synopsis,
            cover_art_url=self.cover_art_url,
            release_date=self.release_date,
            director=self.director,
            cast_json=json.dumps(self.cast, ensure_ascii=False) if self.cast else None,
        )


class LinkFormatsPayload(BaseModel):
    formats: list[str] = Field(default_factory=list)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def item_to_dict(item: PhysicalItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "formats": [fmt.value for fmt in item.format_set],
        "edition_notes": item.edition_notes,
        "purchase_date": item.purchase_date,
        "store_links": [{"label": link.label, "url": link.url} for link in item.store_links],
        "custom_image_url": item.custom_image_url,
        "created_at": _iso(item.created_at),
        "updated_at": _iso(item.updated_at),
    }


def details_to_dict(details: PhysicalItemDetails) -> dict[str, Any]:
    result = item_to_dict(details.item)
    result["media"] = [
        {
            "id": entry.media.id,
            "title": entry.media.title,
            "external_id": entry.media.external_id,
            "synopsis": entry.media.synopsis,
            "cover_art_url": entry.media.cover_art_url,
            "release_date": entry.media.release_date,
            "director": entry.media.director,
            "cast": entry.media.cast,
            "formats": [fmt.value for fmt in entry.link.formats],
            "disc_number": entry.link.disc_number,
        }
        for entry in details.media
    ]
    return result


@router.get("")
def list_physical_items(
    container: Container = Depends(get_container),
    format_name: Optional[str] = Query(default=None, alias="format"),
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = Query(default=None, pattern="^(asc|desc)$"),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, le=200),
):
    """Liste paginee, filtree par format contenu (ex: ?format=Blu-ray)."""
    settings = container.config()
    format_filter = None
    if format_name:
        try:
            format_filter = Format.parse(format_name)
        except ValueError as e:
            return JSONResponse(status_code=400, content={"error": "Format invalide", "details": str(e)})

    result = container.physical_item_service().list_items(
        format_filter=format_filter,
        sort_by=sort_by or settings.default_sort_by,
        sort_order=sort_order or settings.default_sort_order,
        page=page,
        limit=limit or settings.items_per_page,
    )
    return {
        "items": [item_to_dict(item) for item in result.items],
        "pagination": {
            "page": result.page,
            "limit": result.limit,
            "total": result.total,
            "total_pages": result.total_pages,
        },
    }


@router.get("/{item_id}")
def get_physical_item(item_id: int, container: Container = Depends(get_container)):
    """Detail d'un article avec ses medias."""
    return details_to_dict(container.physical_item_service().get_item(item_id))


@router.delete("/{item_id}", dependencies=[Depends(require_admin)])
def delete_physical_item(item_id: int, container: Container = Depends(get_container)):
    """Supprime un article et ses liens (les medias sont conserves)."""
    container.physical_item_service().delete_item(item_id)
    logger.info("Article physique %d supprime", item_id)
    return {"message": "Article physique supprime"}


@router.post("/{item_id}/media", status_code=201, dependencies=[Depends(require_admin)])
def add_media_to_item(
    item_id: int,
    payload: MediaLinkPayload,
    container: Container = Depends(get_container),
):
    """Lie un media existant ou nouveau a l'article."""
    details = container.physical_item_service().add_media_link(
        item_id,
        payload.formats,
        media_id=payload.media_id,
        new_media=None if payload.media_id is not None else payload.to_media(),
        disc_number=payload.disc_number,
    )
    return details_to_dict(details)


@router.put("/{item_id}/media/{media_id}/formats", dependencies=[Depends(require_admin)])
def update_media_formats(
    item_id: int,
    media_id: int,
    payload: LinkFormatsPayload,
    container: Container = Depends(get_container),
):
    """Remplace les formats d'un media de l'article."""
    details = container.physical_item_service().update_link_formats(item_id, media_id, payload.formats)
    return details_to_dict(details)


@router.delete("/{item_id}/media/{media_id}", dependencies=[Depends(require_admin)])
def remove_media_from_item(
    item_id: int, media_id: int, container: Container = Depends(get_container)
):
    """Retire un media de l'article (refuse pour le dernier media)."""
    details = container.physical_item_service().remove_media_link(item_id, media_id)
    return details_to_dict(details)
