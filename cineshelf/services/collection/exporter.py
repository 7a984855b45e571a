"""
Export de la collection en CSV.

Une ligne par lien (article physique, media), article le plus recent d'abord
puis numero de disque croissant. Tous les champs sont exportes, y compris id
et horodatages, pour que le fichier soit re-importable (ces trois colonnes
sont ignorees a l'import).
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from loguru import logger

from cineshelf.adapters.csv.codec import CSVCodec
from cineshelf.core.ports.repositories import ExportRecord, ICollectionUnitOfWork

EXPORT_COLUMNS = (
    "id",
    "title",
    "external_id",
    "synopsis",
    "cover_art_url",
    "release_date",
    "director",
    "cast",
    "physical_item_name",
    "formats",
    "disc_number",
    "edition_notes",
    "purchase_date",
    "store_links",
    "custom_image_url",
    "created_at",
    "updated_at",
)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    """Horodatage UTC "YYYY-MM-DD HH:MM:SS" (valeurs avec ou sans fuseau)."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(sep=" ", timespec="seconds")


def export_row(record: ExportRecord) -> dict[str, Any]:
    """Aplati un lien et ses entites en une ligne d'export."""
    item, media, link = record.physical_item, record.media, record.link
    return {
        "id": media.id,
        "title": media.title,
        "external_id": media.external_id,
        "synopsis": media.synopsis,
        "cover_art_url": media.cover_art_url,
        "release_date": media.release_date,
        "director": media.director,
        "cast": media.cast_json,
        "physical_item_name": item.name,
        "formats": json.dumps([fmt.value for fmt in link.formats], separators=(",", ":"), ensure_ascii=False),
        "disc_number": link.disc_number,
        "edition_notes": item.edition_notes,
        "purchase_date": item.purchase_date,
        "store_links": item.store_links_json,
        "custom_image_url": item.custom_image_url,
        "created_at": _timestamp(item.created_at),
        "updated_at": _timestamp(item.updated_at),
    }


class ExportSerializer:
    """
    Serialise la collection en CSV.

    Attributs injectes:
        uow_factory: Fabrique d'unites de travail (lecture seule)
        codec: Codec CSV
    """

    def __init__(
        self, uow_factory: Callable[[], ICollectionUnitOfWork], codec: CSVCodec
    ) -> None:
        self._uow_factory = uow_factory
        self._codec = codec

    def export_csv(self) -> str:
        """Retourne la collection complete au format CSV (en-tete compris)."""
        with self._uow_factory() as uow:
            records = uow.links.list_export_records()

        logger.bind(operation="export").info(f"Export CSV : {len(records)} ligne(s)")
        return self._codec.write_table(EXPORT_COLUMNS, (export_row(r) for r in records))
