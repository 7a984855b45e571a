"""
Implementation SQLModel du repository MediaLink.

Chaque lien stocke ses formats dans physical_item_media_formats,
avec leur position pour restituer l'ordre fourni.
"""

from collections import defaultdict
from typing import Iterable, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from cineshelf.core.entities.collection import MediaLink
from cineshelf.core.ports.repositories import ExportRecord, IMediaLinkRepository
from cineshelf.core.value_objects.formats import Format
from cineshelf.infrastructure.persistence.models import (
    MediaLinkFormatModel,
    MediaLinkModel,
    MediaModel,
    PhysicalItemModel,
)
from cineshelf.infrastructure.persistence.repositories.media_repository import media_to_entity
from cineshelf.infrastructure.persistence.repositories.physical_item_repository import (
    load_item_formats,
    physical_item_to_entity,
)


class SQLModelMediaLinkRepository(IMediaLinkRepository):
    """
    Repository SQLModel pour les liens article <-> media.

    N'impose aucune unicite sur (article, media) : la deduplication
    eventuelle releve des services.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active (transaction geree par l'appelant)
        """
        self._session = session

    def _load_formats(self, link_ids: Iterable[int]) -> dict[int, tuple[Format, ...]]:
        """Charge les formats ordonnes de plusieurs liens en une requete."""
        ids = list(link_ids)
        if not ids:
            return {}
        statement = (
            select(MediaLinkFormatModel)
            .where(MediaLinkFormatModel.link_id.in_(ids))
            .order_by(MediaLinkFormatModel.link_id, MediaLinkFormatModel.position)
        )
        grouped: dict[int, list[Format]] = defaultdict(list)
        for row in self._session.exec(statement).all():
            grouped[row.link_id].append(Format.parse(row.format))
        return {link_id: tuple(formats) for link_id, formats in grouped.items()}

    @staticmethod
    def _to_entity(model: MediaLinkModel, formats: tuple[Format, ...]) -> MediaLink:
        return MediaLink(
            id=model.id,
            physical_item_id=model.physical_item_id,
            media_id=model.media_id,
            formats=formats,
            disc_number=model.disc_number,
            created_at=model.created_at,
        )

    def _to_entities(self, models: list[MediaLinkModel]) -> list[MediaLink]:
        formats = self._load_formats(m.id for m in models)
        return [self._to_entity(m, formats.get(m.id, ())) for m in models]

    def add(self, link: MediaLink) -> MediaLink:
        """Insere un lien et ses formats, retourne l'entite avec son ID."""
        model = MediaLinkModel(
            physical_item_id=link.physical_item_id,
            media_id=link.media_id,
            disc_number=link.disc_number,
        )
        self._session.add(model)
        self._session.flush()

        for position, fmt in enumerate(link.formats):
            self._session.add(
                MediaLinkFormatModel(link_id=model.id, position=position, format=fmt.value)
            )
        self._session.flush()
        return self._to_entity(model, link.formats)

    def get(self, item_id: int, media_id: int) -> Optional[MediaLink]:
        """Recupere le premier lien entre un article et un media."""
        statement = (
            select(MediaLinkModel)
            .where(MediaLinkModel.physical_item_id == item_id)
            .where(MediaLinkModel.media_id == media_id)
            .order_by(MediaLinkModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entities([model])[0]
        return None

    def list_for_item(self, item_id: int) -> list[MediaLink]:
        """Liste les liens d'un article par numero de disque."""
        statement = (
            select(MediaLinkModel)
            .where(MediaLinkModel.physical_item_id == item_id)
            .order_by(MediaLinkModel.disc_number, MediaLinkModel.id)
        )
        return self._to_entities(list(self._session.exec(statement).all()))

    def _link_ids(self, item_id: int, media_id: int) -> list[int]:
        return list(
            self._session.exec(
                select(MediaLinkModel.id)
                .where(MediaLinkModel.physical_item_id == item_id)
                .where(MediaLinkModel.media_id == media_id)
            ).all()
        )

    def set_formats(self, item_id: int, media_id: int, formats: Iterable[Format]) -> int:
        """Remplace les formats ordonnes de chaque lien entre un article et un media."""
        link_ids = self._link_ids(item_id, media_id)
        if not link_ids:
            return 0
        self._session.execute(
            delete(MediaLinkFormatModel).where(MediaLinkFormatModel.link_id.in_(link_ids))
        )
        ordered = list(formats)
        for link_id in link_ids:
            for position, fmt in enumerate(ordered):
                self._session.add(
                    MediaLinkFormatModel(link_id=link_id, position=position, format=fmt.value)
                )
        self._session.flush()
        return len(link_ids)

    def delete(self, item_id: int, media_id: int) -> int:
        """Supprime les liens entre un article et un media."""
        link_ids = self._link_ids(item_id, media_id)
        if not link_ids:
            return 0
        self._session.execute(
            delete(MediaLinkFormatModel).where(MediaLinkFormatModel.link_id.in_(link_ids))
        )
        self._session.execute(delete(MediaLinkModel).where(MediaLinkModel.id.in_(link_ids)))
        self._session.flush()
        return len(link_ids)

    def list_export_records(self) -> list[ExportRecord]:
        """
        Liste les liens joints a leur article et a leur media.

        Ordre : article le plus recent d'abord, puis numero de disque croissant.
        """
        statement = (
            select(MediaLinkModel, PhysicalItemModel, MediaModel)
            .join(PhysicalItemModel, MediaLinkModel.physical_item_id == PhysicalItemModel.id)
            .join(MediaModel, MediaLinkModel.media_id == MediaModel.id)
            .order_by(
                PhysicalItemModel.created_at.desc(),
                PhysicalItemModel.id.desc(),
                MediaLinkModel.disc_number.asc(),
                MediaLinkModel.id.asc(),
            )
        )
        rows = self._session.exec(statement).all()

        link_formats = self._load_formats(link.id for link, _, _ in rows)
        item_formats = load_item_formats(self._session, {item.id for _, item, _ in rows})
        return [
            ExportRecord(
                physical_item=physical_item_to_entity(item, item_formats.get(item.id, ())),
                media=media_to_entity(media),
                link=self._to_entity(link, link_formats.get(link.id, ())),
            )
            for link, item, media in rows
        ]
