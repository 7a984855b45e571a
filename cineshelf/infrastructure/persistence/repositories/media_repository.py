"""
Implementation SQLModel du repository Media.

Implemente l'interface IMediaRepository pour la persistance des fiches media.
"""

from typing import Optional

from sqlalchemy import func
from sqlmodel import Session, select

from cineshelf.core.entities.collection import Media
from cineshelf.core.ports.repositories import IMediaRepository
from cineshelf.infrastructure.persistence.models import MediaModel


def media_to_entity(model: MediaModel) -> Media:
    """Convertit un modele DB en entite domaine."""
    return Media(
        id=model.id,
        title=model.title,
        external_id=model.external_id,
        synopsis=model.synopsis,
        cover_art_url=model.cover_art_url,
        release_date=model.release_date,
        director=model.director,
        cast_json=model.cast_json,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SQLModelMediaRepository(IMediaRepository):
    """
    Repository SQLModel pour les fiches media.

    Les medias ne sont jamais modifies par l'import : un media retrouve
    par external_id est reutilise tel quel.
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active (transaction geree par l'appelant)
        """
        self._session = session

    def get_by_id(self, media_id: int) -> Optional[Media]:
        """Recupere un media par son ID interne."""
        model = self._session.get(MediaModel, media_id)
        if model:
            return media_to_entity(model)
        return None

    def get_by_external_id(self, external_id: int) -> Optional[Media]:
        """Recupere le premier media portant cet ID externe."""
        statement = (
            select(MediaModel)
            .where(MediaModel.external_id == external_id)
            .order_by(MediaModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return media_to_entity(model)
        return None

    def add(self, media: Media) -> Media:
        """Insere un media et retourne l'entite avec son ID."""
        model = MediaModel(
            title=media.title,
            external_id=media.external_id,
            synopsis=media.synopsis,
            cover_art_url=media.cover_art_url,
            release_date=media.release_date,
            director=media.director,
            cast_json=media.cast_json,
        )
        self._session.add(model)
        self._session.flush()
        return media_to_entity(model)

    def count(self) -> int:
        """Nombre total de medias."""
        return self._session.exec(select(func.count()).select_from(MediaModel)).one()
