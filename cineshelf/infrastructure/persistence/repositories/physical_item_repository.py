"""
Implementation SQLModel du repository PhysicalItem.

Implemente l'interface IPhysicalItemRepository. L'ensemble des formats d'un
article est stocke dans physical_item_formats (une ligne par format).
Aucune methode ne valide la transaction : c'est le role de l'unite de travail.
"""

from collections import defaultdict
from typing import Iterable, Optional

from sqlalchemy import delete, func
from sqlmodel import Session, select

from cineshelf.core.entities.collection import PhysicalItem
from cineshelf.core.ports.repositories import IPhysicalItemRepository
from cineshelf.core.value_objects.formats import Format, aggregate_formats
from cineshelf.infrastructure.persistence.models import (
    MediaLinkFormatModel,
    MediaLinkModel,
    PhysicalItemFormatModel,
    PhysicalItemModel,
    utc_now,
)

# Colonnes de tri autorisees pour le listing
_SORT_COLUMNS = {
    "created_at": PhysicalItemModel.created_at,
    "name": PhysicalItemModel.name,
    "title": PhysicalItemModel.name,
    "purchase_date": PhysicalItemModel.purchase_date,
}


def load_item_formats(session: Session, item_ids: Iterable[int]) -> dict[int, tuple[Format, ...]]:
    """Charge les ensembles de formats de plusieurs articles en une requete."""
    ids = list(item_ids)
    if not ids:
        return {}
    statement = select(PhysicalItemFormatModel).where(
        PhysicalItemFormatModel.physical_item_id.in_(ids)
    )
    grouped: dict[int, list[Format]] = defaultdict(list)
    for row in session.exec(statement).all():
        grouped[row.physical_item_id].append(Format.parse(row.format))
    return {item_id: aggregate_formats([formats]) for item_id, formats in grouped.items()}


def physical_item_to_entity(
    model: PhysicalItemModel, format_set: tuple[Format, ...] = ()
) -> PhysicalItem:
    """Convertit un modele DB en entite domaine."""
    return PhysicalItem(
        id=model.id,
        name=model.name,
        format_set=format_set,
        edition_notes=model.edition_notes,
        purchase_date=model.purchase_date,
        store_links_json=model.store_links_json,
        custom_image_url=model.custom_image_url,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SQLModelPhysicalItemRepository(IPhysicalItemRepository):
    """
    Repository SQLModel pour les articles physiques.

    Implemente IPhysicalItemRepository avec conversion bidirectionnelle
    entre l'entite PhysicalItem (domaine) et PhysicalItemModel (persistance).
    """

    def __init__(self, session: Session) -> None:
        """
        Initialise le repository avec une session SQLModel.

        Args :
            session : Session SQLModel active (transaction geree par l'appelant)
        """
        self._session = session

    def _to_entity(self, model: PhysicalItemModel) -> PhysicalItem:
        formats = load_item_formats(self._session, [model.id])
        return physical_item_to_entity(model, formats.get(model.id, ()))

    def get_by_id(self, item_id: int) -> Optional[PhysicalItem]:
        """Recupere un article par son ID."""
        model = self._session.get(PhysicalItemModel, item_id)
        if model:
            return self._to_entity(model)
        return None

    def get_by_name(self, name: str) -> Optional[PhysicalItem]:
        """Recupere le premier article portant exactement ce nom."""
        statement = (
            select(PhysicalItemModel)
            .where(PhysicalItemModel.name == name)
            .order_by(PhysicalItemModel.id)
        )
        model = self._session.exec(statement).first()
        if model:
            return self._to_entity(model)
        return None

    def add(self, item: PhysicalItem) -> PhysicalItem:
        """Insere un article (avec ses formats eventuels) et retourne l'entite avec ID."""
        model = PhysicalItemModel(
            name=item.name,
            edition_notes=item.edition_notes,
            purchase_date=item.purchase_date,
            store_links_json=item.store_links_json,
            custom_image_url=item.custom_image_url,
        )
        self._session.add(model)
        self._session.flush()
        if item.format_set:
            self.set_format_set(model.id, item.format_set)
        return self._to_entity(model)

    def set_format_set(self, item_id: int, formats: Iterable[Format]) -> None:
        """Remplace l'ensemble des formats d'un article et met a jour updated_at."""
        self._session.execute(
            delete(PhysicalItemFormatModel).where(
                PhysicalItemFormatModel.physical_item_id == item_id
            )
        )
        for fmt in aggregate_formats([formats]):
            self._session.add(PhysicalItemFormatModel(physical_item_id=item_id, format=fmt.value))

        model = self._session.get(PhysicalItemModel, item_id)
        if model is not None:
            model.updated_at = utc_now()
            self._session.add(model)
        self._session.flush()

    def _filtered(self, statement, format_filter: Optional[Format]):
        if format_filter is None:
            return statement
        containing = select(PhysicalItemFormatModel.physical_item_id).where(
            PhysicalItemFormatModel.format == Format.parse(format_filter).value
        )
        return statement.where(PhysicalItemModel.id.in_(containing))

    def list_items(
        self,
        format_filter: Optional[Format] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[PhysicalItem]:
        """Liste les articles, filtres par format contenu, tries et pagines."""
        column = _SORT_COLUMNS.get(sort_by, PhysicalItemModel.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        statement = self._filtered(select(PhysicalItemModel), format_filter).order_by(
            ordering, PhysicalItemModel.id
        )
        if offset:
            statement = statement.offset(offset)
        if limit is not None:
            statement = statement.limit(limit)

        models = self._session.exec(statement).all()
        formats = load_item_formats(self._session, [m.id for m in models])
        return [physical_item_to_entity(m, formats.get(m.id, ())) for m in models]

    def count(self, format_filter: Optional[Format] = None) -> int:
        """Compte les articles, filtres par format contenu."""
        statement = self._filtered(
            select(func.count()).select_from(PhysicalItemModel), format_filter
        )
        return self._session.exec(statement).one()

    def delete(self, item_id: int) -> bool:
        """Supprime un article, ses formats et ses liens. Les medias sont conserves."""
        model = self._session.get(PhysicalItemModel, item_id)
        if model is None:
            return False

        link_ids = select(MediaLinkModel.id).where(MediaLinkModel.physical_item_id == item_id)
        self._session.execute(
            delete(MediaLinkFormatModel).where(MediaLinkFormatModel.link_id.in_(link_ids))
        )
        self._session.execute(delete(MediaLinkModel).where(MediaLinkModel.physical_item_id == item_id))
        self._session.execute(
            delete(PhysicalItemFormatModel).where(
                PhysicalItemFormatModel.physical_item_id == item_id
            )
        )
        self._session.delete(model)
        self._session.flush()
        return True

    def delete_all(self) -> int:
        """Supprime tous les articles et tous les liens (les medias sont conserves)."""
        count = self.count()
        self._session.execute(delete(MediaLinkFormatModel))
        self._session.execute(delete(MediaLinkModel))
        self._session.execute(delete(PhysicalItemFormatModel))
        self._session.execute(delete(PhysicalItemModel))
        self._session.flush()
        return count
