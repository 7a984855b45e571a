"""
Interfaces ports pour les repositories.

Interfaces abstraites (ports) définissant les contrats pour la persistance de la collection.
Les implémentations ne valident jamais la transaction elles-mêmes : seule l'unité
de travail (ICollectionUnitOfWork) décide du commit ou de l'annulation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from cineshelf.core.entities.collection import Media, MediaLink, PhysicalItem
from cineshelf.core.value_objects.formats import Format


@dataclass(frozen=True)
class ExportRecord:
    """Une ligne d'export : un lien avec son article physique et son media."""

    physical_item: PhysicalItem
    media: Media
    link: MediaLink


class IPhysicalItemRepository(ABC):
    """
    Interface de stockage des articles physiques.

    Le format_set est stocké de manière normalisée et n'est modifié
    que par set_format_set().
    """

    @abstractmethod
    def get_by_id(self, item_id: int) -> Optional[PhysicalItem]:
        """Récupère un article physique par son ID."""
        ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[PhysicalItem]:
        """Récupère un article physique par son nom exact."""
        ...

    @abstractmethod
    def add(self, item: PhysicalItem) -> PhysicalItem:
        """Insère un article physique et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def set_format_set(self, item_id: int, formats: Iterable[Format]) -> None:
        """Remplace l'ensemble des formats d'un article."""
        ...

    @abstractmethod
    def list_items(
        self,
        format_filter: Optional[Format] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[PhysicalItem]:
        """Liste les articles, filtrés optionnellement par format contenu."""
        ...

    @abstractmethod
    def count(self, format_filter: Optional[Format] = None) -> int:
        """Compte les articles, filtrés optionnellement par format contenu."""
        ...

    @abstractmethod
    def delete(self, item_id: int) -> bool:
        """Supprime un article et ses liens (les medias sont conservés)."""
        ...

    @abstractmethod
    def delete_all(self) -> int:
        """Supprime tous les articles et tous les liens. Retourne le nombre d'articles."""
        ...


class IMediaRepository(ABC):
    """Interface de stockage des fiches media."""

    @abstractmethod
    def get_by_id(self, media_id: int) -> Optional[Media]:
        """Récupère un media par son ID interne."""
        ...

    @abstractmethod
    def get_by_external_id(self, external_id: int) -> Optional[Media]:
        """Récupère un media par son ID externe."""
        ...

    @abstractmethod
    def add(self, media: Media) -> Media:
        """Insère un media et retourne l'entité avec son ID."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Nombre total de medias."""
        ...


class IMediaLinkRepository(ABC):
    """Interface de stockage des liens article <-> media."""

    @abstractmethod
    def add(self, link: MediaLink) -> MediaLink:
        """Insère un lien avec ses formats ordonnés."""
        ...

    @abstractmethod
    def get(self, item_id: int, media_id: int) -> Optional[MediaLink]:
        """Récupère le premier lien entre un article et un media."""
        ...

    @abstractmethod
    def list_for_item(self, item_id: int) -> list[MediaLink]:
        """Liste les liens d'un article, par numéro de disque."""
        ...

    @abstractmethod
    def delete(self, item_id: int, media_id: int) -> int:
        """Supprime les liens entre un article et un media. Retourne le nombre supprimé."""
        ...

    @abstractmethod
    def set_formats(self, item_id: int, media_id: int, formats: Iterable[Format]) -> int:
        """Remplace les formats des liens entre un article et un media. Retourne le nombre modifié."""
        ...

    @abstractmethod
    def list_export_records(self) -> list[ExportRecord]:
        """
        Liste tous les liens joints à leur article et media.

        Ordre : article le plus récent d'abord, puis numéro de disque croissant.
        """
        ...


class ICollectionUnitOfWork(ABC):
    """
    Frontière transactionnelle de la collection.

    Utilisation :
        with uow_factory() as uow:
            item = uow.physical_items.add(...)
            uow.commit()

    Toute sortie du bloc sans commit() annule les écritures.
    """

    physical_items: IPhysicalItemRepository
    media: IMediaRepository
    links: IMediaLinkRepository

    def __enter__(self) -> "ICollectionUnitOfWork":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Valide la transaction en cours."""
        ...

    @abstractmethod
    def rollback(self) -> None:
        """Annule la transaction en cours."""
        ...
