"""
Service des operations manuelles sur les articles physiques.

Operations sur les liens media d'un article, suppression d'article
et listing.
Chaque operation d'ecriture recalcule l'ensemble des formats de l'article
dans la meme transaction, pour que format_set reste l'union triee des
formats de ses liens.
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from loguru import logger

from cineshelf.core.entities.collection import Media, MediaLink, PhysicalItem
from cineshelf.core.exceptions import (
    MediaLinkError,
    MediaLinkNotFoundError,
    MediaNotFoundError,
    PhysicalItemNotFoundError,
)
from cineshelf.core.ports.repositories import ICollectionUnitOfWork
from cineshelf.core.value_objects.formats import Format

log = logger.bind(operation="items")


@dataclass
class LinkedMedia:
    """Un media tel qu'il figure dans un article (avec formats et disque)."""

    media: Media
    link: MediaLink


@dataclass
class PhysicalItemDetails:
    """Un article physique avec ses medias lies."""

    item: PhysicalItem
    media: list[LinkedMedia] = field(default_factory=list)


@dataclass
class PhysicalItemPage:
    """Page du listing des articles."""

    items: list[PhysicalItem]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


class PhysicalItemService:
    """
    Operations manuelles sur les articles physiques.

    Attributs injectes:
        uow_factory: Fabrique d'unites de travail (une par operation)
    """

    def __init__(self, uow_factory: Callable[[], ICollectionUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def list_items(
        self,
        format_filter: Optional[Format] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 24,
    ) -> PhysicalItemPage:
        """Liste paginee des articles, filtree par format contenu."""
        page = max(page, 1)
        with self._uow_factory() as uow:
            items = uow.physical_items.list_items(
                format_filter=format_filter,
                sort_by=sort_by,
                sort_order=sort_order,
                limit=limit,
                offset=(page - 1) * limit,
            )
            total = uow.physical_items.count(format_filter)
        return PhysicalItemPage(items=items, total=total, page=page, limit=limit)

    def get_item(self, item_id: int) -> PhysicalItemDetails:
        """
        Recupere un article et ses medias lies.

        Raises:
            PhysicalItemNotFoundError: Article inexistant
        """
        with self._uow_factory() as uow:
            return self._load_details(uow, item_id)

    def delete_item(self, item_id: int) -> None:
        """
        Supprime un article et ses liens. Les medias sont conserves.

        Raises:
            PhysicalItemNotFoundError: Article inexistant
        """
        with self._uow_factory() as uow:
            if not uow.physical_items.delete(item_id):
                raise PhysicalItemNotFoundError(f"Article physique introuvable : {item_id}")
            uow.commit()
        log.info(f"Article physique supprime : {item_id}")

    def add_media_link(
        self,
        item_id: int,
        formats: Iterable[str],
        media_id: Optional[int] = None,
        new_media: Optional[Media] = None,
        disc_number: int = 1,
    ) -> PhysicalItemDetails:
        """
        Lie un media (existant ou nouveau) a un article.

        Raises:
            PhysicalItemNotFoundError: Article inexistant
            MediaNotFoundError: media_id inconnu
            MediaLinkError: Formats invalides, media deja lie, ou ni media_id
                ni nouveau media fourni
        """
        link_formats = self._parse_formats(formats)

        with self._uow_factory() as uow:
            if uow.physical_items.get_by_id(item_id) is None:
                raise PhysicalItemNotFoundError(f"Article physique introuvable : {item_id}")

            if media_id is not None:
                if uow.media.get_by_id(media_id) is None:
                    raise MediaNotFoundError(f"Media introuvable : {media_id}")
                if uow.links.get(item_id, media_id) is not None:
                    raise MediaLinkError("Ce media est deja lie a cet article")
            elif new_media is not None and new_media.title:
                media_id = uow.media.add(new_media).id
            else:
                raise MediaLinkError("Le titre du media est obligatoire")

            uow.links.add(
                MediaLink(
                    physical_item_id=item_id,
                    media_id=media_id,
                    formats=link_formats,
                    disc_number=disc_number,
                )
            )
            self._refresh_format_set(uow, item_id)
            uow.commit()
            details = self._load_details(uow, item_id)

        log.info(f"Media {media_id} lie a l'article {item_id}")
        return details

    def update_link_formats(
        self, item_id: int, media_id: int, formats: Iterable[str]
    ) -> PhysicalItemDetails:
        """
        Remplace les formats d'un media dans un article.

        Raises:
            PhysicalItemNotFoundError: Article inexistant
            MediaLinkNotFoundError: Media non lie a cet article
            MediaLinkError: Formats invalides ou liste vide
        """
        link_formats = self._parse_formats(formats)

        with self._uow_factory() as uow:
            if uow.physical_items.get_by_id(item_id) is None:
                raise PhysicalItemNotFoundError(f"Article physique introuvable : {item_id}")
            if not uow.links.set_formats(item_id, media_id, link_formats):
                raise MediaLinkNotFoundError(f"Lien media introuvable : {media_id}")

            self._refresh_format_set(uow, item_id)
            uow.commit()
            details = self._load_details(uow, item_id)

        log.info(f"Formats du media {media_id} mis a jour dans l'article {item_id}")
        return details

    def remove_media_link(self, item_id: int, media_id: int) -> PhysicalItemDetails:
        """
        Retire un media d'un article (le media est conserve).

        Raises:
            PhysicalItemNotFoundError: Article inexistant
            MediaLinkError: Lien inexistant, ou dernier lien de l'article
        """
        with self._uow_factory() as uow:
            if uow.physical_items.get_by_id(item_id) is None:
                raise PhysicalItemNotFoundError(f"Article physique introuvable : {item_id}")
            links = uow.links.list_for_item(item_id)
            if not any(link.media_id == media_id for link in links):
                raise MediaLinkError("Lien media introuvable")
            if all(link.media_id == media_id for link in links):
                raise MediaLinkError("Impossible de retirer le dernier media d'un article")

            uow.links.delete(item_id, media_id)
            self._refresh_format_set(uow, item_id)
            uow.commit()
            details = self._load_details(uow, item_id)

        log.info(f"Media {media_id} retire de l'article {item_id}")
        return details

    @staticmethod
    def _parse_formats(formats: Iterable[str]) -> tuple[Format, ...]:
        try:
            link_formats = tuple(Format.parse(fmt) for fmt in formats)
        except ValueError as e:
            raise MediaLinkError(str(e)) from e
        if not link_formats:
            raise MediaLinkError("Au moins un format est requis")
        return link_formats

    @staticmethod
    def _refresh_format_set(uow: ICollectionUnitOfWork, item_id: int) -> None:
        item = uow.physical_items.get_by_id(item_id)
        item.links = uow.links.list_for_item(item_id)
        uow.physical_items.set_format_set(item_id, item.recompute_format_set())

    @staticmethod
    def _load_details(uow: ICollectionUnitOfWork, item_id: int) -> PhysicalItemDetails:
        item = uow.physical_items.get_by_id(item_id)
        if item is None:
            raise PhysicalItemNotFoundError(f"Article physique introuvable : {item_id}")
        item.links = uow.links.list_for_item(item_id)
        details = PhysicalItemDetails(item=item)
        for link in item.links:
            media = uow.media.get_by_id(link.media_id)
            if media is not None:
                details.media.append(LinkedMedia(media=media, link=link))
        return details
