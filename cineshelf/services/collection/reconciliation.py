"""
Moteur de regroupement et de reconciliation de l'import.

Les lignes validees sont regroupees par nom d'article physique. Chaque groupe
est traite dans sa propre transaction, strictement l'un apres l'autre dans
l'ordre de premiere apparition :

1. Article physique retrouve par nom exact, sinon cree avec un ensemble de formats vide
2. Pour chaque ligne : media retrouve par external_id (reutilise sans modification)
   ou cree, puis lien cree avec les formats de la ligne
3. Ensemble des formats de l'article = union triee des formats du groupe
   (et de ses liens existants)
4. Commit ; toute erreur annule uniquement le groupe courant

Le traitement sequentiel garantit une deduplication par external_id
deterministe : un groupe voit les medias crees par les groupes precedents.
"""

from typing import Callable, Iterable

from loguru import logger
from sqlalchemy.exc import OperationalError

from cineshelf.core.entities.collection import Media, MediaLink, PhysicalItem
from cineshelf.core.exceptions import DatastoreUnavailableError, GroupReconciliationError
from cineshelf.core.ports.repositories import ICollectionUnitOfWork
from cineshelf.core.value_objects.formats import Format, aggregate_formats
from cineshelf.services.collection.dataclasses import GroupOutcome, ImportRow


def group_rows(rows: Iterable[ImportRow]) -> dict[str, list[ImportRow]]:
    """
    Regroupe les lignes par physical_item_name (correspondance exacte).

    L'ordre des groupes est celui de premiere apparition, l'ordre des lignes
    dans un groupe est l'ordre du fichier.
    """
    groups: dict[str, list[ImportRow]] = {}
    for row in rows:
        groups.setdefault(row.physical_item_name, []).append(row)
    return groups


class ReconciliationEngine:
    """
    Ecrit les groupes de lignes validees dans la collection.

    Attributs injectes:
        uow_factory: Fabrique d'unites de travail (une par groupe)
    """

    def __init__(self, uow_factory: Callable[[], ICollectionUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def reconcile(self, rows: Iterable[ImportRow]) -> list[GroupOutcome]:
        """
        Traite tous les groupes et retourne une issue par groupe.

        Un echec de groupe est rapporte dans son GroupOutcome et n'interrompt
        pas le traitement. Seule une base indisponible arrete tout.

        Raises:
            DatastoreUnavailableError: Base indisponible (les groupes deja
                valides restent valides)
        """
        outcomes = []
        for name, group in group_rows(rows).items():
            try:
                outcome = self._reconcile_group(name, group)
            except GroupReconciliationError as e:
                logger.bind(operation="import", group=name).warning(
                    f"Groupe annule : {e.group_name} ({e.cause})"
                )
                outcome = GroupOutcome(name=name, row_count=len(group), error=str(e.cause))
            outcomes.append(outcome)
        return outcomes

    def _reconcile_group(self, name: str, rows: list[ImportRow]) -> GroupOutcome:
        """
        Traite un groupe dans une transaction unique.

        Raises:
            GroupReconciliationError: Toute erreur d'ecriture (transaction annulee)
            DatastoreUnavailableError: Base indisponible
        """
        outcome = GroupOutcome(name=name, row_count=len(rows))
        try:
            with self._uow_factory() as uow:
                item = uow.physical_items.get_by_name(name)
                if item is None:
                    first = rows[0]
                    item = uow.physical_items.add(
                        PhysicalItem(
                            name=name,
                            edition_notes=first.edition_notes,
                            purchase_date=first.purchase_date,
                            store_links_json=first.store_links,
                            custom_image_url=first.custom_image_url,
                        )
                    )
                    outcome.created_item = True

                running: set[Format] = set()
                if not outcome.created_item:
                    for existing_link in uow.links.list_for_item(item.id):
                        running.update(existing_link.formats)

                for row in rows:
                    media_id = self._resolve_media(uow, row, outcome)
                    link = uow.links.add(
                        MediaLink(
                            physical_item_id=item.id,
                            media_id=media_id,
                            formats=row.formats,
                            disc_number=row.disc_number,
                        )
                    )
                    running.update(link.formats)

                uow.physical_items.set_format_set(item.id, aggregate_formats([running]))
                uow.commit()
        except (DatastoreUnavailableError, OperationalError) as e:
            logger.bind(operation="import", group=name).error(
                f"Base de donnees indisponible pendant le groupe {name}"
            )
            if isinstance(e, DatastoreUnavailableError):
                raise
            raise DatastoreUnavailableError(str(e)) from e
        except Exception as e:
            raise GroupReconciliationError(name, e) from e

        outcome.physical_item_id = item.id
        logger.bind(operation="import", group=name).debug(
            f"Groupe valide : {name} ({len(rows)} ligne(s), "
            f"{outcome.created_media} media(s) cree(s), {outcome.reused_media} reutilise(s))"
        )
        return outcome

    @staticmethod
    def _resolve_media(uow: ICollectionUnitOfWork, row: ImportRow, outcome: GroupOutcome) -> int:
        """Retourne l'ID du media existant (par external_id) ou d'un media cree."""
        if row.external_id is not None:
            existing = uow.media.get_by_external_id(row.external_id)
            if existing is not None:
                outcome.reused_media += 1
                return existing.id

        media = uow.media.add(
            Media(
                title=row.title,
                external_id=row.external_id,
                synopsis=row.synopsis,
                cover_art_url=row.cover_art_url,
                release_date=row.release_date,
                director=row.director,
                cast_json=row.cast,
            )
        )
        outcome.created_media += 1
        return media.id
