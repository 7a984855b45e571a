"""
Unite de travail SQLModel.

Ouvre une session par unite de travail et expose les trois repositories
de la collection sur cette session. La transaction n'est validee que par
un appel explicite a commit() ; toute autre sortie du bloc l'annule.
"""

from typing import Callable, Optional

from loguru import logger
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from cineshelf.core.exceptions import DatastoreUnavailableError
from cineshelf.core.ports.repositories import ICollectionUnitOfWork
from cineshelf.infrastructure.persistence.repositories.media_link_repository import (
    SQLModelMediaLinkRepository,
)
from cineshelf.infrastructure.persistence.repositories.media_repository import (
    SQLModelMediaRepository,
)
from cineshelf.infrastructure.persistence.repositories.physical_item_repository import (
    SQLModelPhysicalItemRepository,
)


class SQLModelUnitOfWork(ICollectionUnitOfWork):
    """
    Unite de travail transactionnelle sur une session SQLModel.

    Utilisation :
        with SQLModelUnitOfWork(session_factory) as uow:
            uow.media.add(media)
            uow.commit()
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._session: Optional[Session] = None

    def __enter__(self) -> "SQLModelUnitOfWork":
        self._session = self._session_factory()
        self.physical_items = SQLModelPhysicalItemRepository(self._session)
        self.media = SQLModelMediaRepository(self._session)
        self.links = SQLModelMediaLinkRepository(self._session)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            self.rollback()
        finally:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        """Valide la transaction. Une base injoignable leve DatastoreUnavailableError."""
        try:
            self._session.commit()
        except OperationalError as e:
            logger.error("Base de donnees indisponible au commit", error=str(e))
            raise DatastoreUnavailableError(str(e)) from e

    def rollback(self) -> None:
        """Annule les ecritures non validees (sans effet apres un commit)."""
        if self._session is not None:
            self._session.rollback()
