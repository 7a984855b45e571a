"""
Implementations SQLModel des repositories.

Ce module contient les implementations concretes des interfaces repository
definies dans cineshelf/core/ports/repositories.py.

Chaque repository :
- Herite de l'interface ABC correspondante du domaine
- Recoit une session SQLModel de l'unite de travail
- Convertit entre entites de domaine (dataclass) et modeles DB (SQLModel)
- Ne valide jamais la transaction (flush uniquement)
"""

from cineshelf.infrastructure.persistence.repositories.media_link_repository import (
    SQLModelMediaLinkRepository,
)
from cineshelf.infrastructure.persistence.repositories.media_repository import (
    SQLModelMediaRepository,
)
from cineshelf.infrastructure.persistence.repositories.physical_item_repository import (
    SQLModelPhysicalItemRepository,
)
from cineshelf.infrastructure.persistence.repositories.unit_of_work import SQLModelUnitOfWork

__all__ = [
    "SQLModelPhysicalItemRepository",
    "SQLModelMediaRepository",
    "SQLModelMediaLinkRepository",
    "SQLModelUnitOfWork",
]
