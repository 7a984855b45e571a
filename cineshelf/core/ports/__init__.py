"""
Ports (interfaces abstraites) definissant les contrats pour les adaptateurs.

Ports repository : Contrats de persistance des donnees
- IPhysicalItemRepository : Stockage des articles physiques et de leurs formats
- IMediaRepository : Stockage des fiches media
- IMediaLinkRepository : Stockage des liens article <-> media
- ICollectionUnitOfWork : Frontiere transactionnelle regroupant les trois
"""

from cineshelf.core.ports.repositories import (
    ExportRecord,
    ICollectionUnitOfWork,
    IMediaLinkRepository,
    IMediaRepository,
    IPhysicalItemRepository,
)

__all__ = [
    "ExportRecord",
    "ICollectionUnitOfWork",
    "IMediaLinkRepository",
    "IMediaRepository",
    "IPhysicalItemRepository",
]
