"""
Entites metier de la collection.

Exports:
- PhysicalItem: Support physique possede (boitier, coffret, disque)
- Media: Fiche film partagee entre plusieurs supports
- MediaLink: Association support <-> media avec formats et numero de disque
- StoreLink: Lien marchand d'un support
"""

from cineshelf.core.entities.collection import Media, MediaLink, PhysicalItem, StoreLink

__all__ = [
    "PhysicalItem",
    "Media",
    "MediaLink",
    "StoreLink",
]
