"""
Cineshelf - Gestion d'une collection personnelle de supports physiques.

Ce package fournit le moteur d'import/export CSV de la collection :
lecture des lignes, validation, regroupement par article physique,
deduplication des medias et export re-importable.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (cas d'utilisation, orchestration)
- adapters/ : Couche infrastructure (CLI, CSV)
- infrastructure/ : Persistance SQLModel
- web/ : API HTTP FastAPI
"""

__version__ = "0.1.0"
