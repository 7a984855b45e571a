"""
Module de persistance SQLModel pour Cineshelf.

Ce module fournit l'infrastructure de stockage utilisant SQLModel (SQLAlchemy).
Il contient :

- database.py : Creation de l'engine, fabrique de sessions, initialisation
- models.py : Modeles SQLModel representant les tables de la base de donnees
- repositories/ : Implementations des ports et unite de travail transactionnelle

Les modeles ici sont des adapters de persistance, distincts des entites de domaine
(dataclass dans core/entities/). La conversion entre les deux se fait dans les
repositories.

Usage:
    from cineshelf.infrastructure.persistence import create_db_engine, init_db

    engine = init_db(create_db_engine("sqlite:///data/cineshelf.db"))
"""

from cineshelf.infrastructure.persistence.database import (
    create_db_engine,
    init_db,
    make_session_factory,
)

__all__ = [
    "create_db_engine",
    "init_db",
    "make_session_factory",
]
