"""
Configuration de la base de donnees pour Cineshelf.

Ce module fournit :
- Engine SQLAlchemy (SQLite par defaut) avec cles etrangeres activees
- Fabrique de sessions pour les unites de travail
- Fonction d'initialisation des tables

La base de donnees est configuree via CINESHELF_DATABASE_URL (defaut: sqlite:///data/cineshelf.db).
"""

from functools import partial
from pathlib import Path
from typing import Callable

from sqlalchemy import Engine, event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def create_db_engine(database_url: str) -> Engine:
    """
    Cree l'engine SQLAlchemy a partir de l'URL configuree.

    Pour un fichier SQLite, le repertoire parent est cree si necessaire.
    Une base SQLite en memoire partage une connexion unique (StaticPool)
    afin que toutes les sessions voient les memes tables.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False)

    if database_url in _MEMORY_URLS:
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_path = Path(database_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_db(engine: Engine) -> Engine:
    """
    Initialise la base de donnees en creant toutes les tables.

    Les modeles sont importes ici pour enregistrer leurs metadonnees
    dans SQLModel.metadata sans import circulaire.
    Doit etre appelee une fois au demarrage de l'application.
    """
    from cineshelf.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> Callable[[], Session]:
    """
    Retourne une fabrique de sessions SQLModel liees a l'engine.

    expire_on_commit=False : les entites restent lisibles apres le commit
    d'un groupe, pour le rapport d'import.
    """
    return partial(Session, engine, expire_on_commit=False)
