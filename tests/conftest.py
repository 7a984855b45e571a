"""
Fixtures pytest partagees pour les tests Cineshelf.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test (base SQLite en memoire, mot de passe admin)
- Container DI branche sur ces settings, tables creees
- Services d'import/export et des articles physiques
"""

from pathlib import Path

import pytest
from dependency_injector import providers
from sqlalchemy import func
from sqlmodel import Session, select

from cineshelf.config import Settings
from cineshelf.container import Container


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings de test : base en memoire, logs dans un repertoire temporaire."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        admin_password="secret",
        log_file=tmp_path / "logs" / "cineshelf.log",
    )


@pytest.fixture
def container(settings: Settings):
    """
    Container DI avec une base en memoire neuve.

    Chaque test obtient son propre engine (StaticPool), donc sa propre base.
    """
    container = Container()
    container.config.override(providers.Object(settings))
    container.database.init()
    yield container
    container.shutdown_resources()
    container.config.reset_override()


@pytest.fixture
def uow_factory(container):
    """Fabrique d'unites de travail sur la base de test."""
    return container.unit_of_work


@pytest.fixture
def import_export_service(container):
    return container.import_export_service()


@pytest.fixture
def physical_item_service(container):
    return container.physical_item_service()


@pytest.fixture
def count_rows(container):
    """Compte les lignes des tables principales : count_rows(PhysicalItemModel)."""
    def _count(model) -> int:
        with Session(container.db_engine()) as session:
            return session.exec(select(func.count()).select_from(model)).one()

    return _count

