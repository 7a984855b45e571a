"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Chaque service recoit une fabrique d'unites de travail : une transaction par
groupe d'import ou par operation manuelle.
"""

from dependency_injector import containers, providers

from .adapters.csv.codec import CSVCodec
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db, make_session_factory
from .infrastructure.persistence.repositories import SQLModelUnitOfWork
from .services.collection import (
    ExportSerializer,
    ImportExportService,
    ReconciliationEngine,
    RowValidator,
)
from .services.physical_items import PhysicalItemService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        service = container.import_export_service()
        result = service.import_csv(text)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Moteur SQLAlchemy partage
    db_engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )

    # Database - Resource pour initialisation unique du schema
    database = providers.Resource(init_db, engine=db_engine)

    session_factory = providers.Singleton(make_session_factory, engine=db_engine)

    # Unite de travail - nouvelle session a chaque appel
    unit_of_work = providers.Factory(SQLModelUnitOfWork, session_factory=session_factory)

    # Adapters et regles (stateless - Singletons)
    csv_codec = providers.Singleton(CSVCodec)
    row_validator = providers.Singleton(RowValidator)

    # Services - Factory, la fabrique d'unites de travail est passee telle quelle
    reconciliation_engine = providers.Factory(
        ReconciliationEngine,
        uow_factory=unit_of_work.provider,
    )
    export_serializer = providers.Factory(
        ExportSerializer,
        uow_factory=unit_of_work.provider,
        codec=csv_codec,
    )
    import_export_service = providers.Factory(
        ImportExportService,
        codec=csv_codec,
        validator=row_validator,
        engine=reconciliation_engine,
        exporter=export_serializer,
        uow_factory=unit_of_work.provider,
    )
    physical_item_service = providers.Factory(
        PhysicalItemService,
        uow_factory=unit_of_work.provider,
    )
