"""
Application FastAPI de Cineshelf.

Initialise l'application web avec le Container DI, traduit les erreurs du
domaine en reponses JSON et monte les routes.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..container import Container
from ..logging_config import configure_logging
from ..core.exceptions import (
    CSVParseError,
    DatastoreUnavailableError,
    MediaLinkError,
    MediaLinkNotFoundError,
    MediaNotFoundError,
    PhysicalItemNotFoundError,
)
from .routes.import_export import router as import_export_router
from .routes.physical_items import router as physical_items_router


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def _csv_parse_error(request: Request, exc: CSVParseError) -> JSONResponse:
    return _error(400, exc.message, exc.details)


async def _datastore_unavailable(request: Request, exc: DatastoreUnavailableError) -> JSONResponse:
    return _error(500, "Base de donnees indisponible", str(exc))


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    return _error(404, str(exc))


async def _media_link_error(request: Request, exc: MediaLinkError) -> JSONResponse:
    return _error(400, str(exc))


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _error(400, "Requete invalide", details)


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Construit l'application.

    Args:
        container: Container deja configure (tests). Sinon un Container est
            cree au demarrage.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise le Container DI (et le logging s'il est cree ici) au demarrage."""
        if container is None:
            app.state.container = Container()
            settings = app.state.container.config()
            configure_logging(
                log_level=settings.log_level,
                log_file=settings.log_file,
                rotation_size=settings.log_rotation_size,
                retention_count=settings.log_retention_count,
            )
        else:
            app.state.container = container
        app.state.container.database.init()
        yield

    app = FastAPI(title="Cineshelf", version=__version__, lifespan=lifespan)

    app.add_exception_handler(CSVParseError, _csv_parse_error)
    app.add_exception_handler(DatastoreUnavailableError, _datastore_unavailable)
    app.add_exception_handler(PhysicalItemNotFoundError, _not_found)
    app.add_exception_handler(MediaNotFoundError, _not_found)
    app.add_exception_handler(MediaLinkNotFoundError, _not_found)
    app.add_exception_handler(MediaLinkError, _media_link_error)
    app.add_exception_handler(RequestValidationError, _invalid_request)

    app.include_router(import_export_router)
    app.include_router(physical_items_router)
    return app


app = create_app()
