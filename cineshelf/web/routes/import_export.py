"""
Routes d'import/export CSV de la collection.

Le schema est public ; export, validation et import exigent le mot de passe
administrateur. Les erreurs de structure CSV sont traduites en 400 par
l'application.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from ...container import Container
from ...services.collection import ImportMode
from ..deps import get_container, require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/import-export", tags=["import-export"])


class CSVPayload(BaseModel):
    """Corps des requetes de validation et d'import."""

    csv_data: Optional[str] = None
    mode: Optional[str] = None


def _bad_request(error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, "details": details})


def _missing_csv() -> JSONResponse:
    return _bad_request(
        "Donnees CSV obligatoires",
        "Le corps de la requete doit contenir le champ csv_data (contenu CSV en texte)",
    )


@router.get("/schema")
async def get_schema(container: Container = Depends(get_container)):
    """Documentation du format CSV d'import."""
    return container.import_export_service().schema()


@router.get("/export", dependencies=[Depends(require_admin)])
def export_collection(container: Container = Depends(get_container)):
    """Telecharge toute la collection en CSV."""
    content = container.import_export_service().export_csv()
    prefix = container.config().export_filename_prefix
    filename = f"{prefix}-{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/validate", dependencies=[Depends(require_admin)])
def validate_csv(payload: CSVPayload, container: Container = Depends(get_container)):
    """Valide un CSV sans rien ecrire."""
    if not payload.csv_data:
        return _missing_csv()

    result = container.import_export_service().validate(payload.csv_data)
    return result.to_dict()


@router.post("/import", dependencies=[Depends(require_admin)])
def import_csv(payload: CSVPayload, container: Container = Depends(get_container)):
    """Importe un CSV (mode add par defaut, ou replace)."""
    if not payload.csv_data:
        return _missing_csv()

    try:
        mode = ImportMode(payload.mode or ImportMode.ADD.value)
    except ValueError:
        return _bad_request(
            "Mode d'import invalide",
            'Le mode doit valoir "add" ou "replace"',
        )

    result = container.import_export_service().import_csv(payload.csv_data, mode)
    if result.failed:
        logger.warning("Import CSV partiel : %d echec(s)", result.failed)
    return {"message": result.message, **result.to_dict()}
