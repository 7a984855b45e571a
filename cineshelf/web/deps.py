"""
Dependances partagees de l'application web.

Fournit l'acces au Container DI et la verification du mot de passe
administrateur (Authorization: Bearer <mot de passe>).
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from ..container import Container


def get_container(request: Request) -> Container:
    """Container DI initialise au demarrage de l'application."""
    return request.app.state.container


def require_admin(
    authorization: Optional[str] = Header(default=None),
    container: Container = Depends(get_container),
) -> None:
    """
    Refuse la requete si le mot de passe administrateur est absent ou faux.

    Sans mot de passe configure, toute requete protegee est refusee.
    """
    password = container.config().admin_password
    scheme, _, token = (authorization or "").partition(" ")
    if (
        not password
        or scheme.lower() != "bearer"
        or not secrets.compare_digest(token.strip().encode("utf-8"), password.encode("utf-8"))
    ):
        raise HTTPException(
            status_code=401,
            detail="Authentification requise",
            headers={"WWW-Authenticate": "Bearer"},
        )
