"""Fixtures partagees pour les tests de l'API."""

import pytest
from fastapi.testclient import TestClient

from cineshelf.web.app import create_app


@pytest.fixture
def client(container):
    """Client HTTP sur une application branchee sur le container de test."""
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings) -> dict[str, str]:
    return {"Authorization": f"Bearer {settings.admin_password}"}
