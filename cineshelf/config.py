"""
Configuration de l'application via pydantic-settings.

La configuration est chargee depuis les variables d'environnement avec le prefixe CINESHELF_,
et peut optionnellement etre fournie via un fichier .env.

Le mot de passe administrateur est optionnel : sans lui, les routes protegees
de l'API refusent toutes les requetes.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env a la racine du projet (parent de cineshelf/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Parametres de l'application avec support des variables d'environnement.

    Tous les parametres peuvent etre surcharges via des variables d'environnement
    avec le prefixe CINESHELF_.
    Exemple : CINESHELF_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="CINESHELF_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de donnees
    database_url: str = Field(default="sqlite:///data/cineshelf.db")

    # Authentification de l'API (Authorization: Bearer <mot de passe>)
    admin_password: Optional[str] = Field(default=None)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de retention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/cineshelf.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    # Import / export
    export_filename_prefix: str = Field(default="cineshelf-export")

    # Listing des articles physiques
    default_sort_by: str = Field(default="created_at")
    default_sort_order: str = Field(default="desc")
    items_per_page: int = Field(default=24, ge=1, le=200)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Etend ~ vers le repertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("default_sort_order")
    @classmethod
    def check_sort_order(cls, v: str) -> str:
        if v not in ("asc", "desc"):
            raise ValueError("default_sort_order doit valoir 'asc' ou 'desc'")
        return v

    @property
    def auth_enabled(self) -> bool:
        """Verifie si un mot de passe administrateur est configure."""
        return bool(self.admin_password)
