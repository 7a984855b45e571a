"""
Dataclasses pour l'import/export de la collection.

Contient les types transitoires de l'import (ImportRow), les rapports
(ImportResult, ValidationResult) et l'issue d'un groupe (GroupOutcome).
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from cineshelf.core.value_objects.formats import Format


class ImportMode(str, Enum):
    """Mode d'import : ajout a la collection ou remplacement."""

    ADD = "add"
    REPLACE = "replace"


@dataclass(frozen=True)
class ImportRow:
    """
    Ligne d'import validee.

    Champs obligatoires : title, physical_item_name, formats.
    cast et store_links conservent le texte fourni (JSON attendu, non impose).
    """

    row_number: int
    title: str
    physical_item_name: str
    formats: tuple[Format, ...]
    external_id: Optional[int] = None
    synopsis: Optional[str] = None
    cover_art_url: Optional[str] = None
    release_date: Optional[str] = None
    director: Optional[str] = None
    cast: Optional[str] = None
    disc_number: int = 1
    edition_notes: Optional[str] = None
    purchase_date: Optional[str] = None
    store_links: Optional[str] = None
    custom_image_url: Optional[str] = None


@dataclass
class RowCheck:
    """Erreurs et avertissements accumules sur une ligne (mode simulation)."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ImportIssue:
    """
    Erreur rapportee par l'import.

    Une erreur de ligne porte row (1-based), une erreur de groupe porte group
    (le nom de l'article physique).
    """

    error: str
    data: str
    row: Optional[int] = None
    group: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"error": self.error, "data": self.data}
        if self.group is not None:
            result["group"] = self.group
        else:
            result["row"] = self.row
        return result


@dataclass
class GroupOutcome:
    """Issue du traitement d'un groupe (un article physique)."""

    name: str
    row_count: int
    physical_item_id: Optional[int] = None
    created_item: bool = False
    created_media: int = 0
    reused_media: int = 0
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ImportResult:
    """
    Rapport d'import.

    Attributs :
        total : Lignes acceptees par la validation stricte
        successful : Groupes (articles physiques) valides en base
        failed : Lignes refusees + groupes annules
        errors : Detail des refus et annulations
    """

    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: list[ImportIssue] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Import terminé : {self.successful} article(s) physique(s) importé(s)."

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [issue.to_dict() for issue in self.errors],
        }


@dataclass
class ValidationResult:
    """Rapport de validation (aucune ecriture en base)."""

    valid: bool = True
    total_rows: int = 0
    warnings: list[dict[str, Any]] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
