"""
Exceptions du domaine Cineshelf.

Taxonomie des erreurs de l'import/export :
- CSVParseError : structure CSV inexploitable, la requete entiere est refusee
- RowValidationError : ligne refusee, exclue du regroupement, le lot continue
- GroupReconciliationError : echec d'ecriture d'un groupe, sa transaction est annulee
- DatastoreUnavailableError : base indisponible, le traitement s'arrete
"""

from typing import Optional


class CollectionError(Exception):
    """Erreur de base de la collection."""


class CSVParseError(CollectionError):
    """Le CSV ne peut pas etre traite (en-tete manquant, colonnes requises absentes...)."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class RowValidationError(CollectionError):
    """Une ligne d'import ne respecte pas le schema."""

    def __init__(self, row_number: int, message: str) -> None:
        super().__init__(f"Ligne {row_number} : {message}")
        self.row_number = row_number
        self.message = message


class GroupReconciliationError(CollectionError):
    """L'ecriture d'un groupe (article physique) a echoue et a ete annulee."""

    def __init__(self, group_name: str, cause: BaseException) -> None:
        super().__init__(f"{group_name} : {cause}")
        self.group_name = group_name
        self.cause = cause


class DatastoreUnavailableError(CollectionError):
    """La base de donnees est indisponible : aucun traitement supplementaire n'est tente."""


class PhysicalItemNotFoundError(CollectionError):
    """Article physique introuvable."""


class MediaNotFoundError(CollectionError):
    """Media introuvable."""


class MediaLinkError(CollectionError):
    """Operation sur un lien article/media refusee."""


class MediaLinkNotFoundError(CollectionError):
    """Aucun lien entre cet article et ce media."""
