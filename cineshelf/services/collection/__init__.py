"""
Import/export CSV de la collection.

Composants :
- RowValidator : validation stricte (import) et simulation (validation seule)
- ReconciliationEngine : regroupement par article physique, ecriture transactionnelle
- ExportSerializer : une ligne CSV par lien article/media
- ImportExportService : modes add/replace et rapports
"""

from cineshelf.services.collection.dataclasses import (
    GroupOutcome,
    ImportIssue,
    ImportMode,
    ImportResult,
    ImportRow,
    RowCheck,
    ValidationResult,
)
from cineshelf.services.collection.exporter import EXPORT_COLUMNS, ExportSerializer
from cineshelf.services.collection.import_export_service import ImportExportService
from cineshelf.services.collection.reconciliation import ReconciliationEngine, group_rows
from cineshelf.services.collection.schema import IMPORT_SCHEMA
from cineshelf.services.collection.validator import RowValidator

__all__ = [
    "EXPORT_COLUMNS",
    "ExportSerializer",
    "GroupOutcome",
    "IMPORT_SCHEMA",
    "ImportExportService",
    "ImportIssue",
    "ImportMode",
    "ImportResult",
    "ImportRow",
    "ReconciliationEngine",
    "RowCheck",
    "RowValidator",
    "ValidationResult",
    "group_rows",
]
