"""
Service d'import/export de la collection.

Orchestre les modes d'import ("add" / "replace"), la validation seule et
l'export, et construit les rapports retournes a l'appelant.

Flux d'import :
    texte CSV -> CSVCodec -> RowValidator (strict) -> ReconciliationEngine -> base
Flux de validation :
    texte CSV -> CSVCodec -> RowValidator (simulation), aucune ecriture
"""

from typing import Any, Callable

from loguru import logger
from sqlalchemy.exc import OperationalError

from cineshelf.adapters.csv.codec import CSVCodec
from cineshelf.core.exceptions import DatastoreUnavailableError, RowValidationError
from cineshelf.core.ports.repositories import ICollectionUnitOfWork
from cineshelf.services.collection.dataclasses import (
    ImportIssue,
    ImportMode,
    ImportResult,
    ImportRow,
    ValidationResult,
)
from cineshelf.services.collection.exporter import ExportSerializer
from cineshelf.services.collection.reconciliation import ReconciliationEngine
from cineshelf.services.collection.schema import IMPORT_SCHEMA
from cineshelf.services.collection.validator import RowValidator


class ImportExportService:
    """
    Service d'import/export CSV de la collection.

    Attributs injectes:
        codec: Codec CSV
        validator: Validateur de lignes
        engine: Moteur de reconciliation (ecriture par groupe)
        exporter: Serialiseur d'export
        uow_factory: Fabrique d'unites de travail (purge du mode replace)
    """

    def __init__(
        self,
        codec: CSVCodec,
        validator: RowValidator,
        engine: ReconciliationEngine,
        exporter: ExportSerializer,
        uow_factory: Callable[[], ICollectionUnitOfWork],
    ) -> None:
        self._codec = codec
        self._validator = validator
        self._engine = engine
        self._exporter = exporter
        self._uow_factory = uow_factory

    def schema(self) -> dict[str, Any]:
        """Documentation statique du format CSV."""
        return IMPORT_SCHEMA

    def validate(self, csv_text: str) -> ValidationResult:
        """
        Valide un CSV sans rien ecrire.

        Signale toute condition qui ferait refuser une ligne a l'import :
        valid == True annonce un import sans ligne refusee.

        Raises:
            CSVParseError: En-tete ou structure inexploitable
        """
        table = self._codec.read_table(csv_text)
        result = ValidationResult(total_rows=len(table.records))

        for record in table.records:
            check = self._validator.validate_dry_run(record.values)
            for error in check.errors:
                result.errors.append({"row": record.row_number, "error": error})
            for warning in check.warnings:
                result.warnings.append({"row": record.row_number, "warning": warning})

        result.valid = not result.errors
        logger.bind(operation="validate").info(
            f"Validation CSV : {result.total_rows} ligne(s), "
            f"{len(result.errors)} erreur(s), {len(result.warnings)} avertissement(s)"
        )
        return result

    def import_csv(self, csv_text: str, mode: ImportMode = ImportMode.ADD) -> ImportResult:
        """
        Importe un CSV dans la collection.

        Les lignes refusees sont rapportees avec leur numero et exclues ;
        chaque groupe (article physique) est ecrit atomiquement. successful
        compte les groupes valides, failed les lignes refusees et les groupes
        annules.

        Raises:
            CSVParseError: En-tete ou structure inexploitable (rien n'est ecrit)
            DatastoreUnavailableError: Base indisponible (les groupes deja
                valides le restent)
        """
        mode = ImportMode(mode)
        log = logger.bind(operation="import", mode=mode.value)
        table = self._codec.read_table(csv_text)

        result = ImportResult()
        rows: list[ImportRow] = []
        for record in table.records:
            try:
                rows.append(self._validator.validate_strict(record.values, record.row_number))
            except RowValidationError as e:
                log.warning(f"Ligne {e.row_number} refusee : {e.message}")
                result.failed += 1
                result.errors.append(ImportIssue(row=e.row_number, error=e.message, data=record.raw))
        result.total = len(rows)

        # La purge n'intervient qu'une fois toutes les lignes examinees
        if mode is ImportMode.REPLACE:
            self._clear_collection()

        for outcome in self._engine.reconcile(rows):
            if outcome.succeeded:
                result.successful += 1
            else:
                result.failed += 1
                result.errors.append(
                    ImportIssue(
                        group=outcome.name,
                        error=outcome.error,
                        data=f"Article physique : {outcome.name}",
                    )
                )

        log.info(
            f"Import CSV ({mode.value}) : {result.total} ligne(s) acceptee(s), "
            f"{result.successful} article(s) importe(s), {result.failed} echec(s)"
        )
        return result

    def _clear_collection(self) -> None:
        """Supprime tous les articles et liens en une transaction (les medias sont conserves)."""
        try:
            with self._uow_factory() as uow:
                deleted = uow.physical_items.delete_all()
                uow.commit()
        except OperationalError as e:
            raise DatastoreUnavailableError(str(e)) from e
        logger.bind(operation="import", mode="replace").info(
            f"Mode replace : {deleted} article(s) physique(s) supprime(s)"
        )

    def export_csv(self) -> str:
        """
        Exporte toute la collection en CSV.

        Raises:
            DatastoreUnavailableError: Base indisponible
        """
        try:
            return self._exporter.export_csv()
        except OperationalError as e:
            raise DatastoreUnavailableError(str(e)) from e
