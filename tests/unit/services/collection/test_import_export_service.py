"""
Tests unitaires pour ImportExportService (modes add/replace, rapports).

Tests couvrant:
- scenario du coffret BTTF
- lignes refusees et rapport d'erreurs
- idempotence de la deduplication en mode add
- purge du mode replace (medias conserves)
- coherence validation / import
- erreurs de structure et base indisponible
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from cineshelf.core.exceptions import CSVParseError, DatastoreUnavailableError
from cineshelf.infrastructure.persistence.models import (
    MediaLinkModel,
    MediaModel,
    PhysicalItemModel,
)
from cineshelf.services.collection import ImportMode, IMPORT_SCHEMA
from tests.fixtures.csv_samples import (
    BTTF_CSV,
    INVALID_ROWS_CSV,
    MATRIX_CSV,
    WARNINGS_CSV,
)


# ============================================================================
# import_csv
# ============================================================================


class TestImportAdd:
    """Tests pour l'import en mode add."""

    def test_bttf_scenario(self, import_export_service, uow_factory, count_rows):
        result = import_export_service.import_csv(BTTF_CSV)

        assert result.to_dict() == {"total": 2, "successful": 1, "failed": 0, "errors": []}
        assert result.message == "Import terminé : 1 article(s) physique(s) importé(s)."
        assert count_rows(PhysicalItemModel) == 1
        assert count_rows(MediaModel) == 2
        with uow_factory() as uow:
            item = uow.physical_items.get_by_name("BTTF Trilogy")
            assert [fmt.value for fmt in item.format_set] == ["Blu-ray"]
            assert uow.media.get_by_external_id(105).title == "Back to the Future"
            assert uow.media.get_by_external_id(165).title == "Back to the Future Part II"
            assert [link.disc_number for link in uow.links.list_for_item(item.id)] == [1, 2]

    def test_rejected_rows_reported(self, import_export_service, count_rows):
        result = import_export_service.import_csv(INVALID_ROWS_CSV)

        assert result.total == 1
        assert result.successful == 1
        assert result.failed == 2
        assert [issue.row for issue in result.errors] == [3, 4]
        assert result.errors[0].error == "Champ obligatoire manquant : title"
        assert result.errors[0].data == ',Sans titre,"[""DVD""]"'
        assert 'Format invalide : "Betamax"' in result.errors[1].error
        assert count_rows(PhysicalItemModel) == 1

    def test_error_dict_shapes(self, import_export_service):
        errors = import_export_service.import_csv(INVALID_ROWS_CSV).to_dict()["errors"]
        assert set(errors[0]) == {"row", "error", "data"}

    def test_reimport_reuses_media(self, import_export_service, count_rows):
        """Re-importer le meme CSV : aucun nouveau media, articles completes."""
        import_export_service.import_csv(MATRIX_CSV)
        assert count_rows(MediaModel) == 2

        result = import_export_service.import_csv(MATRIX_CSV)

        assert result.failed == 0
        assert count_rows(MediaModel) == 2
        assert count_rows(PhysicalItemModel) == 3
        assert count_rows(MediaLinkModel) == 6

    def test_warnings_do_not_block_import(self, import_export_service, uow_factory):
        result = import_export_service.import_csv(WARNINGS_CSV)

        assert result.failed == 0
        with uow_factory() as uow:
            item = uow.physical_items.get_by_name("Vertigo BD")
            media_id = uow.links.list_for_item(item.id)[0].media_id
            media = uow.media.get_by_id(media_id)
        assert media.release_date == "1958"
        assert media.cast_json == "pas du json"
        assert media.external_id is None

    def test_group_failure_reported_by_name(self, import_export_service, monkeypatch):
        from cineshelf.infrastructure.persistence.repositories import media_link_repository

        original_add = media_link_repository.SQLModelMediaLinkRepository.add

        def failing_add(self, link):
            if link.disc_number == 9:
                raise RuntimeError("ecriture impossible")
            return original_add(self, link)

        monkeypatch.setattr(media_link_repository.SQLModelMediaLinkRepository, "add", failing_add)
        csv_text = (
            "title,physical_item_name,formats,disc_number\n"
            'A,Coffret,"[""DVD""]",1\n'
            'B,Coffret,"[""DVD""]",9\n'
            'C,Seul,"[""DVD""]",1\n'
        )

        result = import_export_service.import_csv(csv_text)

        assert result.total == 3
        assert result.successful == 1
        assert result.failed == 1
        issue = result.errors[0].to_dict()
        assert issue == {
            "group": "Coffret",
            "error": "ecriture impossible",
            "data": "Article physique : Coffret",
        }


class TestImportReplace:
    """Tests pour l'import en mode replace."""

    def test_replace_wipes_items_and_keeps_media(self, import_export_service, uow_factory, count_rows):
        import_export_service.import_csv(MATRIX_CSV)

        result = import_export_service.import_csv(BTTF_CSV, ImportMode.REPLACE)

        assert result.successful == 1
        assert count_rows(PhysicalItemModel) == 1
        assert count_rows(MediaLinkModel) == 2
        # Les medias de l'ancienne collection restent en base
        assert count_rows(MediaModel) == 4
        with uow_factory() as uow:
            assert uow.physical_items.get_by_name("Matrix Steelbook") is None

    def test_mode_accepts_string(self, import_export_service, count_rows):
        import_export_service.import_csv(MATRIX_CSV)
        import_export_service.import_csv(BTTF_CSV, "replace")
        assert count_rows(PhysicalItemModel) == 1

    def test_unknown_mode(self, import_export_service):
        with pytest.raises(ValueError):
            import_export_service.import_csv(BTTF_CSV, "merge")

    def test_parse_error_does_not_wipe(self, import_export_service, count_rows):
        import_export_service.import_csv(MATRIX_CSV)
        with pytest.raises(CSVParseError):
            import_export_service.import_csv("title,formats\nA,[]", ImportMode.REPLACE)
        assert count_rows(PhysicalItemModel) == 3

    def test_row_processing_crash_does_not_wipe(self, container, count_rows):
        container.import_export_service().import_csv(MATRIX_CSV)
        validator = MagicMock()
        validator.validate_strict.side_effect = RuntimeError("boom")
        service = container.import_export_service(validator=validator)

        with pytest.raises(RuntimeError):
            service.import_csv(BTTF_CSV, ImportMode.REPLACE)

        assert count_rows(PhysicalItemModel) == 3

    def test_deeply_nested_formats_rejected_not_raised(self, import_export_service, count_rows):
        import_export_service.import_csv(MATRIX_CSV)
        nested = "[" * 100000 + "]" * 100000
        csv_text = BTTF_CSV.replace("\n", f"\nA,B,{nested},,\n", 1)

        result = import_export_service.import_csv(csv_text, ImportMode.REPLACE)

        assert result.failed == 1
        assert result.errors[0].row == 2
        assert result.successful == 1
        assert count_rows(PhysicalItemModel) == 1


# ============================================================================
# validate
# ============================================================================


class TestValidate:
    """Tests pour la validation seule."""

    def test_valid_csv(self, import_export_service, count_rows):
        result = import_export_service.validate(BTTF_CSV)

        assert result.to_dict() == {"valid": True, "total_rows": 2, "warnings": [], "errors": []}
        assert count_rows(PhysicalItemModel) == 0

    def test_invalid_rows(self, import_export_service):
        result = import_export_service.validate(INVALID_ROWS_CSV)

        assert not result.valid
        assert result.total_rows == 3
        assert [e["row"] for e in result.errors] == [3, 4]

    def test_warnings_keep_csv_valid(self, import_export_service):
        result = import_export_service.validate(WARNINGS_CSV)

        assert result.valid
        assert {w["row"] for w in result.warnings} == {2}
        assert len(result.warnings) == 3

    @pytest.mark.parametrize("csv_text", [BTTF_CSV, MATRIX_CSV, WARNINGS_CSV])
    def test_valid_implies_no_failed_import(self, import_export_service, csv_text):
        assert import_export_service.validate(csv_text).valid
        assert import_export_service.import_csv(csv_text).failed == 0

    def test_oversized_integers_warned_and_imported(self, import_export_service, uow_factory):
        csv_text = (
            "title,physical_item_name,formats,external_id,disc_number\n"
            'Big,Big BD,"[""Blu-ray""]",99999999999999999999999,99999999999999999999999\n'
        )

        validation = import_export_service.validate(csv_text)
        result = import_export_service.import_csv(csv_text)

        assert validation.valid
        assert len(validation.warnings) == 2
        assert result.failed == 0
        with uow_factory() as uow:
            item = uow.physical_items.get_by_name("Big BD")
            link = uow.links.list_for_item(item.id)[0]
            assert link.disc_number == 1
            assert uow.media.get_by_id(link.media_id).external_id is None

    def test_missing_columns(self, import_export_service):
        with pytest.raises(CSVParseError) as exc_info:
            import_export_service.validate("title\nHeat")
        assert exc_info.value.message == "Colonnes obligatoires manquantes"


# ============================================================================
# schema / export / base indisponible
# ============================================================================


def test_schema(import_export_service):
    schema = import_export_service.schema()
    assert schema is IMPORT_SCHEMA
    formats_field = next(f for f in schema["fields"] if f["name"] == "formats")
    assert formats_field["required"] is True
    assert "Blu-ray" in formats_field["allowed_values"]


def test_replace_with_datastore_down(container):
    uow = MagicMock()
    uow.__enter__.return_value = uow
    uow.physical_items.delete_all.side_effect = OperationalError("DELETE", {}, Exception("locked"))
    service = container.import_export_service(uow_factory=lambda: uow)

    with pytest.raises(DatastoreUnavailableError):
        service.import_csv(BTTF_CSV, ImportMode.REPLACE)


def test_export_with_datastore_down(container):
    exporter = MagicMock()
    exporter.export_csv.side_effect = OperationalError("SELECT", {}, Exception("no such file"))
    service = container.import_export_service(exporter=exporter)

    with pytest.raises(DatastoreUnavailableError):
        service.export_csv()
