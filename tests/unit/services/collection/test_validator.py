"""
Tests unitaires pour RowValidator.

Tests couvrant:
- validate_strict: construction de l'ImportRow, premiere erreur levee
- validate_dry_run: accumulation des erreurs et avertissements
- coherence: toute ligne refusee en strict porte une erreur en simulation
"""

import pytest

from cineshelf.core.exceptions import RowValidationError
from cineshelf.core.value_objects.formats import Format
from cineshelf.services.collection.validator import RowValidator, parse_int


@pytest.fixture
def validator() -> RowValidator:
    return RowValidator()


def _row(**values) -> dict[str, str]:
    base = {"title": "Heat", "physical_item_name": "Heat DVD", "formats": '["DVD"]'}
    base.update(values)
    return {key: value for key, value in base.items() if value is not None}


# ============================================================================
# validate_strict
# ============================================================================


class TestValidateStrict:
    """Tests pour le mode import."""

    def test_minimal_row(self, validator):
        row = validator.validate_strict(_row(), row_number=2)
        assert row.row_number == 2
        assert row.title == "Heat"
        assert row.physical_item_name == "Heat DVD"
        assert row.formats == (Format.DVD,)
        assert row.disc_number == 1
        assert row.external_id is None

    def test_all_fields(self, validator):
        row = validator.validate_strict(
            _row(
                formats='["Blu-ray", "4K UHD"]',
                external_id="949",
                disc_number="2",
                synopsis="Braquage",
                cover_art_url="https://img.example/heat.jpg",
                release_date="1995-12-15",
                director="Michael Mann",
                cast='["Al Pacino"]',
                edition_notes="Steelbook",
                purchase_date="2020-01-05",
                store_links='[{"label": "Boutique", "url": "https://shop.example"}]',
                custom_image_url="https://img.example/photo.jpg",
            ),
            row_number=7,
        )
        assert row.formats == (Format.BLU_RAY, Format.UHD_4K)
        assert row.external_id == 949
        assert row.disc_number == 2
        assert row.cast == '["Al Pacino"]'
        assert row.store_links == '[{"label": "Boutique", "url": "https://shop.example"}]'
        assert row.edition_notes == "Steelbook"

    def test_legacy_tmdb_id_column(self, validator):
        row = validator.validate_strict(_row(tmdb_id="603"), row_number=2)
        assert row.external_id == 603

    def test_external_id_takes_precedence_over_legacy(self, validator):
        row = validator.validate_strict(_row(external_id="1", tmdb_id="2"), row_number=2)
        assert row.external_id == 1

    @pytest.mark.parametrize(
        "values,message",
        [
            ({"title": None}, "Champ obligatoire manquant : title"),
            ({"physical_item_name": None}, "Champ obligatoire manquant : physical_item_name"),
            ({"formats": None}, "Champ obligatoire manquant : formats"),
            ({"formats": "DVD"}, "JSON invalide dans formats"),
            ({"formats": '"DVD"'}, "formats doit etre un tableau JSON"),
            ({"formats": '["Betamax"]'}, 'Format invalide : "Betamax"'),
            ({"formats": "[]"}, "Au moins un format est requis"),
        ],
    )
    def test_rejected_rows(self, validator, values, message):
        with pytest.raises(RowValidationError) as exc_info:
            validator.validate_strict(_row(**values), row_number=4)
        assert exc_info.value.row_number == 4
        assert message in exc_info.value.message

    def test_first_error_reported(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.validate_strict({"formats": "[]"}, row_number=2)
        assert exc_info.value.message == "Champ obligatoire manquant : title"

    def test_warnings_do_not_block(self, validator):
        """Valeurs douteuses conservees, sauf entiers non numeriques ignores."""
        row = validator.validate_strict(
            _row(
                release_date="1995",
                cast="Al Pacino",
                external_id="abc",
                disc_number="deux",
            ),
            row_number=2,
        )
        assert row.release_date == "1995"
        assert row.cast == "Al Pacino"
        assert row.external_id is None
        assert row.disc_number == 1


# ============================================================================
# validate_dry_run
# ============================================================================


class TestValidateDryRun:
    """Tests pour le mode simulation."""

    def test_valid_row(self, validator):
        check = validator.validate_dry_run(_row())
        assert check.errors == []
        assert check.warnings == []

    def test_all_errors_accumulated(self, validator):
        check = validator.validate_dry_run({"formats": '["Betamax", "VHS", "Laserdisc"]'})
        assert check.errors
        assert "Champ obligatoire manquant : title" in check.errors
        assert "Champ obligatoire manquant : physical_item_name" in check.errors
        assert len([e for e in check.errors if e.startswith("Format invalide")]) == 2

    def test_warnings(self, validator):
        check = validator.validate_dry_run(
            _row(
                release_date="15/12/1995",
                purchase_date="2020",
                cast="{",
                store_links='{"url": "x"}',
                external_id="tt0113277",
                disc_number="A",
            )
        )
        assert not check.errors
        assert check.warnings == [
            "external_id devrait etre un nombre, recu : tt0113277",
            "disc_number devrait etre un nombre, recu : A",
            "release_date devrait etre au format YYYY-MM-DD, recu : 15/12/1995",
            "purchase_date devrait etre au format YYYY-MM-DD, recu : 2020",
            "cast n'est pas un JSON valide",
            "store_links devrait etre un tableau JSON",
        ]

    @pytest.mark.parametrize(
        "values",
        [
            {"title": None},
            {"physical_item_name": None},
            {"formats": None},
            {"formats": "not json"},
            {"formats": "{}"},
            {"formats": '["dvd"]'},
            {"formats": "[]"},
            {"formats": "[1]"},
        ],
    )
    def test_strict_rejection_implies_dry_run_error(self, validator, values):
        """Une ligne refusee a l'import est toujours signalee par la validation."""
        with pytest.raises(RowValidationError):
            validator.validate_strict(_row(**values), row_number=2)
        assert validator.validate_dry_run(_row(**values)).errors


class TestParseInt:
    """Tests pour parse_int."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("603", 603),
            (" 12 ", 12),
            ("-1", -1),
            ("1.5", None),
            ("abc", None),
            (None, None),
            ("9223372036854775807", 2**63 - 1),
            ("-9223372036854775808", -(2**63)),
            ("9223372036854775808", None),
            ("-9223372036854775809", None),
            ("9" * 5000, None),
        ],
    )
    def test_parse_int(self, value, expected):
        assert parse_int(value) == expected


# ============================================================================
# Valeurs extremes
# ============================================================================

_DEEPLY_NESTED = "[" * 100000 + "]" * 100000
_TOO_BIG = "99999999999999999999999"


class TestExtremeValues:
    """JSON trop imbrique et entiers hors plage."""

    def test_deeply_nested_formats_rejected(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.validate_strict(_row(formats=_DEEPLY_NESTED), row_number=2)
        assert "JSON invalide dans formats" in exc_info.value.message
        assert "JSON invalide dans formats" in validator.validate_dry_run(_row(formats=_DEEPLY_NESTED)).errors[0]

    @pytest.mark.parametrize("column", ["cast", "store_links"])
    def test_deeply_nested_json_column_is_warning(self, validator, column):
        check = validator.validate_dry_run(_row(**{column: _DEEPLY_NESTED}))
        assert check.errors == []
        assert check.warnings == [f"{column} n'est pas un JSON valide"]

    def test_out_of_range_integers_are_warnings(self, validator):
        check = validator.validate_dry_run(_row(external_id=_TOO_BIG, disc_number=_TOO_BIG))
        assert check.errors == []
        assert check.warnings == [
            f"external_id devrait etre un nombre, recu : {_TOO_BIG}",
            f"disc_number devrait etre un nombre, recu : {_TOO_BIG}",
        ]

    def test_out_of_range_integers_dropped_on_import(self, validator):
        row = validator.validate_strict(_row(external_id=_TOO_BIG, disc_number=_TOO_BIG), row_number=2)
        assert row.external_id is None
        assert row.disc_number == 1
