"""
Validation des lignes d'import.

Un seul jeu de regles sert deux modes :
- strict (import) : la premiere erreur refuse la ligne (RowValidationError)
- simulation (validation seule) : erreurs et avertissements sont accumules

Les deux modes partagent check(), donc toute ligne refusee par le mode strict
porte au moins une erreur en simulation.

Regles :
- title, physical_item_name : obligatoires (erreur)
- formats : tableau JSON non vide de formats connus (erreur)
- external_id, disc_number : entiers si presents (avertissement)
- release_date, purchase_date : YYYY-MM-DD si presentes (avertissement)
- cast, store_links : tableaux JSON si presents (avertissement, valeur conservee)
"""

import json
import re
from typing import Any, Mapping, Optional

from cineshelf.core.exceptions import RowValidationError
from cineshelf.core.value_objects.formats import Format
from cineshelf.services.collection.dataclasses import ImportRow, RowCheck

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_INT_PATTERN = re.compile(r"^[+-]?\d+$")
_INT_MAX = 2**63 - 1
_INT_MIN = -(2**63)

# Ancien nom de la colonne external_id (exports historiques)
LEGACY_EXTERNAL_ID_COLUMN = "tmdb_id"


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Convertit une cellule en entier, None si absente, non entiere ou hors
    de la plage INTEGER 64 bits de la base.
    """
    if value is None:
        return None
    value = value.strip()
    # 20 caracteres suffisent a tout entier 64 bits signe
    if len(value) > 20 or not _INT_PATTERN.match(value):
        return None
    number = int(value)
    if not _INT_MIN <= number <= _INT_MAX:
        return None
    return number


def _external_id_cell(values: Mapping[str, str]) -> Optional[str]:
    return values.get("external_id") or values.get(LEGACY_EXTERNAL_ID_COLUMN)


class RowValidator:
    """Valide les lignes CSV (cellules non vides indexees par colonne)."""

    def check(self, values: Mapping[str, str]) -> RowCheck:
        """Applique toutes les regles sans s'arreter a la premiere erreur."""
        result = RowCheck()

        if not values.get("title"):
            result.errors.append("Champ obligatoire manquant : title")
        if not values.get("physical_item_name"):
            result.errors.append("Champ obligatoire manquant : physical_item_name")
        self._check_formats(values.get("formats"), result)

        external_id = _external_id_cell(values)
        if external_id is not None and parse_int(external_id) is None:
            result.warnings.append(f"external_id devrait etre un nombre, recu : {external_id}")
        disc_number = values.get("disc_number")
        if disc_number is not None and parse_int(disc_number) is None:
            result.warnings.append(f"disc_number devrait etre un nombre, recu : {disc_number}")

        for column in ("release_date", "purchase_date"):
            value = values.get(column)
            if value and not _DATE_PATTERN.match(value):
                result.warnings.append(f"{column} devrait etre au format YYYY-MM-DD, recu : {value}")

        for column in ("cast", "store_links"):
            value = values.get(column)
            if value:
                warning = self._json_array_warning(column, value)
                if warning:
                    result.warnings.append(warning)

        return result

    @staticmethod
    def _check_formats(raw: Optional[str], result: RowCheck) -> None:
        if not raw:
            result.errors.append("Champ obligatoire manquant : formats")
            return
        try:
            formats = json.loads(raw)
        except (ValueError, RecursionError):
            result.errors.append(f"JSON invalide dans formats : {raw[:100]}")
            return
        if not isinstance(formats, list):
            result.errors.append("formats doit etre un tableau JSON")
            return
        for fmt in formats:
            if not isinstance(fmt, str) or fmt not in Format.values():
                result.errors.append(
                    f'Format invalide : "{fmt}". Valeurs acceptees : {", ".join(Format.values())}'
                )
        if not formats:
            result.errors.append("Au moins un format est requis")

    @staticmethod
    def _json_array_warning(column: str, raw: str) -> Optional[str]:
        try:
            value: Any = json.loads(raw)
        except (ValueError, RecursionError):
            return f"{column} n'est pas un JSON valide"
        if not isinstance(value, list):
            return f"{column} devrait etre un tableau JSON"
        return None

    def validate_dry_run(self, values: Mapping[str, str]) -> RowCheck:
        """Mode simulation : toutes les erreurs et tous les avertissements."""
        return self.check(values)

    def validate_strict(self, values: Mapping[str, str], row_number: int) -> ImportRow:
        """
        Mode import : construit l'ImportRow ou refuse la ligne.

        Les avertissements ne bloquent pas : les valeurs sont conservees telles
        quelles, sauf external_id et disc_number non entiers qui sont ignores
        (disc_number retombe alors a 1).

        Raises:
            RowValidationError: Premiere erreur de la ligne
        """
        check = self.check(values)
        if check.errors:
            raise RowValidationError(row_number, check.errors[0])

        disc_number = parse_int(values.get("disc_number"))
        return ImportRow(
            row_number=row_number,
            title=values["title"],
            physical_item_name=values["physical_item_name"],
            formats=tuple(Format(fmt) for fmt in json.loads(values["formats"])),
            external_id=parse_int(_external_id_cell(values)),
            synopsis=values.get("synopsis"),
            cover_art_url=values.get("cover_art_url"),
            release_date=values.get("release_date"),
            director=values.get("director"),
            cast=values.get("cast"),
            disc_number=disc_number if disc_number is not None else 1,
            edition_notes=values.get("edition_notes"),
            purchase_date=values.get("purchase_date"),
            store_links=values.get("store_links"),
            custom_image_url=values.get("custom_image_url"),
        )
