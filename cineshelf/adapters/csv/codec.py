"""
Codec CSV du format d'echange de la collection.

Format (exact) :
- separateur virgule, encodage UTF-8, ligne d'en-tete obligatoire
- une valeur contenant une virgule, un saut de ligne ou un guillemet est
  entouree de guillemets, les guillemets internes etant doubles
- formats, cast et store_links sont des tableaux JSON encodes dans la cellule

Le texte est entierement charge en memoire avant d'etre analyse.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from cineshelf.core.exceptions import CSVParseError

# Colonnes obligatoires de l'en-tete (noms exacts, sensibles a la casse)
REQUIRED_COLUMNS = ("title", "physical_item_name", "formats")

# Longueur maximale de la ligne brute reprise dans les rapports d'erreur
_RAW_EXCERPT_LENGTH = 100


@dataclass
class CSVRecord:
    """
    Une ligne de donnees.

    Attributs :
        row_number : Numero de ligne 1-based dans le fichier (en-tete = 1)
        values : Cellules non vides, nettoyees, indexees par nom de colonne
        raw : Extrait du texte brut de la ligne (100 premiers caracteres)
    """

    row_number: int
    values: dict[str, str]
    raw: str = ""


@dataclass
class CSVTable:
    """En-tete et lignes de donnees non vides d'un CSV."""

    headers: list[str]
    records: list[CSVRecord] = field(default_factory=list)


class CSVCodec:
    """
    Lecture et ecriture du CSV d'echange.

    L'analyse se fait caractere par caractere : un guillemet bascule l'etat
    "entre guillemets", sauf s'il est suivi d'un second guillemet a l'interieur
    d'une valeur (guillemet litteral). Une virgule hors guillemets termine la
    cellule, un saut de ligne hors guillemets termine la ligne.
    """

    def parse(self, text: str) -> list[list[str]]:
        """
        Decoupe un texte CSV en lignes de cellules.

        Les cellules ne sont pas nettoyees. Une ligne vide donne [""].

        Raises:
            CSVParseError: Si un champ entre guillemets n'est jamais referme
        """
        rows, _ = self._tokenize(text)
        return rows

    def _tokenize(self, text: str) -> tuple[list[list[str]], list[str]]:
        """Retourne les lignes de cellules et le texte brut de chaque ligne."""
        rows: list[list[str]] = []
        raws: list[str] = []
        row: list[str] = []
        current: list[str] = []
        in_quotes = False
        row_start = 0
        i = 0
        length = len(text)

        while i < length:
            char = text[i]
            if char == '"':
                if in_quotes and i + 1 < length and text[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = not in_quotes
            elif char == "," and not in_quotes:
                row.append("".join(current))
                current = []
            elif char in "\r\n" and not in_quotes:
                row.append("".join(current))
                rows.append(row)
                raws.append(text[row_start:i])
                row, current = [], []
                if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                    i += 1
                row_start = i + 1
            else:
                current.append(char)
            i += 1

        if in_quotes:
            raise CSVParseError(
                "Format CSV invalide",
                f"Champ entre guillemets non referme a partir de la ligne {len(rows) + 1}",
            )

        # Derniere ligne sans saut de ligne final
        if current or row or row_start < length:
            row.append("".join(current))
            rows.append(row)
            raws.append(text[row_start:])

        return rows, raws

    def read_table(
        self, text: str, required_columns: Sequence[str] = REQUIRED_COLUMNS
    ) -> CSVTable:
        """
        Analyse un CSV complet et associe chaque ligne a l'en-tete.

        Les cellules sont nettoyees (espaces en bordure) et les cellules vides
        sont considerees absentes. Les lignes vides sont ignorees mais comptent
        dans la numerotation.

        Raises:
            CSVParseError: En-tete absent, colonnes obligatoires manquantes,
                ou aucune ligne de donnees
        """
        rows, raws = self._tokenize(text.lstrip("\ufeff").strip())
        if not rows:
            raise CSVParseError(
                "Format CSV invalide",
                "Le CSV doit contenir une ligne d'en-tete et au moins une ligne de donnees",
            )

        headers = [header.strip() for header in rows[0]]
        missing = [column for column in required_columns if column not in headers]
        if missing:
            raise CSVParseError(
                "Colonnes obligatoires manquantes",
                f"Le CSV doit contenir au moins les colonnes {', '.join(required_columns)} "
                f"(manquantes : {', '.join(missing)})",
            )

        table = CSVTable(headers=headers)
        for index, (cells, raw) in enumerate(zip(rows[1:], raws[1:]), start=2):
            values = {}
            for header, cell in zip(headers, cells):
                value = cell.strip()
                if value and header not in values:
                    values[header] = value
            if not values:
                continue
            table.records.append(
                CSVRecord(row_number=index, values=values, raw=raw[:_RAW_EXCERPT_LENGTH])
            )

        if not table.records:
            raise CSVParseError(
                "Format CSV invalide",
                "Le CSV doit contenir une ligne d'en-tete et au moins une ligne de donnees",
            )
        return table

    @staticmethod
    def escape(value: Any) -> str:
        """Encode une valeur en cellule CSV (None donne une cellule vide)."""
        if value is None:
            return ""
        text = str(value)
        if any(char in text for char in (",", "\n", "\r", '"')):
            return '"' + text.replace('"', '""') + '"'
        return text

    def serialize(self, rows: Iterable[Sequence[Any]]) -> str:
        """Encode des lignes de valeurs en texte CSV (lignes separees par \\n)."""
        return "\n".join(",".join(self.escape(value) for value in row) for row in rows)

    def write_table(
        self, headers: Sequence[str], records: Iterable[dict[str, Optional[Any]]]
    ) -> str:
        """Encode un en-tete et des lignes indexees par colonne."""
        rows: list[Sequence[Any]] = [list(headers)]
        rows.extend([record.get(header) for header in headers] for record in records)
        return self.serialize(rows)
