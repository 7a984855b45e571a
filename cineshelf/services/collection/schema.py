"""
Documentation statique du format CSV d'import/export.

Servie telle quelle par GET /import-export/schema et la commande `schema`.
"""

from typing import Any

from cineshelf.core.value_objects.formats import Format

_EXAMPLE_CSV = """title,physical_item_name,formats,external_id,director,disc_number,edition_notes
"Back to the Future","Back to the Future Trilogy","[""Blu-ray"",""DVD""]",105,"Robert Zemeckis",1,"Box Set"
"Back to the Future Part II","Back to the Future Trilogy","[""Blu-ray"",""DVD""]",165,"Robert Zemeckis",2,"Box Set"
"The Matrix","The Matrix","[""4K UHD"",""Blu-ray""]",603,"Lana Wachowski, Lilly Wachowski",1,"4K Combo Pack\""""


def _field(name: str, type_: str, required: bool, description: str, example: str, **extra: Any) -> dict[str, Any]:
    return {
        "name": name,
        "type": type_,
        "required": required,
        "description": description,
        "example": example,
        **extra,
    }


IMPORT_SCHEMA: dict[str, Any] = {
    "description": "Schéma CSV d'import/export de la collection Cineshelf",
    "format": "CSV (valeurs séparées par des virgules)",
    "encoding": "UTF-8",
    "fields": [
        _field("title", "string", True, "Titre du média", "The Matrix"),
        _field(
            "physical_item_name",
            "string",
            True,
            "Nom de l'article physique. Plusieurs films peuvent partager le même article (coffrets, multi-disques).",
            "Back to the Future Trilogy",
        ),
        _field(
            "formats",
            "JSON array (string)",
            True,
            "Formats physiques de ce film dans l'article, en tableau JSON.",
            '["Blu-ray","DVD"]',
            allowed_values=Format.values(),
        ),
        _field(
            "external_id",
            "integer",
            False,
            "ID de la base de films externe. Si un média porte déjà cet ID, il est réutilisé au lieu d'être dupliqué. "
            "L'ancien nom de colonne tmdb_id est accepté.",
            "603",
        ),
        _field("synopsis", "text", False, "Résumé", "Un pirate informatique découvre..."),
        _field("cover_art_url", "string (URL)", False, "URL de la jaquette", "https://image.tmdb.org/t/p/w500/..."),
        _field("release_date", "date", False, "Date de sortie au format YYYY-MM-DD", "1999-03-31"),
        _field("director", "string", False, "Réalisateur(s)", "Lana Wachowski, Lilly Wachowski"),
        _field(
            "cast",
            "JSON array (string)",
            False,
            "Acteurs en tableau JSON",
            '["Keanu Reeves","Laurence Fishburne","Carrie-Anne Moss"]',
        ),
        _field("disc_number", "integer", False, "Numéro de disque dans l'article (défaut 1)", "1"),
        _field("edition_notes", "string", False, "Détails d'édition (Steelbook, Collector...)", "Steelbook Edition"),
        _field("purchase_date", "date", False, "Date d'achat au format YYYY-MM-DD", "2023-12-01"),
        _field(
            "store_links",
            "JSON array (string)",
            False,
            "Liens marchands de l'article en tableau JSON ({label, url} ou URL)",
            '[{"label":"Amazon","url":"https://amazon.com/item"}]',
        ),
        _field("custom_image_url", "string (URL)", False, "Photo personnelle du support", "/uploads/my-photo.jpg"),
    ],
    "notes": [
        "IMPORT : seuls title, physical_item_name et formats sont obligatoires.",
        "IMPORT : les lignes partageant un physical_item_name forment un seul article, importé de façon atomique.",
        "IMPORT : un article déjà présent sous le même nom est complété, pas dupliqué.",
        "IMPORT : si external_id correspond à un média existant, ce média est réutilisé sans être modifié.",
        "IMPORT : les formats de l'article sont calculés à partir des formats de tous ses films.",
        "IMPORT : une valeur contenant virgule, saut de ligne ou guillemet doit être entourée de guillemets.",
        'IMPORT : un guillemet dans une valeur entre guillemets s\'écrit avec deux guillemets ("").',
        "IMPORT : cast et store_links doivent être des tableaux JSON valides.",
        "IMPORT : le mode replace supprime tous les articles et liens existants avant l'import (les médias sont conservés).",
        "EXPORT : tous les champs sont exportés, y compris id, created_at et updated_at.",
        "EXPORT : une ligne par film, les informations de l'article étant répétées.",
        "EXPORT : un export peut être ré-importé ; id, created_at et updated_at sont alors ignorés.",
    ],
    "example_csv": _EXAMPLE_CSV,
}
