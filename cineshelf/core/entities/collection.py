"""
Entites de la collection physique.

Une collection est composee d'articles physiques (PhysicalItem) qui
contiennent un ou plusieurs medias (Media) via des liens (MediaLink).
Un meme Media peut etre reference par plusieurs articles physiques.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from cineshelf.core.value_objects.formats import Format, aggregate_formats


def _load_json_list(raw: Optional[str]) -> list[Any]:
    """Decode une liste JSON stockee telle quelle, [] si absente ou malformee."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (ValueError, RecursionError):
        return []
    return value if isinstance(value, list) else []


@dataclass(frozen=True)
class StoreLink:
    """Lien marchand (libelle + URL)."""

    label: str
    url: str


@dataclass
class Media:
    """
    Fiche d'un film ou d'une serie.

    Attributes:
        id: ID interne en base
        title: Titre
        external_id: ID de la base de films externe (cle naturelle de deduplication)
        synopsis: Resume
        cover_art_url: URL de la jaquette
        release_date: Date de sortie (YYYY-MM-DD attendu, conservee telle quelle)
        director: Realisateur(s)
        cast_json: Liste d'acteurs encodee en JSON, conservee telle que fournie
    """

    id: Optional[int] = None
    title: str = ""
    external_id: Optional[int] = None
    synopsis: Optional[str] = None
    cover_art_url: Optional[str] = None
    release_date: Optional[str] = None
    director: Optional[str] = None
    cast_json: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def cast(self) -> list[str]:
        """Acteurs deserialises (vide si la valeur stockee n'est pas une liste JSON)."""
        return [str(name) for name in _load_json_list(self.cast_json)]


@dataclass
class MediaLink:
    """
    Lien entre un article physique et un media.

    Invariant : formats non vide, chaque element appartient a Format.
    Les libelles sont convertis en Format a la construction.
    """

    physical_item_id: Optional[int] = None
    media_id: Optional[int] = None
    formats: tuple[Format, ...] = ()
    disc_number: int = 1
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.formats:
            raise ValueError("Au moins un format est requis")
        self.formats = tuple(Format.parse(fmt) for fmt in self.formats)


@dataclass
class PhysicalItem:
    """
    Article physique possede.

    Attributes:
        id: ID interne en base
        name: Nom de l'article (cle de regroupement a l'import)
        format_set: Formats agreges de tous ses liens (tries, uniques)
        edition_notes: Notes d'edition (Steelbook, Collector...)
        purchase_date: Date d'achat (YYYY-MM-DD attendu, conservee telle quelle)
        store_links_json: Liens marchands encodes en JSON, conserves tels que fournis
        custom_image_url: Photo personnelle du support
    """

    id: Optional[int] = None
    name: str = ""
    format_set: tuple[Format, ...] = ()
    edition_notes: Optional[str] = None
    purchase_date: Optional[str] = None
    store_links_json: Optional[str] = None
    custom_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: list[MediaLink] = field(default_factory=list)

    @property
    def store_links(self) -> list[StoreLink]:
        """
        Liens marchands deserialises, dans l'ordre.

        Accepte les objets {label, url} et les simples URL (le libelle
        reprend alors l'URL). Les entrees inexploitables sont ignorees.
        """
        result = []
        for entry in _load_json_list(self.store_links_json):
            if isinstance(entry, dict) and entry.get("url"):
                result.append(StoreLink(label=str(entry.get("label") or entry["url"]), url=str(entry["url"])))
            elif isinstance(entry, str) and entry:
                result.append(StoreLink(label=entry, url=entry))
        return result

    def recompute_format_set(self) -> tuple[Format, ...]:
        """Recalcule format_set depuis les liens charges."""
        self.format_set = aggregate_formats(link.formats for link in self.links)
        return self.format_set
