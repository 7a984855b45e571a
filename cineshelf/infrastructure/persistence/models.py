"""
Modeles SQLModel pour la base de donnees Cineshelf.

Ces modeles representent les tables de la base de donnees.
Ils sont distincts des entites de domaine (dataclass dans core/entities/)
selon l'architecture hexagonale.

Tables:
- physical_items: Articles physiques possedes
- physical_item_formats: Formats agreges d'un article (une ligne par format)
- media: Fiches film partagees entre articles
- physical_item_media: Liens article <-> media (numero de disque)
- physical_item_media_formats: Formats ordonnes d'un lien (une ligne par format)

Les formats sont normalises dans des tables dediees, indexees sur le format,
pour que "les articles contenant le format X" reste une requete indexee.
Les champs *_json (acteurs, liens marchands) conservent le texte fourni a l'import.
"""

from datetime import datetime, timezone

from sqlmodel import Field, Index, SQLModel


def utc_now() -> datetime:
    """Horodatage courant en UTC (avec fuseau)."""
    return datetime.now(timezone.utc)


class PhysicalItemModel(SQLModel, table=True):
    """
    Modele representant un article physique.

    Le nom sert de cle de regroupement a l'import (pas d'unicite imposee).
    """

    __tablename__ = "physical_items"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    edition_notes: str | None = None  # ex: "Steelbook", "Director's Cut"
    purchase_date: str | None = None  # YYYY-MM-DD attendu, conserve tel quel
    store_links_json: str | None = None  # JSON: [{"label": ..., "url": ...}]
    custom_image_url: str | None = None
    created_at: datetime | None = Field(default_factory=utc_now, index=True)
    updated_at: datetime | None = Field(default_factory=utc_now)


class PhysicalItemFormatModel(SQLModel, table=True):
    """Un format de l'ensemble agrege d'un article physique."""

    __tablename__ = "physical_item_formats"

    physical_item_id: int = Field(foreign_key="physical_items.id", primary_key=True)
    format: str = Field(primary_key=True, index=True)


class MediaModel(SQLModel, table=True):
    """
    Modele representant une fiche media.

    external_id est la cle naturelle de deduplication a l'import.
    """

    __tablename__ = "media"

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    external_id: int | None = Field(default=None, index=True)
    synopsis: str | None = None
    cover_art_url: str | None = None
    release_date: str | None = Field(default=None, index=True)
    director: str | None = None
    cast_json: str | None = None  # JSON: ["Acteur 1", "Acteur 2", ...]
    created_at: datetime | None = Field(default_factory=utc_now)
    updated_at: datetime | None = Field(default_factory=utc_now)


class MediaLinkModel(SQLModel, table=True):
    """
    Lien entre un article physique et un media.

    Aucune contrainte d'unicite sur (physical_item_id, media_id) :
    un meme media peut etre lie deux fois au meme article par un import.
    """

    __tablename__ = "physical_item_media"
    __table_args__ = (
        Index("ix_physical_item_media_item_disc", "physical_item_id", "disc_number"),
    )

    id: int | None = Field(default=None, primary_key=True)
    physical_item_id: int = Field(foreign_key="physical_items.id", index=True)
    media_id: int = Field(foreign_key="media.id", index=True)
    disc_number: int = Field(default=1)
    created_at: datetime | None = Field(default_factory=utc_now)


class MediaLinkFormatModel(SQLModel, table=True):
    """Un format d'un lien, a sa position dans la liste fournie."""

    __tablename__ = "physical_item_media_formats"

    link_id: int = Field(foreign_key="physical_item_media.id", primary_key=True)
    position: int = Field(primary_key=True)
    format: str = Field(index=True)
