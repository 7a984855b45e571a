"""
Formats physiques des supports de la collection.

L'ensemble des formats est ferme : toute valeur hors de cette liste est
refusee a la validation et a l'ecriture.
"""

from enum import Enum
from typing import Iterable


class Format(str, Enum):
    """Format physique d'un support."""

    UHD_4K = "4K UHD"
    BLU_RAY_3D = "3D Blu-ray"
    BLU_RAY = "Blu-ray"
    DVD = "DVD"
    LASERDISC = "LaserDisc"
    VHS = "VHS"

    @classmethod
    def values(cls) -> list[str]:
        """Retourne les libelles dans l'ordre de declaration."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: str) -> "Format":
        """
        Convertit un libelle en Format.

        Raises:
            ValueError: Si le libelle n'appartient pas a l'enumeration
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f'Format invalide : "{value}". Valeurs acceptees : {", ".join(cls.values())}'
            ) from None


def aggregate_formats(format_lists: Iterable[Iterable[Format]]) -> tuple[Format, ...]:
    """
    Calcule l'ensemble des formats d'un article physique.

    Union de tous les formats des liens, dedupliquee et triee par libelle.
    """
    merged = {Format.parse(fmt) for formats in format_lists for fmt in formats}
    return tuple(sorted(merged, key=lambda fmt: fmt.value))
