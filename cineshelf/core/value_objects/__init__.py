"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- Format : Format physique d'un support (4K UHD, Blu-ray, DVD, ...)
- aggregate_formats : Union triee et dedupliquee de listes de formats
"""

from cineshelf.core.value_objects.formats import Format, aggregate_formats

__all__ = [
    "Format",
    "aggregate_formats",
]
