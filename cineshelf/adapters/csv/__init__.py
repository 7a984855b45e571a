"""Codec CSV du format d'echange de la collection."""

from cineshelf.adapters.csv.codec import REQUIRED_COLUMNS, CSVCodec, CSVRecord, CSVTable

__all__ = [
    "CSVCodec",
    "CSVRecord",
    "CSVTable",
    "REQUIRED_COLUMNS",
]
