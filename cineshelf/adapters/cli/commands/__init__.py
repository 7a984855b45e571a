"""Sous-package CLI commands - re-exporte les commandes publiques."""

from cineshelf.adapters.cli.commands.collection_commands import (
    export,
    import_collection,
    schema,
    validate,
)

__all__ = [
    "export",
    "import_collection",
    "schema",
    "validate",
]
