"""
Utilitaires partages pour les commandes CLI de Cineshelf.

Ce module fournit :
- console : instance Rich Console partagee
- with_container : decorateur injectant un container initialise
- read_text_file : lecture d'un fichier CSV avec message d'erreur lisible
"""

from functools import wraps
from pathlib import Path

import typer
from rich.console import Console

from cineshelf.container import Container

console = Console()


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), cree les tables si necessaire.

    Usage:
        @with_container()
        def my_command(container, ...):
            service = container.import_export_service()
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            container = Container()
            if requires_db:
                container.database.init()
            return func(container, *args, **kwargs)
        return wrapper
    return decorator


def read_text_file(path: Path) -> str:
    """Lit un fichier texte UTF-8 (BOM tolere) ou quitte avec le code 1."""
    if not path.exists():
        console.print(f"[red]Erreur:[/red] Fichier introuvable: {path}")
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8-sig")
