"""
Point d'entree CLI de Cineshelf.

Configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import export, import_collection, schema, validate
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="cineshelf",
    help="Gestion d'une collection de films sur supports physiques",
)
container = Container()


# Commandes d'import/export
app.command()(schema)
app.command()(validate)
# Note: "import" est un mot reserve Python, donc on utilise name= explicitement
app.command(name="import")(import_collection)
app.command()(export)


def get_config() -> Settings:
    """Recupere les parametres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Authentification API : {'activée' if config.auth_enabled else 'désactivée'}")
    typer.echo(f"Préfixe d'export : {config.export_filename_prefix}")
    typer.echo(f"Tri par défaut : {config.default_sort_by} ({config.default_sort_order})")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Cineshelf v{__version__}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance l'API HTTP Cineshelf."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("cineshelf.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entree de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de Cineshelf", version=__version__)

    app()


if __name__ == "__main__":
    main()
