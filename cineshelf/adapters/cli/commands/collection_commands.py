"""
Commandes CLI d'import/export de la collection (schema, validate, import, export).
"""

import json
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from cineshelf.adapters.cli.helpers import console, read_text_file, with_container
from cineshelf.core.exceptions import CSVParseError, DatastoreUnavailableError
from cineshelf.services.collection import ImportMode, ImportResult, ValidationResult


def schema() -> None:
    """Affiche la documentation du format CSV d'import (JSON)."""
    _schema_impl()


@with_container(requires_db=False)
def _schema_impl(container) -> None:
    service = container.import_export_service()
    typer.echo(json.dumps(service.schema(), ensure_ascii=False, indent=2))


def validate(
    csv_file: Annotated[Path, typer.Argument(help="Fichier CSV a valider")],
) -> None:
    """
    Valide un fichier CSV sans rien ecrire en base.
    """
    _validate_impl(csv_file)


@with_container()
def _validate_impl(container, csv_file: Path) -> None:
    _run_validation(container, read_text_file(csv_file))


def _run_validation(container, text: str) -> None:
    service = container.import_export_service()
    try:
        result = service.validate(text)
    except CSVParseError as e:
        _print_parse_error(e)
        raise typer.Exit(code=1)

    _display_validation(result)


def import_collection(
    csv_file: Annotated[Path, typer.Argument(help="Fichier CSV a importer")],
    mode: Annotated[
        ImportMode,
        typer.Option("--mode", "-m", help="add: ajoute a la collection, replace: remplace les articles"),
    ] = ImportMode.ADD,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Valide seulement, sans modifier la BDD"),
    ] = False,
) -> None:
    """
    Importe un fichier CSV dans la collection.

    Les lignes sont regroupees par physical_item_name : un article physique par
    groupe, chaque groupe etant ecrit atomiquement.
    """
    _import_impl(csv_file, mode, dry_run)


@with_container()
def _import_impl(container, csv_file: Path, mode: ImportMode, dry_run: bool) -> None:
    text = read_text_file(csv_file)
    service = container.import_export_service()

    if dry_run:
        console.print("[yellow]Mode dry-run - aucune modification[/yellow]\n")
        _run_validation(container, text)
        return

    if mode is ImportMode.REPLACE:
        console.print("[yellow]Mode replace : les articles existants seront supprimes[/yellow]")

    try:
        result = service.import_csv(text, mode)
    except CSVParseError as e:
        _print_parse_error(e)
        raise typer.Exit(code=1)
    except DatastoreUnavailableError as e:
        console.print(f"[red]Base de donnees indisponible:[/red] {e}")
        raise typer.Exit(code=1)

    _display_import(result)


def export(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Fichier de sortie (defaut: <prefixe>-AAAA-MM-JJ.csv)"),
    ] = None,
) -> None:
    """Exporte toute la collection en CSV."""
    _export_impl(output)


@with_container()
def _export_impl(container, output: Optional[Path]) -> None:
    config = container.config()
    service = container.import_export_service()
    try:
        content = service.export_csv()
    except DatastoreUnavailableError as e:
        console.print(f"[red]Base de donnees indisponible:[/red] {e}")
        raise typer.Exit(code=1)

    if output is None:
        output = Path(export_filename(config.export_filename_prefix))
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")

    line_count = len(container.csv_codec().parse(content)) - 1
    console.print(f"[green]Export termine[/green] : {output} ({line_count} ligne(s) de donnees)")


def export_filename(prefix: str, day: Optional[date] = None) -> str:
    """Nom de fichier d'export : <prefixe>-AAAA-MM-JJ.csv."""
    return f"{prefix}-{(day or date.today()).isoformat()}.csv"


def _print_parse_error(error: CSVParseError) -> None:
    console.print(f"[red]Erreur:[/red] {error.message}")
    if error.details:
        console.print(f"[dim]{error.details}[/dim]")


def _display_validation(result: ValidationResult) -> None:
    status = "[green]valide[/green]" if result.valid else "[red]invalide[/red]"
    console.print(f"CSV {status} : {result.total_rows} ligne(s) de donnees")

    if result.errors or result.warnings:
        table = Table(title="Rapport de validation", show_header=True)
        table.add_column("Ligne", justify="right", style="cyan")
        table.add_column("Niveau")
        table.add_column("Message")
        for error in result.errors:
            table.add_row(str(error["row"]), "[red]erreur[/red]", error["error"])
        for warning in result.warnings:
            table.add_row(str(warning["row"]), "[yellow]avertissement[/yellow]", warning["warning"])
        console.print(table)


def _display_import(result: ImportResult) -> None:
    console.print(f"[green]{result.message}[/green]")
    console.print(
        f"Lignes acceptees : {result.total} | "
        f"Articles importes : {result.successful} | Echecs : {result.failed}"
    )

    if result.errors:
        table = Table(title="Erreurs d'import", show_header=True)
        table.add_column("Ligne / Article", style="cyan")
        table.add_column("Erreur", style="red")
        table.add_column("Donnees", style="dim")
        for issue in result.errors:
            where = issue.group if issue.group is not None else str(issue.row)
            table.add_row(where, issue.error, issue.data)
        console.print(table)
