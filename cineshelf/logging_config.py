"""
Configuration du logging Cineshelf via loguru.

Deux sorties :
- console (stderr) : coloree, prefixee par l'operation en cours
- fichier : une ligne JSON par evenement, avec rotation

Les services attachent leur contexte par logger.bind(operation=..., mode=...,
group=...). Ces champs sont visibles en console (operation) et conserves
integralement dans le champ "extra" du JSON.
"""

import sys
from pathlib import Path

from loguru import logger

# Contexte par defaut des evenements emis hors import/validation/export
DEFAULT_CONTEXT = {"operation": "-"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[operation]: <8}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/cineshelf.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """
    Installe les sorties console et fichier (remplace les sorties existantes).

    Args :
        log_level : Niveau minimum en console ; le fichier recoit tout a partir de DEBUG
        log_file : Fichier JSON (dossier parent cree si besoin)
        rotation_size : Taille declenchant la rotation (ex: "10 MB")
        retention_count : Nombre d'archives conservees
    """
    logger.remove()
    logger.configure(extra=DEFAULT_CONTEXT)

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.bind(operation="startup").debug(f"Journal JSON : {log_file} (rotation {rotation_size})")
