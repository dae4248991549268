"""
Configuration du logging d'AniLib via loguru.

La console suit une mise à jour en cours, le fichier JSON garde l'historique
complet des créations, conversions et suppressions.
"""

import sys

from loguru import logger

from .config import Settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings) -> None:
    """
    Remplace les handlers loguru par ceux d'AniLib.

    Args:
        settings: Niveau console, chemin, rotation et rétention du fichier
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        settings.log_file,
        level="DEBUG",
        serialize=True,
        rotation=settings.log_rotation_size,
        retention=settings.log_retention_count,
        compression="zip",
        enqueue=True,  # Écritures depuis les threads de parcours et de sonde
    )
