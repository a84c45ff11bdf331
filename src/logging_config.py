"""
Configuration du logging de l'application via loguru.

Deux sorties :
- console : coloree, au niveau choisi (option -v / -q de la CLI ou PLEXORG_LOG_LEVEL)
- fichier : JSON avec rotation, toujours au niveau DEBUG
"""

import sys
from pathlib import Path

from loguru import logger


def level_for_verbosity(verbose: int, quiet: bool, default: str = "INFO") -> str:
    """
    Traduit les options -v / -q en niveau loguru.

    -q : ERROR ; -v : DEBUG ; -vv et plus : TRACE ; sinon le niveau par defaut.
    """
    if quiet:
        return "ERROR"
    if verbose >= 2:
        return "TRACE"
    if verbose == 1:
        return "DEBUG"
    return default.upper()


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/plexorg.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs à conserver
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
            "<level>{message}</level> <dim>{extra}</dim>"
        ),
        colorize=True,
    )

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

    logger.debug("Logging configuré", log_file=str(log_file), level=log_level)
