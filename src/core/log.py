"""Configuración de logging (loguru).

Por qué loguru:
- Un único `logger` global sin handlers por módulo.
- La librería no instala sinks por su cuenta; solo la CLI llama a
  `configure_logging`.
"""

from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "WARNING", *, verbose: bool = False) -> None:
    """Reemplaza los sinks de loguru por uno solo en stderr."""

    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
    )
