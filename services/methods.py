"""Body fat method keys and their display metadata."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)

NAVY = "navy"
DEURENBERG = "deurenberg"

NAVY_ALIASES = frozenset({"navy", "us_navy", "us-navy", "u.s. navy", "usnavy"})
DEURENBERG_ALIASES = frozenset({"deurenberg", "deurenberg1991", "d1991"})

METHOD_SOURCES = {
    NAVY: {
        "name": "U.S. Navy",
        "note": "Estimación por circunferencias de cuello, cintura (y cadera en mujeres) y altura. "
        "Más precisa que los métodos basados en el IMC.",
    },
    DEURENBERG: {
        "name": "Deurenberg (1991)",
        "note": "Usa IMC, edad y sexo como estimación poblacional.",
    },
}


def normalize_method_key(method: Optional[str]) -> str:
    """Map a method label or alias to 'navy' or 'deurenberg'.

    Unknown or empty labels fall back to 'deurenberg' with a warning.
    """
    if not method:
        logger.warning("Empty body fat method received, defaulting to '%s'", DEURENBERG)
        return DEURENBERG

    key = str(method).strip().lower()
    if key in NAVY_ALIASES:
        return NAVY
    if key in DEURENBERG_ALIASES:
        return DEURENBERG

    logger.warning("Unknown body fat method %r, defaulting to '%s'", method, DEURENBERG)
    return DEURENBERG


def method_info(method: Optional[str]) -> dict[str, str]:
    key = normalize_method_key(method)
    return {"key": key, **METHOD_SOURCES[key]}
