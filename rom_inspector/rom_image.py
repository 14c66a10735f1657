"""
ROM image loading.

Accepts only ``.bin`` / ``.rom`` dumps of exactly 32KB or 64KB; everything
else is rejected before any analysis runs.
"""

import logging
from pathlib import Path
from typing import Union

from .constants import VALID_ROM_EXTENSIONS, VALID_ROM_SIZES
from .errors import RomFileError

logger = logging.getLogger(__name__)


def validate_rom(name: str, size: int) -> None:
    """Raise ``RomFileError`` unless ``name``/``size`` describe a usable dump."""
    extension = Path(name).suffix.lower()
    if extension not in VALID_ROM_EXTENSIONS:
        raise RomFileError(f"File must have a .bin or .rom extension: {name}")
    if size not in VALID_ROM_SIZES:
        raise RomFileError(f"File size must be 32KB or 64KB. Actual size: {size} bytes")


def load_rom(path: Union[str, Path]) -> bytes:
    """Read and validate a ROM dump, returning its bytes."""
    path = Path(path)
    if not path.is_file():
        raise RomFileError(f"File not found: {path}")

    validate_rom(path.name, path.stat().st_size)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise RomFileError(f"Unable to read {path}: {e}") from e

    logger.info(f"Loaded binary: {path.name} ({len(data):,} bytes)")
    return data
