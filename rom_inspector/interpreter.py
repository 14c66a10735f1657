"""
Value Interpreter - turn resolved bytes into display values.

Three shapes, chosen by the field's declared length:

    1 byte        -> Flag (0xFF enabled / 0x00 disabled) or RawByte
    >= 10 bytes   -> ByteGrid (one row of all bytes; 10 columns from 100 bytes up)
    otherwise     -> one RawByte / ScaledValue per byte

Bytes absent from the image (truncated fields) are never invented: a grid
cell becomes ``None`` and an empty single-byte field interprets to ``None``.
"""

import math
from typing import List, Optional, Tuple

from .constants import (FLAG_DISABLED, FLAG_ENABLED, GRID_MAX_COLUMNS,
                        GRID_MIN_BYTES, GRID_WIDE_BYTES)
from .models import (ByteGrid, Flag, InterpretedValue, RawByte,
                     ResolvedDefinition, ScalarValue, ScaledValue)


def interpret_flag(raw: bytes) -> Optional[InterpretedValue]:
    if not raw:
        return None
    byte = raw[0]
    if byte == FLAG_ENABLED:
        return Flag(True)
    if byte == FLAG_DISABLED:
        return Flag(False)
    return RawByte(byte)


def grid_columns(byte_length: int) -> int:
    return GRID_MAX_COLUMNS if byte_length >= GRID_WIDE_BYTES else byte_length


def interpret_grid(raw: bytes, byte_length: int) -> ByteGrid:
    columns = grid_columns(byte_length)
    row_count = math.ceil(byte_length / columns)
    rows = []
    for row in range(row_count):
        base = row * columns
        rows.append(tuple(raw[i] if i < len(raw) else None
                          for i in range(base, base + columns)))
    return ByteGrid(columns=columns, rows=tuple(rows))


def scale(raw: int, factor: Optional[float]) -> ScalarValue:
    """Scale one byte, rounding half up. Zero bytes and zero or missing factors stay raw."""
    if not factor or raw == 0:
        return RawByte(raw)
    product = raw * factor
    if not math.isfinite(product):
        return ScaledValue(raw=raw, scaled=product)
    return ScaledValue(raw=raw, scaled=float(math.floor(product + 0.5)))


def interpret_scalars(raw: bytes, factor: Optional[float]) -> Tuple[ScalarValue, ...]:
    return tuple(scale(byte, factor) for byte in raw)


def interpret(resolved: ResolvedDefinition) -> InterpretedValue:
    """Interpret a resolved definition according to its declared byte length."""
    byte_length = resolved.fields.byte_length
    if byte_length == 1:
        return interpret_flag(resolved.raw_bytes)
    if byte_length >= GRID_MIN_BYTES:
        return interpret_grid(resolved.raw_bytes, byte_length)
    return interpret_scalars(resolved.raw_bytes, resolved.fields.scaling_factor)


def value_offsets(resolved: ResolvedDefinition) -> List[int]:
    """Image offset of each byte present in ``resolved.raw_bytes``."""
    return [resolved.offset + i for i in range(len(resolved.raw_bytes))]
