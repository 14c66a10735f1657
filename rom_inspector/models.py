"""
Value objects produced and consumed by the analysis modules.

Every type here is a frozen dataclass: results are computed fresh per call
and never mutated afterwards.

    Region ─────────> SpaceUsage            (tune_space)
    bytes ──────────> TableCandidate        (table_detector)
    Group/Leaf ─────> ResolvedDefinition    (resolver)
    ResolvedDefinition ─> Flag | RawByte | ScaledValue | ByteGrid   (interpreter)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Union


# ──────────────────────────────────────────────
# Space / table results
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Region:
    """Half-open byte range ``[start, end)`` inside a ROM image."""
    start: int
    end: int

    def __post_init__(self):
        if not 0 <= self.start <= self.end:
            raise ValueError(f"Invalid region [0x{self.start:X}, 0x{self.end:X})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def label(self) -> str:
        """Inclusive hex label, e.g. ``0x0000 - 0x7FFF``."""
        last = max(self.end - 1, self.start)
        return f"0x{self.start:04X} - 0x{last:04X}"


@dataclass(frozen=True)
class SpaceUsage:
    used_bytes: int
    leftover_bytes: int


@dataclass(frozen=True)
class TableCandidate:
    """Contiguous block of non-padding rows found by the table detector."""
    start: int
    end: int
    column_count: int

    @property
    def size(self) -> int:
        return self.end - self.start


# ──────────────────────────────────────────────
# Definition schema
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Leaf:
    """One named memory field of the definition catalog."""
    address: str
    byte_length: int
    bit_width: Optional[int] = None
    description: str = ""
    notes: str = ""
    scaling_factor: Optional[float] = None


@dataclass(frozen=True)
class Group:
    """Named collection of schema nodes, in document order."""
    children: Dict[str, "SchemaNode"] = field(default_factory=dict)

    def items(self):
        return self.children.items()

    def __len__(self) -> int:
        return len(self.children)


@dataclass(frozen=True)
class InvalidNode:
    """Catalog entry that is neither a field nor a group (a string, null, ...)."""
    value_type: str


SchemaNode = Union[Leaf, Group, InvalidNode]


@dataclass(frozen=True)
class ResolvedDefinition:
    """A schema leaf together with the bytes found at its address."""
    route: str
    address: str
    raw_bytes: bytes
    fields: Leaf

    @property
    def offset(self) -> int:
        return int(self.address, 16)

    @property
    def truncated(self) -> bool:
        return len(self.raw_bytes) < self.fields.byte_length


# ──────────────────────────────────────────────
# Interpreted values
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Flag:
    enabled: bool


@dataclass(frozen=True)
class RawByte:
    value: int


@dataclass(frozen=True)
class ScaledValue:
    raw: int
    scaled: float


@dataclass(frozen=True)
class ByteGrid:
    """Byte table laid out in rows; ``None`` marks a byte missing from the image."""
    columns: int
    rows: Tuple[Tuple[Optional[int], ...], ...]

    @property
    def missing_count(self) -> int:
        return sum(1 for row in self.rows for cell in row if cell is None)


ScalarValue = Union[RawByte, ScaledValue]
InterpretedValue = Union[Flag, RawByte, ScaledValue, ByteGrid, Tuple[ScalarValue, ...], None]


@dataclass(frozen=True)
class RomAnalysis:
    """Everything one analysis pass produced for a single image."""
    size: int
    tunes: Tuple[Tuple[Region, SpaceUsage], ...]
    tables: Tuple[TableCandidate, ...]
    definitions: Tuple[Tuple[ResolvedDefinition, InterpretedValue], ...]
    diagnostics: Tuple[str, ...] = ()
