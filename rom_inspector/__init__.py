"""
ROM Inspector - ECU ROM image analysis
======================================
Inspects 32KB / 64KB ECU ROM dumps and reports how much of each tune is used,
where calibration tables lie, and what values sit at the addresses named by a
definition catalog.

    ┌───────────┐    ┌──────────────┐
    │ ROM bytes │───>│  tune_space  │───> SpaceUsage per tune
    │           │───>│table_detector│───> TableCandidate list
    └───────────┘    └──────────────┘
    ┌───────────┐    ┌──────────────┐    ┌─────────────┐
    │  schema   │───>│   resolver   │───>│ interpreter │───> (ResolvedDefinition, value)
    └───────────┘    └──────────────┘    └─────────────┘

Every stage is a pure function over the image and schema; none shares state.
"""

__version__ = "1.0.0"

from typing import List, Optional

from .errors import DefinitionError, RomFileError, RomInspectorError, SchemaError
from .interpreter import interpret, value_offsets
from .models import (ByteGrid, Flag, Group, InvalidNode, Leaf, RawByte, Region, ResolvedDefinition,
                     RomAnalysis, ScaledValue, SpaceUsage, TableCandidate)
from .resolver import resolve
from .rom_image import load_rom, validate_rom
from .schema import build_schema, load_schema
from .table_detector import find_tables, table_rows
from .tune_space import analyze_space, analyze_tunes, tune_regions


def analyze_rom(buffer: bytes, schema: Optional[Group] = None) -> RomAnalysis:
    """Run every analysis over one image.

    Args:
        buffer: ROM image bytes.
        schema: Definition schema; when omitted no definitions are resolved.

    Returns:
        RomAnalysis with tune usage, table candidates, interpreted definitions
        in schema order, and one diagnostic per skipped definition.
    """
    diagnostics: List[str] = []
    resolved = resolve(buffer, schema, diagnostics) if schema is not None else []
    return RomAnalysis(
        size=len(buffer),
        tunes=tuple(analyze_tunes(buffer)),
        tables=tuple(find_tables(buffer)),
        definitions=tuple((r, interpret(r)) for r in resolved),
        diagnostics=tuple(diagnostics),
    )
