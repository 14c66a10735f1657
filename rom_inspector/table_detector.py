"""
Table Region Detector - find calibration tables by padding layout.
==================================================================

Calibration data in these ROMs sits in dense byte grids separated by runs of
erased (0xFF) space. The image is walked in fixed 16-byte rows:

- a row whose bytes are all 0xFF is a *padding row*
- the first non-padding row opens a table; the number of non-padding bytes
  in that row becomes the table's column count and is never revised
- up to ``max_padding_rows`` blank rows are tolerated inside a table; one
  more closes it, and the tolerated blank rows are cut from its end
- a table still open at the end of the image runs to the image end

Candidates smaller than ``min_table_size`` bytes are dropped.
"""

import logging
from typing import List, Optional

from .constants import MAX_PADDING_ROWS, MIN_TABLE_SIZE, PADDING_BYTE, ROW_SIZE
from .models import TableCandidate

logger = logging.getLogger(__name__)


def _is_padding_row(row: bytes) -> bool:
    return all(byte == PADDING_BYTE for byte in row)


def find_tables(buffer: bytes, *,
                row_size: int = ROW_SIZE,
                max_padding_rows: int = MAX_PADDING_ROWS,
                min_table_size: int = MIN_TABLE_SIZE) -> List[TableCandidate]:
    """Scan ``buffer`` once and return table candidates in ascending order."""
    if row_size < 1:
        raise ValueError(f"row_size must be positive, got {row_size}")

    tables: List[TableCandidate] = []
    table_start: Optional[int] = None
    column_count = 0
    padding_rows = 0

    for offset in range(0, len(buffer), row_size):
        row = buffer[offset:offset + row_size]

        if _is_padding_row(row):
            padding_rows += 1
            if table_start is not None and padding_rows > max_padding_rows:
                end = offset - max_padding_rows * row_size
                tables.append(TableCandidate(table_start, end, column_count))
                logger.debug(f"Table 0x{table_start:04X}-0x{end:04X} closed by padding")
                table_start = None
                column_count = 0
        else:
            padding_rows = 0
            if table_start is None:
                table_start = offset
                column_count = sum(1 for byte in row if byte != PADDING_BYTE)

    if table_start is not None:
        tables.append(TableCandidate(table_start, len(buffer), column_count))

    found = [t for t in tables if t.size >= min_table_size]
    logger.debug(f"{len(found)} tables ({len(tables) - len(found)} below "
                 f"{min_table_size} bytes dropped)")
    return found


def table_rows(buffer: bytes, table: TableCandidate,
               row_size: int = ROW_SIZE) -> List[List[int]]:
    """Bytes of ``table`` as rows, ``column_count`` bytes from each row start.

    Rows are taken every ``row_size`` bytes; a row running off the image end is
    shortened rather than padded.
    """
    return [list(buffer[offset:min(offset + table.column_count, len(buffer))])
            for offset in range(table.start, table.end, row_size)]
