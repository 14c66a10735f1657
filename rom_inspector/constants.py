"""
ROM Inspector constants
=======================

Fixed numbers shared by every analysis module. ECU images handled here are
flat 27C256 / 27C512 dumps: one tune per 32KB, erased space is 0xFF.
"""

# ============================================================================
# IMAGE GEOMETRY
# ============================================================================

FILE_SIZE_32KB = 32 * 1024
FILE_SIZE_64KB = 64 * 1024
VALID_ROM_SIZES = (FILE_SIZE_32KB, FILE_SIZE_64KB)
VALID_ROM_EXTENSIONS = (".bin", ".rom")

TUNE_SIZE = FILE_SIZE_32KB         # one tune per 32KB bank

# ============================================================================
# PADDING / TABLE DETECTION
# ============================================================================

PADDING_BYTE = 0xFF                # erased EPROM cell
ROW_SIZE = 16                      # bytes per scanned row
MAX_PADDING_ROWS = 2               # blank rows tolerated inside one table
MIN_TABLE_SIZE = 16                # smaller candidates are discarded

# ============================================================================
# VALUE INTERPRETATION
# ============================================================================

FLAG_ENABLED = 0xFF
FLAG_DISABLED = 0x00

GRID_MIN_BYTES = 10                # fields this long are shown as a grid
GRID_WIDE_BYTES = 100              # ...and from this length wrap at 10 columns
GRID_MAX_COLUMNS = 10
