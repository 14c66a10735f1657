"""
Tune Space Analyzer - how much of each tune is used vs. erased padding.

Scans backward from the end of a region and stops at the first byte that is
not the padding sentinel. Everything after it is leftover space; padding
inside the used part is not counted as free.
"""

import logging
from typing import List, Tuple

from .constants import PADDING_BYTE, TUNE_SIZE
from .models import Region, SpaceUsage

logger = logging.getLogger(__name__)


def analyze_space(buffer: bytes, region: Region) -> SpaceUsage:
    """Return used/leftover byte counts for ``region`` of ``buffer``."""
    if region.end > len(buffer):
        raise ValueError(f"Region {region.label()} extends past image end "
                         f"(0x{len(buffer):X} bytes)")

    last_used = region.end - 1
    while last_used >= region.start and buffer[last_used] == PADDING_BYTE:
        last_used -= 1

    used = last_used - region.start + 1   # 0 when nothing was found
    usage = SpaceUsage(used_bytes=used, leftover_bytes=region.length - used)
    logger.debug(f"{region.label()}: {usage.used_bytes} used, "
                 f"{usage.leftover_bytes} leftover")
    return usage


def tune_regions(length: int) -> List[Region]:
    """Split an image of ``length`` bytes into consecutive 32KB tunes."""
    return [Region(start, min(start + TUNE_SIZE, length))
            for start in range(0, length, TUNE_SIZE)]


def analyze_tunes(buffer: bytes) -> List[Tuple[Region, SpaceUsage]]:
    """Space usage for every tune in the image, in address order."""
    return [(region, analyze_space(buffer, region))
            for region in tune_regions(len(buffer))]
