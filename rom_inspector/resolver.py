"""
Definition Resolver - attach ROM bytes to every schema leaf.

Top-level leaves resolve under their own key; leaves inside a group resolve
under ``group:key``. Only one level of grouping is walked.

A field that runs past the end of the image is not an error: its bytes are
truncated (possibly to nothing) and the interpreter marks what is missing.
A malformed leaf is skipped with a diagnostic, and its siblings still resolve.
"""

import logging
from typing import List, Optional

from .errors import DefinitionError
from .models import Group, InvalidNode, Leaf, ResolvedDefinition, SchemaNode

logger = logging.getLogger(__name__)


def _parse_address(address: str, route: str) -> int:
    try:
        value = int(address, 16)
    except (TypeError, ValueError):
        raise DefinitionError(f"address {address!r} is not hexadecimal", route)
    if value < 0:
        raise DefinitionError(f"address {address!r} is negative", route)
    return value


def resolve_leaf(buffer: bytes, route: str, node: SchemaNode) -> ResolvedDefinition:
    """Slice the bytes for a single leaf. Raises ``DefinitionError`` if malformed."""
    if isinstance(node, InvalidNode):
        raise DefinitionError(f"expected an object, got {node.value_type}", route)
    if not isinstance(node, Leaf):
        raise DefinitionError("groups nested inside groups are not supported", route)
    if node.byte_length < 1:
        raise DefinitionError(f"byte length {node.byte_length} is less than 1", route)

    start = _parse_address(node.address, route)
    raw = bytes(buffer[start:start + node.byte_length])
    if len(raw) < node.byte_length:
        logger.debug(f"{route}: truncated to {len(raw)} of {node.byte_length} bytes")
    return ResolvedDefinition(route=route, address=node.address, raw_bytes=raw, fields=node)


def resolve(buffer: bytes, schema: Group,
            diagnostics: Optional[List[str]] = None) -> List[ResolvedDefinition]:
    """Resolve every leaf of ``schema`` against ``buffer`` in document order.

    Args:
        buffer: ROM image.
        schema: Root group from ``schema.build_schema``.
        diagnostics: Optional list that receives one message per skipped leaf.

    Returns:
        ResolvedDefinition list, one per well-formed leaf.
    """
    entries = []
    for key, node in schema.items():
        if isinstance(node, Group):
            entries.extend((f"{key}:{sub_key}", sub_node) for sub_key, sub_node in node.items())
        else:
            entries.append((key, node))

    resolved = []
    for route, node in entries:
        try:
            resolved.append(resolve_leaf(buffer, route, node))
        except DefinitionError as e:
            logger.warning(f"Skipping definition {e}")
            if diagnostics is not None:
                diagnostics.append(str(e))

    logger.debug(f"Resolved {len(resolved)} of {len(entries)} definitions")
    return resolved
