"""
Definition schema loader.

Definition documents are JSON objects mapping names to either a field
description (it has an ``address`` key) or a group of further names::

    {
        "vtec_enable": {"address": "6FC0", "bytes": 1, "description": "...",
                        "notes": ""},
        "rev_limit":   {"low":  {"address": "0F1A", "bytes": 2,
                                 "scalingFactor": 31.25, ...},
                        "high": {...}}
    }

``build_schema`` turns that implicit shape into explicit ``Leaf``/``Group``
nodes once, at load time, so nothing downstream has to probe for keys.
"""

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .errors import SchemaError
from .models import Group, InvalidNode, Leaf, SchemaNode

logger = logging.getLogger(__name__)


def _parse_count(value: Any) -> int:
    """Byte counts may be ints or decimal strings; anything else becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    try:
        return int(str(value).strip(), 10)
    except (TypeError, ValueError):
        return 0


def _parse_optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_factor(value: Any) -> Optional[float]:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_leaf(entry: Mapping[str, Any]) -> Leaf:
    """Convert one field description into a ``Leaf``."""
    return Leaf(
        address=str(entry.get("address", "")).strip(),
        byte_length=_parse_count(entry.get("bytes")),
        bit_width=_parse_optional_int(entry.get("bit")),
        description=str(entry.get("description", "")),
        notes=str(entry.get("notes", "")),
        scaling_factor=_parse_factor(entry.get("scalingFactor")),
    )


def build_node(value: Any, route: str) -> SchemaNode:
    """Leaf, Group, or InvalidNode for values that are not objects.

    Invalid entries are kept so the resolver can report them per field.
    """
    if not isinstance(value, Mapping):
        logger.debug(f"{route}: not an object ({type(value).__name__})")
        return InvalidNode(type(value).__name__)
    if "address" in value:
        return build_leaf(value)
    return Group({key: build_node(child, f"{route}:{key}") for key, child in value.items()})


def build_schema(document: Mapping[str, Any]) -> Group:
    """Reify a parsed definition document into a ``Group`` root."""
    if not isinstance(document, Mapping):
        raise SchemaError(f"Definition document must be an object, "
                          f"got {type(document).__name__}")
    root = Group({key: build_node(value, key) for key, value in document.items()})
    logger.debug(f"Schema built: {len(root)} top-level entries")
    return root


def load_schema(path: Union[str, Path]) -> Group:
    """Read a JSON definition file and build its schema tree."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise SchemaError(f"Unable to read definitions file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON in {path}: {e}") from e

    schema = build_schema(document)
    logger.info(f"Loaded definitions: {path.name} ({len(schema)} entries)")
    return schema
