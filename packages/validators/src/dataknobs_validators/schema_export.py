"""JSON Schema export helpers.

Every validator can describe itself with ``Validator.to_json_schema()``. The
result uses the JSON Schema draft-07 vocabulary and is at least as
permissive as the validator: shapes that cannot be expressed exactly (for
example case-insensitive patterns) are left out rather than approximated
more strictly.

Example:
    ```python
    from dataknobs_validators import V, export_json_schema

    export_json_schema(V.array(V.string().min_length(1)).max_length(3))
    # {'$schema': 'http://json-schema.org/draft-07/schema#',
    #  'type': 'array', 'items': {'type': 'string', 'minLength': 1}, 'maxItems': 3}
    ```
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import Validator

logger = logging.getLogger(__name__)

DRAFT7_SCHEMA_URI = "http://json-schema.org/draft-07/schema#"

# Flags that change what a pattern matches and have no JSON Schema equivalent
_UNREPRESENTABLE_FLAGS = re.IGNORECASE | re.MULTILINE | re.DOTALL | re.VERBOSE


def remove_unset_properties(schema: Any) -> Any:
    """Recursively drop ``None`` valued entries from a schema, in place.

    Lists are walked so that nested schemas are cleaned, but list elements
    themselves are kept, so ``{"enum": [None]}`` survives.

    Args:
        schema: Schema dict (or any nested list/dict/scalar)

    Returns:
        The same object, cleaned
    """
    if isinstance(schema, list):
        for item in schema:
            remove_unset_properties(item)
    elif isinstance(schema, dict):
        for key in list(schema.keys()):
            if schema[key] is None:
                del schema[key]
            else:
                remove_unset_properties(schema[key])
    return schema


def pattern_to_json_schema(pattern: re.Pattern[str]) -> str | None:
    """Translate a compiled pattern into a JSON Schema ``pattern`` string.

    Args:
        pattern: The compiled regular expression

    Returns:
        The pattern source, or None if it cannot be represented
    """
    if pattern.flags & _UNREPRESENTABLE_FLAGS:
        logger.debug(f"Omitting pattern with unsupported flags from schema: {pattern.pattern!r}")
        return None
    source = pattern.pattern
    if source.endswith("Z"):
        body = source[:-1]
        # An odd run of backslashes leaves the last one escaping the Z
        if (len(body) - len(body.rstrip("\\"))) % 2 == 1:
            source = body[:-1] + "$"
    return source


def export_json_schema(validator: Validator[Any], check: bool = True) -> dict[str, Any]:
    """Export a validator as a standalone draft-07 JSON Schema document.

    Args:
        validator: Validator to describe
        check: If True, verify the document against the draft-07 meta-schema

    Returns:
        Schema dictionary including the ``$schema`` keyword

    Raises:
        jsonschema.SchemaError: If ``check`` is set and the export is invalid
    """
    import jsonschema

    schema: dict[str, Any] = {"$schema": DRAFT7_SCHEMA_URI}
    schema.update(validator.to_json_schema())
    if check:
        jsonschema.Draft7Validator.check_schema(schema)
    return schema
