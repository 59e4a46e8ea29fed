"""JSON parsing utilities for structured value casting."""

from __future__ import annotations

import json
from typing import Any

from .errors import CastError


def parse_json_if_needed(value: str | bytes | Any) -> Any:
    """Parse a JSON document if the value is text.

    Producers frequently resolve with the raw payload they received; this
    lets a schema see the decoded structure instead. Non-text values are
    returned as-is.

    Raises:
        CastError: If the value is text but not valid JSON
    """
    if isinstance(value, (str, bytes)):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise CastError(f"Invalid JSON: {e.msg} at position {e.pos}", value) from e
        except UnicodeDecodeError as e:
            raise CastError(f"Failed to decode JSON: {e.reason}", value) from e
    return value
