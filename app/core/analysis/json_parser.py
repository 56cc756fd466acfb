from __future__ import annotations
import json
import re
from typing import Any, TypeVar

T = TypeVar("T")

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*\})\s*```")


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON and cannot be serialized back out
    raise ValueError(f"Non-finite JSON constant: {name}")


def safe_parse_json(raw: Any, default: T) -> Any:
    """
    Parse a model response as JSON, unwrapping a ```json fenced block if
    present. Returns ``default`` on any failure; never raises.
    """
    try:
        match = _FENCED_JSON.search(raw)
        candidate = match.group(1) if match else raw
        return json.loads(candidate.strip(), parse_constant=_reject_constant)
    except Exception:
        return default
