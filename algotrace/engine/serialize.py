"""
serialize.py — Step → JSON
===========================
Turns frozen Steps into plain dicts that `json.dumps` / `flask.jsonify`
accept as-is:

  • dataclasses  → dicts (field order kept)
  • tuples       → lists
  • Enums        → their `.value`
  • ±inf / NaN   → None   (JSON has no infinity; "unreachable" is null)
  • frozen dicts → JSON objects (extras included, at any depth)

Each payload also carries a `"type"` tag ("graph", "board" or "array") so
a renderer can pick its painter without sniffing keys.
"""

import math
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

from algotrace.algorithms.step import FrozenMap, Step, GraphSnapshot, BoardSnapshot, ArraySnapshot


PAYLOAD_TYPES = {
    GraphSnapshot: "graph",
    BoardSnapshot: "board",
    ArraySnapshot: "array",
}


def to_jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool) or value is None or isinstance(value, (int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, FrozenMap):
        return {str(k): to_jsonable(v) for k, v in value}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return str(value)


def payload_to_dict(payload: Any) -> Dict[str, Any]:
    data = to_jsonable(payload)
    data["type"] = PAYLOAD_TYPES.get(type(payload), "unknown")
    return data


def step_to_dict(step: Step) -> Dict[str, Any]:
    return {
        "step_number":     step.step_number,
        "kind":            step.kind,
        "description":     step.description,
        "pseudocode_line": step.pseudocode_line,
        "is_final":        step.is_final,
        "payload":         payload_to_dict(step.payload),
    }


def trace_to_list(trace: Iterable[Step]) -> List[Dict[str, Any]]:
    return [step_to_dict(s) for s in trace]
