"""Client-directed instructions pushed through the channel.

The browser side only understands a handful of actions against the console
element: append a markup fragment, clear the element, or evaluate a raw
expression. Instructions are immutable and serialise to a flat JSON object.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

APPEND = "append"
CLEAR = "clear"
EVAL = "eval"


@dataclass(slots=True, frozen=True)
class ClientInstruction:
    """One action for the client to apply to the console element ``target``."""

    action: str
    target: str
    payload: str = ""

    @classmethod
    def append(cls, target: str, fragment: str) -> "ClientInstruction":
        return cls(APPEND, target, fragment)

    @classmethod
    def clear(cls, target: str) -> "ClientInstruction":
        return cls(CLEAR, target)

    @classmethod
    def evaluate(cls, target: str, expression: str) -> "ClientInstruction":
        return cls(EVAL, target, expression)

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.action, "target": self.target, "payload": self.payload}

    def to_json(self) -> str:
        """Serialise the instruction; the result never contains raw newlines.

        Examples
        --------
        >>> ClientInstruction.append("console", "hi<br/>").to_json()
        '{"action": "append", "target": "console", "payload": "hi<br/>"}'
        """
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> "ClientInstruction":
        data = json.loads(raw)
        return cls(action=data["action"], target=data["target"], payload=data.get("payload", ""))


__all__ = ["APPEND", "CLEAR", "EVAL", "ClientInstruction"]
