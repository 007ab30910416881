from __future__ import annotations

import json

from lib_web_console.domain.instructions import APPEND, CLEAR, EVAL, ClientInstruction


def test_factories_set_action_and_target() -> None:
    assert ClientInstruction.append("c", "x<br/>") == ClientInstruction(APPEND, "c", "x<br/>")
    assert ClientInstruction.clear("c") == ClientInstruction(CLEAR, "c", "")
    assert ClientInstruction.evaluate("c", "scroll()") == ClientInstruction(EVAL, "c", "scroll()")


def test_json_is_single_line_and_parses_back() -> None:
    instruction = ClientInstruction.append("c", "line one\nline two")
    raw = instruction.to_json()
    assert "\n" not in raw
    assert json.loads(raw)["payload"] == "line one\nline two"
    assert ClientInstruction.from_json(raw) == instruction
