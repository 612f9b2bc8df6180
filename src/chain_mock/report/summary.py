"""Scenario summary report - JSON and Markdown output."""
from __future__ import annotations

import json
from collections import Counter
from typing import Any

from ..scenario.generator import STEP_KINDS

__all__ = ["ScenarioSummary"]


def _parse_number(text: Any) -> int:
    if isinstance(text, int):
        return text
    if not text:
        return 0
    try:
        return int(str(text))
    except ValueError as exc:
        raise ValueError(f"Invalid decimal value '{text}' in scenario") from exc


class ScenarioSummary:
    """Condenses a loaded scenario into counts, accounts and calls."""

    def __init__(self, scenario: dict[str, Any]) -> None:
        self.scenario = scenario
        self.name = str(scenario.get("name", "unknown"))

    def _steps(self) -> list[dict[str, Any]]:
        return list(self.scenario.get("steps", []))

    def _step_counts(self) -> dict[str, int]:
        counts = Counter(step["step"] for step in self._steps())
        return {kind: counts.get(kind, 0) for kind in sorted(STEP_KINDS)}

    def _accounts(self) -> list[dict[str, Any]]:
        """Last recorded state of every account touched by a setState step."""
        latest: dict[str, dict[str, Any]] = {}
        for step in self._steps():
            if step["step"] != "setState":
                continue
            for address, entry in step.get("accounts", {}).items():
                latest[address] = entry
        return [
            {
                "address": address,
                "balance": _parse_number(entry.get("balance")),
                "tokens": sorted(entry.get("dct", {})),
                "contract": entry.get("code", ""),
            }
            for address, entry in sorted(latest.items())
        ]

    def _calls(self) -> list[dict[str, Any]]:
        calls = []
        for step in self._steps():
            if step["step"] not in ("scCall", "scQuery"):
                continue
            tx = step["tx"]
            expect = step.get("expect") or {}
            calls.append(
                {
                    "tx_id": step.get("txId", ""),
                    "kind": step["step"],
                    "to": tx.get("to", ""),
                    "function": tx.get("function", ""),
                    "value": _parse_number(tx.get("value")),
                    "payments": len(tx.get("dctValue", [])),
                    "expected_status": _parse_number(expect.get("status")) if expect else None,
                    "expected_message": expect.get("message", "").removeprefix("str:"),
                }
            )
        return calls

    def to_dict(self) -> dict[str, Any]:
        calls = self._calls()
        return {
            "scenario": self.name,
            "gas_schedule": self.scenario.get("gasSchedule", ""),
            "step_counts": self._step_counts(),
            "total_steps": len(self._steps()),
            "accounts": self._accounts(),
            "calls": calls,
            "expected_failures": sum(1 for call in calls if call["expected_status"]),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @staticmethod
    def _markdown_table(headers: list[str], rows: list[list[str]]) -> list[str]:
        sep = "|".join("-" * max(len(h), 3) for h in headers)
        lines = [
            "| " + " | ".join(headers) + " |",
            "|" + sep + "|",
        ]
        for row in rows:
            lines.append("| " + " | ".join(row) + " |")
        return lines

    def to_markdown(self) -> str:
        d = self.to_dict()
        lines = [
            f"# Scenario Summary: {self.name}",
            f"\nGas schedule: {d['gas_schedule'] or 'n/a'}\n",
            "## Steps\n",
        ]
        lines.extend(self._markdown_table(
            ["Step", "Count"],
            [[kind, str(count)] for kind, count in d["step_counts"].items()],
        ))
        lines.append(f"\n**Total steps: {d['total_steps']}**\n")

        lines.append("## Accounts\n")
        if d["accounts"]:
            lines.extend(self._markdown_table(
                ["Address", "Balance", "Tokens", "Contract"],
                [
                    [acc["address"], str(acc["balance"]), ", ".join(acc["tokens"]) or "-", acc["contract"] or "-"]
                    for acc in d["accounts"]
                ],
            ))
        else:
            lines.append("- none")
        lines.append("")

        lines.append("## Calls\n")
        if d["calls"]:
            lines.extend(self._markdown_table(
                ["Tx", "Kind", "Function", "Value", "Expected"],
                [
                    [
                        call["tx_id"],
                        call["kind"],
                        call["function"],
                        str(call["value"]),
                        "-" if call["expected_status"] is None else
                        f"{call['expected_status']} {call['expected_message']}".strip(),
                    ]
                    for call in d["calls"]
                ],
            ))
        else:
            lines.append("- none")
        return "\n".join(lines)
