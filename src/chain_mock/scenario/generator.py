"""Scenario file generator.

Records account snapshots, block metadata and calls as scenario steps so a
test run can be replayed by an external scenario runner. Output is
deterministic: accounts, tokens, instances and storage keys are emitted in
sorted order and every number is a decimal string.

Account setup records are written as `setState` steps and account checks as
`checkState` steps, each carrying its account map under `accounts`.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..world.account import AccountData
from ..world.account_tokens import TokenData
from ..world.block_info import BlockInfo
from ..world.token_instances import TokenInstance
from .steps import ScCallStep, ScQueryStep, TxExpect
from .values import address_expr, biguint_expr, bool_expr, bytes_expr, str_expr

__all__ = ["STEP_KINDS", "ScenarioGenerator", "account_to_dict", "load_scenario"]

logger = logging.getLogger(__name__)

STEP_KINDS = frozenset({"setState", "checkState", "scCall", "scQuery"})


def _instance_to_dict(instance: TokenInstance) -> dict[str, Any]:
    metadata = instance.metadata
    return {
        "nonce": biguint_expr(instance.nonce),
        "balance": biguint_expr(instance.balance),
        "creator": address_expr(metadata.creator) if metadata.creator is not None else "",
        "royalties": biguint_expr(metadata.royalties),
        "name": str_expr(metadata.name),
        "hash": bytes_expr(metadata.hash) if metadata.hash is not None else "",
        "uri": [bytes_expr(metadata.uri)] if metadata.uri is not None else [],
        "attributes": bytes_expr(metadata.attributes),
    }


def _token_to_dict(data: TokenData) -> dict[str, Any]:
    return {
        "instances": [_instance_to_dict(instance) for instance in data.instances],
        "lastNonce": biguint_expr(data.last_nonce),
        "roles": data.get_roles(),
        "frozen": bool_expr(data.frozen),
    }


def account_to_dict(account: AccountData, code_expr: bytes | None = None) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "nonce": biguint_expr(account.nonce),
        "balance": biguint_expr(account.native_balance),
        "dct": {str_expr(data.token_identifier): _token_to_dict(data) for data in account.tokens},
        "username": str_expr(account.username),
        "storage": {bytes_expr(key): bytes_expr(account.storage[key]) for key in sorted(account.storage)},
    }
    code = code_expr if code_expr is not None else account.contract_path
    if code is not None:
        entry["code"] = code.decode(errors="replace")
    if account.contract_owner is not None:
        entry["owner"] = address_expr(account.contract_owner)
    return entry


def _block_info_to_dict(info: BlockInfo) -> dict[str, str]:
    return {
        "blockTimestamp": biguint_expr(info.block_timestamp),
        "blockNonce": biguint_expr(info.block_nonce),
        "blockRound": biguint_expr(info.block_round),
        "blockEpoch": biguint_expr(info.block_epoch),
        "blockRandomSeed": bytes_expr(info.block_random_seed),
    }


def _expect_to_dict(expect: TxExpect) -> dict[str, Any]:
    return {
        "out": [bytes_expr(value) for value in expect.out],
        "status": biguint_expr(expect.status),
        "message": f"str:{expect.message}" if expect.message else "",
    }


class ScenarioGenerator:
    def __init__(self, name: str = "generated", gas_schedule: str = "v4") -> None:
        self.name = name
        self.gas_schedule = gas_schedule
        self._steps: list[dict[str, Any]] = []
        self._tx_counter = 0

    @property
    def steps(self) -> list[dict[str, Any]]:
        return list(self._steps)

    def _next_tx_id(self) -> str:
        self._tx_counter += 1
        return str(self._tx_counter)

    def set_account(self, account: AccountData, code_expr: bytes | None = None) -> None:
        self._steps.append(
            {
                "step": "setState",
                "accounts": {address_expr(account.address): account_to_dict(account, code_expr)},
            }
        )

    def check_account(self, account: AccountData) -> None:
        self._steps.append(
            {
                "step": "checkState",
                "accounts": {address_expr(account.address): account_to_dict(account)},
            }
        )

    def set_block_info(self, current: BlockInfo, previous: BlockInfo) -> None:
        self._steps.append(
            {
                "step": "setState",
                "currentBlockInfo": _block_info_to_dict(current),
                "previousBlockInfo": _block_info_to_dict(previous),
            }
        )

    def create_tx(self, sc_call: ScCallStep, expect: TxExpect | None = None) -> None:
        step: dict[str, Any] = {
            "step": "scCall",
            "txId": self._next_tx_id(),
            "tx": {
                "from": address_expr(sc_call.from_address),
                "to": address_expr(sc_call.to),
                "value": biguint_expr(sc_call.native_value),
                "dctValue": [
                    {
                        "tokenIdentifier": str_expr(payment.token_identifier),
                        "nonce": biguint_expr(payment.nonce),
                        "value": biguint_expr(payment.amount),
                    }
                    for payment in sc_call.token_transfers
                ],
                "function": sc_call.function,
                "arguments": [bytes_expr(arg) for arg in sc_call.arguments],
                "gasLimit": biguint_expr(sc_call.gas_limit),
                "gasPrice": biguint_expr(sc_call.gas_price),
            },
        }
        if expect is not None:
            step["expect"] = _expect_to_dict(expect)
        self._steps.append(step)

    def create_query(self, sc_query: ScQueryStep, expect: TxExpect | None = None) -> None:
        step: dict[str, Any] = {
            "step": "scQuery",
            "txId": self._next_tx_id(),
            "tx": {
                "to": address_expr(sc_query.to),
                "function": sc_query.function,
                "arguments": [bytes_expr(arg) for arg in sc_query.arguments],
            },
        }
        if expect is not None:
            step["expect"] = _expect_to_dict(expect)
        self._steps.append(step)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "gasSchedule": self.gas_schedule,
            "steps": self.steps,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def write(self, path: str | Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.to_json() + "\n")
        logger.info("wrote %d scenario step(s) to %s", len(self._steps), target)
        return target


def load_scenario(raw_json: str) -> dict[str, Any]:
    """Parse a generated scenario file and check its overall shape."""
    try:
        payload = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid scenario JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError("Scenario root must be an object")
    steps = payload.get("steps")
    if not isinstance(steps, list):
        raise ValueError("Scenario must contain a 'steps' list")
    for index, step in enumerate(steps):
        if not isinstance(step, dict):
            raise ValueError(f"Step {index} must be an object")
        kind = step.get("step")
        if kind not in STEP_KINDS:
            raise ValueError(f"Step {index} has unknown kind {kind!r}")
        if kind in ("scCall", "scQuery") and not isinstance(step.get("tx"), dict):
            raise ValueError(f"Step {index} ({kind}) is missing its 'tx' object")
        if kind in ("setState", "checkState") and "accounts" in step and not isinstance(step["accounts"], dict):
            raise ValueError(f"Step {index} ({kind}) has a malformed 'accounts' section")
    return payload
