"""Test-driver facade over the world state and the execution pipeline."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..codec import top_decode, top_encode
from ..config import HarnessConfig
from ..contract.api import ContractApi
from ..errors import AttributeDecodeError, BalanceMismatchError, HarnessUsageError
from ..scenario.generator import ScenarioGenerator
from ..scenario.steps import ScCallStep, ScQueryStep, TxExpect
from ..tx.context import TxContext, TxContextStack
from ..tx.execution import apply_tx_payments, prepay_gas
from ..tx.input import TokenPayment, TxInput
from ..tx.result import Failure, TxResult, catch_tx_panic
from ..world.account import AccountData
from ..world.account_tokens import TokenRole
from ..world.address import Address, AddressFactory
from ..world.block_info import RANDOM_SEED_LENGTH, BlockInfo
from ..world.state import WorldState
from ..world.token_instances import TokenInstanceMetadata

__all__ = ["BlockchainStateWrapper", "ContractObjWrapper", "StateChange"]

logger = logging.getLogger(__name__)

C = TypeVar("C")


class StateChange(StrEnum):
    COMMIT = "commit"
    REVERT = "revert"


@dataclass(slots=True, frozen=True)
class ContractObjWrapper(Generic[C]):
    address: Address
    obj_builder: Callable[[ContractApi], C]


def _require_non_negative(value: int, what: str) -> None:
    if value < 0:
        raise HarnessUsageError(f"negative {what} {value}")


def _serialize_attributes(attributes: Any) -> bytes:
    try:
        return top_encode(attributes)
    except TypeError as exc:
        raise HarnessUsageError(f"Failed to encode attributes: {exc}") from exc


def _decode_attributes(raw: bytes, decoder: type | Callable[[bytes], Any] | None) -> Any:
    if decoder is None:
        return raw
    try:
        if isinstance(decoder, type):
            return top_decode(raw, decoder)
        return decoder(raw)
    except (TypeError, ValueError) as exc:
        raise AttributeDecodeError(f"Failed to decode attributes 0x{raw.hex()}: {exc}") from exc


def _token_name(token_id: bytes) -> str:
    return token_id.decode(errors="replace")


class BlockchainStateWrapper:
    """Owns one world state, its execution stack and its scenario recorder.

    Every ``execute_*`` call runs the same pipeline: payments are moved
    inside a fresh transaction cache, the body runs in a pushed call frame,
    a ``TxPanic`` raised by the body becomes the returned ``TxResult`` and
    the cache is folded into the world state only when the body commits.
    Payment failures and harness misuse are not converted; they propagate
    to the calling test.
    """

    def __init__(self, config: HarnessConfig | None = None, scenario_name: str = "generated") -> None:
        self.config = config or HarnessConfig()
        self._address_factory = AddressFactory()
        self._state = WorldState()
        self._address_to_code_path: dict[Address, bytes] = {}
        self._scenario = ScenarioGenerator(scenario_name, gas_schedule=self.config.gas_schedule)
        self._stack = TxContextStack(max_depth=self.config.max_call_depth)

    @property
    def state(self) -> WorldState:
        return self._state

    @property
    def scenario(self) -> ScenarioGenerator:
        return self._scenario

    @property
    def stack(self) -> TxContextStack:
        return self._stack

    def write_scenario_output(self, file_name: str) -> Path:
        return self._scenario.write(self.config.scenario_dir / file_name)

    # account setup

    def create_user_account(self, native_balance: int) -> Address:
        address = self._address_factory.new_address()
        self.create_account_raw(address, native_balance)
        return address

    def create_sc_account(
        self,
        native_balance: int,
        owner: Address | None,
        obj_builder: Callable[[ContractApi], C],
        contract_code_path: str,
    ) -> ContractObjWrapper[C]:
        address = self._address_factory.new_sc_address()
        code = f"file:{contract_code_path}".encode()
        self._address_to_code_path[address] = code
        if not self._state.contains_contract(code):
            self._state.contracts.register(code, obj_builder)
        self.create_account_raw(address, native_balance, owner=owner, contract_code=code)
        return ContractObjWrapper(address=address, obj_builder=obj_builder)

    def create_account_raw(
        self,
        address: Address,
        native_balance: int,
        owner: Address | None = None,
        contract_code: bytes | None = None,
    ) -> None:
        _require_non_negative(native_balance, "native balance")
        account = AccountData(
            address=address,
            native_balance=native_balance,
            contract_path=contract_code,
            contract_owner=owner,
        )
        self._scenario.set_account(account, contract_code)
        self._state.add_account(account)
        logger.debug("created account %s with balance %d", address, native_balance)

    def _require_account(self, address: Address, operation: str) -> AccountData:
        return self._state.require_account(address, operation)

    def set_native_balance(self, address: Address, balance: int) -> None:
        _require_non_negative(balance, "native balance")
        self._require_account(address, "set_native_balance").native_balance = balance
        self.add_scenario_set_account(address)

    def set_dct_balance(self, address: Address, token_id: bytes, balance: int) -> None:
        _require_non_negative(balance, "token balance")
        account = self._require_account(address, "set_dct_balance")
        account.tokens.set_balance(token_id, 0, balance, TokenInstanceMetadata())
        self.add_scenario_set_account(address)

    def set_nft_balance(self, address: Address, token_id: bytes, nonce: int, balance: int, attributes: Any) -> None:
        self.set_nft_balance_all_properties(address, token_id, nonce, balance, attributes)

    def set_nft_balance_all_properties(
        self,
        address: Address,
        token_id: bytes,
        nonce: int,
        balance: int,
        attributes: Any,
        royalties: int = 0,
        creator: Address | None = None,
        name: bytes | None = None,
        hash: bytes | None = None,
        uri: bytes | None = None,
    ) -> None:
        _require_non_negative(balance, "token balance")
        account = self._require_account(address, "set_nft_balance")
        account.tokens.set_balance(
            token_id,
            nonce,
            balance,
            TokenInstanceMetadata(
                creator=creator,
                royalties=royalties,
                attributes=_serialize_attributes(attributes),
                name=name or b"",
                hash=hash,
                uri=uri,
            ),
        )
        self.add_scenario_set_account(address)

    def increase_nft_balance(
        self, address: Address, token_id: bytes, nonce: int, amount: int, attributes: Any = b""
    ) -> None:
        """Mint more of an instance; the attributes only apply if the nonce is new."""
        _require_non_negative(amount, "token amount")
        account = self._require_account(address, "increase_nft_balance")
        account.tokens.increase_balance(
            token_id,
            nonce,
            amount,
            TokenInstanceMetadata(attributes=_serialize_attributes(attributes)),
        )
        self.add_scenario_set_account(address)

    def set_dct_local_roles(self, address: Address, token_id: bytes, roles: Iterable[TokenRole | str]) -> None:
        account = self._require_account(address, "set_dct_local_roles")
        account.tokens.set_roles(token_id, [str(role) for role in roles])
        self.add_scenario_set_account(address)

    def set_dct_frozen(self, address: Address, token_id: bytes, frozen: bool) -> None:
        self._require_account(address, "set_dct_frozen").tokens.set_frozen(token_id, frozen)
        self.add_scenario_set_account(address)

    def issue_token(
        self,
        owner: Address,
        token_id: bytes,
        initial_supply: int = 0,
        roles: Iterable[TokenRole | str] = (),
    ) -> None:
        """Register a new token identifier and hand the initial supply to ``owner``."""
        account = self._require_account(owner, "issue_token")
        self._state.issue_token(token_id, owner)
        if initial_supply:
            account.tokens.set_balance(token_id, 0, initial_supply, TokenInstanceMetadata())
        role_names = [str(role) for role in roles]
        if role_names:
            account.tokens.set_roles(token_id, role_names)
        self.add_scenario_set_account(owner)

    # block metadata

    def _update_block_info(self, info: BlockInfo, **fields: Any) -> None:
        seed = fields.get("block_random_seed")
        if seed is not None and len(seed) != RANDOM_SEED_LENGTH:
            raise HarnessUsageError(f"block random seed must be {RANDOM_SEED_LENGTH} bytes")
        for name, value in fields.items():
            setattr(info, name, value)
        self._scenario.set_block_info(self._state.current_block_info, self._state.previous_block_info)

    def set_block_epoch(self, block_epoch: int) -> None:
        self._update_block_info(self._state.current_block_info, block_epoch=block_epoch)

    def set_block_nonce(self, block_nonce: int) -> None:
        self._update_block_info(self._state.current_block_info, block_nonce=block_nonce)

    def set_block_random_seed(self, block_random_seed: bytes) -> None:
        self._update_block_info(self._state.current_block_info, block_random_seed=block_random_seed)

    def set_block_round(self, block_round: int) -> None:
        self._update_block_info(self._state.current_block_info, block_round=block_round)

    def set_block_timestamp(self, block_timestamp: int) -> None:
        self._update_block_info(self._state.current_block_info, block_timestamp=block_timestamp)

    def set_prev_block_epoch(self, block_epoch: int) -> None:
        self._update_block_info(self._state.previous_block_info, block_epoch=block_epoch)

    def set_prev_block_nonce(self, block_nonce: int) -> None:
        self._update_block_info(self._state.previous_block_info, block_nonce=block_nonce)

    def set_prev_block_random_seed(self, block_random_seed: bytes) -> None:
        self._update_block_info(self._state.previous_block_info, block_random_seed=block_random_seed)

    def set_prev_block_round(self, block_round: int) -> None:
        self._update_block_info(self._state.previous_block_info, block_round=block_round)

    def set_prev_block_timestamp(self, block_timestamp: int) -> None:
        self._update_block_info(self._state.previous_block_info, block_timestamp=block_timestamp)

    # scenario recording

    def add_scenario_sc_call(self, sc_call: ScCallStep, expect: TxExpect | None = None) -> None:
        self._scenario.create_tx(sc_call, expect)

    def add_scenario_sc_query(self, sc_query: ScQueryStep, expect: TxExpect | None = None) -> None:
        self._scenario.create_query(sc_query, expect)

    def add_scenario_set_account(self, address: Address) -> None:
        account = self._state.get_account(address)
        if account is not None:
            self._scenario.set_account(account, self._address_to_code_path.get(address))

    def add_scenario_check_account(self, address: Address) -> None:
        account = self._state.get_account(address)
        if account is not None:
            self._scenario.check_account(account)

    # execution

    def execute_tx(
        self,
        caller: Address,
        sc_wrapper: ContractObjWrapper[C],
        native_payment: int,
        tx_fn: Callable[[C], StateChange],
        *,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> TxResult:
        return self._execute_tx_any(
            caller,
            sc_wrapper.address,
            native_payment,
            [],
            tx_fn,
            sc_wrapper.obj_builder,
            gas_limit=gas_limit,
            gas_price=gas_price,
        )

    def execute_dct_transfer(
        self,
        caller: Address,
        sc_wrapper: ContractObjWrapper[C],
        token_id: bytes,
        dct_nonce: int,
        dct_amount: int,
        tx_fn: Callable[[C], StateChange],
    ) -> TxResult:
        payments = [TokenPayment(token_id, dct_nonce, dct_amount)]
        return self._execute_tx_any(caller, sc_wrapper.address, 0, payments, tx_fn, sc_wrapper.obj_builder)

    def execute_dct_multi_transfer(
        self,
        caller: Address,
        sc_wrapper: ContractObjWrapper[C],
        dct_transfers: Iterable[TokenPayment],
        tx_fn: Callable[[C], StateChange],
    ) -> TxResult:
        return self._execute_tx_any(
            caller, sc_wrapper.address, 0, list(dct_transfers), tx_fn, sc_wrapper.obj_builder
        )

    def execute_query(self, sc_wrapper: ContractObjWrapper[C], query_fn: Callable[[C], Any]) -> TxResult:
        def run_query(sc: C) -> StateChange:
            query_fn(sc)
            return StateChange.REVERT

        return self._execute_tx_any(sc_wrapper.address, sc_wrapper.address, 0, [], run_query, sc_wrapper.obj_builder)

    def execute_native_transfer(self, from_address: Address, to: Address, amount: int) -> TxResult:
        """Plain value transfer between two accounts, no contract involved."""
        return self._execute_tx_any(from_address, to, amount, [], lambda _: StateChange.COMMIT, None)

    def execute_token_transfer(
        self, from_address: Address, to: Address, token_id: bytes, nonce: int, amount: int
    ) -> TxResult:
        payments = [TokenPayment(token_id, nonce, amount)]
        return self._execute_tx_any(from_address, to, 0, payments, lambda _: StateChange.COMMIT, None)

    def _execute_tx_any(
        self,
        caller: Address,
        dest: Address,
        native_payment: int,
        token_payments: list[TokenPayment],
        tx_fn: Callable[[Any], StateChange],
        obj_builder: Callable[[ContractApi], Any] | None,
        *,
        gas_limit: int | None = None,
        gas_price: int | None = None,
    ) -> TxResult:
        tx_input = TxInput(
            from_address=caller,
            to=dest,
            native_value=native_payment,
            token_payments=token_payments,
            gas_limit=self.config.default_gas_limit if gas_limit is None else gas_limit,
            gas_price=self.config.default_gas_price if gas_price is None else gas_price,
        )
        context = TxContext.new(tx_input, self._state, self._state, self._stack)

        # setup failures are not results, they abort the calling test
        prepay_gas(context.tx_cache, tx_input)
        apply_tx_payments(context.tx_cache, tx_input)

        def dispatch() -> Any:
            with self._stack.frame(context):
                contract = obj_builder(ContractApi(context)) if obj_builder is not None else None
                return tx_fn(contract)

        outcome = catch_tx_panic(dispatch)
        updates = context.into_blockchain_updates()

        if isinstance(outcome, Failure):
            updates.discard()
            return outcome.to_tx_result()

        state_change = outcome.value
        if state_change is StateChange.COMMIT:
            updates.apply(self._state)
            logger.debug("tx %s -> %s committed", caller, dest)
            return TxResult.empty()

        updates.discard()
        if state_change is not StateChange.REVERT:
            raise HarnessUsageError(f"transaction body must return a StateChange, got {state_change!r}")
        logger.debug("tx %s -> %s reverted", caller, dest)
        return TxResult.empty()

    # queries

    def get_native_balance(self, address: Address) -> int:
        return self._require_account(address, "get_native_balance").native_balance

    def get_dct_balance(self, address: Address, token_id: bytes, token_nonce: int) -> int:
        return self._require_account(address, "get_dct_balance").tokens.get_balance(token_id, token_nonce)

    def get_nft_attributes(
        self,
        address: Address,
        token_id: bytes,
        token_nonce: int,
        decoder: type | Callable[[bytes], Any] | None = None,
    ) -> Any:
        account = self._require_account(address, "get_nft_attributes")
        instance = account.tokens.get_instance(token_id, token_nonce)
        if instance is None:
            return None
        return _decode_attributes(instance.metadata.attributes, decoder)

    def check_native_balance(self, address: Address, expected_balance: int) -> None:
        account = self._state.get_account(address)
        actual = account.native_balance if account is not None else 0
        if actual != expected_balance:
            raise BalanceMismatchError(
                f"native balance mismatch for address {address.to_hex()}\n"
                f" Expected: {expected_balance}\n Have: {actual}"
            )

    def check_dct_balance(self, address: Address, token_id: bytes, expected_balance: int) -> None:
        account = self._state.get_account(address)
        actual = account.tokens.get_balance(token_id, 0) if account is not None else 0
        if actual != expected_balance:
            raise BalanceMismatchError(
                f"DCT balance mismatch for address {address.to_hex()}\n"
                f" Token: {_token_name(token_id)}\n Expected: {expected_balance}\n Have: {actual}"
            )

    def check_nft_balance(
        self,
        address: Address,
        token_id: bytes,
        nonce: int,
        expected_balance: int,
        expected_attributes: Any,
        decoder: type | Callable[[bytes], Any] | None = None,
    ) -> None:
        account = self._state.get_account(address)
        instance = account.tokens.get_instance(token_id, nonce) if account is not None else None
        actual_balance = instance.balance if instance is not None else 0
        raw_attributes = instance.metadata.attributes if instance is not None else b""
        if actual_balance != expected_balance:
            raise BalanceMismatchError(
                f"DCT NFT balance mismatch for address {address.to_hex()}\n"
                f" Token: {_token_name(token_id)}, nonce: {nonce}\n"
                f" Expected: {expected_balance}\n Have: {actual_balance}"
            )
        if decoder is None and not isinstance(expected_attributes, (bytes, bytearray)):
            decoder = type(expected_attributes)
        actual_attributes = _decode_attributes(raw_attributes, decoder)
        if actual_attributes != expected_attributes:
            raise BalanceMismatchError(
                f"DCT NFT attributes mismatch for address {address.to_hex()}\n"
                f" Token: {_token_name(token_id)}, nonce: {nonce}\n"
                f" Expected: {expected_attributes!r}\n Have: {actual_attributes!r}"
            )
