"""Ledger access handed to a contract for the duration of one call frame."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..codec import top_decode, top_encode
from ..errors import ReturnCode, TxPanic
from ..tx.cache import TxCache
from ..tx.context import TxContext
from ..tx.execution import CallableContract, execute_async_call, execute_on_dest_context
from ..tx.input import TokenPayment, TxInput
from ..tx.result import AsyncCallResult
from ..world.account_tokens import NATIVE_TOKEN_ID, TokenRole
from ..world.address import Address
from ..world.block_info import BlockInfo
from ..world.logs import TxLog
from ..world.token_instances import TokenInstanceMetadata
from .token_data import DctTokenData

__all__ = [
    "BlockchainApi",
    "CallValueApi",
    "ContractApi",
    "SendApi",
    "StorageApi",
    "instantiate_contract",
]

logger = logging.getLogger(__name__)

ACTION_NOT_ALLOWED = "action is not allowed"


def _key(key: bytes | str) -> bytes:
    return key.encode() if isinstance(key, str) else bytes(key)


class BlockchainApi:
    def __init__(self, context: TxContext) -> None:
        self._context = context

    @property
    def _cache(self) -> TxCache:
        return self._context.tx_cache

    def get_caller(self) -> Address:
        return self._context.tx_input.from_address

    def get_sc_address(self) -> Address:
        return self._context.tx_input.to

    def get_owner_address(self) -> Address:
        account = self._cache.get_account(self.get_sc_address())
        if account is None or account.contract_owner is None:
            return Address.zero()
        return account.contract_owner

    def get_balance(self, address: Address) -> int:
        return self._cache.native_balance(address)

    def get_sc_balance(self, token_identifier: bytes = NATIVE_TOKEN_ID, nonce: int = 0) -> int:
        return self._cache.token_balance(self.get_sc_address(), token_identifier, nonce)

    def get_dct_balance(self, address: Address, token_identifier: bytes, nonce: int = 0) -> int:
        return self._cache.token_balance(address, token_identifier, nonce)

    def get_dct_local_roles(self, token_identifier: bytes) -> set[str]:
        account = self._cache.get_account(self.get_sc_address())
        if account is None:
            return set()
        return set(account.tokens.get_roles(token_identifier))

    def get_dct_token_data(self, address: Address, token_identifier: bytes, nonce: int) -> DctTokenData:
        account = self._cache.get_account(address)
        data = account.tokens.get_by_identifier(token_identifier) if account is not None else None
        return DctTokenData.from_ledger(data, nonce)

    def get_current_dct_nft_nonce(self, address: Address, token_identifier: bytes) -> int:
        account = self._cache.get_account(address)
        if account is None:
            return 0
        data = account.tokens.get_by_identifier(token_identifier)
        return data.last_nonce if data is not None else 0

    @property
    def _block(self) -> BlockInfo:
        return self._context.world.current_block_info

    @property
    def _prev_block(self) -> BlockInfo:
        return self._context.world.previous_block_info

    def get_block_timestamp(self) -> int:
        return self._block.block_timestamp

    def get_block_nonce(self) -> int:
        return self._block.block_nonce

    def get_block_round(self) -> int:
        return self._block.block_round

    def get_block_epoch(self) -> int:
        return self._block.block_epoch

    def get_block_random_seed(self) -> bytes:
        return self._block.block_random_seed

    def get_prev_block_timestamp(self) -> int:
        return self._prev_block.block_timestamp

    def get_prev_block_nonce(self) -> int:
        return self._prev_block.block_nonce

    def get_prev_block_round(self) -> int:
        return self._prev_block.block_round

    def get_prev_block_epoch(self) -> int:
        return self._prev_block.block_epoch

    def get_prev_block_random_seed(self) -> bytes:
        return self._prev_block.block_random_seed


class CallValueApi:
    def __init__(self, context: TxContext) -> None:
        self._context = context

    def native_value(self) -> int:
        return self._context.tx_input.native_value

    def all_dct_transfers(self) -> list[TokenPayment]:
        return list(self._context.tx_input.token_payments)

    def single_dct(self) -> TokenPayment:
        payments = self._context.tx_input.token_payments
        if len(payments) != 1:
            raise TxPanic.user_error("incorrect number of DCT transfers")
        return payments[0]

    def payment_token_pair(self) -> tuple[bytes, int]:
        """(identifier, amount) of the call value, native coin when no token was sent."""
        payments = self._context.tx_input.token_payments
        if not payments:
            return NATIVE_TOKEN_ID, self.native_value()
        payment = self.single_dct()
        return payment.token_identifier, payment.amount


class StorageApi:
    """Key/value storage of the executing contract."""

    def __init__(self, context: TxContext) -> None:
        self._context = context

    @property
    def _address(self) -> Address:
        return self._context.tx_input.to

    def get(self, key: bytes | str) -> bytes:
        return self._context.tx_cache.storage_get(self._address, _key(key))

    def get_as(self, key: bytes | str, kind: type) -> Any:
        return top_decode(self.get(key), kind)

    def set(self, key: bytes | str, value: Any) -> None:
        self._context.tx_cache.storage_set(self._address, _key(key), top_encode(value))

    def clear(self, key: bytes | str) -> None:
        self._context.tx_cache.storage_set(self._address, _key(key), b"")

    def is_empty(self, key: bytes | str) -> bool:
        return self.get(key) == b""


class SendApi:
    def __init__(self, context: TxContext) -> None:
        self._context = context

    @property
    def _sc_address(self) -> Address:
        return self._context.tx_input.to

    def _require_role(self, token_identifier: bytes, role: TokenRole) -> None:
        account = self._context.tx_cache.get_account(self._sc_address)
        roles = account.tokens.get_roles(token_identifier) if account is not None else []
        if str(role) not in roles:
            raise TxPanic.user_error(ACTION_NOT_ALLOWED)

    def direct_native(self, to: Address, amount: int, data: bytes = b"") -> None:
        self._context.tx_cache.transfer_native(self._sc_address, to, amount)

    def direct_dct(self, to: Address, token_identifier: bytes, nonce: int, amount: int, data: bytes = b"") -> None:
        self._context.tx_cache.transfer_token(self._sc_address, to, token_identifier, nonce, amount)

    def direct(self, to: Address, token_identifier: bytes, nonce: int, amount: int, data: bytes = b"") -> None:
        self._context.tx_cache.transfer_value(self._sc_address, to, token_identifier, nonce, amount)

    def local_mint(self, token_identifier: bytes, nonce: int, amount: int) -> None:
        role = TokenRole.LOCAL_MINT if nonce == 0 else TokenRole.NFT_ADD_QUANTITY
        self._require_role(token_identifier, role)
        cache = self._context.tx_cache
        metadata = TokenInstanceMetadata()
        if nonce > 0:
            account = cache.get_account(self._sc_address)
            instance = account.tokens.get_instance(token_identifier, nonce) if account is not None else None
            if instance is None:
                raise TxPanic.user_error("invalid token nonce")
            metadata = instance.metadata
        cache.increase_token(self._sc_address, token_identifier, nonce, amount, metadata)

    def local_burn(self, token_identifier: bytes, nonce: int, amount: int) -> None:
        role = TokenRole.LOCAL_BURN if nonce == 0 else TokenRole.NFT_BURN
        self._require_role(token_identifier, role)
        self._context.tx_cache.subtract_token(self._sc_address, token_identifier, nonce, amount)

    def nft_add_quantity(self, token_identifier: bytes, nonce: int, amount: int) -> None:
        if nonce == 0:
            raise TxPanic.user_error("invalid token nonce")
        self.local_mint(token_identifier, nonce, amount)

    def nft_burn(self, token_identifier: bytes, nonce: int, amount: int) -> None:
        if nonce == 0:
            raise TxPanic.user_error("invalid token nonce")
        self.local_burn(token_identifier, nonce, amount)

    def nft_create(
        self,
        token_identifier: bytes,
        amount: int,
        name: bytes = b"",
        royalties: int = 0,
        hash: bytes | None = None,
        attributes: Any = b"",
        uri: bytes | None = None,
    ) -> int:
        """Mint a new instance at ``last_nonce + 1`` owned by the contract and return its nonce."""
        self._require_role(token_identifier, TokenRole.NFT_CREATE)
        cache = self._context.tx_cache
        account = cache.account_for_write(self._sc_address)
        data = account.tokens.get_by_identifier(token_identifier)
        nonce = (data.last_nonce if data is not None else 0) + 1
        metadata = TokenInstanceMetadata(
            creator=self._sc_address,
            royalties=royalties,
            attributes=top_encode(attributes),
            name=name,
            hash=hash,
            uri=uri,
        )
        cache.increase_token(self._sc_address, token_identifier, nonce, amount, metadata)
        return nonce

    def _nested_input(
        self,
        to: Address,
        function: str,
        args: Iterable[Any],
        native_value: int,
        payments: Iterable[TokenPayment],
    ) -> TxInput:
        parent = self._context.tx_input
        return TxInput(
            from_address=self._sc_address,
            to=to,
            native_value=native_value,
            token_payments=list(payments),
            func_name=function,
            args=list(args),
            gas_limit=parent.gas_limit,
            gas_price=parent.gas_price,
            tx_hash=parent.tx_hash,
        )

    def execute_on_dest_context(
        self,
        to: Address,
        function: str,
        args: Iterable[Any] = (),
        native_value: int = 0,
        payments: Iterable[TokenPayment] = (),
    ) -> tuple[Any, ...]:
        tx_input = self._nested_input(to, function, args, native_value, payments)
        return execute_on_dest_context(self._context, tx_input, instantiate_contract)

    def async_call(
        self,
        to: Address,
        function: str,
        args: Iterable[Any] = (),
        native_value: int = 0,
        payments: Iterable[TokenPayment] = (),
        callback: Callable[[AsyncCallResult], Any] | None = None,
    ) -> AsyncCallResult:
        tx_input = self._nested_input(to, function, args, native_value, payments)
        return execute_async_call(self._context, tx_input, instantiate_contract, callback)


class ContractApi:
    """Entry point a contract uses to reach the ledger from its own frame."""

    def __init__(self, context: TxContext) -> None:
        self.context = context
        self.blockchain = BlockchainApi(context)
        self.call_value = CallValueApi(context)
        self.storage = StorageApi(context)
        self.send = SendApi(context)

    def emit_event(self, identifier: bytes | str, *topics: Any, data: Any = b"") -> None:
        tx_input = self.context.tx_input
        self.context.emit_log(
            TxLog(
                address=tx_input.to,
                endpoint=tx_input.func_name,
                identifier=_key(identifier),
                topics=tuple(top_encode(topic) for topic in topics),
                data=top_encode(data),
            )
        )

    def require(self, condition: bool, message: str) -> None:
        if not condition:
            raise TxPanic.user_error(message)

    def sc_panic(self, message: str) -> None:
        raise TxPanic.user_error(message)


def instantiate_contract(context: TxContext) -> CallableContract:
    """Build the destination's contract object from the registry."""
    dest = context.tx_input.to
    account = context.tx_cache.get_account(dest)
    if account is None or account.contract_path is None:
        raise TxPanic(ReturnCode.CONTRACT_NOT_FOUND, "contract not found")
    factory = context.world.contracts.get(account.contract_path)
    if factory is None:
        raise TxPanic(ReturnCode.CONTRACT_NOT_FOUND, "contract not found")
    return factory(ContractApi(context))
