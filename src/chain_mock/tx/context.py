"""Per-call transaction contexts and the explicit execution stack."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ..errors import HarnessUsageError, ReturnCode, TxPanic
from ..world.logs import TxLog
from ..world.state import WorldState
from .cache import AccountSource, TxCache
from .input import TxInput

__all__ = ["BlockchainUpdates", "FrameHandle", "TxContext", "TxContextStack"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BlockchainUpdates:
    """Effects collected by one call frame, ready to be folded."""

    cache: TxCache
    logs: list[TxLog] = field(default_factory=list)

    def apply(self, state: WorldState) -> None:
        self.cache.fold_into(state)
        state.logs.extend(self.logs)

    def discard(self) -> None:
        self.cache.discard()
        self.logs.clear()


@dataclass(slots=True)
class TxContext:
    tx_input: TxInput
    tx_cache: TxCache
    world: WorldState
    stack: TxContextStack
    logs: list[TxLog] = field(default_factory=list)

    @classmethod
    def new(cls, tx_input: TxInput, source: AccountSource, world: WorldState, stack: TxContextStack) -> TxContext:
        return cls(tx_input=tx_input, tx_cache=TxCache(source), world=world, stack=stack)

    def new_child(self, tx_input: TxInput) -> TxContext:
        """Context for a nested call, layered over this frame's cache."""
        return TxContext(tx_input=tx_input, tx_cache=TxCache(self.tx_cache), world=self.world, stack=self.stack)

    def emit_log(self, log: TxLog) -> None:
        self.logs.append(log)

    def merge_child(self, child: TxContext) -> None:
        child.tx_cache.fold_into(self.tx_cache)
        self.logs.extend(child.logs)

    def into_blockchain_updates(self) -> BlockchainUpdates:
        return BlockchainUpdates(cache=self.tx_cache, logs=list(self.logs))


@dataclass(slots=True, frozen=True)
class FrameHandle:
    depth: int
    context: TxContext


class TxContextStack:
    """Stack of active call frames owned by one harness.

    ``push`` returns a handle that must be handed back to ``pop``; frames are
    strictly LIFO. ``frame`` pairs the two so a frame is popped on every exit
    path, including a ``TxPanic`` unwinding through it.
    """

    def __init__(self, max_depth: int = 64) -> None:
        self.max_depth = max_depth
        self._frames: list[TxContext] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    def is_empty(self) -> bool:
        return not self._frames

    def push(self, context: TxContext) -> FrameHandle:
        if len(self._frames) >= self.max_depth:
            raise TxPanic(ReturnCode.CALL_STACK_OVERFLOW, "max call depth exceeded")
        self._frames.append(context)
        return FrameHandle(depth=len(self._frames), context=context)

    def pop(self, handle: FrameHandle) -> TxContext:
        if not self._frames or len(self._frames) != handle.depth or self._frames[-1] is not handle.context:
            raise HarnessUsageError(f"call frame at depth {handle.depth} popped out of order")
        return self._frames.pop()

    def current(self) -> TxContext:
        if not self._frames:
            raise HarnessUsageError("no active call frame")
        return self._frames[-1]

    @contextmanager
    def frame(self, context: TxContext) -> Iterator[TxContext]:
        handle = self.push(context)
        try:
            yield context
        finally:
            self.pop(handle)
