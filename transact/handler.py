"""
transact.handler — the executor-facing boundary.

Two structural interfaces meet here:

- `TransactionContext`: the raw, address-keyed view of state for one transaction
  (provided by the executor's state backend).
- `TransactionHandler`: anything that can apply transactions of a family against
  such a context.

Both are `typing.Protocol`s: any object with the right attributes qualifies, no
base class is required. Errors raised by a context are `ContextError`; errors
raised by a handler are `ApplyError`.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence, Tuple, runtime_checkable

from .errors import ApplyError, ContextError
from .protocol.transaction import Transaction

StateEntry = Tuple[str, bytes]
EventAttribute = Tuple[str, str]


@runtime_checkable
class TransactionContext(Protocol):
    """Raw state access for one transaction, keyed by radix address."""

    def get_state_entries(self, addresses: Sequence[str]) -> List[StateEntry]:
        """Return (address, value) pairs for the addresses that hold a value."""
        ...

    def set_state_entries(self, entries: Sequence[StateEntry]) -> None:
        ...

    def delete_state_entries(self, addresses: Sequence[str]) -> List[str]:
        """Delete addresses; return the ones that existed."""
        ...

    def add_receipt_data(self, data: bytes) -> None:
        ...

    def add_event(
        self,
        event_type: str,
        attributes: Sequence[EventAttribute],
        data: bytes,
    ) -> None:
        ...


@runtime_checkable
class TransactionHandler(Protocol):
    """Applies transactions of one family against a raw context."""

    @property
    def family_name(self) -> str:
        ...

    @property
    def family_versions(self) -> Sequence[str]:
        ...

    def apply(self, transaction: Transaction, context: TransactionContext) -> None:
        ...


def accepts(handler: TransactionHandler, transaction: Transaction) -> bool:
    """True if `handler` serves the transaction's family and version."""
    return (
        transaction.family_name == handler.family_name
        and transaction.family_version in handler.family_versions
    )


__all__ = [
    "TransactionContext",
    "TransactionHandler",
    "StateEntry",
    "EventAttribute",
    "ApplyError",
    "ContextError",
    "accepts",
]
