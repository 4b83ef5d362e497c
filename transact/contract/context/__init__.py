"""
transact.contract.context — natural-key views over a raw transaction context.

`ContractContext` is the structural interface handler code programs against:
batch get/set/delete by natural key. `KeyValueTransactionContext` is the
implementation backed by an `Addresser` and a raw `TransactionContext`.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Protocol, TypeVar, runtime_checkable

from .encoding import StateValue
from .key_value import KeyValueTransactionContext

K = TypeVar("K")


@runtime_checkable
class ContractContext(Protocol[K]):
    def get_state_entries(self, keys: Iterable[K]) -> Dict[K, Dict[str, StateValue]]:
        ...

    def set_state_entries(self, entries: Mapping[K, Mapping[str, StateValue]]) -> None:
        ...

    def delete_state_entries(self, keys: Iterable[K]) -> List[K]:
        ...


__all__ = ["ContractContext", "KeyValueTransactionContext", "StateValue"]
