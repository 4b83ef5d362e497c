"""
transact.contract.context.key_value — key-value semantics over radix addresses.

`KeyValueTransactionContext` lets handler code read and write state by natural
key. Each key goes through the handler's `Addresser`; the raw context only ever
sees radix addresses and CBOR-encoded entry lists (see `.encoding`).

Batch semantics
---------------
* Every key of a batch is translated before the raw context is touched. If any
  key fails to translate, `ContractContextError` is raised and nothing from the
  batch reaches the raw context.
* Atomicity of the raw write itself belongs to the raw context.
* `ContextError` from the raw context propagates unchanged.

Receipt data and events are not address-keyed and pass straight through.
"""

from __future__ import annotations

import logging
from typing import (Dict, Generic, Hashable, Iterable, List, Mapping, Optional,
                    Sequence, Tuple, TypeVar)

from ... import metrics
from ...config import TransactConfig, get_config
from ...errors import AddresserError, ContractContextError
from ...handler import EventAttribute, TransactionContext
from ..address import Addresser
from .encoding import StateValue, check_values, decode_entries, encode_entries

log = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

Bucket = Dict[str, Dict[str, StateValue]]


class KeyValueTransactionContext(Generic[K]):
    """
    Natural-key view of one transaction's state.

    Parameters
    ----------
    context :
        The raw context supplied by the executor for this transaction. Borrowed,
        not owned: the executor decides its lifetime.
    addresser :
        Maps natural keys to radix addresses.
    config :
        Limits and feature flags; defaults to `get_config()`.
    """

    def __init__(
        self,
        context: TransactionContext,
        addresser: Addresser[K],
        *,
        config: Optional[TransactConfig] = None,
    ) -> None:
        self._context = context
        self._addresser = addresser
        self._config = config or get_config()

    @property
    def addresser(self) -> Addresser[K]:
        return self._addresser

    # ------------------------------ translation ------------------------------

    def _translate(self, keys: Sequence[K], op: str) -> List[Tuple[K, str, str]]:
        """Return (key, normalized, address) for every key, or raise before any I/O."""
        limit = self._config.limits.max_batch_keys
        if limit and len(keys) > limit:
            raise ContractContextError(
                f"{op} batch exceeds {limit} keys",
                data={"op": op, "keys": len(keys)},
            )
        out: List[Tuple[K, str, str]] = []
        for key in keys:
            try:
                address = self._addresser.compute(key)
                normalized = self._addresser.normalize(key)
            except AddresserError as e:
                raise ContractContextError(
                    f"unable to compute address: {e.message}",
                    key=repr(key),
                    data=e.data,
                ) from e
            out.append((key, normalized, address))
        metrics.observe_context_op(op=op, keys=len(out))
        log.debug("translated %d natural keys for %s", len(out), op)
        return out

    def _load(self, addresses: Iterable[str]) -> Dict[str, Bucket]:
        unique = list(dict.fromkeys(addresses))
        if not unique:
            return {}
        loaded: Dict[str, Bucket] = {}
        for address, data in self._context.get_state_entries(unique):
            try:
                loaded[address] = decode_entries(data)
            except ValueError as e:
                raise ContractContextError(
                    f"malformed state entry: {e}", address=address
                ) from e
        return loaded

    # ------------------------------ state ops --------------------------------

    def get_state_entries(self, keys: Iterable[K]) -> Dict[K, Dict[str, StateValue]]:
        """
        Return {natural_key: values} for the keys that hold a value.

        Keys with nothing stored are simply absent from the result.
        """
        translated = self._translate(list(keys), "get")
        loaded = self._load(address for _, _, address in translated)
        result: Dict[K, Dict[str, StateValue]] = {}
        for key, normalized, address in translated:
            values = loaded.get(address, {}).get(normalized)
            if values is not None:
                result[key] = dict(values)
        return result

    def get_state_entry(self, key: K) -> Optional[Dict[str, StateValue]]:
        return self.get_state_entries([key]).get(key)

    def set_state_entries(self, entries: Mapping[K, Mapping[str, StateValue]]) -> None:
        """Write values for each natural key, replacing what the key held before."""
        items = list(entries.items())
        checked: List[Dict[str, StateValue]] = []
        for key, values in items:
            try:
                checked.append(check_values(values))
            except TypeError as e:
                raise ContractContextError(str(e), key=repr(key)) from e

        translated = self._translate([key for key, _ in items], "set")
        buckets = self._load(address for _, _, address in translated)

        touched: List[str] = []
        for (key, normalized, address), values in zip(translated, checked):
            bucket = buckets.setdefault(address, {})
            if (
                self._config.features.check_collisions
                and bucket
                and normalized not in bucket
            ):
                log.warning(
                    "address collision: %s shares %s with %s",
                    normalized,
                    address,
                    sorted(bucket),
                )
            bucket[normalized] = values
            if address not in touched:
                touched.append(address)

        self._context.set_state_entries(
            [(address, encode_entries(buckets[address])) for address in touched]
        )

    def set_state_entry(self, key: K, values: Mapping[str, StateValue]) -> None:
        self.set_state_entries({key: values})

    def delete_state_entries(self, keys: Iterable[K]) -> List[K]:
        """
        Delete the natural keys; return the ones that actually held a value.

        An address is removed from the raw context once its last entry is gone;
        otherwise it is rewritten without the deleted entries.
        """
        translated = self._translate(list(keys), "delete")
        buckets = self._load(address for _, _, address in translated)

        removed: List[K] = []
        touched: List[str] = []
        for key, normalized, address in translated:
            bucket = buckets.get(address)
            if bucket is None or normalized not in bucket:
                continue
            del bucket[normalized]
            removed.append(key)
            if address not in touched:
                touched.append(address)

        emptied = [a for a in touched if not buckets[a]]
        rewritten = [(a, encode_entries(buckets[a])) for a in touched if buckets[a]]
        if emptied:
            self._context.delete_state_entries(emptied)
        if rewritten:
            self._context.set_state_entries(rewritten)
        return removed

    def delete_state_entry(self, key: K) -> bool:
        return bool(self.delete_state_entries([key]))

    # --------------------------- receipts & events ---------------------------

    def add_receipt_data(self, data: bytes) -> None:
        self._context.add_receipt_data(data)

    def add_event(
        self,
        event_type: str,
        attributes: Sequence[EventAttribute] = (),
        data: bytes = b"",
    ) -> None:
        self._context.add_event(event_type, list(attributes), data)


__all__ = ["KeyValueTransactionContext"]
