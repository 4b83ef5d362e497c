"""
transact.state.memory — dict-backed raw transaction context.

A minimal, deterministic implementation of `transact.handler.TransactionContext`
keyed by radix address (`str`) with `bytes` values. It also collects receipt data
and events in emission order.

Design goals
------------
- Pure Python, no I/O; deterministic semantics.
- Addresses are validated: exactly ADDRESS_LENGTH lowercase hex characters.
- Canonicalization: values are copied to immutable `bytes`.
- Thread-safe: one re-entrant lock guards state, receipts and events.

Typical usage
-------------
    ctx = InMemoryTransactionContext()
    ctx.set_state_entries([(addr, b"value")])
    ctx.get_state_entries([addr])      # [(addr, b"value")]
    ctx.delete_state_entries([addr])   # [addr]
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..contract.address import ADDRESS_LENGTH, is_valid_address
from ..errors import ContextError
from ..handler import EventAttribute, StateEntry
from ..protocol.events import Event

# ------------------------------- helpers -------------------------------------


def _check_address(address: str) -> str:
    if not is_valid_address(address):
        raise ContextError(
            f"address must be {ADDRESS_LENGTH} lowercase hex characters",
            data={"address": repr(address)},
        )
    return address


def _as_bytes(x: bytes | bytearray | memoryview, *, name: str) -> bytes:
    if not isinstance(x, (bytes, bytearray, memoryview)):
        raise ContextError(f"{name} must be bytes-like", data={"got": type(x).__name__})
    return bytes(x)


# ------------------------ InMemoryTransactionContext -------------------------


class InMemoryTransactionContext:
    """
    Raw context over an in-memory address → bytes mapping.

    Parameters
    ----------
    state :
        Optional initial entries. Copied; the caller's mapping is not mutated.
    """

    def __init__(self, state: Optional[Mapping[str, bytes]] = None) -> None:
        self._lock = threading.RLock()
        self._state: Dict[str, bytes] = {}
        self._receipt_data: List[bytes] = []
        self._events: List[Event] = []
        for address, value in (state or {}).items():
            self._state[_check_address(address)] = _as_bytes(value, name="value")

    # ------------------------------ state -----------------------------------

    def get_state_entries(self, addresses: Sequence[str]) -> List[StateEntry]:
        wanted = [_check_address(a) for a in addresses]
        with self._lock:
            return [(a, self._state[a]) for a in wanted if a in self._state]

    def set_state_entries(self, entries: Sequence[StateEntry]) -> None:
        checked = [
            (_check_address(a), _as_bytes(v, name="value")) for a, v in entries
        ]
        with self._lock:
            for address, value in checked:
                self._state[address] = value

    def delete_state_entries(self, addresses: Sequence[str]) -> List[str]:
        wanted = [_check_address(a) for a in addresses]
        removed: List[str] = []
        with self._lock:
            for address in wanted:
                if self._state.pop(address, None) is not None:
                    removed.append(address)
        return removed

    # --------------------------- receipts & events ---------------------------

    def add_receipt_data(self, data: bytes) -> None:
        payload = _as_bytes(data, name="receipt data")
        with self._lock:
            self._receipt_data.append(payload)

    def add_event(
        self,
        event_type: str,
        attributes: Sequence[EventAttribute],
        data: bytes,
    ) -> None:
        payload = _as_bytes(data, name="event data")
        try:
            event = Event(event_type, attributes, payload)
        except ValueError as e:
            raise ContextError(str(e), data={"event_type": repr(event_type)}) from e
        with self._lock:
            self._events.append(event)

    # ------------------------------ inspection -------------------------------

    @property
    def receipt_data(self) -> Tuple[bytes, ...]:
        with self._lock:
            return tuple(self._receipt_data)

    @property
    def events(self) -> Tuple[Event, ...]:
        with self._lock:
            return tuple(self._events)

    def state_snapshot(self) -> Dict[str, bytes]:
        """Copy of all entries, sorted by address."""
        with self._lock:
            return {a: self._state[a] for a in sorted(self._state)}

    def addresses(self, prefix: str = "") -> Iterable[str]:
        """Stored addresses starting with `prefix`, in lexicographic order."""
        with self._lock:
            return [a for a in sorted(self._state) if a.startswith(prefix)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._state)

    def __repr__(self) -> str:  # pragma: no cover (human-only)
        return (
            f"InMemoryTransactionContext(entries={len(self)}, "
            f"events={len(self._events)}, receipts={len(self._receipt_data)})"
        )


__all__ = ["InMemoryTransactionContext"]
