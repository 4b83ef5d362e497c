"""
transact.contract — natural-key contracts on top of radix-addressed state.

Subpackages / modules:
- address:  Addresser protocol and the key-hash addressers
- context:  ContractContext protocol and KeyValueTransactionContext
- handler:  key-value handler / smart contract protocols and the executor adapter
- engine:   SmartContractEngine, dispatch by family name and version

Common symbols are re-exported lazily to keep import cost low and avoid cycles.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "ADDRESS_LENGTH": ("address", "ADDRESS_LENGTH"),
    "Addresser": ("address", "Addresser"),
    "KeyHashAddresser": ("address.key_hash", "KeyHashAddresser"),
    "DoubleKeyHashAddresser": ("address.double_key_hash", "DoubleKeyHashAddresser"),
    "TripleKeyHashAddresser": ("address.triple_key_hash", "TripleKeyHashAddresser"),
    "ContractContext": ("context", "ContractContext"),
    "KeyValueTransactionContext": ("context.key_value", "KeyValueTransactionContext"),
    "KeyValueTransactionHandler": ("handler", "KeyValueTransactionHandler"),
    "SmartContract": ("handler", "SmartContract"),
    "KeyValueHandlerAdapter": ("handler", "KeyValueHandlerAdapter"),
    "SmartContractEngine": ("engine", "SmartContractEngine"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
