"""
transact.contract.address — radix address derivation from natural keys.

A radix address is a lowercase hex string of exactly ADDRESS_LENGTH characters:

    prefix || fragment_1 [|| fragment_2 [|| fragment_3]]

where each fragment is the leading part of the hex SHA-512 digest of one natural
key. Handlers never pick storage locations themselves; they hold an `Addresser`
and hand it natural keys.

Addressers
----------
- KeyHashAddresser         : key = str
- DoubleKeyHashAddresser   : key = (str, str)
- TripleKeyHashAddresser   : key = (str, str, str)

The last fragment is never stored: it is recomputed on every `compute` as the
exact remainder so the total is always ADDRESS_LENGTH. A configuration that
leaves a negative remainder raises `AddresserError` instead of producing a
short address.

Concrete addressers are re-exported lazily from their submodules.
"""

from __future__ import annotations

import hashlib
import re
from importlib import import_module as _imp
from typing import Any, Dict, Protocol, Sequence, Tuple, TypeVar, Union, runtime_checkable

from ...config import get_config
from ...errors import AddresserError

ADDRESS_LENGTH = 70

# hex characters produced by SHA-512
DIGEST_HEX_LENGTH = 128

KEY_SEPARATOR = "_"

NaturalKey = Union[str, Tuple[str, str], Tuple[str, str, str]]

K = TypeVar("K", contravariant=True)

_HEX_RE = re.compile(r"^[0-9a-f]*$")


@runtime_checkable
class Addresser(Protocol[K]):
    """
    Capability turning natural keys of shape K into radix addresses.

    compute(key)   -> address (raises AddresserError on a bad allocation)
    normalize(key) -> human-readable key for logs; never used for addressing
    """

    def compute(self, key: K) -> str:
        ...

    def normalize(self, key: K) -> str:
        ...


def hash_hex(hash_length: int, key: str) -> str:
    """
    First `hash_length` hex characters of SHA-512(UTF-8 key).

    `hash_length` must not exceed DIGEST_HEX_LENGTH; callers guarantee it.
    """
    return hashlib.sha512(key.encode("utf-8")).hexdigest()[:hash_length]


def last_hash_length(prefix_length: int, *resolved: int) -> int:
    """Length left for the final fragment once the prefix and resolved fragments are placed."""
    return ADDRESS_LENGTH - prefix_length - sum(resolved)


def check_allocation(prefix: str, lengths: Sequence[int]) -> None:
    """
    Raise AddresserError unless `prefix` plus fragment `lengths` fill exactly
    ADDRESS_LENGTH with non-negative fragments.
    """
    if any(n < 0 for n in lengths):
        raise AddresserError(
            "fragment length must not be negative",
            prefix=prefix,
            lengths=tuple(lengths),
        )
    total = len(prefix) + sum(lengths)
    if total != ADDRESS_LENGTH:
        raise AddresserError(
            f"hash length does not equal {ADDRESS_LENGTH}",
            prefix=prefix,
            lengths=tuple(lengths),
            data={"total": total},
        )
    if get_config().features.strict_prefix and not _HEX_RE.match(prefix):
        raise AddresserError("prefix must be lowercase hex", prefix=prefix)


def resolve_length(value: Any, name: str) -> int:
    """Validate an explicit fragment length given at construction."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int or None (got {type(value).__name__})")
    return value


def expect_keys(key: Any, count: int) -> Tuple[str, ...]:
    """Return `key` as a tuple of `count` strings or raise AddresserError."""
    if not isinstance(key, (tuple, list)) or len(key) != count:
        raise AddresserError(
            f"expected a tuple of {count} natural keys",
            data={"got": repr(key)},
        )
    for part in key:
        if not isinstance(part, str):
            raise AddresserError(
                "natural keys must be strings",
                data={"got": type(part).__name__},
            )
    return tuple(key)


def is_valid_address(address: Any) -> bool:
    """True if `address` is a lowercase hex string of ADDRESS_LENGTH characters."""
    return (
        isinstance(address, str)
        and len(address) == ADDRESS_LENGTH
        and _HEX_RE.match(address) is not None
    )


# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "KeyHashAddresser": ("key_hash", "KeyHashAddresser"),
    "DoubleKeyHashAddresser": ("double_key_hash", "DoubleKeyHashAddresser"),
    "TripleKeyHashAddresser": ("triple_key_hash", "TripleKeyHashAddresser"),
    "calculate_hash_lengths": ("triple_key_hash", "calculate_hash_lengths"),
}

__all__ = (
    "ADDRESS_LENGTH",
    "DIGEST_HEX_LENGTH",
    "KEY_SEPARATOR",
    "NaturalKey",
    "Addresser",
    "AddresserError",
    "hash_hex",
    "last_hash_length",
    "check_allocation",
    "is_valid_address",
    *_exports.keys(),
)


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
