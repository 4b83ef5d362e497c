"""
transact.contract.address.triple_key_hash — three natural keys per address.

    address = prefix || sha512(k1)[:first] || sha512(k2)[:second] || sha512(k3)[:third]

With `remaining = ADDRESS_LENGTH - len(prefix)`, unspecified lengths resolve once,
at construction:

    first   second   → first                     second
    given   given      as given                  as given
    None    given      (remaining - second) // 2 as given
    given   None       as given                  (remaining - first) // 2
    None    None       remaining // 3            remaining // 3

`third` is never stored; every `compute` takes whatever is left, so rounding
slack always lands in the last fragment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from . import (ADDRESS_LENGTH, KEY_SEPARATOR, check_allocation, expect_keys,
               hash_hex, last_hash_length, resolve_length)


def calculate_hash_lengths(
    prefix_length: int,
    first_length: Optional[int],
    second_length: Optional[int],
) -> Tuple[int, int]:
    """Resolve the first two fragment lengths from the defaulting table above."""
    remaining = ADDRESS_LENGTH - prefix_length
    if first_length is not None and second_length is not None:
        return first_length, second_length
    if second_length is not None:
        return (remaining - second_length) // 2, second_length
    if first_length is not None:
        return first_length, (remaining - first_length) // 2
    return remaining // 3, remaining // 3


@dataclass(frozen=True)
class TripleKeyHashAddresser:
    """
    Addresser for `(str, str, str)` keys.

    Example:
        >>> a = TripleKeyHashAddresser("prefix")
        >>> (a.first_hash_length, a.second_hash_length, a.third_hash_length)
        (21, 21, 22)
    """

    prefix: str
    first_hash_length: Optional[int] = None
    second_hash_length: Optional[int] = None

    def __post_init__(self) -> None:
        first = (
            None
            if self.first_hash_length is None
            else resolve_length(self.first_hash_length, "first_hash_length")
        )
        second = (
            None
            if self.second_hash_length is None
            else resolve_length(self.second_hash_length, "second_hash_length")
        )
        first, second = calculate_hash_lengths(len(self.prefix), first, second)
        object.__setattr__(self, "first_hash_length", first)
        object.__setattr__(self, "second_hash_length", second)

    @property
    def third_hash_length(self) -> int:
        return last_hash_length(
            len(self.prefix), self.first_hash_length, self.second_hash_length
        )

    def compute(self, key: Tuple[str, str, str]) -> str:
        first_key, second_key, third_key = expect_keys(key, 3)
        third = self.third_hash_length
        check_allocation(
            self.prefix, (self.first_hash_length, self.second_hash_length, third)
        )
        return (
            self.prefix
            + hash_hex(self.first_hash_length, first_key)
            + hash_hex(self.second_hash_length, second_key)
            + hash_hex(third, third_key)
        )

    def normalize(self, key: Tuple[str, str, str]) -> str:
        return KEY_SEPARATOR.join((key[0], key[1], key[2]))


__all__ = ["TripleKeyHashAddresser", "calculate_hash_lengths"]
