"""
transact.contract.address.double_key_hash — two natural keys per address.

    address = prefix || sha512(k1)[:first] || sha512(k2)[:second]

`first` defaults to half of the space left after the prefix (floor division);
`second` is always the exact remainder, so it absorbs the odd character when the
space does not split evenly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from . import (ADDRESS_LENGTH, KEY_SEPARATOR, check_allocation, expect_keys,
               hash_hex, last_hash_length, resolve_length)


@dataclass(frozen=True)
class DoubleKeyHashAddresser:
    """
    Addresser for `(str, str)` keys.

    Parameters
    ----------
    prefix :
        Leading characters of every address produced.
    first_hash_length :
        Characters taken from the first key's digest. None → (70 - len(prefix)) // 2.
    """

    prefix: str
    first_hash_length: Optional[int] = None

    def __post_init__(self) -> None:
        if self.first_hash_length is None:
            first = (ADDRESS_LENGTH - len(self.prefix)) // 2
        else:
            first = resolve_length(self.first_hash_length, "first_hash_length")
        object.__setattr__(self, "first_hash_length", first)

    @property
    def second_hash_length(self) -> int:
        return last_hash_length(len(self.prefix), self.first_hash_length)

    def compute(self, key: Tuple[str, str]) -> str:
        first_key, second_key = expect_keys(key, 2)
        second = self.second_hash_length
        check_allocation(self.prefix, (self.first_hash_length, second))
        return (
            self.prefix
            + hash_hex(self.first_hash_length, first_key)
            + hash_hex(second, second_key)
        )

    def normalize(self, key: Tuple[str, str]) -> str:
        return KEY_SEPARATOR.join((key[0], key[1]))


__all__ = ["DoubleKeyHashAddresser"]
