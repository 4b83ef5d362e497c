"""
transact.contract.address.key_hash — one natural key per address.

    address = prefix || sha512(key)[: ADDRESS_LENGTH - len(prefix)]
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import AddresserError
from . import check_allocation, hash_hex, last_hash_length


@dataclass(frozen=True)
class KeyHashAddresser:
    """
    Addresser for a single string key; the whole hash space belongs to the key.

    Example:
        >>> a = KeyHashAddresser("5b7349")
        >>> len(a.compute("game-1"))
        70
    """

    prefix: str

    def compute(self, key: str) -> str:
        if not isinstance(key, str):
            raise AddresserError(
                "natural key must be a string", data={"got": type(key).__name__}
            )
        hash_length = last_hash_length(len(self.prefix))
        check_allocation(self.prefix, (hash_length,))
        return self.prefix + hash_hex(hash_length, key)

    def normalize(self, key: str) -> str:
        return str(key)


__all__ = ["KeyHashAddresser"]
