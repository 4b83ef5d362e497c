"""
transact — radix address derivation and key-value contract contexts.

Handlers address state by natural keys; an Addresser turns those keys into fixed
length radix addresses, and a KeyValueTransactionContext translates every read
and write before it reaches the executor's raw, address-keyed context.

This package exposes only lightweight metadata at import time. Import the
working parts from their subpackages:

    from transact.contract.address import ADDRESS_LENGTH
    from transact.contract.address.key_hash import KeyHashAddresser
    from transact.contract.context import KeyValueTransactionContext
"""

from .version import __version__

__all__ = ["__version__"]
