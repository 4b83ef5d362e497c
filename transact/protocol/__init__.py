"""
transact.protocol — the minimal transaction and event records handlers consume.

The wire format of transactions and batches belongs to the executor; these
dataclasses only carry what a contract handler reads.
"""

from __future__ import annotations

from .events import Event
from .transaction import Transaction

__all__ = ["Event", "Transaction"]
