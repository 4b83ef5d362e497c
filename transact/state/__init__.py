"""
transact.state — reference implementations of the raw transaction context.

- memory: InMemoryTransactionContext, a dict-backed context for tests, the CLI and
  examples.
"""

from __future__ import annotations

from .memory import InMemoryTransactionContext

__all__ = ["InMemoryTransactionContext"]
