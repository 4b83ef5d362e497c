"""
transact.contract.engine — route transactions to registered contract handlers.

`SmartContractEngine` is itself a `TransactionHandler`: the executor hands it
every transaction and it forwards to the handler registered for the
transaction's `(family_name, family_version)`.

Handlers may be raw `TransactionHandler`s or key-value handlers / smart
contracts; the latter are wrapped in a `KeyValueHandlerAdapter` on registration.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import TransactConfig
from ..errors import DispatchError
from ..handler import TransactionContext, TransactionHandler
from ..protocol.transaction import Transaction
from .handler import KeyValueHandlerAdapter, KeyValueTransactionHandler

log = logging.getLogger(__name__)

ENGINE_FAMILY_NAME = "smart_contract_engine_transaction_handler"


class SmartContractEngine:
    """
    Family/version → handler dispatch table.

    Example:
        engine = SmartContractEngine()
        engine.register(XoSmartContract())
        engine.apply(txn, raw_context)
    """

    def __init__(
        self,
        handlers: Sequence[Any] = (),
        *,
        config: Optional[TransactConfig] = None,
    ) -> None:
        self._config = config
        self._routes: Dict[Tuple[str, str], TransactionHandler] = {}
        for h in handlers:
            self.register(h)

    # ------------------------------ registration -----------------------------

    def register(self, handler: Any) -> TransactionHandler:
        """
        Register `handler` for every version it declares.

        Raises:
            ValueError if a (family, version) pair is already taken.
            TypeError if `handler` is neither kind of handler.
        """
        if isinstance(handler, KeyValueTransactionHandler):
            wrapped: TransactionHandler = KeyValueHandlerAdapter(handler, config=self._config)
        elif isinstance(handler, TransactionHandler):
            wrapped = handler
        else:
            raise TypeError(f"{type(handler).__name__} is not a transaction handler")

        routes = [(wrapped.family_name, v) for v in wrapped.family_versions]
        if not routes:
            raise ValueError(f"handler {wrapped.family_name!r} declares no versions")
        taken = [r for r in routes if r in self._routes]
        if taken:
            raise ValueError(f"handler already registered for {taken}")
        for route in routes:
            self._routes[route] = wrapped
        log.info(
            "registered handler",
            extra={"family": wrapped.family_name, "versions": list(wrapped.family_versions)},
        )
        return wrapped

    def lookup(self, family_name: str, family_version: str) -> Optional[TransactionHandler]:
        return self._routes.get((family_name, family_version))

    def routes(self) -> List[Tuple[str, str]]:
        return sorted(self._routes)

    # ------------------------------ TransactionHandler -----------------------

    @property
    def family_name(self) -> str:
        return ENGINE_FAMILY_NAME

    @property
    def family_versions(self) -> List[str]:
        return list(dict.fromkeys(version for _, version in self._routes))

    def apply(self, transaction: Transaction, context: TransactionContext) -> None:
        handler = self.lookup(transaction.family_name, transaction.family_version)
        if handler is None:
            raise DispatchError(
                family_name=transaction.family_name,
                family_version=transaction.family_version,
            )
        handler.apply(transaction, context)


__all__ = ["SmartContractEngine", "ENGINE_FAMILY_NAME"]
