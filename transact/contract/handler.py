"""
transact.contract.handler — key-value handlers and their executor adapter.

A *key-value handler* is any object with:

    family_name:     str
    family_versions: Sequence[str]      (non-empty, ordered)
    addresser:       Addresser[K]
    apply(transaction, context: KeyValueTransactionContext[K]) -> None

A *smart contract* additionally supplies `make_context(raw_context)` to build its
own natural-key context instead of the default `KeyValueTransactionContext`.

Neither requires a base class. `KeyValueHandlerAdapter` turns either into a raw
`transact.handler.TransactionHandler`: it wraps the executor's raw context in a
natural-key context for the duration of one `apply`, times and counts the call,
and reports every failure that is not already an `ApplyError` as a chained
`InternalError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from .. import logging as tlog
from .. import metrics
from ..config import TransactConfig
from ..errors import (ApplyError, DispatchError, InternalError, TransactError,
                      error_to_result_fields)
from ..handler import TransactionContext, accepts
from ..protocol.transaction import Transaction
from .address import Addresser
from .context import ContractContext, KeyValueTransactionContext

log = logging.getLogger(__name__)

K = TypeVar("K")


@runtime_checkable
class KeyValueTransactionHandler(Protocol[K]):
    @property
    def family_name(self) -> str:
        ...

    @property
    def family_versions(self) -> Sequence[str]:
        ...

    @property
    def addresser(self) -> Addresser[K]:
        ...

    def apply(
        self,
        transaction: Transaction,
        context: KeyValueTransactionContext[K],
    ) -> None:
        ...


@runtime_checkable
class SmartContract(KeyValueTransactionHandler[K], Protocol[K]):
    def make_context(self, context: TransactionContext) -> ContractContext[K]:
        ...


class KeyValueHandlerAdapter:
    """
    Present a key-value handler (or smart contract) as a raw TransactionHandler.

    Parameters
    ----------
    handler :
        Object satisfying `KeyValueTransactionHandler`.
    config :
        Passed to every `KeyValueTransactionContext` built by this adapter.
    """

    def __init__(self, handler: Any, *, config: Optional[TransactConfig] = None) -> None:
        if not isinstance(handler, KeyValueTransactionHandler):
            raise TypeError(
                f"{type(handler).__name__} does not provide "
                "family_name, family_versions, addresser and apply"
            )
        if not handler.family_versions:
            raise ValueError(f"handler {handler.family_name!r} declares no versions")
        self._handler = handler
        self._config = config

    @property
    def handler(self) -> Any:
        return self._handler

    @property
    def family_name(self) -> str:
        return self._handler.family_name

    @property
    def family_versions(self) -> Sequence[str]:
        return self._handler.family_versions

    def make_context(self, context: TransactionContext) -> Any:
        make = getattr(self._handler, "make_context", None)
        if make is not None:
            return make(context)
        return KeyValueTransactionContext(
            context, self._handler.addresser, config=self._config
        )

    def apply(self, transaction: Transaction, context: TransactionContext) -> None:
        family = self.family_name
        if not accepts(self, transaction):
            raise DispatchError(
                family_name=transaction.family_name,
                family_version=transaction.family_version,
            )

        with tlog.trace_scope(family=family, tx_id=transaction.header_signature or None):
            with metrics.time_apply(family):
                try:
                    self._handler.apply(transaction, self.make_context(context))
                except ApplyError as e:
                    self._record_failure(e)
                    raise
                except TransactError as e:
                    err = InternalError(e.message, data=e.to_dict())
                    self._record_failure(err)
                    raise err from e
                except Exception as e:
                    err = InternalError(
                        f"handler failed: {type(e).__name__}: {e}",
                        data={"exception": type(e).__name__},
                    )
                    self._record_failure(err)
                    raise err from e
            metrics.observe_apply(family=family, result="valid")
            log.debug("transaction applied")

    def _record_failure(self, err: ApplyError) -> None:
        fields = error_to_result_fields(err)
        metrics.observe_apply(family=self.family_name, result=fields["status"])
        log.warning("transaction rejected: %s", err, extra={"status": fields["status"]})

    def __repr__(self) -> str:  # pragma: no cover (human-only)
        return f"KeyValueHandlerAdapter({self.family_name!r}, {list(self.family_versions)})"


__all__ = [
    "KeyValueTransactionHandler",
    "SmartContract",
    "KeyValueHandlerAdapter",
]
