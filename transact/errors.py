"""
transact.errors — exceptions for address derivation, contexts and handlers.

Failures travel as *typed exceptions* carrying a stable machine code so that the
executor can turn them into transaction results and structured log payloads.
The classes are dependency-free and safe to import from any layer.

Hierarchy
---------
TransactError (base)
 ├─ AddresserError        : prefix/fragment allocation does not add up to ADDRESS_LENGTH
 ├─ ContextError          : raised by the raw (address-keyed) transaction context
 ├─ ContractContextError  : natural-key translation or state-entry decoding failed
 └─ ApplyError            : a handler could not apply a transaction
     ├─ InvalidTransaction : the transaction is invalid under the family rules
     ├─ InternalError      : the handler failed for reasons unrelated to the payload
     └─ DispatchError      : no handler is registered for the family/version

Notes
-----
* `AddresserError` is a configuration bug, never a transient condition.
* `ContextError` is forwarded unchanged by this package; nothing here retries.
* `InvalidTransaction` is a *semantic* failure and invalidates the transaction;
  `InternalError` signals that the node could not evaluate it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class TransactError(Exception):
    """
    Base error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'ADDRESSER/CONFIG').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "transact error"
    code: str = "TRANSACT/ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs and results."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class AddresserError(TransactError):
    """
    The addresser configuration cannot produce a full-length address.

    Raised from `compute` when the prefix and the fragment lengths do not sum to
    exactly ADDRESS_LENGTH, when a resolved length is negative, or when the key
    does not have the shape the addresser expects.
    """
    def __init__(
        self,
        message: str = "invalid addresser configuration",
        *,
        prefix: Optional[str] = None,
        lengths: Optional[tuple] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if prefix is not None:
            d.setdefault("prefix", prefix)
        if lengths is not None:
            d.setdefault("lengths", list(lengths))
        super().__init__(message=message, code="ADDRESSER/CONFIG", data=d or None)


class ContextError(TransactError):
    """Failure reported by the raw transaction context (state backend)."""
    def __init__(self, message: str = "context error", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONTEXT/ERROR", data=data)


class ContractContextError(TransactError):
    """
    Failure in the natural-key layer.

    Wraps addresser failures (with the offending key in `data`) and malformed
    state entries found at a derived address.
    """
    def __init__(
        self,
        message: str = "contract context error",
        *,
        key: Optional[str] = None,
        address: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if key is not None:
            d.setdefault("key", key)
        if address is not None:
            d.setdefault("address", address)
        super().__init__(message=message, code="CONTRACT_CONTEXT/ERROR", data=d or None)


class ApplyError(TransactError):
    """Base class for errors raised while applying a transaction."""
    def __init__(
        self,
        message: str = "apply error",
        *,
        code: str = "APPLY/ERROR",
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, data=data)


class InvalidTransaction(ApplyError):
    """
    The transaction violates the family's rules.

    Usage:
        raise InvalidTransaction("space already taken", data={"space": 5})
    """
    def __init__(self, message: str = "invalid transaction", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="APPLY/INVALID_TRANSACTION", data=data)


class InternalError(ApplyError):
    """The handler could not evaluate the transaction (state or config failure)."""
    def __init__(self, message: str = "internal error", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="APPLY/INTERNAL", data=data)


class DispatchError(ApplyError):
    """No registered handler accepts the transaction's family/version."""
    def __init__(
        self,
        message: str = "no handler for transaction",
        *,
        family_name: Optional[str] = None,
        family_version: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if family_name is not None:
            d.setdefault("family_name", family_name)
        if family_version is not None:
            d.setdefault("family_version", family_version)
        super().__init__(message, code="APPLY/NO_HANDLER", data=d or None)


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: TransactError) -> Dict[str, Any]:
    """
    Map an error to executor-facing result fields.

    Returns:
        {
          "status": "invalid" | "internal",
          "error":  {code, message, data?}
        }
    """
    if isinstance(err, (InvalidTransaction, DispatchError)):
        status = "invalid"
    else:
        status = "internal"
    return {"status": status, "error": err.to_dict()}


__all__ = [
    "TransactError",
    "AddresserError",
    "ContextError",
    "ContractContextError",
    "ApplyError",
    "InvalidTransaction",
    "InternalError",
    "DispatchError",
    "error_to_result_fields",
]
