"""
transact.protocol.transaction — the transaction as seen by a contract handler.

The executor decodes and verifies transactions elsewhere; handlers receive this
frozen record and route on `family_name`/`family_version`.

Conventions
-----------
* `payload` is the raw family-specific payload bytes.
* `signer_public_key` and `header_signature` are hex strings, as produced by the
  signing layer; `header_signature` doubles as the transaction id.

Utilities
---------
* Hex-friendly (de)serialization via `to_dict()` / `from_dict()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

HexLike = Union[str, bytes, bytearray, memoryview]


def _hex_to_bytes(v: HexLike) -> bytes:
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


@dataclass(frozen=True)
class Transaction:
    """
    A transaction addressed to one family.

    Attributes:
        family_name:       str   — family the payload belongs to (e.g. "xo")
        family_version:    str   — version of the family semantics (e.g. "1.0")
        payload:           bytes — family-specific payload
        signer_public_key: str   — hex public key of the signer
        nonce:             str   — signer-chosen uniqueness value
        header_signature:  str   — hex header signature, the transaction id
    """

    family_name: str
    family_version: str
    payload: bytes = b""
    signer_public_key: str = ""
    nonce: str = ""
    header_signature: str = ""

    def __post_init__(self) -> None:
        if not self.family_name:
            raise ValueError("family_name must not be empty")
        if not self.family_version:
            raise ValueError("family_version must not be empty")
        if not isinstance(self.payload, bytes):
            object.__setattr__(self, "payload", _hex_to_bytes(self.payload))

    @property
    def id(self) -> str:
        return self.header_signature

    def to_dict(self) -> Dict[str, Any]:
        return {
            "family_name": self.family_name,
            "family_version": self.family_version,
            "payload": "0x" + self.payload.hex(),
            "signer_public_key": self.signer_public_key,
            "nonce": self.nonce,
            "header_signature": self.header_signature,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Transaction":
        return cls(
            family_name=str(d["family_name"]),
            family_version=str(d["family_version"]),
            payload=_hex_to_bytes(d.get("payload", b"")),
            signer_public_key=str(d.get("signer_public_key", "")),
            nonce=str(d.get("nonce", "")),
            header_signature=str(d.get("header_signature", "")),
        )


__all__ = ["Transaction"]
