"""
transact.protocol.events — events recorded by handlers through their context.

An event is a typed notification with ordered string attributes and an opaque
payload. Unlike state entries, events are not address-keyed; contexts forward
them verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple


@dataclass(frozen=True)
class Event:
    """
    Attributes:
        event_type: str                      — e.g. "xo/take"
        attributes: tuple[(str, str), ...]   — ordered key/value pairs
        data:       bytes                    — unstructured payload
    """

    event_type: str
    attributes: Tuple[Tuple[str, str], ...] = ()
    data: bytes = b""

    def __init__(
        self,
        event_type: str,
        attributes: Iterable[Tuple[str, str]] = (),
        data: bytes = b"",
    ):
        if not event_type:
            raise ValueError("event_type must not be empty")
        attrs = tuple((str(k), str(v)) for k, v in attributes)
        object.__setattr__(self, "event_type", event_type)
        object.__setattr__(self, "attributes", attrs)
        object.__setattr__(self, "data", bytes(data))

    def attribute(self, name: str, default: str = "") -> str:
        """First value recorded for `name`."""
        for k, v in self.attributes:
            if k == name:
                return v
        return default

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "attributes": [list(kv) for kv in self.attributes],
            "data": "0x" + self.data.hex(),
        }


__all__ = ["Event"]
