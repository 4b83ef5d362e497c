"""
transact.contract.context.encoding — deterministic CBOR for state entries.

Every radix address holds one CBOR array of entries, one per natural key that
derived that address:

  StateEntryList = [ StateEntry ]          ; sorted by `key`
  StateEntry = {
    key:    tstr,                          ; normalized natural key
    values: { * tstr => bool / int / tstr / bstr }
  }

Keeping the normalized key next to the values lets two natural keys whose
digests collide on the same address coexist without overwriting each other.
Maps are encoded canonically so equal states always produce equal bytes.

Public API
----------
- encode_entries(bucket) -> bytes
- decode_entries(data) -> dict[normalized_key, values]
- check_values(values) -> dict
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Union

import cbor2

StateValue = Union[bool, int, str, bytes]

_VALUE_TYPES = (bool, int, str, bytes)


def check_values(values: Any) -> Dict[str, StateValue]:
    """
    Validate one field map and return a plain dict copy.

    Raises:
        TypeError if `values` is not a mapping of str → bool/int/str/bytes.
    """
    if not isinstance(values, Mapping):
        raise TypeError(f"state values must be a mapping, got {type(values).__name__}")
    out: Dict[str, StateValue] = {}
    for name, value in values.items():
        if not isinstance(name, str):
            raise TypeError(f"state value names must be str, got {type(name).__name__}")
        if isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        if not isinstance(value, _VALUE_TYPES):
            raise TypeError(
                f"unsupported state value type for {name!r}: {type(value).__name__}"
            )
        out[name] = value
    return out


def encode_entries(bucket: Mapping[str, Mapping[str, StateValue]]) -> bytes:
    """Serialize {normalized_key: values} to canonical CBOR bytes."""
    obj = [
        {"key": key, "values": dict(bucket[key])}
        for key in sorted(bucket)
    ]
    return cbor2.dumps(obj, canonical=True)


def decode_entries(data: bytes) -> Dict[str, Dict[str, StateValue]]:
    """
    Deserialize CBOR bytes into {normalized_key: values}.

    Raises:
        ValueError on malformed bytes or an unexpected shape.
    """
    try:
        obj = cbor2.loads(bytes(data))
    except (cbor2.CBORDecodeError, EOFError) as e:
        raise ValueError(f"state entry is not valid CBOR: {e}") from e

    if not isinstance(obj, list):
        raise ValueError("state entry must decode to an array")
    out: Dict[str, Dict[str, StateValue]] = {}
    for item in obj:
        if not isinstance(item, Mapping) or "key" not in item or "values" not in item:
            raise ValueError("state entry items must be maps with key and values")
        key = item["key"]
        if not isinstance(key, str):
            raise ValueError("state entry key must be a text string")
        try:
            out[key] = check_values(item["values"])
        except TypeError as e:
            raise ValueError(str(e)) from e
    return out


__all__ = ["StateValue", "check_values", "encode_entries", "decode_entries"]
