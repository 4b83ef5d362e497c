#!/usr/bin/env python3
"""
transact.cli.address_generator — print the radix address for natural keys.

The addresser is chosen by the number of keys given:
  1 key  → KeyHashAddresser(prefix)
  2 keys → DoubleKeyHashAddresser(prefix, --first-length)
  3 keys → TripleKeyHashAddresser(prefix, --first-length, --second-length)

Usage:
    python -m transact.cli.address_generator --prefix 5b7349 my-game
    transact-address --prefix cafe01 alice bob --first-length 16 --json

Options:
    --first-length   Characters taken from the first key's digest (2 or 3 keys).
    --second-length  Characters taken from the second key's digest (3 keys).
    --normalize      Also print the normalized key.
    --json           Print a JSON object instead of the bare address.

Exit status: 0 on success, 2 on bad arguments or an unusable allocation.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from transact import __version__
from transact import logging as tlog
from transact.config import get_config
from transact.contract.address import Addresser
from transact.contract.address.double_key_hash import DoubleKeyHashAddresser
from transact.contract.address.key_hash import KeyHashAddresser
from transact.contract.address.triple_key_hash import TripleKeyHashAddresser
from transact.errors import AddresserError

log = logging.getLogger("transact.cli.address_generator")

MAX_KEYS = 3


def make_addresser(
    prefix: str,
    key_count: int,
    first_length: Optional[int] = None,
    second_length: Optional[int] = None,
) -> Addresser[Any]:
    """Pick the addresser matching `key_count`."""
    if key_count == 1:
        if first_length is not None or second_length is not None:
            raise ValueError("fragment lengths only apply to 2 or 3 keys")
        return KeyHashAddresser(prefix)
    if key_count == 2:
        if second_length is not None:
            raise ValueError("--second-length only applies to 3 keys")
        return DoubleKeyHashAddresser(prefix, first_length)
    if key_count == 3:
        return TripleKeyHashAddresser(prefix, first_length, second_length)
    raise ValueError(f"expected 1 to {MAX_KEYS} keys, got {key_count}")


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="transact-address",
        description="Compute the radix address of one to three natural keys.",
    )
    p.add_argument("--prefix", required=True, help="the prefix of the radix address")
    p.add_argument(
        "keys",
        nargs="+",
        metavar="KEY",
        help="the natural key(s) used to compute the radix address",
    )
    p.add_argument("--first-length", type=int, default=None)
    p.add_argument("--second-length", type=int, default=None)
    p.add_argument("--normalize", action="store_true", help="also print the normalized key")
    p.add_argument("--json", action="store_true", help="print a JSON object")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--log-level",
        default=None,
        help="log level (default: TRANSACT_LOG_LEVEL or INFO)",
    )
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(list(sys.argv[1:] if argv is None else argv))
    cfg = get_config()
    tlog.configure(
        json=None if cfg.logging.format is None else cfg.logging.format == "json",
        level=args.log_level or cfg.logging.level,
    )

    if len(args.keys) > MAX_KEYS:
        log.error("Unable to compute radix address: expected at most %d keys", MAX_KEYS)
        return 2

    key: Any = args.keys[0] if len(args.keys) == 1 else tuple(args.keys)
    try:
        addresser = make_addresser(
            args.prefix, len(args.keys), args.first_length, args.second_length
        )
        address = addresser.compute(key)
    except (ValueError, TypeError) as e:
        log.error("Unable to compute radix address: %s", e)
        return 2
    except AddresserError as e:
        log.error("Unable to compute radix address: %s", e, extra={"code": e.code})
        return 2

    if args.json:
        out: Dict[str, Any] = {"prefix": args.prefix, "keys": args.keys, "address": address}
        if args.normalize:
            out["normalized"] = addresser.normalize(key)
        print(json.dumps(out, indent=2, sort_keys=True))
    else:
        print(address)
        if args.normalize:
            print(addresser.normalize(key))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
