"""
transact.metrics — Prometheus counters & histograms for contract handlers.

* Centralized registry: consumers can call `get_registry()` and `generate_latest_text()`
  to expose metrics via HTTP from whatever application embeds the handlers.
* Simple helpers: `observe_apply(...)`, `time_apply(...)` and `observe_context_op(...)`
  cover the common paths.

Exposed metrics (names are prefixed with `transact_`):
  - handler_apply_total{family,result}   : Counter — transactions applied by outcome
  - handler_apply_seconds{family}        : Histogram — wall time of one `apply`
  - context_keys{op}                     : Histogram — natural keys per context batch

Labels:
  - result ∈ {valid, invalid, internal}
  - op     ∈ {get, set, delete}
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# ------------------------------ configuration -------------------------------

_PREFIX = "transact_"


def _buckets_from_env(name: str, default: Iterable[float]) -> Iterable[float]:
    raw = os.getenv(name)
    if not raw:
        return default
    out = []
    for tok in raw.split(","):
        tok = tok.strip()
        if not tok:
            continue
        try:
            out.append(float(tok))
        except ValueError:
            # ignore bad tokens
            continue
    return out or default


_APPLY_SECONDS_BUCKETS = tuple(_buckets_from_env(
    "TRANSACT_METRICS_APPLY_SECONDS_BUCKETS",
    # 100µs .. 5s
    (0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
))
_CONTEXT_KEYS_BUCKETS = tuple(_buckets_from_env(
    "TRANSACT_METRICS_CONTEXT_KEYS_BUCKETS",
    (1, 2, 4, 8, 16, 32, 64, 128, 256, 512, 1024),
))


# ------------------------------ registry & ctor ------------------------------

_registry: Optional[CollectorRegistry] = None

# Metric singletons (bound during _build_metrics)
HANDLER_APPLY_TOTAL: Counter
HANDLER_APPLY_SECONDS: Histogram
CONTEXT_KEYS: Histogram


def get_registry() -> CollectorRegistry:
    """
    Return the metrics registry, creating one on first use.
    """
    global _registry
    if _registry is None:
        _registry = CollectorRegistry()
        _build_metrics(_registry)
    return _registry


def _build_metrics(reg: CollectorRegistry) -> None:
    global HANDLER_APPLY_TOTAL, HANDLER_APPLY_SECONDS, CONTEXT_KEYS

    HANDLER_APPLY_TOTAL = Counter(
        _PREFIX + "handler_apply_total",
        "Transactions applied by contract handlers (by family and result).",
        labelnames=("family", "result"),
        registry=reg,
    )
    HANDLER_APPLY_SECONDS = Histogram(
        _PREFIX + "handler_apply_seconds",
        "Wall time of a single handler apply.",
        labelnames=("family",),
        buckets=_APPLY_SECONDS_BUCKETS,
        registry=reg,
    )
    CONTEXT_KEYS = Histogram(
        _PREFIX + "context_keys",
        "Natural keys per key-value context batch.",
        labelnames=("op",),
        buckets=_CONTEXT_KEYS_BUCKETS,
        registry=reg,
    )


# ------------------------------ helpers -------------------------------------


def _norm_result(s: str) -> str:
    s = (s or "").strip().lower()
    if s in {"ok", "valid", "success"}:
        return "valid"
    if s in {"invalid", "invalid_transaction"}:
        return "invalid"
    return "internal"


def observe_apply(*, family: str, result: str) -> None:
    """
    Count one applied transaction.

    Args:
        family: handler family name
        result: logical outcome {'valid','invalid','internal'} (flexibly normalized)
    """
    get_registry()
    HANDLER_APPLY_TOTAL.labels(family=family, result=_norm_result(result)).inc()


def observe_context_op(*, op: str, keys: int) -> None:
    """Record the batch size of a key-value context operation."""
    get_registry()
    CONTEXT_KEYS.labels(op=op).observe(float(keys))


@dataclass
class _TimerCtx:
    h: Histogram
    labels: Dict[str, str]
    t0: float

    def stop(self) -> float:
        dt = max(0.0, time.perf_counter() - self.t0)
        self.h.labels(**self.labels).observe(dt)
        return dt

    def __enter__(self) -> "_TimerCtx":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def time_apply(family: str) -> _TimerCtx:
    """
    Context manager timing one handler apply.

    Example:
        with time_apply("xo"):
            handler.apply(txn, ctx)
    """
    get_registry()
    return _TimerCtx(
        h=HANDLER_APPLY_SECONDS,
        labels={"family": family},
        t0=time.perf_counter(),
    )


# ------------------------------ exposition ----------------------------------


def generate_latest_text() -> bytes:
    """
    Return Prometheus exposition format for the current registry.
    """
    return generate_latest(get_registry())


__all__ = [
    "get_registry",
    "generate_latest_text",
    "observe_apply",
    "observe_context_op",
    "time_apply",
    "CONTENT_TYPE_LATEST",
]
