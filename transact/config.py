"""
transact.config — runtime configuration for address derivation and contract contexts.

This module centralizes knobs for:
  • Logging (level and output format used by the CLI and embedding applications)
  • Feature flags (strict hex prefixes, address collision warnings)
  • Limits (maximum number of natural keys in one context batch)

Configuration may be provided via environment variables. Safe defaults are chosen so a
local developer run works out of the box.

Environment variables (all optional):
  TRANSACT_LOG_LEVEL          -> DEBUG/INFO/WARNING/ERROR (default: INFO)
  TRANSACT_LOG_FORMAT         -> json/text (default: auto, text on a TTY)
  TRANSACT_STRICT_PREFIX      -> 0/1/true/false (default: 0)
  TRANSACT_CHECK_COLLISIONS   -> 0/1/true/false (default: 1)
  TRANSACT_MAX_BATCH_KEYS     -> integer, 0 = unlimited (default: 1024)

Programmatic usage:
    from transact.config import get_config
    cfg = get_config()
    if cfg.features.strict_prefix:
        ...

Note: This module does not perform any I/O beyond reading env vars.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    # Be forgiving: non-empty → True, empty → default
    return bool(v) if v != "" else default


def _log_format(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = value.strip().lower()
    if v in ("json", "text"):
        return v
    if v in ("", "auto"):
        return None
    raise ValueError(f"invalid log format: {value!r} (expected json or text)")


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: Optional[str] = None  # None → decided by TTY detection


@dataclass(frozen=True)
class FeatureFlags:
    strict_prefix: bool = False
    check_collisions: bool = True


@dataclass(frozen=True)
class Limits:
    max_batch_keys: int = 1024  # 0 = unlimited


@dataclass(frozen=True)
class TransactConfig:
    logging: LoggingConfig
    features: FeatureFlags
    limits: Limits

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------ loader --------------------------------------


def _validate(cfg: TransactConfig) -> TransactConfig:
    if cfg.logging.level not in _LOG_LEVELS:
        raise ValueError(f"log level must be one of {_LOG_LEVELS}")
    if cfg.limits.max_batch_keys < 0:
        raise ValueError("max_batch_keys must be ≥ 0")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bool]]] = None,
) -> TransactConfig:
    """
    Build a TransactConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'log_level', 'log_format', 'strict_prefix', 'check_collisions',
          'max_batch_keys'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    logging_cfg = LoggingConfig(
        level=str(
            overrides.get("log_level", env.get("TRANSACT_LOG_LEVEL", "INFO"))
        ).strip().upper(),
        format=_log_format(
            overrides.get("log_format", env.get("TRANSACT_LOG_FORMAT"))  # type: ignore[arg-type]
        ),
    )

    features = FeatureFlags(
        strict_prefix=_bool_env(
            env.get("TRANSACT_STRICT_PREFIX"),
            bool(overrides.get("strict_prefix", False)),
        ),
        check_collisions=_bool_env(
            env.get("TRANSACT_CHECK_COLLISIONS"),
            bool(overrides.get("check_collisions", True)),
        ),
    )

    limits = Limits(
        max_batch_keys=int(
            overrides.get(
                "max_batch_keys", env.get("TRANSACT_MAX_BATCH_KEYS", 1024)
            )
        ),
    )

    return _validate(
        TransactConfig(logging=logging_cfg, features=features, limits=limits)
    )


@lru_cache(maxsize=1)
def get_config() -> TransactConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[TransactConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the configuration.
    """
    cfg = cfg or get_config()
    f = cfg.features
    return (
        "transact{"
        f"log={cfg.logging.level}/{cfg.logging.format or 'auto'}, "
        f"strict_prefix={int(f.strict_prefix)}, collisions={int(f.check_collisions)}, "
        f"max_batch={cfg.limits.max_batch_keys or 'unlimited'}"
        "}"
    )


__all__ = [
    "LoggingConfig",
    "FeatureFlags",
    "Limits",
    "TransactConfig",
    "load_config",
    "get_config",
    "summary",
]
