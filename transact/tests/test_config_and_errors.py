import pytest

from transact import __version__
from transact.config import get_config, load_config, summary
from transact.errors import (AddresserError, ApplyError, ContextError,
                             ContractContextError, DispatchError,
                             InternalError, InvalidTransaction, TransactError,
                             error_to_result_fields)

# -------------------------------- config ------------------------------------


def test_defaults():
    cfg = load_config(env={})
    assert cfg.logging.level == "INFO"
    assert cfg.logging.format is None
    assert cfg.features.strict_prefix is False
    assert cfg.features.check_collisions is True
    assert cfg.limits.max_batch_keys == 1024
    assert summary(cfg) == (
        "transact{log=INFO/auto, strict_prefix=0, collisions=1, max_batch=1024}"
    )


def test_environment_values():
    cfg = load_config(
        env={
            "TRANSACT_LOG_LEVEL": "debug",
            "TRANSACT_LOG_FORMAT": "JSON",
            "TRANSACT_STRICT_PREFIX": "yes",
            "TRANSACT_CHECK_COLLISIONS": "off",
            "TRANSACT_MAX_BATCH_KEYS": "0",
        }
    )
    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.format == "json"
    assert cfg.features.strict_prefix is True
    assert cfg.features.check_collisions is False
    assert cfg.limits.max_batch_keys == 0
    assert "max_batch=unlimited" in summary(cfg)


def test_overrides():
    cfg = load_config(env={}, overrides={"log_level": "warning", "max_batch_keys": 8})
    assert cfg.logging.level == "WARNING"
    assert cfg.limits.max_batch_keys == 8
    assert cfg.to_dict()["limits"] == {"max_batch_keys": 8}


@pytest.mark.parametrize(
    "env",
    [
        {"TRANSACT_LOG_LEVEL": "loud"},
        {"TRANSACT_LOG_FORMAT": "xml"},
        {"TRANSACT_MAX_BATCH_KEYS": "-1"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_config(env=env)


def test_get_config_is_cached(monkeypatch):
    monkeypatch.setenv("TRANSACT_MAX_BATCH_KEYS", "7")
    first = get_config()
    monkeypatch.setenv("TRANSACT_MAX_BATCH_KEYS", "9")
    assert get_config() is first
    assert first.limits.max_batch_keys == 7


def test_version_is_semver():
    major, minor, patch = __version__.split(".")
    assert all(part.isdigit() for part in (major, minor, patch))


# -------------------------------- errors ------------------------------------


def test_error_codes():
    assert AddresserError().code == "ADDRESSER/CONFIG"
    assert ContextError().code == "CONTEXT/ERROR"
    assert ContractContextError().code == "CONTRACT_CONTEXT/ERROR"
    assert ApplyError().code == "APPLY/ERROR"
    assert InvalidTransaction().code == "APPLY/INVALID_TRANSACTION"
    assert InternalError().code == "APPLY/INTERNAL"
    assert DispatchError().code == "APPLY/NO_HANDLER"
    for cls in (InvalidTransaction, InternalError, DispatchError):
        assert issubclass(cls, ApplyError)
    for cls in (AddresserError, ContextError, ContractContextError, ApplyError):
        assert issubclass(cls, TransactError)


def test_structured_details():
    err = AddresserError("too long", prefix="ab", lengths=(40, 40), data={"total": 82})
    assert err.to_dict() == {
        "code": "ADDRESSER/CONFIG",
        "message": "too long",
        "data": {"total": 82, "prefix": "ab", "lengths": [40, 40]},
    }
    assert ContractContextError("x", key="'k'").data == {"key": "'k'"}
    assert ContextError("x").to_dict() == {"code": "CONTEXT/ERROR", "message": "x"}


def test_error_to_result_fields():
    assert error_to_result_fields(InvalidTransaction("bad"))["status"] == "invalid"
    assert error_to_result_fields(DispatchError(family_name="xo"))["status"] == "invalid"
    fields = error_to_result_fields(InternalError("boom"))
    assert fields == {
        "status": "internal",
        "error": {"code": "APPLY/INTERNAL", "message": "boom"},
    }
