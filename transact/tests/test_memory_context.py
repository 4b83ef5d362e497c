import io
import json
import logging

import pytest

from transact import logging as tlog
from transact.config import load_config
from transact.errors import ContextError
from transact.handler import TransactionContext
from transact.metrics import generate_latest_text, observe_apply
from transact.protocol.events import Event
from transact.protocol.transaction import Transaction
from transact.state.memory import InMemoryTransactionContext

A1 = "5b7349" + "1" * 64
A2 = "5b7349" + "2" * 64
B1 = "cafe01" + "3" * 64


# ---------------------------------------------------------------------------
# In-memory raw context
# ---------------------------------------------------------------------------


def test_is_a_transaction_context():
    assert isinstance(InMemoryTransactionContext(), TransactionContext)


def test_get_set_delete():
    ctx = InMemoryTransactionContext({A1: b"one"})
    ctx.set_state_entries([(A2, bytearray(b"two")), (B1, b"three")])

    assert ctx.get_state_entries([A1, A2, "5b7349" + "f" * 64]) == [(A1, b"one"), (A2, b"two")]
    assert list(ctx.addresses("5b7349")) == [A1, A2]
    assert ctx.delete_state_entries([A1, A1, B1]) == [A1, B1]
    assert ctx.state_snapshot() == {A2: b"two"}
    assert len(ctx) == 1


@pytest.mark.parametrize("address", ["short", "5B7349" + "1" * 64, A1 + "0", 70])
def test_rejects_malformed_addresses(address):
    ctx = InMemoryTransactionContext()
    with pytest.raises(ContextError):
        ctx.get_state_entries([address])
    with pytest.raises(ContextError):
        ctx.set_state_entries([(address, b"x")])


def test_rejects_non_bytes_values():
    with pytest.raises(ContextError):
        InMemoryTransactionContext().set_state_entries([(A1, "text")])
    with pytest.raises(ContextError):
        InMemoryTransactionContext({A1: 5})


def test_receipts_and_events_keep_order():
    ctx = InMemoryTransactionContext()
    ctx.add_receipt_data(b"r1")
    ctx.add_receipt_data(memoryview(b"r2"))
    ctx.add_event("a", [("k", "v")], b"")
    ctx.add_event("b", [], b"\x00")
    assert ctx.receipt_data == (b"r1", b"r2")
    assert [e.event_type for e in ctx.events] == ["a", "b"]


# ---------------------------------------------------------------------------
# Transaction / Event records
# ---------------------------------------------------------------------------


def test_transaction_round_trips_through_dict():
    txn = Transaction("xo", "1.0", b"g,create", "02ab", "n1", "beef")
    assert txn.id == "beef"
    d = txn.to_dict()
    assert d["payload"] == "0x" + b"g,create".hex()
    assert Transaction.from_dict(d) == txn


def test_transaction_requires_family():
    with pytest.raises(ValueError):
        Transaction("", "1.0")
    with pytest.raises(ValueError):
        Transaction("xo", "")
    assert Transaction("xo", "1.0", "0x0102").payload == b"\x01\x02"  # type: ignore[arg-type]


def test_event_attributes():
    ev = Event("xo/take", [("name", "g"), ("state", "P2-NEXT")], b"")
    assert ev.attribute("state") == "P2-NEXT"
    assert ev.attribute("missing", "-") == "-"
    assert ev.to_dict() == {
        "event_type": "xo/take",
        "attributes": [["name", "g"], ["state", "P2-NEXT"]],
        "data": "0x",
    }
    with pytest.raises(ValueError):
        Event("")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture
def json_log():
    root = logging.getLogger()
    level = root.level
    stream = io.StringIO()
    tlog.configure(json=True, level="DEBUG", stream=stream)
    yield stream
    for h in list(root.handlers):
        if isinstance(h.formatter, (tlog.JSONFormatter, tlog.TextFormatter)):
            root.removeHandler(h)
    root.setLevel(level)


def test_trace_scope_fields_reach_json_output(json_log):
    log = tlog.get_logger("transact.test")
    with tlog.trace_scope("t-1", family="xo", tx_id=b"\xbe\xef") as tid:
        log.info("applying", extra={"keys": 3})
    log.info("outside")

    inside, outside = [json.loads(line) for line in json_log.getvalue().splitlines()]
    assert tid == "t-1"
    assert inside["trace_id"] == "t-1"
    assert inside["family"] == "xo"
    assert inside["tx_id"] == "beef"
    assert inside["keys"] == 3
    assert inside["msg"] == "applying"
    assert "trace_id" not in outside


def test_with_fields_adds_constant_fields(json_log):
    log = tlog.with_fields(tlog.get_logger("transact.test"), component="engine")
    log.warning("registered")
    (line,) = json_log.getvalue().splitlines()
    doc = json.loads(line)
    assert doc["component"] == "engine"
    assert doc["level"] == "WARNING"


def test_bind_and_unbind():
    tlog.bind(component="cli")
    assert tlog.context() == {"component": "cli"}
    tlog.unbind("component")
    assert tlog.context() == {}


def test_text_format_from_config():
    root = logging.getLogger()
    level = root.level
    stream = io.StringIO()
    tlog.configure_from_config(
        load_config(env={}, overrides={"log_format": "text", "log_level": "warning"}),
        stream=stream,
    )
    try:
        with tlog.trace_scope(family="xo"):
            tlog.get_logger("transact.test").warning("collision")
            tlog.get_logger("transact.test").info("hidden")
    finally:
        for h in list(root.handlers):
            if isinstance(h.formatter, (tlog.JSONFormatter, tlog.TextFormatter)):
                root.removeHandler(h)
        root.setLevel(level)

    (line,) = stream.getvalue().splitlines()
    assert "WARNING" in line
    assert "family=xo" in line
    assert line.endswith("| collision")


def test_metrics_exposition_lists_handler_metrics():
    observe_apply(family="xo", result="ok")
    text = generate_latest_text().decode()
    assert 'transact_handler_apply_total{family="xo",result="valid"}' in text


def test_blank_event_type_is_a_context_error():
    ctx = InMemoryTransactionContext()
    with pytest.raises(ContextError) as ei:
        ctx.add_event("", [("k", "v")], b"")
    assert isinstance(ei.value.__cause__, ValueError)
    assert ctx.events == ()
