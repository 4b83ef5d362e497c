import hashlib
import json
import logging

import pytest

from transact import __version__
from transact import logging as tlog
from transact.cli.address_generator import main, make_addresser
from transact.contract.address.double_key_hash import DoubleKeyHashAddresser
from transact.contract.address.key_hash import KeyHashAddresser
from transact.contract.address.triple_key_hash import TripleKeyHashAddresser


def _sha512_hex(key: str) -> str:
    return hashlib.sha512(key.encode("utf-8")).hexdigest()


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for h in list(root.handlers):
        if isinstance(h.formatter, (tlog.JSONFormatter, tlog.TextFormatter)):
            root.removeHandler(h)
    root.setLevel(level)


def _run(capsys, *argv):
    code = main(["--log-level", "CRITICAL", *argv])
    return code, capsys.readouterr().out


def test_make_addresser_picks_by_key_count():
    assert make_addresser("ab", 1) == KeyHashAddresser("ab")
    assert make_addresser("ab", 2, 16) == DoubleKeyHashAddresser("ab", 16)
    assert make_addresser("ab", 3, None, 14) == TripleKeyHashAddresser("ab", None, 14)
    with pytest.raises(ValueError):
        make_addresser("ab", 1, 10)
    with pytest.raises(ValueError):
        make_addresser("ab", 2, None, 10)
    with pytest.raises(ValueError):
        make_addresser("ab", 4)


def test_single_key(capsys):
    code, out = _run(capsys, "--prefix", "5b7349", "game")
    assert code == 0
    assert out.strip() == "5b7349" + _sha512_hex("game")[:64]


def test_double_key_with_first_length(capsys):
    code, out = _run(capsys, "--prefix", "cafe01", "alice", "bob", "--first-length", "16")
    assert code == 0
    assert out.strip() == "cafe01" + _sha512_hex("alice")[:16] + _sha512_hex("bob")[:48]


def test_triple_key_json_with_normalized_key(capsys):
    code, out = _run(capsys, "--prefix", "abcdef", "a", "b", "c", "--json", "--normalize")
    assert code == 0
    doc = json.loads(out)
    assert doc == {
        "prefix": "abcdef",
        "keys": ["a", "b", "c"],
        "address": TripleKeyHashAddresser("abcdef").compute(("a", "b", "c")),
        "normalized": "a_b_c",
    }


def test_plain_output_with_normalized_key(capsys):
    code, out = _run(capsys, "--prefix", "abcdef", "a", "b", "--normalize")
    assert code == 0
    address, normalized = out.split()
    assert len(address) == 70
    assert normalized == "a_b"


def test_too_many_keys(capsys):
    code, out = _run(capsys, "--prefix", "ab", "a", "b", "c", "d")
    assert code == 2
    assert out == ""


def test_unusable_allocation(capsys):
    code, out = _run(capsys, "--prefix", "ab", "a", "b", "--first-length", "90")
    assert code == 2
    assert out == ""


def test_length_option_with_one_key(capsys):
    code, _ = _run(capsys, "--prefix", "ab", "a", "--first-length", "4")
    assert code == 2


def test_prefix_is_required(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["a"])
    assert ei.value.code == 2


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as ei:
        main(["--version"])
    assert ei.value.code == 0
    assert capsys.readouterr().out.strip() == f"transact-address {__version__}"
