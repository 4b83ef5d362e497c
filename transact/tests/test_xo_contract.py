import pytest

from transact.contract.address.key_hash import KeyHashAddresser
from transact.contract.context import KeyValueTransactionContext
from transact.contract.engine import SmartContractEngine
from transact.errors import InvalidTransaction
from transact.examples.xo import (XO_PREFIX, XoPayload, XoSmartContract,
                                  next_state, winner)
from transact.protocol.transaction import Transaction
from transact.state.memory import InMemoryTransactionContext

P1 = "02" + "11" * 32
P2 = "03" + "22" * 32


def _send(engine, raw, payload, signer=P1):
    engine.apply(
        Transaction(
            family_name="xo",
            family_version="1.0",
            payload=payload.encode(),
            signer_public_key=signer,
        ),
        raw,
    )


def _game(raw, name):
    return KeyValueTransactionContext(raw, KeyHashAddresser(XO_PREFIX)).get_state_entry(name)


@pytest.fixture
def engine():
    return SmartContractEngine([XoSmartContract()])


# -------------------------------- payload -----------------------------------


@pytest.mark.parametrize(
    "payload,message",
    [
        (b"game", "Invalid payload serialization"),
        (b"a,b,c,d", "Invalid payload serialization"),
        (b"\xff\xfe", "Invalid payload serialization"),
        (b",create", "Name is required"),
        (b"a|b,create", 'Name cannot contain "|"'),
        (b"game,jump", "Invalid action: jump"),
        (b"game,take,x", "Space must be an integer"),
        (b"game,take,10", "Invalid space: 10"),
        (b"game,take", "Space must be an integer"),
    ],
)
def test_bad_payloads(payload, message):
    with pytest.raises(InvalidTransaction) as ei:
        XoPayload.from_bytes(payload)
    assert message in ei.value.message


def test_payload_parsing():
    assert XoPayload.from_bytes(b"game,take,5") == XoPayload("game", "take", 5)
    assert XoPayload.from_bytes(b"game,create") == XoPayload("game", "create")


# -------------------------------- board -------------------------------------


def test_winner_and_next_state():
    assert winner("XXX------") == "X"
    assert winner("O---O---O") == "O"
    assert winner("XO-------") is None
    assert next_state("XXX-OO---", "P1-NEXT") == "P1-WIN"
    assert next_state("XOXXOOOXX", "P1-NEXT") == "TIE"
    assert next_state("X--------", "P1-NEXT") == "P2-NEXT"
    assert next_state("XO-------", "P2-NEXT") == "P1-NEXT"


# -------------------------------- game --------------------------------------


def test_create_game(engine):
    raw = InMemoryTransactionContext()
    _send(engine, raw, "game1,create")

    assert _game(raw, "game1") == {
        "board": "---------",
        "state": "P1-NEXT",
        "player1": "",
        "player2": "",
    }
    assert raw.addresses() == [KeyHashAddresser(XO_PREFIX).compute("game1")]
    (event,) = raw.events
    assert event.event_type == "xo/create"
    assert event.attribute("name") == "game1"
    assert event.attribute("state") == "P1-NEXT"


def test_create_existing_game_is_invalid(engine):
    raw = InMemoryTransactionContext()
    _send(engine, raw, "game1,create")
    with pytest.raises(InvalidTransaction, match="Game already exists"):
        _send(engine, raw, "game1,create")


def test_full_game_to_a_win(engine):
    raw = InMemoryTransactionContext()
    _send(engine, raw, "g,create")
    for space, signer in [(1, P1), (4, P2), (2, P1), (5, P2), (3, P1)]:
        _send(engine, raw, f"g,take,{space}", signer)

    game = _game(raw, "g")
    assert game["board"] == "XXXOO----"
    assert game["state"] == "P1-WIN"
    assert game["player1"] == P1
    assert game["player2"] == P2

    with pytest.raises(InvalidTransaction, match="Game has ended"):
        _send(engine, raw, "g,take,9", P2)


def test_wrong_player_and_taken_space(engine):
    raw = InMemoryTransactionContext()
    _send(engine, raw, "g,create")
    _send(engine, raw, "g,take,5", P1)

    _send(engine, raw, "g,take,1", P2)

    with pytest.raises(InvalidTransaction, match="Not this player"):
        _send(engine, raw, "g,take,2", P2)
    with pytest.raises(InvalidTransaction, match="already taken"):
        _send(engine, raw, "g,take,5", P1)


def test_take_requires_existing_game(engine):
    with pytest.raises(InvalidTransaction):
        _send(engine, InMemoryTransactionContext(), "nope,take,1")


def test_delete_game(engine):
    raw = InMemoryTransactionContext()
    _send(engine, raw, "g,create")
    _send(engine, raw, "g,delete")

    assert _game(raw, "g") is None
    assert len(raw) == 0
    assert raw.events[-1].event_type == "xo/delete"
    assert raw.events[-1].attribute("state") == "DELETED"

    with pytest.raises(InvalidTransaction):
        _send(engine, raw, "g,delete")


def test_contract_declares_its_family():
    contract = XoSmartContract()
    assert contract.family_name == "xo"
    assert contract.family_versions == ["1.0"]
    assert contract.addresser == KeyHashAddresser(XO_PREFIX)
