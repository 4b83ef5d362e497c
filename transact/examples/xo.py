"""
Tic-tac-toe ("xo") smart contract on a KeyHashAddresser.

Payload (UTF-8 CSV):

    name,action[,space]

    create  → start game `name` (must not exist)
    take    → mark `space` (1..9) for the player whose turn it is
    delete  → remove game `name` (must exist)

State (natural key = game name):

    {"board": "---------", "state": "P1-NEXT", "player1": "", "player2": ""}

The first two distinct signers to take a space become player 1 (X) and player 2 (O).
Every applied transaction emits an `xo/<action>` event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Final, List, Optional, Tuple

from transact.contract.address.key_hash import KeyHashAddresser
from transact.contract.context import KeyValueTransactionContext
from transact.errors import InvalidTransaction
from transact.protocol.transaction import Transaction

FAMILY_NAME: Final[str] = "xo"
FAMILY_VERSIONS: Final[Tuple[str, ...]] = ("1.0",)
XO_PREFIX: Final[str] = "5b7349"

EMPTY_BOARD: Final[str] = "-" * 9

_WINNING_LINES: Final[Tuple[Tuple[int, int, int], ...]] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

_FINISHED: Final[Tuple[str, ...]] = ("P1-WIN", "P2-WIN", "TIE")


@dataclass(frozen=True)
class XoPayload:
    name: str
    action: str
    space: Optional[int] = None

    @classmethod
    def from_bytes(cls, payload: bytes) -> "XoPayload":
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidTransaction("Invalid payload serialization") from None

        parts = text.split(",")
        if len(parts) not in (2, 3):
            raise InvalidTransaction("Invalid payload serialization")
        name, action = parts[0], parts[1]
        if not name:
            raise InvalidTransaction("Name is required")
        if "|" in name:
            raise InvalidTransaction('Name cannot contain "|"')
        if action not in ("create", "take", "delete"):
            raise InvalidTransaction(f"Invalid action: {action}")

        space: Optional[int] = None
        if action == "take":
            raw = parts[2] if len(parts) == 3 else ""
            try:
                space = int(raw)
            except ValueError:
                raise InvalidTransaction(f"Space must be an integer: {raw!r}") from None
            if not 1 <= space <= 9:
                raise InvalidTransaction(f"Invalid space: {space}")
        return cls(name=name, action=action, space=space)


def winner(board: str) -> Optional[str]:
    """'X' or 'O' if that mark completes a line, else None."""
    for a, b, c in _WINNING_LINES:
        if board[a] != "-" and board[a] == board[b] == board[c]:
            return board[a]
    return None


def next_state(board: str, current: str) -> str:
    mark = winner(board)
    if mark == "X":
        return "P1-WIN"
    if mark == "O":
        return "P2-WIN"
    if "-" not in board:
        return "TIE"
    return "P2-NEXT" if current == "P1-NEXT" else "P1-NEXT"


@dataclass
class XoSmartContract:
    family_name: str = FAMILY_NAME
    family_versions: List[str] = field(default_factory=lambda: list(FAMILY_VERSIONS))
    addresser: KeyHashAddresser = field(default_factory=lambda: KeyHashAddresser(XO_PREFIX))

    def apply(
        self,
        transaction: Transaction,
        context: KeyValueTransactionContext[str],
    ) -> None:
        payload = XoPayload.from_bytes(transaction.payload)
        game = context.get_state_entry(payload.name)

        if payload.action == "create":
            if game is not None:
                raise InvalidTransaction("Invalid action: Game already exists")
            game = {
                "board": EMPTY_BOARD,
                "state": "P1-NEXT",
                "player1": "",
                "player2": "",
            }
            context.set_state_entry(payload.name, game)
        elif payload.action == "delete":
            if game is None:
                raise InvalidTransaction("Invalid action: game does not exist")
            context.delete_state_entry(payload.name)
        else:
            if game is None:
                raise InvalidTransaction("Invalid action: Take requires an existing game")
            game = self._take(game, payload.space, transaction.signer_public_key)
            context.set_state_entry(payload.name, game)

        state = "DELETED" if payload.action == "delete" else str(game["state"])
        context.add_event(
            f"xo/{payload.action}",
            [("name", payload.name), ("state", state)],
            b"",
        )

    @staticmethod
    def _take(game: Dict, space: Optional[int], signer: str) -> Dict:
        board, state = str(game["board"]), str(game["state"])
        player1, player2 = str(game["player1"]), str(game["player2"])

        if state in _FINISHED:
            raise InvalidTransaction("Invalid Action: Game has ended")

        if state == "P1-NEXT" and not player1:
            player1 = signer
        elif state == "P2-NEXT" and not player2:
            player2 = signer

        expected = player1 if state == "P1-NEXT" else player2
        if signer != expected:
            raise InvalidTransaction(f"Not this player: {signer}")

        index = space - 1  # type: ignore[operator]
        if board[index] != "-":
            raise InvalidTransaction(f"Invalid Action: space {space} already taken")

        mark = "X" if state == "P1-NEXT" else "O"
        board = board[:index] + mark + board[index + 1:]
        return {
            "board": board,
            "state": next_state(board, state),
            "player1": player1,
            "player2": player2,
        }


__all__ = ["XoSmartContract", "XoPayload", "winner", "next_state", "FAMILY_NAME", "XO_PREFIX"]
