from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class InvalidTileCode(ValueError):
    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"Invalid tile code: {code!r} ({reason})")
        self.code = code
        self.reason = reason


class Suit(str, Enum):
    MAN = "m"
    PIN = "p"
    SOU = "s"
    HONOR = "z"


class Honor(str, Enum):
    EAST = "E"
    SOUTH = "S"
    WEST = "W"
    NORTH = "N"
    WHITE = "P"
    GREEN = "F"
    RED = "C"


SUITED = (Suit.MAN, Suit.PIN, Suit.SOU)
WINDS = (Honor.EAST, Honor.SOUTH, Honor.WEST, Honor.NORTH)
DRAGONS = (Honor.WHITE, Honor.GREEN, Honor.RED)

_SUIT_ORDER = {Suit.MAN: 0, Suit.PIN: 1, Suit.SOU: 2, Suit.HONOR: 3}
_HONOR_ORDER = {h: i for i, h in enumerate(Honor)}


@dataclass(frozen=True)
class TileKey:
    """Tile identity with the red-five flag erased."""

    suit: Suit
    num: int = 0
    honor: Honor | None = None

    @classmethod
    def of_honor(cls, honor: Honor) -> TileKey:
        return cls(Suit.HONOR, 0, honor)

    @property
    def sort_key(self) -> tuple[int, int, int]:
        honor_rank = _HONOR_ORDER[self.honor] if self.honor is not None else 255
        return (_SUIT_ORDER[self.suit], honor_rank, self.num)

    @property
    def code(self) -> str:
        if self.honor is not None:
            return self.honor.value
        return f"{self.num}{self.suit.value}"

    def is_honor(self) -> bool:
        return self.suit == Suit.HONOR

    def is_terminal(self) -> bool:
        return not self.is_honor() and self.num in (1, 9)

    def is_terminal_or_honor(self) -> bool:
        return self.is_honor() or self.num in (1, 9)

    def is_simple(self) -> bool:
        return not self.is_terminal_or_honor()

    def is_dragon(self) -> bool:
        return self.honor in DRAGONS

    def is_wind(self) -> bool:
        return self.honor in WINDS

    def shifted(self, step: int) -> TileKey | None:
        if self.is_honor() or not 1 <= self.num + step <= 9:
            return None
        return TileKey(self.suit, self.num + step)

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Tile:
    suit: Suit
    num: int = 0
    honor: Honor | None = None
    red: bool = False

    @classmethod
    def from_code(cls, code: str) -> Tile:
        if not isinstance(code, str):
            raise InvalidTileCode(str(code), "not a string")
        if len(code) == 1:
            try:
                return cls(Suit.HONOR, 0, Honor(code))
            except ValueError:
                raise InvalidTileCode(code, "unknown honor letter") from None
        if len(code) != 2:
            raise InvalidTileCode(code, "wrong length")

        digit, letter = code[0], code[1]
        if not digit.isdigit() or not digit.isascii():
            raise InvalidTileCode(code, "rank is not a digit")
        if letter not in ("m", "p", "s"):
            raise InvalidTileCode(code, "unknown suit letter")

        num = int(digit)
        if num == 0:
            return cls(Suit(letter), 5, None, red=True)
        return cls(Suit(letter), num)

    @property
    def key(self) -> TileKey:
        return TileKey(self.suit, self.num, self.honor)

    @property
    def code(self) -> str:
        if self.red:
            return f"0{self.suit.value}"
        return self.key.code

    def is_honor(self) -> bool:
        return self.suit == Suit.HONOR

    def __str__(self) -> str:
        return self.code


def parse_tiles(codes: Iterable[str]) -> list[Tile]:
    return [Tile.from_code(code) for code in codes]


def sort_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    return sorted(tiles, key=lambda t: (t.key.sort_key, t.red))


def orphan_keys() -> list[TileKey]:
    keys = [TileKey(suit, num) for suit in SUITED for num in (1, 9)]
    keys.extend(TileKey.of_honor(h) for h in Honor)
    return keys
