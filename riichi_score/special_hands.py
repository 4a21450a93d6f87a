from __future__ import annotations

from enum import Enum
from typing import Sequence

from riichi_score.decomposition import count_keys
from riichi_score.tiles import Tile, orphan_keys

ORPHANS = frozenset(orphan_keys())


class SpecialHand(str, Enum):
    CHIITOITSU = "chiitoitsu"
    KOKUSHI = "kokushi"
    KOKUSHI_13 = "kokushi_13"


def is_chiitoitsu(tiles: Sequence[Tile]) -> bool:
    counts = count_keys(tiles)
    return len(counts) == 7 and all(c == 2 for c in counts.values())


def is_kokushi(tiles: Sequence[Tile]) -> bool:
    counts = count_keys(tiles)
    if set(counts) != ORPHANS:
        return False
    return sorted(counts.values()) == [1] * 12 + [2]


def detect_special(tiles: Sequence[Tile], win_tile: Tile, has_melds: bool) -> SpecialHand | None:
    """Seven pairs or thirteen orphans; both need a fully concealed hand."""
    if has_melds or len(tiles) != 14:
        return None
    if is_chiitoitsu(tiles):
        return SpecialHand.CHIITOITSU
    if is_kokushi(tiles):
        if count_keys(tiles)[win_tile.key] == 2:
            return SpecialHand.KOKUSHI_13
        return SpecialHand.KOKUSHI
    return None
