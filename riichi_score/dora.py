from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from riichi_score.tiles import DRAGONS, WINDS, Tile, TileKey


def indicator_to_dora(indicator: Tile) -> TileKey:
    """The tile an indicator points at: next rank / next wind / next dragon, wrapping."""
    key = indicator.key
    if key.honor in WINDS:
        return TileKey.of_honor(WINDS[(WINDS.index(key.honor) + 1) % len(WINDS)])
    if key.honor in DRAGONS:
        return TileKey.of_honor(DRAGONS[(DRAGONS.index(key.honor) + 1) % len(DRAGONS)])
    return TileKey(key.suit, 1 if key.num == 9 else key.num + 1)


def count_dora(tiles: Sequence[Tile], indicators: Iterable[Tile]) -> int:
    counts = Counter(t.key for t in tiles)
    return sum(counts.get(indicator_to_dora(ind), 0) for ind in indicators)


def count_aka(tiles: Iterable[Tile]) -> int:
    return sum(1 for t in tiles if t.red and not t.is_honor() and t.num == 5)
