from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from riichi_score.decomposition import Block, BlockKind
from riichi_score.schemas import Meld, MeldType
from riichi_score.tiles import Tile, TileKey, parse_tiles

OPEN_MELD_TYPES = {MeldType.chi, MeldType.pon, MeldType.kan, MeldType.kakan}
QUAD_MELD_TYPES = {MeldType.kan, MeldType.ankan, MeldType.kakan}


@dataclass(frozen=True)
class DeclaredMeld:
    type: MeldType
    tiles: tuple[Tile, ...]

    @classmethod
    def from_schema(cls, meld: Meld) -> DeclaredMeld:
        return cls(type=meld.type, tiles=tuple(parse_tiles(meld.tiles)))

    @property
    def is_open(self) -> bool:
        return self.type in OPEN_MELD_TYPES

    @property
    def base_key(self) -> TileKey:
        return min((t.key for t in self.tiles), key=lambda k: k.sort_key)

    def to_block(self) -> Block:
        if self.type == MeldType.chi:
            kind = BlockKind.RUN
        elif self.type == MeldType.pon:
            kind = BlockKind.TRIPLET
        else:
            kind = BlockKind.QUAD
        return Block(kind, self.base_key, declared=True)


@dataclass(frozen=True)
class OpenMeldInfo:
    open_triplets: frozenset[TileKey] = frozenset()
    open_quads: frozenset[TileKey] = frozenset()

    @classmethod
    def from_melds(cls, melds: Iterable[DeclaredMeld]) -> OpenMeldInfo:
        triplets: set[TileKey] = set()
        quads: set[TileKey] = set()
        for meld in melds:
            if not meld.tiles:
                continue
            if meld.type == MeldType.pon:
                triplets.add(meld.base_key)
            elif meld.type in (MeldType.kan, MeldType.kakan):
                quads.add(meld.base_key)
        return cls(frozenset(triplets), frozenset(quads))

    def is_open_triplet(self, key: TileKey) -> bool:
        return key in self.open_triplets

    def is_open_quad(self, key: TileKey) -> bool:
        return key in self.open_quads

    def is_open(self, block: Block) -> bool:
        if block.kind == BlockKind.QUAD:
            return self.is_open_quad(block.key)
        if block.kind == BlockKind.TRIPLET:
            return self.is_open_triplet(block.key)
        return False


def is_concealed_hand(melds: Sequence[DeclaredMeld]) -> bool:
    return not any(meld.is_open for meld in melds)


def meld_tiles(melds: Iterable[DeclaredMeld]) -> list[Tile]:
    return [t for meld in melds for t in meld.tiles]
