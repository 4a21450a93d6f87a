from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, NamedTuple

from riichi_score.tiles import Tile, TileKey

if TYPE_CHECKING:
    from riichi_score.melds import OpenMeldInfo

GROUPS_PER_HAND = 4


class TooManyMelds(ValueError):
    pass


class BlockKind(str, Enum):
    RUN = "run"
    TRIPLET = "triplet"
    QUAD = "quad"
    PAIR = "pair"


_BLOCK_SIZE = {BlockKind.RUN: 3, BlockKind.TRIPLET: 3, BlockKind.QUAD: 4, BlockKind.PAIR: 2}


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    key: TileKey
    declared: bool = False

    @property
    def size(self) -> int:
        return _BLOCK_SIZE[self.kind]

    @property
    def keys(self) -> tuple[TileKey, ...]:
        if self.kind == BlockKind.RUN:
            return (self.key, self.key.shifted(1), self.key.shifted(2))
        return (self.key,) * self.size

    def is_run(self) -> bool:
        return self.kind == BlockKind.RUN

    def is_triplet_like(self) -> bool:
        return self.kind in (BlockKind.TRIPLET, BlockKind.QUAD)

    def is_quad(self) -> bool:
        return self.kind == BlockKind.QUAD

    def has_terminal_or_honor(self) -> bool:
        return any(k.is_terminal_or_honor() for k in self.keys)


@dataclass(frozen=True)
class HandPattern:
    """One way the hand splits into four groups and a head."""

    blocks: tuple[Block, ...]
    head: Block
    concealed: bool
    open_info: OpenMeldInfo

    @property
    def head_key(self) -> TileKey:
        return self.head.key

    @property
    def runs(self) -> list[Block]:
        return [b for b in self.blocks if b.is_run()]

    @property
    def triplets(self) -> list[Block]:
        return [b for b in self.blocks if b.is_triplet_like()]

    @property
    def quads(self) -> list[Block]:
        return [b for b in self.blocks if b.is_quad()]

    def tile_counts(self) -> Counter[TileKey]:
        counts: Counter[TileKey] = Counter(self.head.keys)
        for block in self.blocks:
            counts.update(block.keys)
        return counts


class Decomposition(NamedTuple):
    head: TileKey
    groups: tuple[Block, ...]


def count_keys(tiles: Iterable[Tile]) -> Counter[TileKey]:
    return Counter(t.key for t in tiles)


def groups_needed(declared_melds: int) -> int:
    needed = GROUPS_PER_HAND - declared_melds
    if needed < 0:
        raise TooManyMelds(f"{declared_melds} melds declared; a hand holds at most {GROUPS_PER_HAND}")
    return needed


def _min_key(work: Counter[TileKey]) -> TileKey | None:
    present = [k for k, c in work.items() if c > 0]
    if not present:
        return None
    return min(present, key=lambda k: k.sort_key)


def _collect_groups(work: Counter[TileKey], needed: int) -> list[tuple[Block, ...]]:
    found: list[tuple[Block, ...]] = []

    def dfs(current: list[Block]) -> None:
        first = _min_key(work)
        if len(current) == needed:
            if first is None:
                found.append(tuple(current))
            return
        if first is None:
            return

        if work[first] >= 3:
            work[first] -= 3
            current.append(Block(BlockKind.TRIPLET, first))
            dfs(current)
            current.pop()
            work[first] += 3

        second, third = first.shifted(1), first.shifted(2)
        if second is not None and third is not None and work[second] > 0 and work[third] > 0:
            for k in (first, second, third):
                work[k] -= 1
            current.append(Block(BlockKind.RUN, first))
            dfs(current)
            current.pop()
            for k in (first, second, third):
                work[k] += 1

    dfs([])
    return found


def decompose(tiles: Iterable[Tile], needed: int) -> list[Decomposition]:
    """Every head + `needed` groups split that uses the tiles exactly."""
    counts = count_keys(tiles)
    results: list[Decomposition] = []
    for head in sorted(counts, key=lambda k: k.sort_key):
        if counts[head] < 2:
            continue
        work = counts.copy()
        work[head] -= 2
        for groups in _collect_groups(work, needed):
            results.append(Decomposition(head, groups))
    return results


def build_patterns(
    decompositions: Iterable[Decomposition],
    meld_blocks: Iterable[Block],
    concealed: bool,
    open_info: OpenMeldInfo,
) -> list[HandPattern]:
    melds = tuple(meld_blocks)
    return [
        HandPattern(
            blocks=d.groups + melds,
            head=Block(BlockKind.PAIR, d.head),
            concealed=concealed,
            open_info=open_info,
        )
        for d in decompositions
    ]
