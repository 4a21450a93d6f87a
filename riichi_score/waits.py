from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from riichi_score.decomposition import Block, HandPattern
from riichi_score.schemas import WinType
from riichi_score.tiles import TileKey


class WaitType(str, Enum):
    RYANMEN = "ryanmen"
    KANCHAN = "kanchan"
    PENCHAN = "penchan"
    TANKI = "tanki"
    SHANPON = "shanpon"


class WaitInfo(NamedTuple):
    wait_type: WaitType
    # Set when a shanpon wait is finished by ron: that triplet scores as open.
    ron_completed: TileKey | None = None


def classify_run_wait(run: Block, win_key: TileKey) -> WaitType:
    start = run.key.num
    win = win_key.num
    if win == start + 1:
        return WaitType.KANCHAN
    if (start == 1 and win == 3) or (start == 7 and win == 7):
        return WaitType.PENCHAN
    return WaitType.RYANMEN


def wait_interpretations(pattern: HandPattern, win_key: TileKey, win_type: WinType) -> list[WaitInfo]:
    """Every way the winning tile can have completed this pattern, in priority order."""
    found: list[WaitInfo] = []

    def add(info: WaitInfo) -> None:
        if info not in found:
            found.append(info)

    if pattern.head_key == win_key:
        add(WaitInfo(WaitType.TANKI))

    concealed_blocks = [b for b in pattern.blocks if not b.declared]
    for block in concealed_blocks:
        if block.is_run() and win_key in block.keys:
            add(WaitInfo(classify_run_wait(block, win_key)))

    for block in concealed_blocks:
        if block.is_triplet_like() and block.key == win_key:
            ron_completed = block.key if win_type == WinType.ron else None
            add(WaitInfo(WaitType.SHANPON, ron_completed))

    return found


def detect_wait(pattern: HandPattern, win_key: TileKey, win_type: WinType) -> WaitInfo:
    interpretations = wait_interpretations(pattern, win_key, win_type)
    if not interpretations:
        raise ValueError(f"winning tile {win_key} does not appear in the concealed part of the hand")
    return interpretations[0]
