from __future__ import annotations

from typing import NamedTuple

from riichi_score.decomposition import Block, BlockKind, HandPattern
from riichi_score.schemas import FuBreakdownItem, WinType, Wind
from riichi_score.tiles import Honor, TileKey
from riichi_score.waits import WaitInfo, WaitType

BASE_FU = 20
CHIITOITSU_FU = 25
PINFU_TSUMO_FU = 20
MINIMUM_FU = 30

# (open, terminal_or_honor) -> fu
_TRIPLET_FU = {(True, False): 2, (True, True): 4, (False, False): 4, (False, True): 8}
_QUAD_FU = {(True, False): 8, (True, True): 16, (False, False): 16, (False, True): 32}

_EXTRA_WAIT_FU = {WaitType.KANCHAN, WaitType.PENCHAN, WaitType.TANKI}


class FuResult(NamedTuple):
    fu: int
    breakdown: list[FuBreakdownItem]


def wind_key(wind: Wind) -> TileKey:
    return TileKey.of_honor(Honor(wind.value))


def is_value_tile(key: TileKey, round_wind: Wind, seat_wind: Wind) -> bool:
    return key.is_dragon() or key in (wind_key(round_wind), wind_key(seat_wind))


def is_pinfu_shape(pattern: HandPattern, wait_type: WaitType, round_wind: Wind, seat_wind: Wind) -> bool:
    """All runs, a head that is not a value tile and a two-sided wait.

    Shared by the 20 fu exception and the pinfu yaku.
    """
    return (
        all(b.is_run() for b in pattern.blocks)
        and not is_value_tile(pattern.head_key, round_wind, seat_wind)
        and wait_type == WaitType.RYANMEN
    )


def head_fu(key: TileKey, round_wind: Wind, seat_wind: Wind, renpu_fu: int = 4) -> int:
    if key.is_dragon():
        return 2
    is_round = key == wind_key(round_wind)
    is_seat = key == wind_key(seat_wind)
    if is_round and is_seat:
        return renpu_fu
    if is_round or is_seat:
        return 2
    return 0


def block_fu(block: Block, is_open: bool) -> int:
    if block.kind == BlockKind.TRIPLET:
        return _TRIPLET_FU[(is_open, block.key.is_terminal_or_honor())]
    if block.kind == BlockKind.QUAD:
        return _QUAD_FU[(is_open, block.key.is_terminal_or_honor())]
    return 0


def is_open_block(block: Block, pattern: HandPattern, wait: WaitInfo) -> bool:
    if not block.is_triplet_like():
        return False
    return pattern.open_info.is_open(block) or wait.ron_completed == block.key


def round_up_10(fu: int) -> int:
    return ((fu + 9) // 10) * 10


def calc_fu(
    pattern: HandPattern,
    wait: WaitInfo,
    win_type: WinType,
    round_wind: Wind,
    seat_wind: Wind,
    renpu_fu: int = 4,
) -> FuResult:
    if (
        pattern.concealed
        and win_type == WinType.tsumo
        and is_pinfu_shape(pattern, wait.wait_type, round_wind, seat_wind)
    ):
        return FuResult(PINFU_TSUMO_FU, [FuBreakdownItem(name="副底", fu=BASE_FU)])

    details = [FuBreakdownItem(name="副底", fu=BASE_FU)]
    if win_type == WinType.tsumo:
        details.append(FuBreakdownItem(name="ツモ", fu=2))
    if win_type == WinType.ron and pattern.concealed:
        details.append(FuBreakdownItem(name="門前ロン", fu=10))

    pfu = head_fu(pattern.head_key, round_wind, seat_wind, renpu_fu)
    if pfu:
        details.append(FuBreakdownItem(name="雀頭", fu=pfu))

    if wait.wait_type in _EXTRA_WAIT_FU:
        details.append(FuBreakdownItem(name="待ち", fu=2))

    for block in pattern.blocks:
        mfu = block_fu(block, is_open_block(block, pattern, wait))
        if mfu:
            details.append(FuBreakdownItem(name="面子", fu=mfu))

    total = sum(item.fu for item in details)
    if total == BASE_FU:
        details.append(FuBreakdownItem(name="最低符", fu=MINIMUM_FU - BASE_FU))
        total = MINIMUM_FU

    rounded = round_up_10(total)
    if rounded > total:
        details.append(FuBreakdownItem(name="切り上げ", fu=rounded - total))
    return FuResult(rounded, details)
