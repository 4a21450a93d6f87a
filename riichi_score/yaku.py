from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from riichi_score.decomposition import HandPattern
from riichi_score.fu import is_pinfu_shape, wind_key
from riichi_score.schemas import ContextInput, RiichiType, RuleSet, WinType, YakuItem
from riichi_score.special_hands import SpecialHand
from riichi_score.tiles import DRAGONS, SUITED, Honor, Suit, TileKey
from riichi_score.waits import WaitInfo, WaitType

# Which candidates a check can look at.
SITUATION = "situation"  # flags only
TILES = "tiles"  # the tile multiset only
SHAPE = "shape"  # needs a standard HandPattern and its wait
PAIRS = "pairs"  # seven pairs only

STANDARD_SCOPES = frozenset({SITUATION, TILES, SHAPE})
CHIITOITSU_SCOPES = frozenset({SITUATION, TILES, PAIRS})

GREEN_TILES = frozenset(
    [TileKey(Suit.SOU, n) for n in (2, 3, 4, 6, 8)] + [TileKey.of_honor(Honor.GREEN)]
)
_CHUUREN_BASE = {1: 3, 2: 1, 3: 1, 4: 1, 5: 1, 6: 1, 7: 1, 8: 1, 9: 3}


@dataclass(frozen=True)
class YakuContext:
    situation: ContextInput
    rules: RuleSet
    tiles: tuple[TileKey, ...]
    win_key: TileKey
    pattern: Optional[HandPattern] = None
    wait: Optional[WaitInfo] = None

    def for_candidate(self, pattern: HandPattern, wait: WaitInfo) -> YakuContext:
        return replace(self, pattern=pattern, wait=wait)

    @property
    def concealed(self) -> bool:
        # Special hands are never scored with declared melds.
        if self.pattern is None:
            return True
        return self.pattern.concealed

    @property
    def tsumo(self) -> bool:
        return self.situation.win_type == WinType.tsumo

    def han(self, closed: int, opened: int) -> int:
        return closed if self.concealed else opened

    def double(self) -> int:
        return 2 if self.rules.double_yakuman_ari else 1


@dataclass
class YakuResult:
    items: list[YakuItem] = field(default_factory=list)

    @property
    def han(self) -> int:
        return sum(item.han for item in self.items)

    @property
    def yakuman(self) -> int:
        return sum(item.yakuman for item in self.items)

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.items]

    def __bool__(self) -> bool:
        return bool(self.items)


YakuCheck = Callable[[YakuContext], Optional[YakuItem]]

_YAKU: list[tuple[str, YakuCheck]] = []
_YAKUMAN: list[tuple[str, YakuCheck]] = []


def _yaku(scope: str) -> Callable[[YakuCheck], YakuCheck]:
    def decorator(check: YakuCheck) -> YakuCheck:
        _YAKU.append((scope, check))
        return check

    return decorator


def _yakuman(scope: str) -> Callable[[YakuCheck], YakuCheck]:
    def decorator(check: YakuCheck) -> YakuCheck:
        _YAKUMAN.append((scope, check))
        return check

    return decorator


def _concealed_triplet_count(ctx: YakuContext) -> int:
    count = 0
    for block in ctx.pattern.triplets:
        if ctx.pattern.open_info.is_open(block):
            continue
        if ctx.wait.ron_completed == block.key:
            continue
        count += 1
    return count


def _suits_and_honors(tiles: tuple[TileKey, ...]) -> tuple[set[Suit], bool]:
    suits = {k.suit for k in tiles if not k.is_honor()}
    return suits, any(k.is_honor() for k in tiles)


# ===== situational =====


@_yaku(SITUATION)
def riichi(ctx: YakuContext) -> YakuItem | None:
    if ctx.situation.riichi == RiichiType.double:
        return YakuItem(name="ダブル立直", han=2)
    if ctx.situation.riichi == RiichiType.riichi:
        return YakuItem(name="立直", han=1)
    return None


@_yaku(SITUATION)
def ippatsu(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="一発", han=1) if ctx.situation.ippatsu else None


@_yaku(SITUATION)
def rinshan(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="嶺上開花", han=1) if ctx.situation.rinshan else None


@_yaku(SITUATION)
def chankan(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="槍槓", han=1) if ctx.situation.chankan else None


@_yaku(SITUATION)
def haitei(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="海底摸月", han=1) if ctx.situation.haitei else None


@_yaku(SITUATION)
def houtei(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="河底撈魚", han=1) if ctx.situation.houtei else None


@_yaku(SITUATION)
def menzen_tsumo(ctx: YakuContext) -> YakuItem | None:
    if ctx.concealed and ctx.tsumo:
        return YakuItem(name="門前清自摸和", han=1)
    return None


@_yaku(PAIRS)
def chiitoitsu(ctx: YakuContext) -> YakuItem | None:
    return YakuItem(name="七対子", han=2)


# ===== tiles =====


@_yaku(TILES)
def tanyao(ctx: YakuContext) -> YakuItem | None:
    if not ctx.concealed and not ctx.rules.kuitan_ari:
        return None
    if all(k.is_simple() for k in ctx.tiles):
        return YakuItem(name="断么九", han=1)
    return None


# ===== value tiles =====


def _value_triplet(key: TileKey, name: str) -> YakuCheck:
    def check(ctx: YakuContext) -> YakuItem | None:
        if any(b.key == key for b in ctx.pattern.triplets):
            return YakuItem(name=name, han=1)
        return None

    return check


_DRAGON_NAMES = {Honor.WHITE: "役牌 白", Honor.GREEN: "役牌 發", Honor.RED: "役牌 中"}
_WIND_NAMES = {Honor.EAST: "東", Honor.SOUTH: "南", Honor.WEST: "西", Honor.NORTH: "北"}

for _honor in DRAGONS:
    _YAKU.append((SHAPE, _value_triplet(TileKey.of_honor(_honor), _DRAGON_NAMES[_honor])))


@_yaku(SHAPE)
def round_wind(ctx: YakuContext) -> YakuItem | None:
    key = wind_key(ctx.situation.round_wind)
    return _value_triplet(key, f"場風 {_WIND_NAMES[key.honor]}")(ctx)


@_yaku(SHAPE)
def seat_wind(ctx: YakuContext) -> YakuItem | None:
    key = wind_key(ctx.situation.seat_wind)
    return _value_triplet(key, f"自風 {_WIND_NAMES[key.honor]}")(ctx)


# ===== shape =====


@_yaku(SHAPE)
def toitoi(ctx: YakuContext) -> YakuItem | None:
    if all(b.is_triplet_like() for b in ctx.pattern.blocks):
        return YakuItem(name="対々和", han=2)
    return None


@_yaku(SHAPE)
def sanankou(ctx: YakuContext) -> YakuItem | None:
    if _concealed_triplet_count(ctx) >= 3:
        return YakuItem(name="三暗刻", han=2)
    return None


@_yaku(TILES)
def honitsu_chinitsu(ctx: YakuContext) -> YakuItem | None:
    suits, has_honor = _suits_and_honors(ctx.tiles)
    if len(suits) != 1:
        return None
    if has_honor:
        return YakuItem(name="混一色", han=ctx.han(3, 2))
    return YakuItem(name="清一色", han=ctx.han(6, 5))


@_yaku(SHAPE)
def ittsuu(ctx: YakuContext) -> YakuItem | None:
    starts = {(b.key.suit, b.key.num) for b in ctx.pattern.runs}
    for suit in SUITED:
        if all((suit, n) in starts for n in (1, 4, 7)):
            return YakuItem(name="一気通貫", han=ctx.han(2, 1))
    return None


@_yaku(SHAPE)
def sanshoku_doujun(ctx: YakuContext) -> YakuItem | None:
    starts = {(b.key.suit, b.key.num) for b in ctx.pattern.runs}
    for n in range(1, 8):
        if all((suit, n) in starts for suit in SUITED):
            return YakuItem(name="三色同順", han=ctx.han(2, 1))
    return None


@_yaku(SHAPE)
def chanta_junchan(ctx: YakuContext) -> YakuItem | None:
    pattern = ctx.pattern
    if not pattern.head.has_terminal_or_honor():
        return None
    if not all(b.has_terminal_or_honor() for b in pattern.blocks):
        return None
    has_honor = pattern.head_key.is_honor() or any(b.key.is_honor() for b in pattern.blocks)
    if has_honor:
        return YakuItem(name="混全帯么九", han=ctx.han(2, 1))
    return YakuItem(name="純全帯么九", han=ctx.han(3, 2))


@_yaku(SHAPE)
def sanshoku_doukou(ctx: YakuContext) -> YakuItem | None:
    ranks = {(b.key.suit, b.key.num) for b in ctx.pattern.triplets if not b.key.is_honor()}
    for n in range(1, 10):
        if all((suit, n) in ranks for suit in SUITED):
            return YakuItem(name="三色同刻", han=2)
    return None


@_yaku(SHAPE)
def shousangen(ctx: YakuContext) -> YakuItem | None:
    dragon_triplets = sum(1 for b in ctx.pattern.triplets if b.key.is_dragon())
    if dragon_triplets == 2 and ctx.pattern.head_key.is_dragon():
        return YakuItem(name="小三元", han=2)
    return None


@_yaku(TILES)
def honroutou(ctx: YakuContext) -> YakuItem | None:
    if all(k.is_terminal_or_honor() for k in ctx.tiles):
        return YakuItem(name="混老頭", han=2)
    return None


@_yaku(SHAPE)
def sankantsu(ctx: YakuContext) -> YakuItem | None:
    if len(ctx.pattern.quads) == 3:
        return YakuItem(name="三槓子", han=2)
    return None


@_yaku(SHAPE)
def pinfu(ctx: YakuContext) -> YakuItem | None:
    if not ctx.concealed:
        return None
    if is_pinfu_shape(ctx.pattern, ctx.wait.wait_type, ctx.situation.round_wind, ctx.situation.seat_wind):
        return YakuItem(name="平和", han=1)
    return None


@_yaku(SHAPE)
def iipeikou_ryanpeikou(ctx: YakuContext) -> YakuItem | None:
    if not ctx.concealed:
        return None
    repeats = sum(1 for c in Counter(b.key for b in ctx.pattern.runs).values() if c >= 2)
    if repeats >= 2:
        return YakuItem(name="二盃口", han=3)
    if repeats == 1:
        return YakuItem(name="一盃口", han=1)
    return None


# ===== yakuman =====


@_yakuman(SHAPE)
def daisangen(ctx: YakuContext) -> YakuItem | None:
    if sum(1 for b in ctx.pattern.triplets if b.key.is_dragon()) == 3:
        return YakuItem(name="大三元", yakuman=1)
    return None


@_yakuman(SHAPE)
def suushii(ctx: YakuContext) -> YakuItem | None:
    wind_triplets = sum(1 for b in ctx.pattern.triplets if b.key.is_wind())
    if wind_triplets == 4:
        return YakuItem(name="大四喜", yakuman=1)
    if wind_triplets == 3 and ctx.pattern.head_key.is_wind():
        return YakuItem(name="小四喜", yakuman=1)
    return None


@_yakuman(TILES)
def tsuuiisou(ctx: YakuContext) -> YakuItem | None:
    if all(k.is_honor() for k in ctx.tiles):
        return YakuItem(name="字一色", yakuman=1)
    return None


@_yakuman(TILES)
def chinroutou(ctx: YakuContext) -> YakuItem | None:
    if all(k.is_terminal() for k in ctx.tiles):
        return YakuItem(name="清老頭", yakuman=1)
    return None


@_yakuman(TILES)
def ryuuiisou(ctx: YakuContext) -> YakuItem | None:
    if all(k in GREEN_TILES for k in ctx.tiles):
        return YakuItem(name="緑一色", yakuman=1)
    return None


@_yakuman(TILES)
def chuuren(ctx: YakuContext) -> YakuItem | None:
    if not ctx.concealed or len(ctx.tiles) != 14:
        return None
    suits, has_honor = _suits_and_honors(ctx.tiles)
    if has_honor or len(suits) != 1:
        return None
    counts = Counter(k.num for k in ctx.tiles)
    extras = [n for n in range(1, 10) for _ in range(counts[n] - _CHUUREN_BASE[n])]
    if any(counts[n] < _CHUUREN_BASE[n] for n in range(1, 10)) or len(extras) != 1:
        return None
    if ctx.win_key.num == extras[0]:
        return YakuItem(name="純正九蓮宝燈", yakuman=ctx.double())
    return YakuItem(name="九蓮宝燈", yakuman=1)


@_yakuman(SHAPE)
def suukantsu(ctx: YakuContext) -> YakuItem | None:
    if len(ctx.pattern.quads) == 4:
        return YakuItem(name="四槓子", yakuman=1)
    return None


@_yakuman(SHAPE)
def suuankou(ctx: YakuContext) -> YakuItem | None:
    if _concealed_triplet_count(ctx) < 4:
        return None
    if ctx.wait.wait_type == WaitType.TANKI:
        return YakuItem(name="四暗刻単騎", yakuman=ctx.double())
    return YakuItem(name="四暗刻", yakuman=1)


def _run_checks(checks: list[tuple[str, YakuCheck]], ctx: YakuContext, scopes: frozenset[str]) -> YakuResult:
    result = YakuResult()
    for scope, check in checks:
        if scope not in scopes:
            continue
        item = check(ctx)
        if item is not None:
            result.items.append(item)
    return result


def _evaluate(ctx: YakuContext, scopes: frozenset[str]) -> YakuResult:
    """Yakuman, when any applies, replace the standard yaku entirely."""
    yakuman = _run_checks(_YAKUMAN, ctx, scopes)
    if yakuman:
        return yakuman
    return _run_checks(_YAKU, ctx, scopes)


def evaluate_standard(ctx: YakuContext) -> YakuResult:
    if ctx.pattern is None or ctx.wait is None:
        raise ValueError("standard evaluation needs a hand pattern and its wait")
    return _evaluate(ctx, STANDARD_SCOPES)


def evaluate_special(special: SpecialHand, ctx: YakuContext) -> YakuResult:
    if special == SpecialHand.KOKUSHI_13:
        return YakuResult([YakuItem(name="国士無双十三面待ち", yakuman=ctx.double())])
    if special == SpecialHand.KOKUSHI:
        return YakuResult([YakuItem(name="国士無双", yakuman=1)])
    return _evaluate(ctx, CHIITOITSU_SCOPES)
