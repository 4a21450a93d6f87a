from __future__ import annotations

import logging
from dataclasses import dataclass

from riichi_score.decomposition import TooManyMelds, build_patterns, decompose, groups_needed
from riichi_score.dora import count_aka, count_dora
from riichi_score.fu import CHIITOITSU_FU, FuResult, calc_fu
from riichi_score.melds import DeclaredMeld, OpenMeldInfo, is_concealed_hand, meld_tiles
from riichi_score.points import calc_points
from riichi_score.schemas import (
    ContextInput,
    DoraBreakdown,
    FuBreakdownItem,
    HandInput,
    ResultStatus,
    RiichiType,
    RuleSet,
    ScoreRequest,
    ScoreResult,
    YakuItem,
)
from riichi_score.special_hands import SpecialHand, detect_special
from riichi_score.tiles import InvalidTileCode, Tile, parse_tiles, sort_tiles
from riichi_score.waits import WaitType, wait_interpretations
from riichi_score.yaku import YakuContext, YakuResult, evaluate_special, evaluate_standard

logger = logging.getLogger(__name__)


class TileCountError(ValueError):
    pass


@dataclass(frozen=True)
class ParsedHand:
    concealed: tuple[Tile, ...]
    win_tile: Tile
    melds: tuple[DeclaredMeld, ...]

    @property
    def all_tiles(self) -> list[Tile]:
        return list(self.concealed) + meld_tiles(self.melds)


def parse_hand(hand: HandInput) -> ParsedHand:
    """Parse codes and settle the concealed tiles (winning tile included)."""
    closed = parse_tiles(hand.closed_tiles)
    win_tile = Tile.from_code(hand.win_tile)
    melds = tuple(DeclaredMeld.from_schema(m) for m in hand.melds)

    needed = groups_needed(len(melds))
    expected = needed * 3 + 2
    if len(closed) == expected - 1:
        closed.append(win_tile)
    elif len(closed) == expected:
        if win_tile.key not in {t.key for t in closed}:
            raise TileCountError(f"winning tile {win_tile} is not among the {expected} concealed tiles")
    else:
        raise TileCountError(
            f"expected {expected - 1} concealed tiles (or {expected} with the winning tile), got {len(closed)}"
        )
    return ParsedHand(concealed=tuple(sort_tiles(closed)), win_tile=win_tile, melds=melds)


def count_dora_breakdown(tiles: list[Tile], context: ContextInput, rules: RuleSet) -> DoraBreakdown:
    dora = count_dora(tiles, parse_tiles(context.dora_indicators + context.kan_dora_indicators))
    ura = 0
    # Ura indicators are only flipped for a riichi winner.
    if context.riichi != RiichiType.none:
        ura = count_dora(tiles, parse_tiles(context.ura_dora_indicators + context.kan_ura_dora_indicators))
    aka = count_aka(tiles) if rules.aka_ari else 0
    return DoraBreakdown(dora=dora, aka_dora=aka, ura_dora=ura)


def _failure(status: ResultStatus, message: str) -> ScoreResult:
    logger.info(f"hand not scored: {status.value}: {message}")
    return ScoreResult(status=status, message=message)


def _build_result(
    yaku: YakuResult,
    fu_result: FuResult,
    wait: WaitType | None,
    dora: DoraBreakdown,
    context: ContextInput,
    rules: RuleSet,
) -> ScoreResult:
    items = list(yaku.items)
    names = yaku.names
    if yaku.yakuman:
        han = 0
        fu = 0
        fu_breakdown: list[FuBreakdownItem] = []
    else:
        for name, count in (("ドラ", dora.dora), ("裏ドラ", dora.ura_dora), ("赤ドラ", dora.aka_dora)):
            if count > 0:
                items.append(YakuItem(name=name, han=count))
                names.append(f"{name}{count}")
        han = sum(item.han for item in items)
        fu, fu_breakdown = fu_result

    breakdown = calc_points(
        fu,
        han,
        yaku.yakuman,
        context.win_type,
        context.is_dealer,
        honba=context.honba,
        kyotaku=context.kyotaku,
        rules=rules,
    )
    return ScoreResult(
        status=ResultStatus.ok,
        total_points=breakdown.payments.total_received,
        yakuman=yaku.yakuman,
        han=han,
        fu=fu,
        yaku=names,
        yaku_items=items,
        dora=dora,
        wait=wait.value if wait is not None else None,
        fu_breakdown=fu_breakdown,
        point_label=breakdown.label,
        points=breakdown.points,
        payments=breakdown.payments,
    )


def score_hand_shape(hand: HandInput, context: ContextInput, rules: RuleSet) -> ScoreResult:
    """Hand shape -> best scoring interpretation, returned as a value in every case."""
    try:
        parsed = parse_hand(hand)
        dora = count_dora_breakdown(parsed.all_tiles, context, rules)
    except InvalidTileCode as exc:
        return _failure(ResultStatus.invalid_tile, str(exc))
    except (TooManyMelds, TileCountError) as exc:
        return _failure(ResultStatus.invalid_shape, str(exc))

    concealed = is_concealed_hand(parsed.melds)
    open_info = OpenMeldInfo.from_melds(parsed.melds)
    base_ctx = YakuContext(
        situation=context,
        rules=rules,
        tiles=tuple(t.key for t in parsed.all_tiles),
        win_key=parsed.win_tile.key,
    )

    best: ScoreResult | None = None
    candidates = 0

    def consider(result: ScoreResult) -> None:
        nonlocal best
        if best is None or result.total_points > best.total_points:
            best = result

    special = detect_special(parsed.concealed, parsed.win_tile, bool(parsed.melds))
    if special is not None:
        candidates += 1
        yaku = evaluate_special(special, base_ctx)
        if special == SpecialHand.CHIITOITSU:
            fu_result = FuResult(CHIITOITSU_FU, [FuBreakdownItem(name="七対子", fu=CHIITOITSU_FU)])
            wait = WaitType.TANKI
        else:
            fu_result = FuResult(0, [])
            wait = None
        if yaku:
            consider(_build_result(yaku, fu_result, wait, dora, context, rules))

    decompositions = decompose(parsed.concealed, groups_needed(len(parsed.melds)))
    patterns = build_patterns(
        decompositions,
        (m.to_block() for m in parsed.melds),
        concealed=concealed,
        open_info=open_info,
    )
    logger.debug(f"special={special}, {len(patterns)} standard pattern(s)")

    for pattern in patterns:
        for wait in wait_interpretations(pattern, parsed.win_tile.key, context.win_type):
            candidates += 1
            yaku = evaluate_standard(base_ctx.for_candidate(pattern, wait))
            if not yaku:
                continue
            fu_result = calc_fu(
                pattern,
                wait,
                context.win_type,
                context.round_wind,
                context.seat_wind,
                rules.renpu_fu,
            )
            consider(_build_result(yaku, fu_result, wait.wait_type, dora, context, rules))

    if candidates == 0:
        tiles = "".join(t.code for t in parsed.concealed)
        return _failure(
            ResultStatus.invalid_shape,
            f"Hand is not a valid winning shape: {tiles} cannot form "
            f"{groups_needed(len(parsed.melds))} group(s) and a pair",
        )
    if best is None:
        return _failure(ResultStatus.no_yaku, "No yaku: the hand has a winning shape but no scoring bonus")

    logger.info(
        f"scored {best.total_points} points (han={best.han}, fu={best.fu}, yakuman={best.yakuman}) "
        f"from {candidates} candidate(s)"
    )
    return best


def score_request(req: ScoreRequest) -> ScoreResult:
    return score_hand_shape(req.hand, req.context, req.rules)
