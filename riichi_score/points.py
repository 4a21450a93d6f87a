from __future__ import annotations

from typing import NamedTuple

from riichi_score.schemas import Payments, Points, RuleSet, WinType

YAKUMAN_BASE = 8000


class PointBreakdown(NamedTuple):
    label: str
    base: int
    points: Points
    payments: Payments


def round_up_100(x: int) -> int:
    return ((x + 99) // 100) * 100


def yakuman_label(multiplier: int) -> str:
    if multiplier <= 1:
        return "役満"
    if multiplier == 2:
        return "ダブル役満"
    return f"{multiplier}倍役満"


def point_label_from_han_fu(han: int, fu: int, rules: RuleSet | None = None) -> str:
    kazoe = rules.kazoe_yakuman_ari if rules is not None else True
    if han >= 13 and kazoe:
        return "数え役満"
    if han >= 11:
        return "三倍満"
    if han >= 8:
        return "倍満"
    if han >= 6:
        return "跳満"
    if han == 5 or (han == 4 and fu >= 40) or (han == 3 and fu >= 70):
        return "満貫"
    return "通常"


_LIMIT_BASE = {"満貫": 2000, "跳満": 3000, "倍満": 4000, "三倍満": 6000, "数え役満": 8000}


def base_points(han: int, fu: int, rules: RuleSet | None = None) -> int:
    label = point_label_from_han_fu(han, fu, rules)
    if label in _LIMIT_BASE:
        return _LIMIT_BASE[label]
    return fu * (2 ** (han + 2))


def calc_points(
    fu: int,
    han: int,
    yakuman: int,
    win_type: WinType,
    is_dealer: bool,
    honba: int = 0,
    kyotaku: int = 0,
    rules: RuleSet | None = None,
) -> PointBreakdown:
    if yakuman > 0:
        label = yakuman_label(yakuman)
        base = YAKUMAN_BASE * yakuman
    else:
        label = point_label_from_han_fu(han, fu, rules)
        base = base_points(han, fu, rules)

    if win_type == WinType.ron:
        ron = round_up_100(base * (6 if is_dealer else 4))
        points = Points(ron=ron)
        hand_points_received = ron
    elif is_dealer:
        each = round_up_100(base * 2)
        points = Points(tsumo_dealer_pay=each, tsumo_non_dealer_pay=each)
        hand_points_received = each * 3
    else:
        pay_dealer = round_up_100(base * 2)
        pay_non_dealer = round_up_100(base)
        points = Points(tsumo_dealer_pay=pay_dealer, tsumo_non_dealer_pay=pay_non_dealer)
        hand_points_received = pay_dealer + pay_non_dealer * 2

    # 300 per repeat in total, i.e. 100 from each payer on tsumo.
    honba_bonus = honba * 300
    kyotaku_bonus = kyotaku * 1000
    hand_points_with_honba = hand_points_received + honba_bonus
    return PointBreakdown(
        label=label,
        base=base,
        points=points,
        payments=Payments(
            hand_points_received=hand_points_received,
            hand_points_with_honba=hand_points_with_honba,
            honba_bonus=honba_bonus,
            kyotaku_bonus=kyotaku_bonus,
            total_received=hand_points_with_honba + kyotaku_bonus,
        ),
    )
