from riichi_score.decomposition import Block, BlockKind, build_patterns, decompose
from riichi_score.fu import block_fu, calc_fu, head_fu, is_pinfu_shape, round_up_10
from riichi_score.melds import DeclaredMeld, OpenMeldInfo, is_concealed_hand
from riichi_score.schemas import Meld, MeldType, WinType, Wind
from riichi_score.tiles import Tile, parse_tiles
from riichi_score.waits import WaitInfo, WaitType, detect_wait


def key(code: str):
    return Tile.from_code(code).key


def only_pattern(codes: str, melds: list[Meld] | None = None):
    declared = [DeclaredMeld.from_schema(m) for m in melds or []]
    patterns = build_patterns(
        decompose(parse_tiles(codes.split()), 4 - len(declared)),
        [m.to_block() for m in declared],
        concealed=is_concealed_hand(declared),
        open_info=OpenMeldInfo.from_melds(declared),
    )
    assert len(patterns) == 1
    return patterns[0]


def breakdown(result) -> list[tuple[str, int]]:
    return [(item.name, item.fu) for item in result.breakdown]


PINFU_HAND = "1m 2m 3m 4m 5m 6m 3p 4p 5p 6s 7s 8s 5p 5p"


def test_pinfu_tsumo_is_fixed_twenty():
    pattern = only_pattern(PINFU_HAND)
    result = calc_fu(pattern, WaitInfo(WaitType.RYANMEN), WinType.tsumo, Wind.E, Wind.S)
    assert result.fu == 20
    assert breakdown(result) == [("副底", 20)]


def test_pinfu_ron_is_thirty():
    pattern = only_pattern(PINFU_HAND)
    result = calc_fu(pattern, WaitInfo(WaitType.RYANMEN), WinType.ron, Wind.E, Wind.S)
    assert result.fu == 30
    assert breakdown(result) == [("副底", 20), ("門前ロン", 10)]


def test_open_pinfu_shape_ron_gets_minimum():
    pattern = only_pattern(
        "4m 5m 6m 3p 4p 5p 6s 7s 8s 5p 5p",
        melds=[Meld(type=MeldType.chi, tiles=["1m", "2m", "3m"])],
    )
    result = calc_fu(pattern, WaitInfo(WaitType.RYANMEN), WinType.ron, Wind.E, Wind.S)
    assert result.fu == 30
    assert breakdown(result) == [("副底", 20), ("最低符", 10)]


def test_open_pinfu_shape_tsumo_rounds_up():
    pattern = only_pattern(
        "4m 5m 6m 3p 4p 5p 6s 7s 8s 5p 5p",
        melds=[Meld(type=MeldType.chi, tiles=["1m", "2m", "3m"])],
    )
    result = calc_fu(pattern, WaitInfo(WaitType.RYANMEN), WinType.tsumo, Wind.E, Wind.S)
    assert result.fu == 30
    assert breakdown(result) == [("副底", 20), ("ツモ", 2), ("切り上げ", 8)]


def test_closed_kanchan_tsumo_not_pinfu():
    pattern = only_pattern(PINFU_HAND)
    wait = detect_wait(pattern, key("2m"), WinType.tsumo)
    assert wait == WaitInfo(WaitType.KANCHAN)
    result = calc_fu(pattern, wait, WinType.tsumo, Wind.E, Wind.S)
    assert result.fu == 30
    assert breakdown(result) == [("副底", 20), ("ツモ", 2), ("待ち", 2), ("切り上げ", 6)]


def test_shanpon_ron_triplet_counts_open():
    pattern = only_pattern("1m 1m 1m 4p 4p 4p 7s 7s 7s 2m 3m 4m 9p 9p")
    wait = detect_wait(pattern, key("7s"), WinType.ron)
    result = calc_fu(pattern, wait, WinType.ron, Wind.E, Wind.S)
    # 20 + 10 + 8 (1m) + 4 (4p) + 2 (7s, completed by ron)
    assert result.fu == 50
    assert [fu for name, fu in breakdown(result) if name == "面子"] == [8, 4, 2]


def test_shanpon_tsumo_triplet_stays_concealed():
    pattern = only_pattern("1m 1m 1m 4p 4p 4p 7s 7s 7s 2m 3m 4m 9p 9p")
    wait = detect_wait(pattern, key("7s"), WinType.tsumo)
    result = calc_fu(pattern, wait, WinType.tsumo, Wind.E, Wind.S)
    # 20 + 2 + 8 + 4 + 4
    assert result.fu == 40


def test_quads():
    pattern = only_pattern(
        "2m 3m 4m 6p 7p 8p 5s 5s",
        melds=[
            Meld(type=MeldType.ankan, tiles=["E", "E", "E", "E"]),
            Meld(type=MeldType.kan, tiles=["2p", "2p", "2p", "2p"]),
        ],
    )
    result = calc_fu(pattern, WaitInfo(WaitType.RYANMEN), WinType.ron, Wind.S, Wind.W)
    # 20 + 32 (concealed honor quad) + 8 (open simple quad)
    assert result.fu == 60
    assert breakdown(result) == [("副底", 20), ("面子", 32), ("面子", 8)]


def test_head_fu():
    assert head_fu(key("P"), Wind.E, Wind.S) == 2
    assert head_fu(key("E"), Wind.E, Wind.S) == 2
    assert head_fu(key("S"), Wind.E, Wind.S) == 2
    assert head_fu(key("W"), Wind.E, Wind.S) == 0
    assert head_fu(key("E"), Wind.E, Wind.E) == 4
    assert head_fu(key("E"), Wind.E, Wind.E, renpu_fu=2) == 2
    assert head_fu(key("5m"), Wind.E, Wind.E) == 0


def test_block_fu_table():
    assert block_fu(Block(BlockKind.TRIPLET, key("5m")), is_open=True) == 2
    assert block_fu(Block(BlockKind.TRIPLET, key("9m")), is_open=True) == 4
    assert block_fu(Block(BlockKind.TRIPLET, key("5m")), is_open=False) == 4
    assert block_fu(Block(BlockKind.TRIPLET, key("C")), is_open=False) == 8
    assert block_fu(Block(BlockKind.QUAD, key("5m")), is_open=True) == 8
    assert block_fu(Block(BlockKind.QUAD, key("1s")), is_open=True) == 16
    assert block_fu(Block(BlockKind.QUAD, key("5m")), is_open=False) == 16
    assert block_fu(Block(BlockKind.QUAD, key("N")), is_open=False) == 32
    assert block_fu(Block(BlockKind.RUN, key("1m")), is_open=False) == 0


def test_pinfu_shape_rejects_value_head():
    pattern = only_pattern("1m 2m 3m 4m 5m 6m 3p 4p 5p 6s 7s 8s S S")
    assert is_pinfu_shape(pattern, WaitType.RYANMEN, Wind.E, Wind.W)
    assert not is_pinfu_shape(pattern, WaitType.RYANMEN, Wind.S, Wind.W)
    assert not is_pinfu_shape(pattern, WaitType.KANCHAN, Wind.E, Wind.W)


def test_round_up_10():
    assert round_up_10(20) == 20
    assert round_up_10(22) == 30
    assert round_up_10(101) == 110
