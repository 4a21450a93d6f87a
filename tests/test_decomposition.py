import pytest

from riichi_score.decomposition import (
    BlockKind,
    TooManyMelds,
    build_patterns,
    count_keys,
    decompose,
    groups_needed,
)
from riichi_score.melds import DeclaredMeld, OpenMeldInfo, is_concealed_hand
from riichi_score.schemas import Meld, MeldType
from riichi_score.special_hands import SpecialHand, detect_special
from riichi_score.tiles import Tile, parse_tiles


def tiles(codes: str) -> list[Tile]:
    return parse_tiles(codes.split())


def describe(decomposition) -> tuple[str, list[str]]:
    return decomposition.head.code, [f"{g.kind.value}:{g.key.code}" for g in decomposition.groups]


def test_decompose_single_split():
    result = decompose(tiles("1m 2m 3m 4m 5m 6m 7m 8m 9m 1p 1p 1p 2s 2s"), 4)
    assert [describe(d) for d in result] == [
        ("2s", ["run:1m", "run:4m", "run:7m", "triplet:1p"]),
    ]


def test_decompose_keeps_every_split_for_same_head():
    result = decompose(tiles("1m 1m 1m 2m 2m 2m 3m 3m 3m 4p 5p 6p 7s 7s"), 4)
    assert [describe(d) for d in result] == [
        ("7s", ["triplet:1m", "triplet:2m", "triplet:3m", "run:4p"]),
        ("7s", ["run:1m", "run:1m", "run:1m", "run:4p"]),
    ]


def test_decompose_all_heads_in_canonical_order():
    result = decompose(tiles("2m 2m 2m 3m 3m 3m 4m 4m 4m 5m 5m 5m 6m 6m"), 4)
    assert [describe(d) for d in result] == [
        ("3m", ["triplet:2m", "run:3m", "run:4m", "run:4m"]),
        ("6m", ["triplet:2m", "triplet:3m", "triplet:4m", "triplet:5m"]),
        ("6m", ["triplet:2m", "run:3m", "run:3m", "run:3m"]),
        ("6m", ["run:2m", "run:2m", "run:2m", "triplet:5m"]),
    ]


@pytest.mark.parametrize(
    "codes",
    [
        "1m 2m 3m 4m 5m 6m 7m 8m 9m 1p 1p 1p 2s 2s",
        "1m 1m 1m 2m 2m 2m 3m 3m 3m 4p 5p 6p 7s 7s",
        "2m 2m 2m 3m 3m 3m 4m 4m 4m 5m 5m 5m 6m 6m",
        "1m 1m 2m 2m 3m 3m 4p 4p 5p 5p 6p 6p 9s 9s",
        "1s 1s 1s 2s 3s 4s 5s 6s 7s 8s 9s 9s 9s 5s",
    ],
)
def test_decomposition_conserves_tiles(codes):
    hand = tiles(codes)
    patterns = build_patterns(decompose(hand, 4), [], concealed=True, open_info=OpenMeldInfo())
    assert patterns
    for pattern in patterns:
        assert pattern.tile_counts() == count_keys(hand)
        assert sum(b.size for b in pattern.blocks) + pattern.head.size == 14


def test_decompose_rejects_unsplittable_hand():
    hand = tiles("1m 1m 2m 3m 4m 5m 6m 7m 8m 9m 1p 1p 1p 1p")
    assert decompose(hand, 4) == []


def test_honors_never_form_runs():
    assert decompose(tiles("E S W N N"), 1) == []
    assert decompose(tiles("P F C"), 1) == []


def test_decompose_with_zero_groups_needed():
    result = decompose(tiles("5p 5p"), 0)
    assert [describe(d) for d in result] == [("5p", [])]
    assert decompose(tiles("5p 6p"), 0) == []


def test_groups_needed():
    assert groups_needed(0) == 4
    assert groups_needed(4) == 0
    with pytest.raises(TooManyMelds):
        groups_needed(5)


def test_build_patterns_appends_declared_melds():
    melds = [
        DeclaredMeld.from_schema(Meld(type=MeldType.pon, tiles=["E", "E", "E"])),
        DeclaredMeld.from_schema(Meld(type=MeldType.chi, tiles=["4p", "3p", "5p"])),
        DeclaredMeld.from_schema(Meld(type=MeldType.ankan, tiles=["9s", "9s", "9s", "9s"])),
    ]
    hand = tiles("2m 3m 4m 8p 8p")
    patterns = build_patterns(
        decompose(hand, groups_needed(len(melds))),
        [m.to_block() for m in melds],
        concealed=is_concealed_hand(melds),
        open_info=OpenMeldInfo.from_melds(melds),
    )
    assert len(patterns) == 1
    pattern = patterns[0]
    assert [(b.kind, b.key.code, b.declared) for b in pattern.blocks] == [
        (BlockKind.RUN, "2m", False),
        (BlockKind.TRIPLET, "E", True),
        (BlockKind.RUN, "3p", True),
        (BlockKind.QUAD, "9s", True),
    ]
    assert pattern.head_key.code == "8p"
    assert pattern.concealed is False


def test_open_meld_info_marks_only_claimed_sets():
    melds = [
        DeclaredMeld.from_schema(Meld(type=MeldType.pon, tiles=["1m", "1m", "1m"])),
        DeclaredMeld.from_schema(Meld(type=MeldType.kan, tiles=["2p", "2p", "2p", "2p"])),
        DeclaredMeld.from_schema(Meld(type=MeldType.kakan, tiles=["3s", "3s", "3s", "3s"])),
        DeclaredMeld.from_schema(Meld(type=MeldType.ankan, tiles=["E", "E", "E", "E"])),
    ]
    info = OpenMeldInfo.from_melds(melds)
    assert {k.code for k in info.open_triplets} == {"1m"}
    assert {k.code for k in info.open_quads} == {"2p", "3s"}


def test_concealed_quad_keeps_hand_concealed():
    ankan = DeclaredMeld.from_schema(Meld(type=MeldType.ankan, tiles=["E", "E", "E", "E"]))
    pon = DeclaredMeld.from_schema(Meld(type=MeldType.pon, tiles=["1m", "1m", "1m"]))
    assert is_concealed_hand([ankan]) is True
    assert is_concealed_hand([ankan, pon]) is False


def test_detect_seven_pairs():
    hand = tiles("1m 1m 3m 3m 5m 5m 7p 7p 9p 9p E E S S")
    assert detect_special(hand, Tile.from_code("S"), has_melds=False) == SpecialHand.CHIITOITSU


def test_seven_pairs_needs_seven_distinct_pairs():
    hand = tiles("1m 1m 1m 1m 5m 5m 7p 7p 9p 9p E E S S")
    assert detect_special(hand, Tile.from_code("S"), has_melds=False) is None


def test_detect_thirteen_orphans():
    hand = tiles("1m 9m 1p 9p 1s 9s E S W N P F C 1m")
    assert detect_special(hand, Tile.from_code("9m"), has_melds=False) == SpecialHand.KOKUSHI
    assert detect_special(hand, Tile.from_code("1m"), has_melds=False) == SpecialHand.KOKUSHI_13


def test_thirteen_orphans_rejects_simples():
    hand = tiles("1m 9m 1p 9p 1s 9s E S W N P F 5m 5m")
    assert detect_special(hand, Tile.from_code("5m"), has_melds=False) is None


def test_special_hands_never_with_melds():
    pairs = tiles("1m 1m 3m 3m 5m 5m 7p 7p 9p 9p E E S S")
    orphans = tiles("1m 9m 1p 9p 1s 9s E S W N P F C 1m")
    assert detect_special(pairs, Tile.from_code("S"), has_melds=True) is None
    assert detect_special(orphans, Tile.from_code("1m"), has_melds=True) is None
