from __future__ import annotations

from collections import Counter

from fastapi import HTTPException

from riichi_score.melds import QUAD_MELD_TYPES
from riichi_score.schemas import MeldType, RiichiType, ScoreRequest, WinType
from riichi_score.tiles import InvalidTileCode, Tile, TileKey


def validate_tile(tile: str) -> Tile:
    try:
        return Tile.from_code(tile)
    except InvalidTileCode as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _validate_tiles(tiles: list[str]) -> list[TileKey]:
    return [validate_tile(tile).key for tile in tiles]


def validate_score_request(req: ScoreRequest) -> None:
    hand = req.hand
    context = req.context

    closed = _validate_tiles(hand.closed_tiles)
    win = validate_tile(hand.win_tile).key
    meld_keys: list[TileKey] = []
    for meld in hand.melds:
        meld_keys.extend(_validate_tiles(meld.tiles))
    for indicators in (
        context.dora_indicators,
        context.kan_dora_indicators,
        context.ura_dora_indicators,
        context.kan_ura_dora_indicators,
    ):
        _validate_tiles(indicators)

    for meld in hand.melds:
        if meld.type in {MeldType.chi, MeldType.pon} and len(meld.tiles) != 3:
            raise HTTPException(status_code=422, detail=f"{meld.type.value} must contain exactly 3 tiles")
        if meld.type in QUAD_MELD_TYPES and len(meld.tiles) != 4:
            raise HTTPException(status_code=422, detail=f"{meld.type.value} must contain exactly 4 tiles")

    includes_win = len(closed) == 14 - 3 * len(hand.melds)
    tile_counts = Counter(closed + meld_keys)
    if not includes_win:
        tile_counts[win] += 1
    for key, count in tile_counts.items():
        if count >= 5:
            raise HTTPException(status_code=422, detail=f"Tile appears 5+ times in hand: {key}")

    riichi = context.riichi != RiichiType.none
    if context.ippatsu and not riichi:
        raise HTTPException(status_code=422, detail="ippatsu cannot be true without riichi/double riichi")
    if riichi and any(m.type != MeldType.ankan for m in hand.melds):
        raise HTTPException(status_code=422, detail="riichi requires a concealed hand")
    if context.win_type == WinType.ron and context.haitei:
        raise HTTPException(status_code=422, detail="haitei cannot be true on ron")
    if context.win_type == WinType.tsumo and context.houtei:
        raise HTTPException(status_code=422, detail="houtei cannot be true on tsumo")
    if context.win_type == WinType.ron and context.rinshan:
        raise HTTPException(status_code=422, detail="rinshan cannot be true on ron")
    if context.win_type == WinType.tsumo and context.chankan:
        raise HTTPException(status_code=422, detail="chankan cannot be true on tsumo")
    if context.chiihou and context.tenhou:
        raise HTTPException(status_code=422, detail="chiihou and tenhou cannot both be true")
    if (context.chiihou or context.tenhou) and context.win_type != WinType.tsumo:
        raise HTTPException(status_code=422, detail="chiihou/tenhou require tsumo")
    if context.tenhou and not context.is_dealer:
        raise HTTPException(status_code=422, detail="tenhou requires dealer")
    if context.chiihou and context.is_dealer:
        raise HTTPException(status_code=422, detail="chiihou requires non-dealer")
