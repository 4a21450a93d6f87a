from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, conint


class Wind(str, Enum):
    E = "E"
    S = "S"
    W = "W"
    N = "N"


class WinType(str, Enum):
    ron = "ron"
    tsumo = "tsumo"


class RiichiType(str, Enum):
    none = "none"
    riichi = "riichi"
    double = "double"


class MeldType(str, Enum):
    chi = "chi"
    pon = "pon"
    kan = "kan"
    ankan = "ankan"
    kakan = "kakan"


class ResultStatus(str, Enum):
    ok = "ok"
    no_yaku = "no_yaku"
    invalid_shape = "invalid_shape"
    invalid_tile = "invalid_tile"


TileCode = str


class Meld(BaseModel):
    type: MeldType
    tiles: list[TileCode]


class HandInput(BaseModel):
    closed_tiles: list[TileCode]
    melds: list[Meld] = Field(default_factory=list)
    win_tile: TileCode


class ContextInput(BaseModel):
    win_type: WinType
    is_dealer: bool = False
    round_wind: Wind = Wind.E
    seat_wind: Wind = Wind.S
    riichi: RiichiType = RiichiType.none
    ippatsu: bool = False
    rinshan: bool = False
    chankan: bool = False
    haitei: bool = False
    houtei: bool = False
    # Carried through for the caller; not scored.
    tenhou: bool = False
    chiihou: bool = False
    dora_indicators: list[TileCode] = Field(default_factory=list)
    kan_dora_indicators: list[TileCode] = Field(default_factory=list)
    ura_dora_indicators: list[TileCode] = Field(default_factory=list)
    kan_ura_dora_indicators: list[TileCode] = Field(default_factory=list)
    honba: conint(ge=0) = 0
    kyotaku: conint(ge=0) = 0


class RuleSet(BaseModel):
    aka_ari: bool = True
    kuitan_ari: bool = True
    double_yakuman_ari: bool = True
    kazoe_yakuman_ari: bool = True
    renpu_fu: Literal[2, 4] = 4


class ScoreRequest(BaseModel):
    hand: HandInput
    context: ContextInput
    rules: RuleSet = Field(default_factory=RuleSet)


class YakuItem(BaseModel):
    name: str
    han: int = 0
    yakuman: int = 0


class FuBreakdownItem(BaseModel):
    name: str
    fu: int


class DoraBreakdown(BaseModel):
    dora: int = 0
    aka_dora: int = 0
    ura_dora: int = 0


class Points(BaseModel):
    ron: int = 0
    tsumo_dealer_pay: int = 0
    tsumo_non_dealer_pay: int = 0


class Payments(BaseModel):
    hand_points_received: int = 0
    hand_points_with_honba: int = 0
    honba_bonus: int = 0
    kyotaku_bonus: int = 0
    total_received: int = 0


class ScoreResult(BaseModel):
    status: ResultStatus = ResultStatus.ok
    message: str | None = None
    total_points: int = 0
    yakuman: int = 0
    han: int = 0
    fu: int = 0
    yaku: list[str] = Field(default_factory=list)
    yaku_items: list[YakuItem] = Field(default_factory=list)
    dora: DoraBreakdown = Field(default_factory=DoraBreakdown)
    wait: str | None = None
    fu_breakdown: list[FuBreakdownItem] = Field(default_factory=list)
    point_label: str = ""
    points: Points = Field(default_factory=Points)
    payments: Payments = Field(default_factory=Payments)


class ScoreResponse(BaseModel):
    score_id: UUID
    status: Literal["ok"]
    result: ScoreResult
    warnings: list[str] = Field(default_factory=list)


class ResultGetResponse(BaseModel):
    id: UUID
    type: Literal["score"]
    created_at: datetime
    expires_at: datetime
    data: dict
