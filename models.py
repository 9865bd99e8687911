from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple

# ---------- domain ----------

class Entrant(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: str
    display_name: str
    avatar: str
    weight: int = Field(1, ge=1)    # carried for weighted odds, not used by selection
    color: str

class BlockReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    height: int
    verifiable: bool = True
    provider: Optional[str] = None  # node that answered; None for local fallback

class DrawRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_seed: str
    entrants: Tuple[Entrant, ...] = ()

class DrawResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    block: BlockReference
    client_seed: str
    digest: str
    hex_slice: str
    roll: float
    winner_index: int
    winner: Entrant
    roster_size: int
    roster_root: str
    created_at: int

class Verification(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: str
    digest: str
    hex_slice: str
    value: int
    roll: float
    index: int

class HistoryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    winner_name: str
    winner_avatar: str = ""
    block_id: str
    timestamp: int

# ---------- API payloads ----------

class RosterTextIn(BaseModel):
    text: str = Field(..., description="one name per line")

class RosterPostIn(BaseModel):
    url: str = Field(..., description="post URL containing @author/permlink")
    exclude_bots: bool = True

class RosterOut(BaseModel):
    entrants: List[Entrant]
    source: str
    locked: bool

class DrawIn(BaseModel):
    client_seed: Optional[str] = Field(None, description="generated when omitted")

class DrawStateOut(BaseModel):
    state: str
    result: Optional[DrawResult] = None

class VerifyIn(BaseModel):
    client_seed: str
    block_id: str
    roster_size: int = Field(..., ge=1)
