from fastapi import APIRouter, Body, Query
from models import Verification, VerifyIn
from rng.fair import verify

router = APIRouter()

@router.post("/verify", response_model=Verification)
async def verify_post(body: VerifyIn = Body(...)):
    return verify(body.client_seed, body.block_id, body.roster_size)

# shareable form of the same check
@router.get("/verify", response_model=Verification)
async def verify_get(client_seed: str, block_id: str, roster_size: int = Query(..., ge=1)):
    return verify(client_seed, block_id, roster_size)
