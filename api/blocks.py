from fastapi import APIRouter
from services import runtime
from services.draw import new_client_seed
from sources.hive import EntropyResolver

router = APIRouter()

@router.get("/blocks/latest")
async def blocks_latest():
    block = runtime.poller.latest
    return {
        "block": block,
        "explorerUrl": EntropyResolver.explorer_url(block) if block else None,
    }

@router.get("/bots")
async def bots_list():
    return {"items": runtime.denylist.names()}

@router.get("/seed")
async def seed_new():
    return {"clientSeed": new_client_seed()}
