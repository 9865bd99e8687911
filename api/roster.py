from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from models import RosterOut, RosterPostIn, RosterTextIn
from services import runtime

router = APIRouter()

def _out() -> RosterOut:
    s = runtime.session
    return RosterOut(entrants=s.roster.entrants, source=s.roster.source, locked=s.locked)

@router.get("/roster", response_model=RosterOut)
async def roster_get():
    return _out()

@router.post("/roster/text", response_model=RosterOut)
async def roster_from_text(body: RosterTextIn = Body(...)):
    runtime.session.load_text(body.text)
    return _out()

@router.post("/roster/post", response_model=RosterOut)
async def roster_from_post(body: RosterPostIn = Body(...)):
    await runtime.session.load_post(body.url, exclude_automated=body.exclude_bots)
    return _out()

@router.delete("/roster/{identity}", response_model=RosterOut)
async def roster_remove(identity: str):
    if not runtime.session.remove(identity):
        return JSONResponse(status_code=404, content={"error": f"no entrant {identity!r}"})
    return _out()
