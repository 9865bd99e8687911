from typing import Optional
from fastapi import APIRouter, Body
from models import DrawIn, DrawResult, DrawStateOut
from services import runtime

router = APIRouter()


@router.post("/draws", response_model=DrawResult)
async def draw_create(body: Optional[DrawIn] = Body(None)):
    # errors (empty roster, draw in progress) surface before the reveal starts
    return await runtime.session.draw(body.client_seed if body else None)


@router.get("/draws/current", response_model=DrawStateOut)
async def draws_current():
    s = runtime.session
    return DrawStateOut(state=s.state, result=s.result)


@router.post("/draws/reset", response_model=DrawStateOut)
async def draws_reset():
    """Dismiss the reveal: back to idle, pending steps are dropped."""
    s = runtime.session
    s.reset()
    return DrawStateOut(state=s.state, result=s.result)
