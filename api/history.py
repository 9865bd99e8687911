from fastapi import APIRouter
from services import runtime

router = APIRouter()

@router.get("/history")
async def history_list():
    return {"items": runtime.session.history.load()}

@router.delete("/history")
async def history_clear():
    runtime.session.history.clear()
    return {"ok": True}
