# api/stream.py
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from streams import hub

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

@router.get("/draws/stream")
async def stream():
    """draw.result, reveal.started, reveal.step, reveal.completed"""
    async def gen():
        async for chunk in hub.subscribe("draws"):
            yield chunk
    return StreamingResponse(gen(), media_type="text/event-stream", headers=SSE_HEADERS)
