# main.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from settings import settings
from errors import DrawError

from api.roster import router as roster_router
from api.draws import router as draws_router
from api.stream import router as stream_router
from api.verify import router as verify_router
from api.history import router as history_router
from api.blocks import router as blocks_router
from services import runtime

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("hivefortune")

app = FastAPI(title="HiveFortune provably fair draw")

@app.get("/health")
def health():
    return {"ok": True}


@app.exception_handler(DrawError)
async def _draw_error(request: Request, exc: DrawError):
    return JSONResponse(status_code=exc.status_code,
                        content={"error": exc.message, "kind": type(exc).__name__})


app.include_router(roster_router)    # /roster...
app.include_router(stream_router)    # /draws/stream
app.include_router(draws_router)     # /draws, /draws/current, /draws/reset
app.include_router(verify_router)    # /verify
app.include_router(history_router)   # /history
app.include_router(blocks_router)    # /blocks/latest, /bots, /seed


@app.on_event("startup")
async def _start_block_poller():
    # display-only; never blocks or affects a draw
    runtime.poller.start()
    logger.info("polling %d Hive nodes every %.1fs", len(runtime.resolver.nodes), runtime.poller.interval)


@app.on_event("shutdown")
async def _stop_block_poller():
    await runtime.poller.stop()
