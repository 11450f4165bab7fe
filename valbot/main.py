# valbot/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from valbot.context import AppContext
from valbot.routes.stats import router as stats_router

log = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
  async with AppContext.from_env() as ctx:
    app.state.ctx = ctx
    log.info("[Startup] region=%s shard=%s links=%d", ctx.default_region, ctx.default_shard, len(ctx.links))
    yield


app = FastAPI(title="valbot", lifespan=lifespan)

#health check
@app.get("/api/health", response_class=PlainTextResponse)
async def health():
  return "ok"

#register API routes
app.include_router(stats_router)
