# valbot/routes/stats.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from valbot import config
from valbot.context import AppContext
from valbot.errors import (
  InvalidRoutingError,
  RateLimitExhausted,
  RiotIdParseError,
  UnknownEntityError,
  UpstreamHTTPError,
  ValbotError,
)
from valbot.models import BreakdownResponse, ProfileResponse
from valbot.services.handlers import mode_filter
from valbot.services.identity import lookup_account, resolve_identity, resolve_target
from valbot.services.lookups import fetch_recent_matches
from valbot.services.stats_agg import (
  aggregate_breakdown,
  aggregate_recent_stats,
  resolve_agent_filter,
  resolve_map_filter,
)

router = APIRouter(prefix="/api", tags=["stats"])

# inline lookups carry no Discord identity
ANON = "api"


def get_ctx(request: Request) -> AppContext:
  return request.app.state.ctx


def _http_error(e: ValbotError) -> HTTPException:
  if isinstance(e, (RiotIdParseError, InvalidRoutingError)):
    return HTTPException(400, e.message)
  if isinstance(e, UnknownEntityError):
    return HTTPException(404, e.message)
  if isinstance(e, RateLimitExhausted):
    return HTTPException(429, e.message)
  if isinstance(e, UpstreamHTTPError) and e.status == 404:
    return HTTPException(404, "Riot account not found")
  return HTTPException(502, e.message)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(riotId: str, queue: Optional[str] = None, region: Optional[str] = None,
                      shard: Optional[str] = None, ctx: AppContext = Depends(get_ctx)):
  """
  Example:
    /api/profile?riotId=Nick%23EUW&queue=competitive
  """
  try:
    account, routing = await resolve_identity(ctx, ANON, riot_id=riotId, region=region, shard=shard)
    matches = await fetch_recent_matches(ctx.riot, account.puuid, routing.shard, config.PROFILE_MATCHES)
  except ValbotError as e:
    raise _http_error(e)
  mf = mode_filter(queue)
  return ProfileResponse(
      riotId=account.riot_id, puuid=account.puuid, region=routing.region, shard=routing.shard,
      queue=mf, summary=aggregate_recent_stats(account.puuid, matches, mf),
  )


async def _breakdown(ctx: AppContext, by: str, riot_id: str, name: Optional[str], queue: Optional[str],
                     region: Optional[str], shard: Optional[str]) -> BreakdownResponse:
  try:
    target = resolve_target(ctx, ANON, riot_id=riot_id, region=region, shard=shard)
    only = None
    if name:
      roster = await (ctx.assets.agents() if by == "agent" else ctx.assets.maps())
      resolve = resolve_agent_filter if by == "agent" else resolve_map_filter
      only, _ = resolve(roster, name)
    account = await lookup_account(ctx, target)
    matches = await fetch_recent_matches(ctx.riot, account.puuid, target.routing.shard, config.BREAKDOWN_MATCHES)
  except ValbotError as e:
    raise _http_error(e)
  mf = mode_filter(queue)
  return BreakdownResponse(
      riotId=account.riot_id, puuid=account.puuid, region=target.routing.region, shard=target.routing.shard,
      by=by, queue=mf, rows=aggregate_breakdown(account.puuid, matches, by, mf, only=only),
  )


@router.get("/agent-stats", response_model=BreakdownResponse)
async def get_agent_stats(riotId: str, agent: Optional[str] = None, queue: Optional[str] = None,
                          region: Optional[str] = None, shard: Optional[str] = None,
                          ctx: AppContext = Depends(get_ctx)):
  return await _breakdown(ctx, "agent", riotId, agent, queue, region, shard)


@router.get("/map-stats", response_model=BreakdownResponse)
async def get_map_stats(riotId: str, map: Optional[str] = None, queue: Optional[str] = None,
                        region: Optional[str] = None, shard: Optional[str] = None,
                        ctx: AppContext = Depends(get_ctx)):
  return await _breakdown(ctx, "map", riotId, map, queue, region, shard)
