# valbot/services/handlers.py
"""Command logic shared by the Discord cog.

Each handler takes the AppContext plus plain option values and returns a
Reply; the boundary decorator turns every failure into a message so nothing
propagates to the dispatcher.
"""
import functools
import logging
from typing import Optional

from valbot import config
from valbot.errors import NotLinkedError, ValbotError
from valbot.models import Reply
from valbot.riot_client import RiotClient
from valbot.services.identity import lookup_account, parse_riot_id, resolve_identity, resolve_routing, resolve_target
from valbot.services.lookups import fetch_recent_matches
from valbot.services.render import breakdown_embed, last_match_embed, profile_embed, tracker_button
from valbot.services.stats_agg import (
  aggregate_breakdown,
  aggregate_recent_stats,
  resolve_agent_filter,
  resolve_map_filter,
)

log = logging.getLogger("handlers")

GENERIC_ERROR = "Something went wrong, try again later."


def command_boundary(prefix: str = "Error"):
  def deco(fn):
    @functools.wraps(fn)
    async def wrapper(ctx, *args, **kwargs) -> Reply:
      try:
        return await fn(ctx, *args, **kwargs)
      except NotLinkedError as e:
        return Reply(content=e.message, ephemeral=True)
      except ValbotError as e:
        log.info("%s failed: %s", fn.__name__, e.message)
        return Reply(content=f"{prefix}: {e.message}")
      except Exception:
        log.exception("Handler error in %s", fn.__name__)
        return Reply(content=GENERIC_ERROR)
    return wrapper
  return deco


def mode_filter(queue: Optional[str]) -> Optional[str]:
  """UI queue choice -> matchInfo.queueId; unknown values pass through as raw queueIds."""
  q = (queue or "").strip().lower()
  if not q:
    return None
  return config.QUEUES.get(q, q)


# ------------------------- account linking -------------------------
@command_boundary("Could not link")
async def link(ctx, caller_id: str, riot_id: str, shard: Optional[str] = None, region: Optional[str] = None) -> Reply:
  game_name, tag_line = parse_riot_id(riot_id)
  routing = resolve_routing(ctx.links.get(caller_id), ctx.default_region, ctx.default_shard,
                            region=region, shard=shard)
  sh = RiotClient.norm_shard(routing.shard)
  reg = RiotClient.norm_region(routing.region)
  account = await ctx.riot.account_by_riot_id(reg, game_name, tag_line)
  ctx.links.link(caller_id, account.gameName, account.tagLine, shard=sh, region=reg)
  log.info("Linked %s -> %s (%s / %s)", caller_id, account.riot_id, sh, reg)
  return Reply(
      content=f"Linked to **{account.riot_id}** ({sh} / {reg}).",
      buttons=[tracker_button(account, "Open on Tracker.gg")],
      ephemeral=True,
  )


@command_boundary()
async def unlink(ctx, caller_id: str) -> Reply:
  existed = ctx.links.unlink(caller_id)
  return Reply(content="Link removed." if existed else "There was no link.", ephemeral=True)


@command_boundary()
async def me(ctx, caller_id: str) -> Reply:
  rec = ctx.links.get(caller_id)
  if not rec or not rec.has_riot_id:
    raise NotLinkedError(str(caller_id), is_self=True)
  routing = resolve_routing(rec, ctx.default_region, ctx.default_shard)
  return Reply(
      content=f"Linked: **{rec.gameName}#{rec.tagLine}** • shard: {routing.shard} • region: {routing.region}",
      ephemeral=True,
  )


@command_boundary()
async def set_shard(ctx, caller_id: str, shard: str) -> Reply:
  sh = RiotClient.norm_shard(shard)
  ctx.links.set_shard(caller_id, sh)
  return Reply(content=f"Shard set to **{sh}**.", ephemeral=True)


@command_boundary()
async def set_region(ctx, caller_id: str, region: str) -> Reply:
  reg = RiotClient.norm_region(region)
  ctx.links.set_region(caller_id, reg)
  return Reply(content=f"Region set to **{reg}**.", ephemeral=True)


# ------------------------- stats views -------------------------
@command_boundary()
async def profile(
    ctx,
    caller_id: str,
    target_id: Optional[str] = None,
    *,
    riot_id: Optional[str] = None,
    queue: Optional[str] = None,
    region: Optional[str] = None,
    shard: Optional[str] = None,
) -> Reply:
  target_id = str(target_id or caller_id)
  account, routing = await resolve_identity(ctx, caller_id, target_id, riot_id=riot_id, region=region, shard=shard)
  matches = await fetch_recent_matches(ctx.riot, account.puuid, routing.shard, config.PROFILE_MATCHES)
  mf = mode_filter(queue)
  summary = aggregate_recent_stats(account.puuid, matches, mf)
  agents = await ctx.assets.agents()
  maps = await ctx.assets.maps()
  embed = profile_embed(
      account, summary, matches, routing, agents, maps,
      target=None if riot_id else f"<@{target_id}>",
      queue=mf,
  )
  return Reply(embed=embed, buttons=[tracker_button(account)])


@command_boundary()
async def last_match(ctx, caller_id: str, target_id: Optional[str] = None) -> Reply:
  account, routing = await resolve_identity(ctx, caller_id, target_id)
  ids = await ctx.riot.match_ids(routing.shard, account.puuid, start=0, count=1)
  if not ids:
    return Reply(content="No matches found.")
  match = await ctx.riot.match(routing.shard, ids[0])
  agents = await ctx.assets.agents()
  maps = await ctx.assets.maps()
  return Reply(embed=last_match_embed(account, match, agents, maps), buttons=[tracker_button(account)])


async def _breakdown(ctx, caller_id, target_id, by: str, name: Optional[str], queue: Optional[str]) -> Reply:
  target = resolve_target(ctx, caller_id, target_id)
  roster = await (ctx.assets.agents() if by == "agent" else ctx.assets.maps())
  only, selected = None, None
  if name and name.strip():
    resolve = resolve_agent_filter if by == "agent" else resolve_map_filter
    only, meta = resolve(roster, name)
    selected = meta.get("displayName")
  account = await lookup_account(ctx, target)
  matches = await fetch_recent_matches(ctx.riot, account.puuid, target.routing.shard, config.BREAKDOWN_MATCHES)
  rows = aggregate_breakdown(account.puuid, matches, by, mode_filter(queue), only=only)
  if not rows:
    return Reply(content="No data for this filter.")
  return Reply(embed=breakdown_embed(account, rows, by, roster, selected=selected))


@command_boundary()
async def agent_stats(ctx, caller_id: str, target_id: Optional[str] = None, *,
                      agent: Optional[str] = None, queue: Optional[str] = None) -> Reply:
  return await _breakdown(ctx, caller_id, target_id, "agent", agent, queue)


@command_boundary()
async def map_stats(ctx, caller_id: str, target_id: Optional[str] = None, *,
                    map_name: Optional[str] = None, queue: Optional[str] = None) -> Reply:
  return await _breakdown(ctx, caller_id, target_id, "map", map_name, queue)
