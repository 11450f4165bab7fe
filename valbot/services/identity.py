# valbot/services/identity.py
from typing import NamedTuple, Optional, Tuple

from valbot.errors import NotLinkedError, RiotIdParseError
from valbot.models import Account, Link, Routing


class Target(NamedTuple):
  game_name: str
  tag_line: str
  routing: Routing
  inline: bool  # Riot ID came from the command, not from a stored link


def parse_riot_id(raw: str) -> Tuple[str, str]:
  """'Nick#TAG' -> ('Nick', 'TAG'). Splits at the last '#'."""
  s = raw or ""
  idx = s.rfind("#")
  if idx == -1:
    raise RiotIdParseError(s)
  game_name = s[:idx].strip()
  tag_line = s[idx + 1:].strip()
  if not game_name or not tag_line:
    raise RiotIdParseError(s)
  return game_name, tag_line


def resolve_routing(
    link: Optional[Link],
    default_region: str,
    default_shard: str,
    *,
    region: Optional[str] = None,
    shard: Optional[str] = None,
) -> Routing:
  """explicit override > stored link > process default"""
  return Routing(
      region=region or (link.region if link else None) or default_region,
      shard=shard or (link.shard if link else None) or default_shard,
  )


def resolve_target(
    ctx,
    caller_id: str,
    target_id: Optional[str] = None,
    *,
    riot_id: Optional[str] = None,
    region: Optional[str] = None,
    shard: Optional[str] = None,
) -> Target:
  """Who to look up and where, without touching the network."""
  target_id = str(target_id or caller_id)
  link = ctx.links.get(target_id)

  if riot_id:
    game_name, tag_line = parse_riot_id(riot_id)
  else:
    if not link or not link.has_riot_id:
      raise NotLinkedError(target_id, is_self=target_id == str(caller_id))
    game_name, tag_line = link.gameName, link.tagLine

  routing = resolve_routing(link, ctx.default_region, ctx.default_shard, region=region, shard=shard)
  return Target(game_name, tag_line, routing, inline=bool(riot_id))


async def lookup_account(ctx, target: Target) -> Account:
  return await ctx.riot.account_by_riot_id(target.routing.region, target.game_name, target.tag_line)


async def resolve_identity(
    ctx,
    caller_id: str,
    target_id: Optional[str] = None,
    *,
    riot_id: Optional[str] = None,
    region: Optional[str] = None,
    shard: Optional[str] = None,
) -> Tuple[Account, Routing]:
  target = resolve_target(ctx, caller_id, target_id, riot_id=riot_id, region=region, shard=shard)
  account = await lookup_account(ctx, target)
  return account, target.routing
