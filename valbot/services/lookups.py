# valbot/services/lookups.py
import asyncio
import logging
from typing import List

from valbot.errors import UpstreamError
from valbot.riot_client import RiotClient

log = logging.getLogger("lookups")

DETAIL_CONCURRENCY = 4


async def fetch_matches(rc: RiotClient, shard: str, match_ids: List[str]) -> List[dict]:
  """Match details in id order; a detail that fails upstream is skipped."""
  sem = asyncio.Semaphore(DETAIL_CONCURRENCY)  # bounded detail calls

  async def _one(mid: str) -> dict:
    async with sem:
      return await rc.match(shard, mid)

  results = await asyncio.gather(*[_one(mid) for mid in match_ids], return_exceptions=True)
  out = []
  for mid, m in zip(match_ids, results):
    if isinstance(m, UpstreamError):
      log.warning("Skipping match %s: %s", mid, m.message)
      continue
    if isinstance(m, BaseException):
      raise m
    out.append(m)
  return out


async def fetch_recent_matches(rc: RiotClient, puuid: str, shard: str, count: int) -> List[dict]:
  ids = await rc.match_ids(shard, puuid, start=0, count=count)
  if not ids:
    return []
  return await fetch_matches(rc, shard, ids)
